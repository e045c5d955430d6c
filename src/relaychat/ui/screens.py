"""Modal screens for the TUI.

This module hides the design decisions about:
- API key dialog appearance (CSS, layout)
- Button styling and variants
- Keyboard shortcuts for dialogs

To change how the key prompt looks, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from .config import API_KEY_URL


class ApiKeyScreen(ModalScreen[str | None]):
    """Modal dialog asking for the API key.

    Dismisses with the trimmed key on save, or None on cancel.
    Save is disabled while the input is blank.
    """

    CSS = """
    ApiKeyScreen {
        align: center middle;
        background: $background 70%;
    }

    #api-key-dialog {
        width: 64;
        height: auto;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #api-key-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    #api-key-help {
        width: 100%;
        color: $text-muted;
        margin: 1 0;
    }

    #api-key-save {
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, has_existing_key: bool = False) -> None:
        super().__init__()
        self._has_existing_key = has_existing_key

    def compose(self) -> ComposeResult:
        with Vertical(id="api-key-dialog"):
            yield Static("OpenAI API Key Required", id="api-key-title")
            yield Static(
                "Please enter your OpenAI API key to start chatting with the AI assistant."
            )
            yield Input(
                placeholder="sk-..." if not self._has_existing_key else "Enter a new key to replace the current one",
                password=True,
                id="api-key-input",
            )
            yield Static(
                f"You can get your API key from the OpenAI dashboard:\n{API_KEY_URL}",
                id="api-key-help",
            )
            yield Button("Save API Key", id="api-key-save", variant="primary", disabled=True)

    def on_mount(self) -> None:
        self.query_one("#api-key-input", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.query_one("#api-key-save", Button).disabled = not event.value.strip()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._save(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "api-key-save":
            event.stop()
            self._save(self.query_one("#api-key-input", Input).value)

    def _save(self, value: str) -> None:
        trimmed = value.strip()
        if trimmed:
            self.dismiss(trimmed)

    def action_cancel(self) -> None:
        self.dismiss(None)
