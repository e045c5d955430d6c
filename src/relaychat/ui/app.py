"""Main Textual TUI application.

Orchestrates the UI components and forwards user interaction to the
ConversationController.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..chat import ConversationController, RequestState
from .callbacks import TUIObserver
from .config import LogLevel
from .screens import ApiKeyScreen
from .styles import APP_CSS
from .themes import RELAYCHAT_DARK
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, ThinkingIndicator


class ChatApp(App):
    """Single-conversation chat client."""

    CSS = APP_CSS
    TITLE = "relaychat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear_chat", "Clear Chat", priority=True),
        Binding("ctrl+s", "api_key", "API Key", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
    ]

    def __init__(
        self,
        controller: ConversationController,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._log_level = log_level
        self._unsent_text: str | None = None

    @property
    def controller(self) -> ConversationController:
        return self._controller

    @property
    def chat_history(self) -> ChatHistoryWidget:
        return self.query_one("#chat-history", ChatHistoryWidget)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield ThinkingIndicator(id="thinking")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(RELAYCHAT_DARK)
        self.theme = "relaychat-dark"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.add_entry("TUI", f"Log panel enabled with level: {self._log_level.upper()}", LogLevel.INFO)

        self._controller.set_observer(TUIObserver(self))
        self._controller.set_debug_callback(log_panel.handle_debug)

        model_name = getattr(self._controller.client, "model", "unknown")
        self.sub_title = model_name

        self.chat_history.render_history(self._controller.history)
        self.show_request_state(self._controller.state)

        if not self._controller.has_credential:
            self.action_api_key()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if not event.value:
            return
        self._submit(event.value)

    @work(group="completion")
    async def _submit(self, text: str) -> None:
        """Run one submit as a background async worker."""
        self._unsent_text = text
        try:
            await self._controller.submit(text)
        finally:
            self._unsent_text = None

    def request_credential(self) -> None:
        """Ask for a key, keeping any text the rejected submit carried."""
        if self._unsent_text:
            self.query_one("#chat-input-bar", ChatInputBar).restore(self._unsent_text)
        self.action_api_key()

    def show_request_state(self, state: RequestState) -> None:
        """Reflect the request state: disable input and show progress while pending."""
        if not self.is_running:
            return
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_enabled(state.is_idle)
        self.query_one("#thinking", ThinkingIndicator).set_active(state.is_pending)
        if state.is_idle and not isinstance(self.screen, ApiKeyScreen):
            input_bar.focus_input()

    def action_api_key(self) -> None:
        """Open the API key dialog."""
        if isinstance(self.screen, ApiKeyScreen):
            return
        self.push_screen(
            ApiKeyScreen(has_existing_key=self._controller.has_credential),
            callback=self._on_api_key_entered,
        )

    def _on_api_key_entered(self, value: str | None) -> None:
        if value:
            self._controller.set_credential(value)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_clear_chat(self) -> None:
        """Clear the chat history."""
        if not self._controller.clear_conversation():
            self.notify("Wait for the current reply before clearing", severity="warning", timeout=2)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        response = self._controller.last_reply()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied", timeout=2)
        else:
            self.notify("No response to copy", severity="warning", timeout=2)


async def run_textual_tui(
    controller: ConversationController,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        controller: Conversation controller wired to a store and client
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ChatApp(controller=controller, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
