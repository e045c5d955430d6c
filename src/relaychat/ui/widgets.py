"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Chat message rendering
- Input history management
- Pending-request indicator
- Log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..chat.models import Message, MessageRole
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIMESTAMP_FORMAT,
    THINKING_TEXT,
    LogLevel,
)

WELCOME_TEXT = (
    "Welcome to relaychat\n\n"
    "Start a conversation by typing a message below.\n"
    "Ctrl+J sends, Ctrl+S sets your API key."
)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history.

    Mirrors the controller's history. The history is append-only, so only
    messages beyond what is already rendered are mounted; a shorter history
    means it was cleared.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._rendered_ids: list[str] = []

    def on_mount(self) -> None:
        self._show_welcome()

    @property
    def rendered_count(self) -> int:
        return len(self._rendered_ids)

    def render_history(self, history: tuple[Message, ...]) -> None:
        """Bring the display in line with `history`."""
        known = self._rendered_ids
        if len(history) < len(known) or [m.id for m in history[: len(known)]] != known:
            self.clear_history()

        new_messages = history[len(self._rendered_ids):]
        if not new_messages:
            return

        if not self._rendered_ids:
            self.query("#welcome").remove()

        for msg in new_messages:
            self._render_message(msg)
            self._rendered_ids.append(msg.id)

        self.border_subtitle = f"{len(self._rendered_ids)} messages"
        self.scroll_end(animate=False)

    def clear_history(self) -> None:
        """Remove every rendered message and show the welcome text."""
        self._rendered_ids = []
        self.remove_children()
        self.border_subtitle = "Conversation history"
        self._show_welcome()

    def _show_welcome(self) -> None:
        self.mount(Static(WELCOME_TEXT, id="welcome"))

    def _render_message(self, msg: Message) -> None:
        if msg.role == MessageRole.USER:
            header_text = f"> You [{msg.created_at.strftime(MESSAGE_TIMESTAMP_FORMAT)}]"
            border_class = "user-message"
        else:
            header_text = f"< Assistant [{msg.created_at.strftime(MESSAGE_TIMESTAMP_FORMAT)}]"
            border_class = "assistant-message"

        container = Vertical(classes=f"chat-message {border_class}")
        container.compose_add_child(Static(header_text, classes="message-header"))

        if msg.role == MessageRole.ASSISTANT:
            container.compose_add_child(Markdown(msg.content, classes="message-content"))
        else:
            # Plain text for user messages, no markup parsing
            container.compose_add_child(Static(Text(msg.content), classes="message-content"))

        self.mount(container)


class ThinkingIndicator(Static):
    """One-line indicator shown while a completion is pending."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(f"[dim]Assistant:[/] {THINKING_TEXT}", *args, **kwargs)

    def set_active(self, active: bool) -> None:
        self.set_class(active, "-active")


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._enabled = True

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        text_area.focus()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable submission (disabled while a request is pending)."""
        self._enabled = enabled
        self.set_class(not enabled, "-disabled")
        self.query_one("#send-btn", Button).disabled = not enabled

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if not self._enabled:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value:
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()

    def restore(self, value: str) -> None:
        """Put text that was not sent back into an empty input."""
        text_area = self.query_one("#chat-input", TextArea)
        if not text_area.text:
            text_area.text = value


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Chat": "green",
        "LLM": "magenta",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Chat, LLM)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] "
        )
        line.append(message)
        self.write(line)

    def handle_debug(self, level: str, component: str, message: str) -> None:
        """Debug callback entry point: Callable(level, component, message)."""
        self.add_entry(component, message, LogLevel.from_string(level))

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
