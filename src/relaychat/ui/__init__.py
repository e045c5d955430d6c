"""Terminal UI module for relaychat.

Provides a Textual-based single-screen chat client.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (chat rendering, input history, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette and theme configuration
- screens.py: Modal dialogs (API key prompt)
- callbacks.py: Controller integration (how TUI receives updates)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatApp, run_textual_tui
from .callbacks import TUIObserver
from .config import LogLevel
from .screens import ApiKeyScreen
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, ThinkingIndicator

__all__ = [
    "ApiKeyScreen",
    "ChatApp",
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "LogLevel",
    "TUIObserver",
    "ThinkingIndicator",
    "run_textual_tui",
]
