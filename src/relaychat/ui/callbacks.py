"""Observer bridging the conversation controller to the TUI.

Hides the details of how the TUI receives updates from the controller.
"""

import threading
from typing import TYPE_CHECKING, Any

from ..chat.models import Message, RequestState
from ..chat.observer import ConversationObserver
from .config import ERROR_TOAST_TIMEOUT, NOTICE_TOAST_TIMEOUT

if TYPE_CHECKING:
    from .app import ChatApp


class TUIObserver(ConversationObserver):
    """Routes controller notifications to widgets and toasts.

    Updates are marshalled onto the app thread when they arrive from
    elsewhere.
    """

    def __init__(self, app: "ChatApp") -> None:
        self.app = app

    def _call_thread_safe(self, func: Any, *args: Any, **kwargs: Any) -> None:
        if self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(func, *args, **kwargs)
        else:
            func(*args, **kwargs)

    def on_history_changed(self, history: tuple[Message, ...]) -> None:
        self._call_thread_safe(self.app.chat_history.render_history, history)

    def on_request_state_changed(self, state: RequestState) -> None:
        self._call_thread_safe(self.app.show_request_state, state)

    def on_error_occurred(self, message: str) -> None:
        self._call_thread_safe(
            self.app.notify, message, title="Error", severity="error", timeout=ERROR_TOAST_TIMEOUT
        )

    def on_credential_required(self) -> None:
        self._call_thread_safe(self.app.request_credential)

    def on_notice(self, message: str) -> None:
        self._call_thread_safe(
            self.app.notify, message, severity="information", timeout=NOTICE_TOAST_TIMEOUT
        )
