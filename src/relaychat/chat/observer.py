"""Observer interface for conversation updates.

Hides how a surface (TUI, console) learns about controller changes.
Subclass and override only the notifications you care about.
"""

from .models import Message, RequestState


class ConversationObserver:
    """Receives notifications emitted by a ConversationController.

    All methods are no-ops by default.
    """

    def on_history_changed(self, history: tuple[Message, ...]) -> None:
        """Called after a message is appended or the history is cleared."""

    def on_request_state_changed(self, state: RequestState) -> None:
        """Called on every RequestState transition."""

    def on_error_occurred(self, message: str) -> None:
        """Called exactly once per failed completion."""

    def on_credential_required(self) -> None:
        """Called when a submit needs a credential that is not stored."""

    def on_notice(self, message: str) -> None:
        """Called for informational events (credential saved, chat cleared)."""
