"""Conversation controller.

Owns the message history and the request lifecycle. The UI surface talks
only to this class; it decides when the credential store is consulted and
when the completion client is called.

State machine:
    Idle --submit--> Pending --success--> Idle
                             --failure--> Failed(reason) --> Idle
"""

from typing import Any

from ..credentials import CredentialStore
from ..llm import CompletionClient, CompletionError
from .conversation import Conversation
from .models import Message, RequestState
from .observer import ConversationObserver

CREDENTIAL_SAVED_NOTICE = "API key saved successfully!"
CHAT_CLEARED_NOTICE = "All messages have been removed."


class ConversationController:
    """Single owner of one conversation and its RequestState.

    All mutations of history and state happen here, on one event loop.
    Between the Idle check in submit() and the transition to Pending there
    is no await, so at most one completion call is outstanding.

    Example:
        controller = ConversationController(store, client, observer)
        reply = await controller.submit("Hello")
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        client: CompletionClient,
        observer: ConversationObserver | None = None,
    ) -> None:
        self._credentials = credential_store
        self._client = client
        self._observer = observer or ConversationObserver()
        self._conversation = Conversation()
        self._state = RequestState.idle()
        self._debug_callback: Any = None

    @property
    def history(self) -> tuple[Message, ...]:
        return self._conversation.snapshot()

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def has_credential(self) -> bool:
        return self._credentials.has_credential

    @property
    def client(self) -> CompletionClient:
        return self._client

    def last_reply(self) -> str | None:
        """Get the most recent assistant reply, if any."""
        return self._conversation.last_reply()

    def set_observer(self, observer: ConversationObserver) -> None:
        """Replace the observer receiving notifications."""
        self._observer = observer

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for detailed logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'

        The callback is propagated to the completion client.
        """
        self._debug_callback = callback
        self._client.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Chat", message)

    def _set_state(self, state: RequestState) -> None:
        self._state = state
        self._debug("debug", f"Request state -> {state.status.value}")
        self._observer.on_request_state_changed(state)

    def _append(self, message: Message) -> None:
        self._conversation.append(message)
        self._observer.on_history_changed(self.history)

    async def submit(self, text: str) -> Message | None:
        """Send user text and wait for the assistant's reply.

        Args:
            text: Raw user input; surrounding whitespace is trimmed

        Returns:
            The appended assistant Message, or None when the input was
            empty, a request was already pending, no credential was
            stored, or the completion failed
        """
        content = text.strip()
        if not content:
            return None

        if not self._state.is_idle:
            self._debug("warning", "Submit rejected: a completion is already pending")
            return None

        credential = self._credentials.get()
        if credential is None or not credential.strip():
            self._debug("info", "No API key stored, requesting one")
            self._observer.on_credential_required()
            return None

        self._append(Message.user(content))
        self._set_state(RequestState.pending())
        history = self.history
        self._debug("info", f"Submitting turn {len(history)}: '{content[:50]}'")

        try:
            reply = await self._client.complete(history, credential)
        except CompletionError as e:
            self._set_state(RequestState.failed(e.message))
            self._set_state(RequestState.idle())
            self._observer.on_error_occurred(e.message)
            return None
        except BaseException:
            self._set_state(RequestState.idle())
            raise

        assistant_message = Message.assistant(reply)
        self._append(assistant_message)
        self._set_state(RequestState.idle())
        return assistant_message

    def clear_conversation(self) -> bool:
        """Empty the history.

        Only permitted while Idle; RequestState is not touched.

        Returns:
            True if the history was cleared
        """
        if not self._state.is_idle:
            self._debug("warning", "Clear rejected: a completion is pending")
            return False
        self._conversation.clear()
        self._debug("info", "Chat cleared")
        self._observer.on_history_changed(self.history)
        self._observer.on_notice(CHAT_CLEARED_NOTICE)
        return True

    def set_credential(self, value: str) -> bool:
        """Store a new API key.

        Returns:
            True if the key was saved, False if it was blank
        """
        if not self._credentials.set(value):
            self._debug("warning", "Ignored blank API key")
            return False
        self._debug("info", "API key saved")
        self._observer.on_notice(CREDENTIAL_SAVED_NOTICE)
        return True

    def clear_credential(self) -> None:
        """Forget the stored API key."""
        self._credentials.clear()
        self._debug("info", "API key cleared")
