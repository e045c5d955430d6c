from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .errors import NO_CREDENTIAL_MESSAGE, CompletionError, ErrorKind

if TYPE_CHECKING:
    from ..chat.models import Message


class CompletionClient(ABC):
    """Abstract base class for completion clients.

    This module hides the design decision of how the remote completion
    service is reached. Implementations must handle:
    - Request payload construction
    - Authentication with the per-call credential
    - Classifying failures into CompletionError kinds

    Each call to complete() makes exactly one attempt. The client tracks
    whether a call is outstanding but does not serialize callers.

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            reply = await client.complete(history, api_key)
    """

    def __init__(self) -> None:
        self._busy = False
        self._debug_callback: Any = None

    @property
    def is_busy(self) -> bool:
        """True while a completion call is outstanding."""
        return self._busy

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for request logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "LLM", message)

    async def complete(self, history: Sequence["Message"], credential: str) -> str:
        """Send the conversation and return the assistant's reply text.

        Args:
            history: Full conversation history in order
            credential: API key used for this call

        Returns:
            Text of the first candidate reply

        Raises:
            CompletionError: On any failure, classified by kind
        """
        if not credential or not credential.strip():
            raise CompletionError(ErrorKind.NO_CREDENTIAL, NO_CREDENTIAL_MESSAGE)

        self._busy = True
        self._debug("info", f"Sending {len(history)} message(s)")
        try:
            reply = await self._send(history, credential.strip())
        except CompletionError as e:
            self._debug("error", f"Completion failed ({e.kind.value}): {e.message}")
            raise
        finally:
            self._busy = False

        self._debug("info", f"Reply received ({len(reply)} chars)")
        return reply

    @abstractmethod
    async def _send(self, history: Sequence["Message"], credential: str) -> str:
        """Perform the single outbound call.

        Raises:
            CompletionError: Classified transport, rejection or empty-reply failure
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "CompletionClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
