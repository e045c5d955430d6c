"""Abstract base class for credential storage backends.

This module defines the interface for holding the single API key.
The abstraction hides:
- Storage format (JSON file, in-memory)
- Persistence location
- File permissions
"""

from abc import ABC, abstractmethod

# Fixed key under which the credential is persisted
CREDENTIAL_KEY = "openai-api-key"


class CredentialStore(ABC):
    """Abstract credential store.

    Holds at most one secret string. Absent (None) is a valid state and is
    distinct from the empty string. No validation of the credential's shape
    is performed; authenticity is only discovered when it is used.
    """

    @abstractmethod
    def get(self) -> str | None:
        """Read the stored credential.

        Never raises. Returns None when nothing is stored or the backing
        storage cannot be read.
        """

    @abstractmethod
    def _write(self, value: str) -> None:
        """Persist an already-trimmed, non-empty value."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored credential (no-op if absent)."""

    def set(self, value: str) -> bool:
        """Store a credential.

        Args:
            value: Raw credential text; surrounding whitespace is trimmed

        Returns:
            True if the value was stored, False if it was empty after
            trimming (the previous value is left unchanged)
        """
        trimmed = value.strip()
        if not trimmed:
            return False
        self._write(trimmed)
        return True

    @property
    def has_credential(self) -> bool:
        return self.get() is not None

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
