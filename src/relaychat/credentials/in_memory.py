"""In-memory credential backend.

Data is lost when the application exits.
"""

from .base import CredentialStore


class InMemoryCredentialStore(CredentialStore):
    """In-memory credential store (process-lifetime only).

    Suitable for testing or a throwaway session.
    """

    def __init__(self, value: str | None = None):
        self._value = value

    def get(self) -> str | None:
        return self._value

    def _write(self, value: str) -> None:
        self._value = value

    def clear(self) -> None:
        self._value = None

    @property
    def backend_type(self) -> str:
        return "memory"
