"""Failure taxonomy for completion calls."""

from enum import Enum

GENERIC_REJECTION_MESSAGE = "Failed to get response from OpenAI"
EMPTY_REPLY_MESSAGE = "No response content received from OpenAI"
NO_CREDENTIAL_MESSAGE = "An API key is required before sending messages"


class ErrorKind(str, Enum):
    """Classification of a failed completion."""

    TRANSPORT = "transport"          # No response obtained
    REJECTED = "rejected"            # Service answered with a non-success status
    EMPTY_REPLY = "empty_reply"      # Success status but no usable content
    NO_CREDENTIAL = "no_credential"  # Nothing to authenticate with


class CompletionError(Exception):
    """A classified completion failure.

    Terminal for the operation that raised it; callers never retry.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"CompletionError(kind={self.kind.value!r}, message={self.message!r})"
