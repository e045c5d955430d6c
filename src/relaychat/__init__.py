"""
relaychat: a minimal single-conversation chat client for OpenAI-compatible
completion endpoints.

Each module hides a specific design decision: where the key lives
(credentials), how the remote service is called (llm), how the conversation
evolves (chat), and how it is presented (ui, cli).
"""

__version__ = "0.1.0"

from .chat import (
    ConversationController,
    ConversationObserver,
    Message,
    MessageRole,
    RequestState,
    RequestStatus,
)
from .credentials import CredentialStore, create_credential_store
from .llm import CompletionClient, CompletionError, ErrorKind, OpenAICompletionClient

__all__ = [
    "CompletionClient",
    "CompletionError",
    "ConversationController",
    "ConversationObserver",
    "CredentialStore",
    "ErrorKind",
    "Message",
    "MessageRole",
    "OpenAICompletionClient",
    "RequestState",
    "RequestStatus",
    "create_credential_store",
]
