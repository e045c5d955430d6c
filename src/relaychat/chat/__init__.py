"""Conversation module for relaychat.

Owns the in-memory history and the request lifecycle.
"""

from .controller import CHAT_CLEARED_NOTICE, CREDENTIAL_SAVED_NOTICE, ConversationController
from .conversation import Conversation
from .models import Message, MessageRole, RequestState, RequestStatus
from .observer import ConversationObserver

__all__ = [
    "CHAT_CLEARED_NOTICE",
    "CREDENTIAL_SAVED_NOTICE",
    "Conversation",
    "ConversationController",
    "ConversationObserver",
    "Message",
    "MessageRole",
    "RequestState",
    "RequestStatus",
]
