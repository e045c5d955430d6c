from .base import CompletionClient
from .errors import CompletionError, ErrorKind
from .models import ChatMessage, GenerationParams, build_payload
from .providers import OpenAICompletionClient

__all__ = [
    "ChatMessage",
    "CompletionClient",
    "CompletionError",
    "ErrorKind",
    "GenerationParams",
    "OpenAICompletionClient",
    "build_payload",
]
