from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ..chat.models import Message


class ChatMessage(BaseModel):
    """Wire representation of a turn: role and content only."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user' or 'assistant'")
    content: str = Field(description="Content of the message")

    @classmethod
    def from_message(cls, message: "Message") -> "ChatMessage":
        """Strip id and timestamp from a conversation message."""
        return cls(role=message.role.value, content=message.content)


class GenerationParams(BaseModel):
    """Fixed generation settings sent with every request."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(default="gpt-3.5-turbo", description="Model identifier")
    max_tokens: int = Field(default=1000, ge=1, description="Cap on generated tokens")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")


def build_payload(history: Iterable["Message"], params: GenerationParams) -> dict:
    """Build the JSON body for a chat completion request.

    Args:
        history: Conversation messages in display order
        params: Generation settings

    Returns:
        Dict with model, messages, max_tokens and temperature
    """
    return {
        "model": params.model,
        "messages": [ChatMessage.from_message(msg).model_dump() for msg in history],
        "max_tokens": params.max_tokens,
        "temperature": params.temperature,
    }
