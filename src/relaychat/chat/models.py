"""Data models for the conversation.

These models define the structure of chat turns and the request lifecycle,
independent of how they are rendered or sent to the completion service.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """Who authored a turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single turn in the conversation.

    Immutable once created. The id is opaque and unique per message.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex, description="Opaque unique identifier")
    role: MessageRole = Field(description="Author of the turn")
    content: str = Field(description="Text of the turn")
    created_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user turn."""
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        """Create an assistant turn."""
        return cls(role=MessageRole.ASSISTANT, content=content)


class RequestStatus(str, Enum):
    """Lifecycle of the conversation-wide completion request."""

    IDLE = "idle"
    PENDING = "pending"
    FAILED = "failed"


class RequestState(BaseModel):
    """Tagged request state: Idle, Pending or Failed(reason)."""

    model_config = ConfigDict(frozen=True)

    status: RequestStatus = RequestStatus.IDLE
    reason: str | None = Field(default=None, description="Failure reason, only set when FAILED")

    @classmethod
    def idle(cls) -> "RequestState":
        return cls(status=RequestStatus.IDLE)

    @classmethod
    def pending(cls) -> "RequestState":
        return cls(status=RequestStatus.PENDING)

    @classmethod
    def failed(cls, reason: str) -> "RequestState":
        return cls(status=RequestStatus.FAILED, reason=reason)

    @property
    def is_idle(self) -> bool:
        return self.status == RequestStatus.IDLE

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
