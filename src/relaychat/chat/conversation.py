"""In-memory conversation history.

Append-only ordered list of messages. Insertion order is display order
and chronological order. Nothing here is persisted.
"""

from collections.abc import Iterator

from .models import Message, MessageRole


class Conversation:
    """Ordered, append-only sequence of messages.

    Only two things are enforced on append: the id must be new and the role
    must be a MessageRole. Role alternation is not checked: a failed turn
    leaves a user message without a reply.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._ids: set[str] = set()

    def append(self, message: Message) -> None:
        """Append a message to the end of the conversation.

        Raises:
            ValueError: If a message with the same id is already present
        """
        if message.id in self._ids:
            raise ValueError(f"Duplicate message id: {message.id}")
        if not isinstance(message.role, MessageRole):
            raise ValueError(f"Unsupported role: {message.role!r}")
        self._messages.append(message)
        self._ids.add(message.id)

    def clear(self) -> None:
        """Replace the history with the empty sequence."""
        self._messages = []
        self._ids = set()

    def snapshot(self) -> tuple[Message, ...]:
        """Return an immutable view of the current history."""
        return tuple(self._messages)

    def last_reply(self) -> str | None:
        """Get the content of the most recent assistant message."""
        for msg in reversed(self._messages):
            if msg.role == MessageRole.ASSISTANT:
                return msg.content
        return None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
