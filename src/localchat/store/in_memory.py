"""In-memory message store backend.

Simple dict-based storage for session-only history.
Data is lost when the application exits.
"""

from ..errors import StorageError
from .base import MessageStore
from .models import ChatMessage


class InMemoryMessageStore(MessageStore):
    """In-memory message store (session-only).

    Suitable for single-session use or testing.
    """

    def __init__(self) -> None:
        super().__init__()
        # Dicts keep insertion order, which breaks timestamp ties
        self._messages: dict[str, ChatMessage] = {}

    async def connect(self) -> None:
        """Initialize store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close store (no-op for in-memory)."""
        pass

    async def _commit(self, changes: list[tuple[str, ChatMessage]]) -> None:
        """Apply changes to a copy, then swap it in."""
        messages = dict(self._messages)
        for op, message in changes:
            if op == "insert":
                if message.id in messages:
                    raise StorageError(f"Duplicate message id: {message.id}")
                messages[message.id] = message
            elif op == "update":
                if message.id not in messages:
                    raise StorageError(f"Message not found: {message.id}")
                messages[message.id] = messages[message.id].model_copy(
                    update={"text": message.text}
                )
            else:
                messages.pop(message.id, None)
        self._messages = messages

    async def fetch_all(self) -> list[ChatMessage]:
        """Get all messages sorted by timestamp."""
        ordered = sorted(self._messages.values(), key=lambda m: m.timestamp)
        return [m.model_copy() for m in ordered]

    @property
    def backend_type(self) -> str:
        return "memory"
