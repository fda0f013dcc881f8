"""Abstract base class for message store backends.

This module defines the interface for chat message persistence.
The abstraction hides:
- Storage format (SQLite rows, in-process dict)
- Persistence mechanism (file, memory)
- Connection and transaction management

Writes follow a unit-of-work pattern: ``insert``, ``update`` and ``delete``
only stage a change, ``save`` commits every staged change at once.
"""

from abc import ABC, abstractmethod

from .models import ChatMessage


class MessageStore(ABC):
    """Abstract message store backend."""

    def __init__(self) -> None:
        self._pending: list[tuple[str, ChatMessage]] = []

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store backend gracefully."""

    def insert(self, message: ChatMessage) -> None:
        """Stage a new message for insertion."""
        self._pending.append(("insert", message.model_copy()))

    def update(self, message: ChatMessage) -> None:
        """Stage a text update for an existing message."""
        self._pending.append(("update", message.model_copy()))

    def delete(self, message: ChatMessage) -> None:
        """Stage a message for deletion."""
        self._pending.append(("delete", message.model_copy()))

    @property
    def has_changes(self) -> bool:
        """Whether there are staged changes waiting for ``save``."""
        return bool(self._pending)

    async def save(self) -> None:
        """Commit all staged changes.

        The commit is atomic: either every staged change is persisted or none
        is. Staged changes are discarded in both cases.

        Raises:
            StorageError: If the backend fails to persist the changes
        """
        pending, self._pending = self._pending, []
        if pending:
            await self._commit(pending)

    @abstractmethod
    async def _commit(self, changes: list[tuple[str, ChatMessage]]) -> None:
        """Apply staged changes in one transaction."""

    @abstractmethod
    async def fetch_all(self) -> list[ChatMessage]:
        """Return every committed message.

        Ordered by timestamp ascending, ties broken by insertion order.

        Raises:
            StorageError: If the backend cannot be read
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
