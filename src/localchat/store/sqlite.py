"""SQLite message store backend.

Provides persistent message storage using a SQLite database.
Uses aiosqlite for async access.
"""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from ..errors import StorageError
from .base import MessageStore
from .models import ChatMessage


def _encode_timestamp(ts: datetime) -> str:
    # Fixed width so text ordering in SQL matches chronological ordering
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SQLiteMessageStore(MessageStore):
    """SQLite-backed message store.

    Stores the conversation in a SQLite database file so history
    survives across sessions. ``save`` runs in a single transaction.
    """

    def __init__(self, path: str | Path = "./localchat.db"):
        super().__init__()
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database connection and create the schema."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._db_path)
            await self._create_schema()
        except (OSError, aiosqlite.Error) as e:
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
            raise StorageError(f"Cannot open message database {self._db_path}: {e}") from e

    async def _create_schema(self) -> None:
        """Create database tables."""
        # seq records insertion order for timestamp ties
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS messages (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                text TEXT NOT NULL,
                is_from_user INTEGER NOT NULL,
                timestamp TEXT NOT NULL
            )
        """)

        await self._connection.execute("""
            CREATE INDEX IF NOT EXISTS idx_messages_timestamp
            ON messages(timestamp, seq)
        """)

        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise StorageError("Message store is not connected")
        return self._connection

    async def _commit(self, changes: list[tuple[str, ChatMessage]]) -> None:
        """Write staged changes in one transaction, rolling back on failure."""
        conn = self._require_connection()
        try:
            for op, message in changes:
                if op == "insert":
                    await conn.execute("""
                        INSERT INTO messages (id, text, is_from_user, timestamp)
                        VALUES (?, ?, ?, ?)
                    """, (
                        message.id,
                        message.text,
                        int(message.is_from_user),
                        _encode_timestamp(message.timestamp),
                    ))
                elif op == "update":
                    cursor = await conn.execute(
                        "UPDATE messages SET text = ? WHERE id = ?",
                        (message.text, message.id)
                    )
                    if cursor.rowcount == 0:
                        raise StorageError(f"Message not found: {message.id}")
                else:
                    await conn.execute(
                        "DELETE FROM messages WHERE id = ?",
                        (message.id,)
                    )
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            raise StorageError(f"Failed to save messages: {e}") from e
        except StorageError:
            await conn.rollback()
            raise

    async def fetch_all(self) -> list[ChatMessage]:
        """Get all messages sorted by timestamp, then insertion order."""
        conn = self._require_connection()
        try:
            async with conn.execute(
                """
                SELECT id, text, is_from_user, timestamp
                FROM messages
                ORDER BY timestamp ASC, seq ASC
                """
            ) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to read messages: {e}") from e

        messages = []
        for row in rows:
            message_id, text, is_from_user, ts = row
            messages.append(ChatMessage(
                id=message_id,
                text=text,
                is_from_user=bool(is_from_user),
                timestamp=datetime.fromisoformat(ts)
            ))

        return messages

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
