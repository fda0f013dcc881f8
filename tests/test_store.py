"""Unit tests for the message store module."""
import asyncio
from datetime import datetime, timedelta, timezone

import aiosqlite
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from localchat.errors import StorageError
from localchat.store import ChatMessage, MessageStore, create_message_store
from localchat.store.in_memory import InMemoryMessageStore
from localchat.store.sqlite import SQLiteMessageStore

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path):
    """Each test below runs against both backends."""
    if request.param == "sqlite":
        backend = create_message_store("sqlite", path=tmp_path / "chat.db")
    else:
        backend = create_message_store("memory")
    await backend.connect()
    yield backend
    await backend.disconnect()


def _message(text: str, is_from_user: bool = True, offset: int = 0) -> ChatMessage:
    return ChatMessage(text=text, is_from_user=is_from_user, timestamp=T0 + timedelta(seconds=offset))


class TestMessageStoreInterface:
    """Tests for the abstract MessageStore interface."""

    def test_store_is_abstract(self):
        """Test that MessageStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            MessageStore()  # type: ignore


class TestChatMessage:
    """Tests for the ChatMessage model."""

    def test_defaults(self):
        """Test that id and timestamp are assigned at creation."""
        message = ChatMessage(text="Hello", is_from_user=True)

        assert len(message.id) == 32
        assert message.timestamp.tzinfo is not None
        assert ChatMessage(text="Hello", is_from_user=True).id != message.id

    def test_text_is_mutable(self):
        """Test that text can be overwritten in place."""
        message = _message("Thinking...", is_from_user=False)
        message.text = "Hi there"
        assert message.text == "Hi there"

    @pytest.mark.parametrize("field,value", [
        ("is_from_user", False),
        ("timestamp", T0 + timedelta(days=1)),
        ("id", "other"),
    ])
    def test_identity_fields_are_frozen(self, field, value):
        """Test that id, author flag and timestamp never change."""
        message = _message("Hello")
        with pytest.raises(ValidationError):
            setattr(message, field, value)

    def test_naive_timestamp_is_taken_as_utc(self):
        """Test that naive datetimes are normalized to UTC."""
        message = ChatMessage(text="x", is_from_user=True, timestamp=datetime(2024, 5, 1, 12, 0))
        assert message.timestamp == T0


class TestUnitOfWork:
    """Tests shared by every backend."""

    async def test_insert_is_staged_until_save(self, store):
        """Test that inserts are invisible before save."""
        store.insert(_message("Hello"))

        assert store.has_changes
        assert await store.fetch_all() == []

        await store.save()

        assert not store.has_changes
        messages = await store.fetch_all()
        assert [m.text for m in messages] == ["Hello"]

    async def test_round_trip_preserves_fields(self, store):
        """Test that every field survives persistence."""
        original = _message("Hello", offset=5)
        store.insert(original)
        await store.save()

        (stored,) = await store.fetch_all()
        assert stored.model_dump() == original.model_dump()

    async def test_fetch_orders_by_timestamp(self, store):
        """Test that messages come back oldest first regardless of insert order."""
        store.insert(_message("third", offset=30))
        store.insert(_message("first", offset=10))
        await store.save()
        store.insert(_message("second", offset=20))
        await store.save()

        assert [m.text for m in await store.fetch_all()] == ["first", "second", "third"]

    async def test_timestamp_ties_keep_insertion_order(self, store):
        """Test that equal timestamps fall back to insertion order."""
        for text in ["a", "b", "c"]:
            store.insert(_message(text))
            await store.save()

        assert [m.text for m in await store.fetch_all()] == ["a", "b", "c"]

    async def test_update_changes_text_only(self, store):
        """Test that an update rewrites the text of an existing message."""
        placeholder = _message("Thinking...", is_from_user=False)
        store.insert(placeholder)
        await store.save()

        placeholder.text = "Hi there"
        store.update(placeholder)
        await store.save()

        (stored,) = await store.fetch_all()
        assert stored.text == "Hi there"
        assert stored.id == placeholder.id
        assert stored.is_from_user is False

    async def test_staged_copy_is_isolated_from_later_mutation(self, store):
        """Test that mutating a message after insert does not leak into the store."""
        message = _message("Hello")
        store.insert(message)
        message.text = "changed"
        await store.save()

        assert [m.text for m in await store.fetch_all()] == ["Hello"]

    async def test_delete(self, store):
        """Test that a deleted message disappears."""
        keep, drop = _message("keep"), _message("drop", offset=1)
        store.insert(keep)
        store.insert(drop)
        await store.save()

        store.delete(drop)
        await store.save()

        assert [m.text for m in await store.fetch_all()] == ["keep"]

    async def test_update_of_unknown_message_fails(self, store):
        """Test that updating a message that was never saved raises StorageError."""
        store.update(_message("ghost"))
        with pytest.raises(StorageError):
            await store.save()

    async def test_failed_save_is_atomic(self, store):
        """Test that a failing batch persists nothing and is discarded."""
        store.insert(_message("Hello"))
        store.update(_message("ghost"))

        with pytest.raises(StorageError):
            await store.save()

        assert not store.has_changes
        assert await store.fetch_all() == []

    async def test_save_without_changes_is_noop(self, store):
        """Test that saving nothing succeeds."""
        await store.save()
        assert await store.fetch_all() == []


class TestSQLiteMessageStore:
    """Tests specific to the SQLite backend."""

    async def test_history_survives_reconnect(self, tmp_path):
        """Test that messages persist across connections."""
        path = tmp_path / "nested" / "chat.db"
        first = SQLiteMessageStore(path=path)
        await first.connect()
        first.insert(_message("Hello"))
        first.insert(_message("Hi there", is_from_user=False, offset=1))
        await first.save()
        await first.disconnect()

        second = SQLiteMessageStore(path=path)
        await second.connect()
        try:
            messages = await second.fetch_all()
        finally:
            await second.disconnect()

        assert [(m.text, m.is_from_user) for m in messages] == [
            ("Hello", True),
            ("Hi there", False),
        ]

    async def test_unconnected_store_raises_storage_error(self, tmp_path):
        """Test that using the store before connect fails cleanly."""
        store = SQLiteMessageStore(path=tmp_path / "chat.db")
        with pytest.raises(StorageError):
            await store.fetch_all()

    async def test_failed_schema_setup_closes_connection(self, tmp_path, monkeypatch):
        """Test that a connect failure after opening the file leaves nothing open."""
        closed = []
        real_close = aiosqlite.Connection.close

        async def _close(connection):
            closed.append(connection)
            await real_close(connection)

        async def _broken_schema(self):
            raise aiosqlite.OperationalError("disk I/O error")

        monkeypatch.setattr(aiosqlite.Connection, "close", _close)
        monkeypatch.setattr(SQLiteMessageStore, "_create_schema", _broken_schema)
        store = SQLiteMessageStore(path=tmp_path / "chat.db")

        with pytest.raises(StorageError, match="disk I/O error"):
            await store.connect()

        assert len(closed) == 1
        with pytest.raises(StorageError):
            await store.fetch_all()

    async def test_properties(self, sqlite_store, tmp_path):
        """Test backend identifiers."""
        assert sqlite_store.backend_type == "sqlite"
        assert sqlite_store.db_path == tmp_path / "chat.db"


class TestStoreFactory:
    """Tests for the store factory."""

    def test_create_memory_store(self):
        """Test creating the in-memory backend."""
        store = create_message_store("memory")
        assert isinstance(store, InMemoryMessageStore)
        assert store.backend_type == "memory"

    def test_create_sqlite_store(self, tmp_path):
        """Test creating the SQLite backend."""
        store = create_message_store("sqlite", path=tmp_path / "x.db")
        assert isinstance(store, SQLiteMessageStore)

    def test_unsupported_backend(self):
        """Test that unknown backends are rejected."""
        with pytest.raises(ValueError, match="Unsupported store backend"):
            create_message_store("postgres")


@given(st.lists(st.integers(min_value=0, max_value=10_000), max_size=30))
def test_fetch_all_is_sorted(offsets: list[int]):
    """Property test: fetch_all never returns timestamps out of order."""
    async def _run() -> list[ChatMessage]:
        store = InMemoryMessageStore()
        await store.connect()
        for i, offset in enumerate(offsets):
            store.insert(_message(str(i), offset=offset))
        await store.save()
        return await store.fetch_all()

    messages = asyncio.run(_run())

    assert len(messages) == len(offsets)
    timestamps = [m.timestamp for m in messages]
    assert timestamps == sorted(timestamps)
    # Stable: equal timestamps stay in insertion order
    for earlier, later in zip(messages, messages[1:]):
        if earlier.timestamp == later.timestamp:
            assert int(earlier.text) < int(later.text)
