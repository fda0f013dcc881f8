"""Pytest configuration and shared fixtures."""
import asyncio
import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from localchat.completion import CompletionClient, OllamaCompletionClient
from localchat.errors import StorageError
from localchat.store import ChatMessage, create_message_store
from localchat.store.in_memory import InMemoryMessageStore


class FlakyMessageStore(InMemoryMessageStore):
    """In-memory store whose saves and reads can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_fetch = False
        self.fail_ops: set[str] = set()
        self.saves = 0

    async def _commit(self, changes: list[tuple[str, ChatMessage]]) -> None:
        self.saves += 1
        if any(op in self.fail_ops for op, _ in changes):
            raise StorageError("disk full")
        await super()._commit(changes)

    async def fetch_all(self) -> list[ChatMessage]:
        if self.fail_fetch:
            raise StorageError("database is locked")
        return await super().fetch_all()


class ScriptedClient(CompletionClient):
    """Completion client returning canned replies (or raising canned errors)."""

    def __init__(self, *replies: str | Exception) -> None:
        super().__init__()
        self._replies = list(replies)
        self.prompts: list[str] = []
        self.on_call: Callable[[str], None] | None = None
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()
        self.closed = False

    @property
    def model(self) -> str:
        return "scripted"

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.started.set()
        if self.on_call is not None:
            self.on_call(prompt)
        if self.gate is not None:
            await self.gate.wait()
        reply = self._replies.pop(0) if self._replies else f"re: {prompt}"
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self) -> None:
        self.closed = True


def ollama_reply(text: str = "Hi there", done: bool = True, status_code: int = 200) -> httpx.Response:
    """Build a /api/generate response body."""
    return httpx.Response(status_code, json={"response": text, "done": done})


@pytest.fixture
def make_ollama_client():
    """Return a factory for Ollama clients backed by an httpx MockTransport.

    The factory takes a handler ``(httpx.Request) -> httpx.Response``; every
    request seen is appended to ``client.requests``.
    """
    clients: list[OllamaCompletionClient] = []

    def _factory(handler, **kwargs) -> OllamaCompletionClient:
        requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = OllamaCompletionClient(transport=httpx.MockTransport(_record), **kwargs)
        client.requests = requests
        clients.append(client)
        return client

    return _factory


@pytest.fixture
def scripted_client():
    """Return the ScriptedClient class for building fake completion clients."""
    return ScriptedClient


@pytest.fixture
async def memory_store():
    """Connected in-memory message store."""
    store = create_message_store("memory")
    await store.connect()
    yield store
    await store.disconnect()


@pytest.fixture
async def sqlite_store(tmp_path):
    """Connected SQLite message store in a temporary directory."""
    store = create_message_store("sqlite", path=tmp_path / "chat.db")
    await store.connect()
    yield store
    await store.disconnect()


@pytest.fixture
async def flaky_store():
    """Connected store with switchable failures."""
    store = FlakyMessageStore()
    await store.connect()
    yield store
    await store.disconnect()


@pytest.fixture
def ticking_clock():
    """Clock advancing one second per call from a fixed UTC start."""
    start = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    ticks = iter(range(10_000))

    def _now() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return _now


def request_json(request: httpx.Request) -> dict:
    """Decode the JSON body of a recorded request."""
    return json.loads(request.content)
