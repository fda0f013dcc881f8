"""Chat controller.

Owns the request lifecycle of a send and the state the presentation
layer renders. The message store stays the single owner of message
lifetime: after every write the controller re-reads the full list instead
of merging changes into its own copy.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..completion import CompletionClient
from ..errors import ChatError, StorageError
from ..store import ChatMessage, MessageStore
from ..store.models import utc_now
from .models import ChatState, SendPhase

PLACEHOLDER_TEXT = "Thinking..."

StateListener = Callable[[ChatState], None]


class ChatController:
    """Coordinates the message store and the completion client.

    Sends are serialized with an internal lock, so overlapping calls run one
    after another instead of racing on the placeholder. The placeholder is
    tracked by its id and rolled back by id when a send fails.

    Example:
        controller = ChatController(store, client)
        controller.subscribe(render)
        await controller.load_history()
        await controller.send_message("Hello")
    """

    def __init__(
        self,
        store: MessageStore,
        client: CompletionClient,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._clock = clock or utc_now
        self._lock = asyncio.Lock()
        self._listeners: list[StateListener] = []
        self._debug_callback: Any = None

        self._messages: list[ChatMessage] = []
        self._input_text = ""
        self._is_loading = False
        self._phase = SendPhase.IDLE
        self._last_error: ChatError | None = None

    @property
    def state(self) -> ChatState:
        """Current state snapshot."""
        return ChatState(
            messages=[m.model_copy() for m in self._messages],
            input_text=self._input_text,
            is_loading=self._is_loading,
            phase=self._phase,
            last_error=self._last_error,
        )

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def client(self) -> CompletionClient:
        return self._client

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with a fresh snapshot after each change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for detailed execution logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
                      component: Source component name
                      message: Log message
        """
        self._debug_callback = callback
        self._client.set_debug_callback(callback)

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)

    def set_input(self, text: str) -> None:
        """Replace the input buffer."""
        if text != self._input_text:
            self._input_text = text
            self._notify()

    def dismiss_error(self) -> None:
        """Forget the last error once the user has seen it."""
        if self._last_error is not None:
            self._last_error = None
            self._notify()

    async def _reload(self) -> None:
        self._messages = await self._store.fetch_all()
        self._notify()

    async def load_history(self) -> ChatState:
        """Replace the in-memory list with every stored message.

        On a storage failure the error is recorded and the current list is
        kept as it is.
        """
        try:
            messages = await self._store.fetch_all()
        except StorageError as e:
            self._debug("error", "Store", f"Failed to load history: {e}")
            self._last_error = e
            self._notify()
            return self.state

        self._messages = messages
        self._debug("info", "Store", f"Loaded {len(messages)} message(s)")
        self._notify()
        return self.state

    async def send_message(self, input_text: str | None = None) -> ChatState:
        """Send a prompt and record the exchange.

        Args:
            input_text: Text to send; the input buffer is used when None.
                Whitespace-only input is silently ignored.

        Returns:
            State snapshot once the send has finished
        """
        raw = self._input_text if input_text is None else input_text
        text = raw.strip()
        if not text:
            self._debug("debug", "Chat", "Ignoring empty input")
            return self.state

        # The buffer clears before any I/O, even if an earlier send still holds the lock
        self._input_text = ""
        self._notify()

        async with self._lock:
            await self._send(text)
        return self.state

    async def _send(self, text: str) -> None:
        placeholder: ChatMessage | None = None
        self._phase = SendPhase.SUBMITTING
        self._debug("info", "Chat", f"Sending: '{text[:50]}'")

        try:
            self._store.insert(ChatMessage(text=text, is_from_user=True, timestamp=self._clock()))
            await self._store.save()
            await self._reload()

            pending = ChatMessage(text=PLACEHOLDER_TEXT, is_from_user=False, timestamp=self._clock())
            self._store.insert(pending)
            await self._store.save()
            placeholder = pending
            await self._reload()

            self._is_loading = True
            self._phase = SendPhase.AWAITING_RESPONSE
            self._notify()

            completion = await self._client.complete(text)

            placeholder.text = completion
            self._store.update(placeholder)
            await self._store.save()
            await self._reload()

            self._phase = SendPhase.SUCCEEDED
            self._debug("info", "Chat", "Reply stored")
        except ChatError as e:
            self._debug("error", "Chat", f"Send failed: {e}")
            self._last_error = e
            self._phase = SendPhase.FAILED
            if placeholder is not None:
                await self._discard_placeholder(placeholder)
        except BaseException:
            if placeholder is not None:
                await self._discard_placeholder(placeholder)
            raise
        finally:
            self._is_loading = False
            self._notify()
            self._phase = SendPhase.IDLE
            self._notify()

    async def _discard_placeholder(self, placeholder: ChatMessage) -> None:
        """Delete the placeholder by id; failures here are logged and dropped."""
        try:
            self._store.delete(placeholder)
            await self._store.save()
            await self._reload()
        except StorageError as e:
            self._debug("warning", "Store", f"Could not remove placeholder {placeholder.id}: {e}")

    async def clear_all(self) -> ChatState:
        """Delete every stored message.

        The in-memory list is only cleared after the store has committed, so
        a failed clear never shows a state that differs from storage.
        """
        async with self._lock:
            try:
                for message in await self._store.fetch_all():
                    self._store.delete(message)
                await self._store.save()
            except StorageError as e:
                self._debug("error", "Store", f"Failed to clear history: {e}")
                self._last_error = e
                self._notify()
                return self.state

            self._messages = []
            self._debug("info", "Store", "History cleared")
            self._notify()
            return self.state
