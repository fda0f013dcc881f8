from abc import ABC, abstractmethod
from typing import Any


class CompletionClient(ABC):
    """Abstract base class for completion clients.

    This module hides the design decision of which inference server is used.
    Implementations must handle server-specific details like:
    - Request/response format conversion
    - Translating transport failures into localchat errors

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            text = await client.complete("Hello")
    """

    def __init__(self) -> None:
        self._debug_callback: Any = None

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Generate a completion for a single prompt.

        Exactly one attempt is made; there are no retries.

        Args:
            prompt: Prompt text sent as-is

        Returns:
            The generated text

        Raises:
            NetworkError: Transport failure (connection refused, timeout)
            ServerError: Non-2xx HTTP status
            DecodeError: Malformed success body
        """
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        """Get the configured model name."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    async def __aenter__(self) -> "CompletionClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
