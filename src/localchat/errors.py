"""Error taxonomy for localchat.

Every failure the chat controller knows how to surface derives from
ChatError. Lower layers translate their library exceptions (httpx,
aiosqlite, pydantic) into one of these before they leave the module.
"""


class ChatError(Exception):
    """Base class for errors surfaced to the user."""


class NetworkError(ChatError):
    """Transport failure calling the completion endpoint."""


class ServerError(ChatError):
    """The completion endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Server error: {status_code}")


class DecodeError(ChatError):
    """Malformed success response body."""


class StorageError(ChatError):
    """Persistence read or write failure."""
