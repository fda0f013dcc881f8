"""Data models for the message store.

These models define the structure of a chat message,
independent of the storage backend used.
"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    """A single message in the conversation.

    Only ``text`` may change after creation; it is filled in place when the
    assistant placeholder receives its completion.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: uuid4().hex, frozen=True)
    text: str = Field(description="Message content")
    is_from_user: bool = Field(frozen=True, description="True for user-authored messages")
    timestamp: datetime = Field(default_factory=utc_now, frozen=True, description="Creation time, sort key")

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        # Naive datetimes are taken as UTC so every stored timestamp compares
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
