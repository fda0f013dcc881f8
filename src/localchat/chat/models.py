"""State models published by the chat controller."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ChatError
from ..store.models import ChatMessage


class SendPhase(str, Enum):
    """Lifecycle of a single send operation."""

    IDLE = "idle"
    SUBMITTING = "submitting"                  # Writing user message and placeholder
    AWAITING_RESPONSE = "awaiting_response"    # Completion request in flight
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ChatState(BaseModel):
    """Snapshot of everything the presentation layer renders.

    Snapshots are immutable; the controller publishes a new one to its
    subscribers after each change.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    messages: list[ChatMessage] = Field(default_factory=list, description="Messages as last read from the store")
    input_text: str = Field(default="", description="Input buffer")
    is_loading: bool = Field(default=False, description="True while a completion is awaited")
    phase: SendPhase = Field(default=SendPhase.IDLE)
    last_error: ChatError | None = Field(default=None, description="Most recent error, until dismissed")

    @property
    def is_empty(self) -> bool:
        return not self.messages

    @property
    def can_send(self) -> bool:
        """Whether the input buffer holds something sendable right now."""
        return bool(self.input_text.strip()) and not self.is_loading
