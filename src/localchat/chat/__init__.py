"""Chat controller module for localchat.

Orchestrates a send: persist the user message, insert a placeholder,
call the completion client, then fill or roll back the placeholder.
"""

from .controller import PLACEHOLDER_TEXT, ChatController
from .models import ChatState, SendPhase

__all__ = [
    "PLACEHOLDER_TEXT",
    "ChatController",
    "ChatState",
    "SendPhase",
]
