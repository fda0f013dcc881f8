"""Message store module for localchat.

Provides durable, ordered storage of chat messages.
"""

from .base import MessageStore
from .factory import create_message_store
from .models import ChatMessage

__all__ = [
    "ChatMessage",
    "MessageStore",
    "create_message_store",
]
