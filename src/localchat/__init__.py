"""
localchat: a minimal chat client for a locally hosted Ollama model.

Messages are persisted in order, each prompt is sent to the local
completion endpoint, and the reply replaces a placeholder bubble.
"""

__version__ = "0.1.0"

from .chat import ChatController, ChatState, SendPhase
from .completion import CompletionClient, OllamaCompletionClient, create_completion_client
from .errors import ChatError, DecodeError, NetworkError, ServerError, StorageError
from .store import ChatMessage, MessageStore, create_message_store

__all__ = [
    "ChatController",
    "ChatError",
    "ChatMessage",
    "ChatState",
    "CompletionClient",
    "DecodeError",
    "MessageStore",
    "NetworkError",
    "OllamaCompletionClient",
    "SendPhase",
    "ServerError",
    "StorageError",
    "create_completion_client",
    "create_message_store",
]
