from .base import CompletionClient
from .factory import create_completion_client
from .models import GenerateRequest, GenerateResponse
from .ollama import OllamaCompletionClient

__all__ = [
    "CompletionClient",
    "create_completion_client",
    "GenerateRequest",
    "GenerateResponse",
    "OllamaCompletionClient",
]
