from typing import Any

from .base import CompletionClient
from .ollama import OllamaCompletionClient


def create_completion_client(backend: str = "ollama", **config: Any) -> CompletionClient:
    """Create a completion client instance.

    This factory function hides the instantiation logic for different servers.

    Args:
        backend: Server type (only 'ollama' is supported)
        **config: Client-specific configuration
            For Ollama:
                - model: str (default: 'mistral')
                - base_url: str (default: 'http://localhost:11434')
                - timeout: float (default: 60.0)

    Returns:
        Initialized completion client

    Raises:
        ValueError: If backend type is not supported

    Examples:
        >>> client = create_completion_client("ollama", model="llama3")
    """
    if backend.lower() == "ollama":
        return OllamaCompletionClient(**config)

    raise ValueError(
        f"Unsupported completion backend: {backend}. "
        f"Supported backends: 'ollama'"
    )
