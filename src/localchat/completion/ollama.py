import httpx
from pydantic import ValidationError

from ..errors import DecodeError, NetworkError, ServerError
from .base import CompletionClient
from .models import GenerateRequest, GenerateResponse

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "mistral"
DEFAULT_TIMEOUT = 60.0
GENERATE_PATH = "/api/generate"


class OllamaCompletionClient(CompletionClient):
    """Completion client for a local Ollama server.

    Hidden design decisions:
    - Endpoint path and JSON body layout of /api/generate
    - HTTP client setup (httpx) and timeout
    - Mapping of httpx and pydantic failures onto localchat errors
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Ollama client.

        Args:
            model: Model name installed on the server (default: mistral)
            base_url: Server root URL (default: http://localhost:11434)
            timeout: Request timeout in seconds (default: 60)
            transport: Optional httpx transport, used by tests
        """
        super().__init__()
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @property
    def model(self) -> str:
        """Get the configured model name."""
        return self._model

    @property
    def endpoint(self) -> str:
        """Full URL of the generate endpoint."""
        return f"{self._base_url}{GENERATE_PATH}"

    async def complete(self, prompt: str) -> str:
        """Generate a completion using Ollama's /api/generate.

        Args:
            prompt: Prompt text

        Returns:
            The ``response`` field of the reply body
        """
        request = GenerateRequest(model=self._model, prompt=prompt, stream=False)
        self._debug("info", "LLM", f"POST {self.endpoint} (model={self._model}, {len(prompt)} chars)")

        try:
            response = await self._client.post(
                GENERATE_PATH,
                content=request.model_dump_json(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            self._debug("error", "LLM", f"Timed out after {self._timeout:g}s")
            raise NetworkError(f"Request timed out after {self._timeout:g} seconds") from e
        except httpx.RequestError as e:
            self._debug("error", "LLM", f"Transport failure: {e!r}")
            raise NetworkError(f"Cannot reach {self.endpoint}: {e}") from e

        if response.status_code != 200:
            self._debug("error", "LLM", f"HTTP {response.status_code}")
            raise ServerError(response.status_code)

        try:
            body = GenerateResponse.model_validate_json(response.content)
        except ValidationError as e:
            self._debug("error", "LLM", f"Malformed response body: {response.text[:200]}")
            raise DecodeError(f"Malformed response from {self.endpoint}") from e

        self._debug("info", "LLM", f"Response received ({len(body.response)} chars, done={body.done})")
        return body.response

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()
