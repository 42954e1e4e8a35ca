"""Local Ollama server scoring backend."""

from http import HTTPStatus

import httpx

from smart_digest.errors import AnalysisError
from smart_digest.llm.base import DEFAULT_TEMPERATURE, BaseScoringBackend


DEFAULT_OLLAMA_URL = "http://localhost:11434"

# Local models can be slow to produce the first token
_TIMEOUT_SECONDS = 120.0
_NUM_PREDICT = 1000
_MAX_ERROR_BODY = 500


class OllamaBackend(BaseScoringBackend):
    """Scoring backend for a local Ollama server (``/api/chat``)."""

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        model: str = "llama3",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            base_url: Ollama server root URL.
            model: Local model name.
            transport: Optional transport, used by tests to mock HTTP.
        """
        super().__init__(model)
        self.base_url = (base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self._client = httpx.Client(timeout=_TIMEOUT_SECONDS, transport=transport)

    @property
    def name(self) -> str:
        return "Ollama"

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        request_body: dict[str, object] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "stream": False,
            "options": {
                "temperature": DEFAULT_TEMPERATURE,
                "num_predict": _NUM_PREDICT,
            },
        }

        try:
            response = self._client.post(
                f"{self.base_url}/api/chat",
                json=request_body,
            )
        except httpx.HTTPError as e:
            msg = f"Ollama API error: {e}"
            raise AnalysisError(msg) from e

        if response.status_code != HTTPStatus.OK:
            msg = (
                f"Ollama API returned {response.status_code}: "
                f"{response.text[:_MAX_ERROR_BODY]}"
            )
            raise AnalysisError(msg, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            msg = f"failed to decode Ollama response: {e}"
            raise AnalysisError(msg) from e

        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content", "") if isinstance(message, dict) else ""
        if not content:
            msg = "empty message content from Ollama"
            raise AnalysisError(msg)
        return str(content)
