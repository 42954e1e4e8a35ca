"""Gemini API scoring backend using API key authentication."""

from http import HTTPStatus

import httpx

from smart_digest.errors import AnalysisError, ConfigurationError
from smart_digest.llm.base import DEFAULT_TEMPERATURE, BaseScoringBackend


_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
_TIMEOUT_SECONDS = 60.0
_MAX_OUTPUT_TOKENS = 1000


class GeminiBackend(BaseScoringBackend):
    """Scoring backend for the standard Gemini API.

    Uses the ``generativelanguage.googleapis.com`` endpoint with an
    ``x-goog-api-key`` header and asks for a JSON response body.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            api_key: Gemini API key.
            model: Gemini model identifier.
            transport: Optional transport, used by tests to mock HTTP.

        Raises:
            ConfigurationError: If no API key is given.
        """
        if not api_key:
            msg = "Gemini API key is required"
            raise ConfigurationError(msg)
        super().__init__(model)
        self._api_key = api_key
        self._client = httpx.Client(timeout=_TIMEOUT_SECONDS, transport=transport)

    @property
    def name(self) -> str:
        return "Gemini"

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        url = f"{_BASE_URL}/{self.model}:generateContent"
        request_body: dict[str, object] = {
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "generationConfig": {
                "temperature": DEFAULT_TEMPERATURE,
                "maxOutputTokens": _MAX_OUTPUT_TOKENS,
                "responseMimeType": "application/json",
            },
        }

        try:
            response = self._client.post(
                url,
                headers={
                    "x-goog-api-key": self._api_key,
                    "Content-Type": "application/json",
                },
                json=request_body,
            )
        except httpx.HTTPError as e:
            msg = f"Gemini API request failed: {e}"
            raise AnalysisError(msg) from e

        if response.status_code != HTTPStatus.OK:
            msg = f"Gemini API returned {response.status_code}"
            raise AnalysisError(msg, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            msg = f"failed to decode Gemini response: {e}"
            raise AnalysisError(msg) from e

        candidates = data.get("candidates", []) if isinstance(data, dict) else []
        if not candidates:
            msg = "No candidates in Gemini API response"
            raise AnalysisError(msg)

        parts = candidates[0].get("content", {}).get("parts", [])
        if not parts:
            msg = "No parts in first candidate"
            raise AnalysisError(msg)

        text: str = parts[0].get("text", "")
        if not text:
            msg = "Empty text in response"
            raise AnalysisError(msg)

        return text
