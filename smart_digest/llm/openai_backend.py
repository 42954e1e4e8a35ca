"""OpenAI chat completions scoring backend."""

import openai

from smart_digest.errors import AnalysisError, ConfigurationError
from smart_digest.llm.base import DEFAULT_TEMPERATURE, BaseScoringBackend


_TIMEOUT_SECONDS = 60.0
_MAX_TOKENS = 500


class OpenAIBackend(BaseScoringBackend):
    """Scoring backend for the OpenAI chat completions API.

    The SDK's own retries are disabled; a failed call is terminal for
    the job.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        client: openai.OpenAI | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            api_key: OpenAI API key.
            model: Chat model identifier.
            client: Optional preconfigured client (used by tests).

        Raises:
            ConfigurationError: If no API key is given.
        """
        if not api_key:
            msg = "OpenAI API key is required"
            raise ConfigurationError(msg)
        super().__init__(model)
        self._client = client or openai.OpenAI(
            api_key=api_key,
            timeout=_TIMEOUT_SECONDS,
            max_retries=0,
        )

    @property
    def name(self) -> str:
        return "OpenAI"

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=DEFAULT_TEMPERATURE,
                max_tokens=_MAX_TOKENS,
            )
        except openai.APIStatusError as e:
            msg = f"OpenAI API error: {e}"
            raise AnalysisError(msg, status_code=e.status_code) from e
        except openai.OpenAIError as e:
            msg = f"OpenAI API error: {e}"
            raise AnalysisError(msg) from e

        if not response.choices:
            msg = "no response from OpenAI"
            raise AnalysisError(msg)

        content = response.choices[0].message.content
        if not content:
            msg = "empty message content from OpenAI"
            raise AnalysisError(msg)
        return content
