"""Pydantic schema for the smart-digest configuration file."""

from enum import Enum
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from smart_digest.config.constants import (
    DEFAULT_INTERESTS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_MODELS,
    DEFAULT_OLLAMA_URL,
    DEFAULT_RATE_LIMIT_PER_SECOND,
    DEFAULT_THRESHOLD,
)
from smart_digest.config.error_hints import format_validation_errors
from smart_digest.errors import ConfigurationError


class LlmProvider(str, Enum):
    """Supported scoring backends."""

    OPENAI = "openai"
    OLLAMA = "ollama"
    GEMINI = "gemini"

    @property
    def requires_api_key(self) -> bool:
        """Whether the provider needs an API key."""
        return self in (LlmProvider.OPENAI, LlmProvider.GEMINI)


class DigestConfig(BaseModel):
    """Validated runtime configuration.

    Immutable once built; CLI overrides go through ``with_overrides``,
    which returns a new validated instance.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    llm_provider: LlmProvider = LlmProvider.OPENAI
    api_key: str | None = Field(default=None, repr=False)
    model: str | None = None
    interests: Annotated[list[str], Field(min_length=1)] = Field(
        default_factory=lambda: list(DEFAULT_INTERESTS)
    )
    threshold: Annotated[int, Field(ge=0, le=100)] = DEFAULT_THRESHOLD
    ollama_url: Annotated[str, Field(min_length=1)] = DEFAULT_OLLAMA_URL
    max_workers: Annotated[int, Field(ge=1, le=64)] = DEFAULT_MAX_WORKERS
    rate_limit_per_second: Annotated[float, Field(gt=0.0, allow_inf_nan=False)] = (
        DEFAULT_RATE_LIMIT_PER_SECOND
    )

    @field_validator("interests")
    @classmethod
    def strip_interests(cls, v: list[str]) -> list[str]:
        """Trim interests and reject a list that is blank after trimming."""
        cleaned = [interest.strip() for interest in v if interest.strip()]
        if not cleaned:
            msg = "at least one interest must be specified"
            raise ValueError(msg)
        return cleaned

    @field_validator("model")
    @classmethod
    def blank_model_is_default(cls, v: str | None) -> str | None:
        """Treat an empty model name as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_api_key(self) -> "DigestConfig":
        """Require an API key for hosted providers."""
        if self.llm_provider.requires_api_key and not self.api_key:
            msg = f"api_key is required for {self.llm_provider.value} provider"
            raise ValueError(msg)
        return self

    @property
    def effective_model(self) -> str:
        """Model name, falling back to the provider default."""
        return self.model or DEFAULT_MODELS[self.llm_provider.value]

    def interests_string(self) -> str:
        """Comma-separated interests for display."""
        return ", ".join(self.interests)

    def with_overrides(self, **overrides: object) -> "DigestConfig":
        """Return a new validated config with ``None``-filtered overrides.

        Args:
            **overrides: Field values to replace; ``None`` values are ignored.

        Returns:
            New DigestConfig instance.

        Raises:
            ConfigurationError: If an override is invalid.
        """
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return DigestConfig.model_validate(data)
        except ValidationError as e:
            errors = format_validation_errors(e)
            msg = f"invalid configuration override: {'; '.join(errors)}"
            raise ConfigurationError(msg, errors=errors) from e
