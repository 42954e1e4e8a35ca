"""Configuration model for the article fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from smart_digest.fetch.constants import (
    DEFAULT_ACCEPT,
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    MAX_CONTENT_LENGTH,
    MAX_EXCERPT_LENGTH,
    MAX_REDIRECTS,
    MIN_CONTENT_LENGTH,
)


class FetchConfig(BaseModel):
    """Configuration for fetching and extracting articles.

    Central configuration for timeouts, redirect and size limits, and
    the bounds applied to extracted text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    accept: str = DEFAULT_ACCEPT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    max_redirects: Annotated[int, Field(ge=0, le=50)] = MAX_REDIRECTS
    max_response_size_bytes: Annotated[int, Field(ge=1024, le=100 * 1024 * 1024)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
    min_content_length: Annotated[int, Field(ge=0)] = MIN_CONTENT_LENGTH
    max_content_length: Annotated[int, Field(ge=1)] = MAX_CONTENT_LENGTH
    max_excerpt_length: Annotated[int, Field(ge=4)] = MAX_EXCERPT_LENGTH

    def request_headers(self) -> dict[str, str]:
        """Headers sent with every article request."""
        return {
            "User-Agent": self.user_agent,
            "Accept": self.accept,
            "Accept-Language": self.accept_language,
        }
