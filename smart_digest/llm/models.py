"""Data models for LLM analysis responses."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


UNCATEGORIZED = "uncategorized"
MIN_SCORE = 0
MAX_SCORE = 100


class AnalysisResult(BaseModel):
    """Structured relevance analysis of a single article.

    Attributes:
        score: Relevance score, clamped into [0, 100].
        summary: Key points in order; never empty.
        category: Single category tag, ``uncategorized`` when omitted.
    """

    model_config = ConfigDict(frozen=True)

    score: int
    summary: list[str] = Field(min_length=1)
    category: str = UNCATEGORIZED

    @field_validator("score", mode="before")
    @classmethod
    def round_score(cls, v: object) -> object:
        """Accept fractional and numeric-string scores from the model."""
        if isinstance(v, str):
            try:
                v = float(v.strip())
            except ValueError:
                return v
        if isinstance(v, float):
            return round(v)
        return v

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: int) -> int:
        """Clamp the score into [0, 100]."""
        return max(MIN_SCORE, min(MAX_SCORE, v))

    @field_validator("summary", mode="before")
    @classmethod
    def normalize_summary(cls, v: object) -> object:
        """Drop blank points; a bare string becomes a single point."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            return [str(point).strip() for point in v if str(point).strip()]
        return v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: object) -> object:
        """Fall back to ``uncategorized`` for a missing or blank category."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNCATEGORIZED
        if isinstance(v, str):
            return v.strip()
        return v
