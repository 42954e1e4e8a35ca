"""Job and Result models for the processing pipeline."""

from dataclasses import dataclass

from smart_digest.errors import CancellationError, DigestError, ErrorClass
from smart_digest.fetch.models import Article
from smart_digest.llm.models import AnalysisResult


@dataclass(frozen=True)
class Job:
    """One URL to fetch and score.

    Immutable so it can be handed between worker threads by value.

    Attributes:
        url: Target URL, non-empty.
        project: Optional project name from upstream tooling.
        version: Optional version label from upstream tooling.
    """

    url: str
    project: str | None = None
    version: str | None = None

    def __post_init__(self) -> None:
        """Reject an empty URL."""
        if not self.url or not self.url.strip():
            msg = "Job url must be a non-empty string"
            raise ValueError(msg)


@dataclass(frozen=True)
class Result:
    """Terminal outcome for exactly one Job.

    Either ``article`` and ``analysis`` are both set and ``error`` is
    None, or ``error`` is set. ``article`` may still be present when
    analysis failed or the job was cancelled after fetching.

    Attributes:
        job: The job this result belongs to.
        article: Extracted article, if the fetch succeeded.
        analysis: LLM analysis, if scoring succeeded.
        error: Per-job error, None on success.
        duration_ms: Wall-clock time spent executing the job.
    """

    job: Job
    article: Article | None = None
    analysis: AnalysisResult | None = None
    error: DigestError | None = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Check if both stages completed."""
        return self.error is None and self.analysis is not None

    @property
    def error_class(self) -> ErrorClass | None:
        """Classification of the error, None on success."""
        if self.error is None:
            return None
        return getattr(self.error, "error_class", None)

    @classmethod
    def cancelled(
        cls,
        job: Job,
        reason: str = "job cancelled",
        article: Article | None = None,
    ) -> "Result":
        """Build a result carrying a CancellationError.

        Args:
            job: The cancelled job.
            reason: Message for the error.
            article: Article fetched before cancellation, if any.

        Returns:
            Result with a CancellationError.
        """
        return cls(job=job, article=article, error=CancellationError(reason))
