"""Protocol interface for scoring backends."""

import threading
from typing import Protocol, runtime_checkable

from smart_digest.llm.models import AnalysisResult


@runtime_checkable
class ScoringBackend(Protocol):
    """Protocol for LLM relevance scoring backends.

    Any backend that implements ``analyze`` with the matching signature
    can be used interchangeably by the pipeline, regardless of the
    provider behind it. Implementations must tolerate concurrent calls
    from several worker threads.
    """

    @property
    def name(self) -> str:
        """Human-readable provider name for logging."""
        ...

    def analyze(
        self,
        text: str,
        interests: list[str],
        cancel: threading.Event | None = None,
    ) -> AnalysisResult:
        """Score and summarize article text against the interests.

        Args:
            text: Cleaned article body.
            interests: The reader's interest list.
            cancel: Event that, once set, aborts the call.

        Returns:
            Validated AnalysisResult.

        Raises:
            AnalysisError: If the backend fails or its output is unusable.
            CancellationError: If ``cancel`` was set before the call.
        """
        ...
