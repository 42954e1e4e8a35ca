"""Shared scaffolding for scoring backends."""

import threading
import time
from abc import ABC, abstractmethod

import structlog

from smart_digest.errors import CancellationError
from smart_digest.llm.models import AnalysisResult
from smart_digest.llm.parser import parse_analysis_result
from smart_digest.llm.prompts import build_system_prompt, build_user_prompt


logger = structlog.get_logger()

DEFAULT_TEMPERATURE = 0.3


class BaseScoringBackend(ABC):
    """Abstract base class for scoring backends.

    Subclasses only implement ``_complete``, the provider-specific
    chat call; prompt building, cancellation checks, logging, and
    response parsing are shared here.
    """

    def __init__(self, model: str) -> None:
        """Initialize the backend.

        Args:
            model: Provider model identifier.
        """
        self.model = model
        self._log = logger.bind(
            component="llm",
            subcomponent=self.name.lower(),
            model=model,
        )

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name."""

    @abstractmethod
    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one chat request and return the raw text reply.

        Raises:
            AnalysisError: On transport failure or an empty reply.
        """

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
            cancel: Event checked before and after the request.

        Returns:
            Validated AnalysisResult.

        Raises:
            AnalysisError: If the call fails or the reply is unusable.
            CancellationError: If cancellation was requested.
        """
        self._check_cancelled(cancel)

        start_time = time.perf_counter()
        raw_response = self._complete(
            build_system_prompt(interests),
            build_user_prompt(text),
        )
        self._check_cancelled(cancel)
        result = parse_analysis_result(raw_response)

        self._log.debug(
            "analysis_complete",
            score=result.score,
            category=result.category,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return result

    def _check_cancelled(self, cancel: threading.Event | None) -> None:
        if cancel is not None and cancel.is_set():
            msg = f"{self.name} analysis cancelled"
            raise CancellationError(msg)
