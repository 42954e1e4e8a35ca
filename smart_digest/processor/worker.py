"""Worker pool executing admitted jobs: fetch, then analyze."""

import queue
import threading
import time

import structlog

from smart_digest.errors import (
    AnalysisError,
    CancellationError,
    ConfigurationError,
    FetchError,
)
from smart_digest.fetch.models import Article
from smart_digest.fetch.protocols import ContentSource
from smart_digest.fetch.redact import redact_url_credentials
from smart_digest.llm.protocols import ScoringBackend
from smart_digest.processor.models import Job, Result


logger = structlog.get_logger()

# End-of-stream marker shared by the pipeline queues
CLOSED = object()

# How often an idle worker re-checks the cancellation event
IDLE_POLL_SECONDS = 0.05


def _elapsed_ms(start: float) -> float:
    return (time.monotonic() - start) * 1000


class WorkerPool:
    """Fixed-size pool of threads running per-job execution.

    Workers share only the admitted queue (input) and the result queue
    (output). Each job taken from the admitted queue yields exactly one
    Result on the result queue.
    """

    def __init__(
        self,
        content_source: ContentSource,
        scoring_backend: ScoringBackend,
        interests: list[str],
        max_workers: int,
    ) -> None:
        """Initialize the pool.

        Args:
            content_source: Fetches and extracts articles.
            scoring_backend: Scores article text.
            interests: Reader interests passed to every analysis.
            max_workers: Number of worker threads, at least 1.

        Raises:
            ConfigurationError: If max_workers is less than 1.
        """
        if max_workers < 1:
            msg = f"max_workers must be at least 1, got {max_workers}"
            raise ConfigurationError(msg)

        self._content_source = content_source
        self._scoring_backend = scoring_backend
        self._interests = list(interests)
        self._max_workers = max_workers
        self._log = logger.bind(component="pipeline", subcomponent="worker")

    @property
    def max_workers(self) -> int:
        """Number of worker threads started per run."""
        return self._max_workers

    def start(
        self,
        admitted: "queue.Queue[object]",
        results: "queue.Queue[object]",
        cancel: threading.Event,
    ) -> list[threading.Thread]:
        """Start the worker threads.

        Args:
            admitted: Queue of admitted jobs, terminated by one CLOSED per worker.
            results: Queue receiving one Result per job.
            cancel: Shared cancellation event.

        Returns:
            The started threads, for the caller to join.
        """
        threads = [
            threading.Thread(
                target=self._run_worker,
                args=(worker_id, admitted, results, cancel),
                name=f"digest-worker-{worker_id}",
                daemon=True,
            )
            for worker_id in range(self._max_workers)
        ]
        for thread in threads:
            thread.start()
        return threads

    def _run_worker(
        self,
        worker_id: int,
        admitted: "queue.Queue[object]",
        results: "queue.Queue[object]",
        cancel: threading.Event,
    ) -> None:
        log = self._log.bind(worker_id=worker_id)
        while True:
            try:
                item = admitted.get(timeout=IDLE_POLL_SECONDS)
            except queue.Empty:
                if cancel.is_set():
                    log.debug("worker_stopped", reason="cancelled_while_idle")
                    return
                continue

            if item is CLOSED:
                log.debug("worker_stopped", reason="closed")
                return

            job: Job = item  # type: ignore[assignment]
            if cancel.is_set():
                results.put(Result.cancelled(job, reason="cancelled before start"))
                log.debug("worker_stopped", reason="cancelled_before_start")
                return

            results.put(self.execute(job, cancel))

    def execute(self, job: Job, cancel: threading.Event | None = None) -> Result:
        """Run one job: fetch, then analyze.

        Never raises for per-job failures; every outcome is captured in
        the returned Result.

        Args:
            job: Job to execute.
            cancel: Cancellation event forwarded to both stages.

        Returns:
            Result for the job.
        """
        start = time.monotonic()
        log = self._log.bind(url=redact_url_credentials(job.url))

        try:
            article = self._content_source.fetch(job.url, cancel)
        except CancellationError as e:
            return Result(job=job, error=e, duration_ms=_elapsed_ms(start))
        except Exception as e:  # noqa: BLE001
            error = FetchError(
                f"fetch failed: {e}",
                url=job.url,
                status_code=getattr(e, "status_code", None),
            )
            error.__cause__ = e
            log.warning("job_failed", stage="fetch", error=str(e))
            return Result(job=job, error=error, duration_ms=_elapsed_ms(start))

        return self._analyze(job, article, cancel, start, log)

    def _analyze(
        self,
        job: Job,
        article: Article,
        cancel: threading.Event | None,
        start: float,
        log: structlog.stdlib.BoundLogger,
    ) -> Result:
        try:
            analysis = self._scoring_backend.analyze(
                article.content, self._interests, cancel
            )
        except CancellationError as e:
            return Result(
                job=job, article=article, error=e, duration_ms=_elapsed_ms(start)
            )
        except Exception as e:  # noqa: BLE001
            error = AnalysisError(
                f"analysis failed: {e}",
                status_code=getattr(e, "status_code", 0) or 0,
            )
            error.__cause__ = e
            log.warning("job_failed", stage="analyze", error=str(e))
            return Result(
                job=job, article=article, error=error, duration_ms=_elapsed_ms(start)
            )

        duration_ms = _elapsed_ms(start)
        log.info(
            "job_complete",
            score=analysis.score,
            category=analysis.category,
            duration_ms=round(duration_ms, 2),
        )
        return Result(
            job=job, article=article, analysis=analysis, duration_ms=duration_ms
        )
