"""Pipeline coordinator: intake, rate gate, worker pool, collection."""

import queue
import threading
import time
from collections.abc import Callable, Iterable, Sequence

import structlog

from smart_digest.errors import CancellationError
from smart_digest.fetch.protocols import ContentSource
from smart_digest.llm.protocols import ScoringBackend
from smart_digest.observability.metrics import PipelineMetrics
from smart_digest.processor.models import Job, Result
from smart_digest.processor.rate_gate import RateGate
from smart_digest.processor.worker import CLOSED, IDLE_POLL_SECONDS, WorkerPool


logger = structlog.get_logger()

ProgressCallback = Callable[[int, int, Result], None]

DEFAULT_MAX_WORKERS = 5
DEFAULT_RATE_LIMIT = 10.0


def _put_unless_cancelled(
    target: "queue.Queue[object]",
    item: object,
    cancel: threading.Event,
) -> bool:
    """Put into a bounded queue, giving up once cancellation is set.

    Returns:
        True if the item was enqueued.
    """
    while True:
        try:
            target.put(item, timeout=IDLE_POLL_SECONDS)
        except queue.Full:
            if cancel.is_set():
                return False
            continue
        return True


def _drain_until_closed(source: "queue.Queue[object]") -> list[Job]:
    """Take every job left in ``source`` up to its CLOSED marker."""
    drained: list[Job] = []
    while True:
        item = source.get()
        if item is CLOSED:
            return drained
        drained.append(item)  # type: ignore[arg-type]


def _drain_nowait(source: "queue.Queue[object]") -> list[Job]:
    """Take every job currently in ``source`` without blocking."""
    drained: list[Job] = []
    while True:
        try:
            item = source.get_nowait()
        except queue.Empty:
            return drained
        if item is not CLOSED:
            drained.append(item)  # type: ignore[arg-type]


class Processor:
    """Runs a batch of jobs through fetch and analysis concurrently.

    Data flows through three queues: intake -> rate gate, rate gate ->
    workers (bounded at ``max_workers``), workers -> collector. The
    collector runs on the caller's thread and is the only place the
    completed counter lives.

    A Processor can be reused for several batches; the rate gate is
    shared across them.
    """

    def __init__(
        self,
        content_source: ContentSource,
        scoring_backend: ScoringBackend,
        interests: list[str],
        max_workers: int = DEFAULT_MAX_WORKERS,
        rate_limit: float = DEFAULT_RATE_LIMIT,
        metrics: PipelineMetrics | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            content_source: Fetches and extracts articles.
            scoring_backend: Scores article text.
            interests: Reader interests passed to every analysis.
            max_workers: Worker pool size, at least 1.
            rate_limit: Job admissions per second, positive.
            metrics: Metrics sink (default: the shared singleton).

        Raises:
            ConfigurationError: If max_workers or rate_limit is invalid.
        """
        self._pool = WorkerPool(
            content_source=content_source,
            scoring_backend=scoring_backend,
            interests=interests,
            max_workers=max_workers,
        )
        self._gate = RateGate(rate_limit)
        if metrics is None:
            metrics = PipelineMetrics.get_instance()
        self._metrics = metrics
        self._log = logger.bind(component="pipeline", subcomponent="processor")

    @property
    def max_workers(self) -> int:
        """Worker pool size."""
        return self._pool.max_workers

    @property
    def rate_gate(self) -> RateGate:
        """The shared admission gate."""
        return self._gate

    def process(
        self,
        jobs: Sequence[Job],
        on_progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> list[Result]:
        """Process every job and return one Result per job.

        Per-job failures are captured in the Results and never abort the
        batch. Results come back in completion order, which is not the
        input order.

        Args:
            jobs: Jobs to process.
            on_progress: Called as ``(completed, total, result)`` on the
                caller's thread after each result arrives.
            cancel: Event that, once set, stops admitting and starting jobs.

        Returns:
            Results in arrival order, ``len(jobs)`` of them.
        """
        if not jobs:
            return []

        batch = list(jobs)
        total = len(batch)
        if cancel is None:
            cancel = threading.Event()
        start = time.monotonic()

        self._metrics.record_submitted(total)
        self._log.info(
            "pipeline_started",
            jobs=total,
            max_workers=self.max_workers,
            rate_per_second=self._gate.rate_per_second,
        )

        intake: queue.Queue[object] = queue.Queue(maxsize=total + 1)
        admitted: queue.Queue[object] = queue.Queue(maxsize=self.max_workers)
        results: queue.Queue[object] = queue.Queue()

        stages = [
            threading.Thread(
                target=self._feed_intake,
                args=(batch, intake, results, cancel),
                name="digest-intake",
                daemon=True,
            ),
            threading.Thread(
                target=self._run_gate,
                args=(intake, admitted, results, cancel),
                name="digest-rate-gate",
                daemon=True,
            ),
        ]
        for stage in stages:
            stage.start()
        stages.extend(self._pool.start(admitted, results, cancel))

        closer = threading.Thread(
            target=self._close_results,
            args=(stages, admitted, results),
            name="digest-closer",
            daemon=True,
        )
        closer.start()

        try:
            collected = self._collect(results, total, on_progress)
        except BaseException:
            # Stop the stages if the caller's thread is interrupted
            cancel.set()
            raise

        self._log.info(
            "pipeline_finished",
            jobs=total,
            succeeded=sum(1 for r in collected if r.success),
            cancelled=cancel.is_set(),
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        return collected

    def _collect(
        self,
        results: "queue.Queue[object]",
        total: int,
        on_progress: ProgressCallback | None,
    ) -> list[Result]:
        collected: list[Result] = []
        completed = 0
        while True:
            item = results.get()
            if item is CLOSED:
                return collected

            result: Result = item  # type: ignore[assignment]
            completed += 1
            collected.append(result)
            if result.error_class is None:
                self._metrics.record_success(result.duration_ms)
            else:
                self._metrics.record_failure(result.error_class, result.duration_ms)

            if on_progress is not None:
                on_progress(completed, total, result)

    def _feed_intake(
        self,
        batch: list[Job],
        intake: "queue.Queue[object]",
        results: "queue.Queue[object]",
        cancel: threading.Event,
    ) -> None:
        try:
            for index, job in enumerate(batch):
                if cancel.is_set():
                    self._abandon(batch[index:], results, "cancelled before admission")
                    return
                intake.put(job)
        finally:
            intake.put(CLOSED)

    def _run_gate(
        self,
        intake: "queue.Queue[object]",
        admitted: "queue.Queue[object]",
        results: "queue.Queue[object]",
        cancel: threading.Event,
    ) -> None:
        while True:
            item = intake.get()
            if item is CLOSED:
                break

            job: Job = item  # type: ignore[assignment]
            try:
                self._gate.admit(job, cancel)
            except CancellationError:
                self._abandon(
                    [job, *_drain_until_closed(intake)],
                    results,
                    "cancelled before admission",
                )
                return

            if not _put_unless_cancelled(admitted, job, cancel):
                self._abandon(
                    [job, *_drain_until_closed(intake)],
                    results,
                    "cancelled before admission",
                )
                return

        for _ in range(self.max_workers):
            if not _put_unless_cancelled(admitted, CLOSED, cancel):
                return

    def _close_results(
        self,
        stages: Iterable[threading.Thread],
        admitted: "queue.Queue[object]",
        results: "queue.Queue[object]",
    ) -> None:
        for stage in stages:
            stage.join()
        # Jobs admitted but never picked up because every worker stopped
        # on cancellation still get a Result.
        self._abandon(_drain_nowait(admitted), results, "cancelled after admission")
        results.put(CLOSED)

    def _abandon(
        self,
        jobs: list[Job],
        results: "queue.Queue[object]",
        reason: str,
    ) -> None:
        if not jobs:
            return
        self._log.warning("jobs_abandoned", count=len(jobs), reason=reason)
        for job in jobs:
            results.put(Result.cancelled(job, reason=reason))
