"""In-process metrics for pipeline runs."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from smart_digest.errors import ErrorClass


# Module-level singleton state
_metrics_instance: "PipelineMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class PipelineMetrics:
    """Thread-safe counters for pipeline operations.

    Tracks submitted jobs, outcomes by error class, and per-job
    durations. Use get_instance() for singleton access.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    jobs_submitted: int = 0
    jobs_succeeded: int = 0
    failures_by_class: Counter[str] = field(default_factory=Counter)
    durations_ms: list[float] = field(default_factory=list)

    @classmethod
    def get_instance(cls) -> "PipelineMetrics":
        """Get the singleton instance (thread-safe).

        Returns:
            The shared PipelineMetrics instance.
        """
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_submitted(self, count: int) -> None:
        """Record jobs handed to the pipeline."""
        with self._lock:
            self.jobs_submitted += count

    def record_success(self, duration_ms: float) -> None:
        """Record a job that completed both stages.

        Args:
            duration_ms: Wall-clock duration of the job.
        """
        with self._lock:
            self.jobs_succeeded += 1
            self.durations_ms.append(duration_ms)

    def record_failure(self, error_class: ErrorClass, duration_ms: float) -> None:
        """Record a failed or cancelled job.

        Args:
            error_class: Classification of the error.
            duration_ms: Wall-clock duration of the job (0 if never run).
        """
        with self._lock:
            self.failures_by_class[error_class.value] += 1
            if duration_ms > 0:
                self.durations_ms.append(duration_ms)

    @property
    def jobs_cancelled(self) -> int:
        """Number of jobs that ended with a cancellation."""
        with self._lock:
            return self.failures_by_class[ErrorClass.CANCELLED.value]

    @property
    def jobs_failed(self) -> int:
        """Number of jobs that ended with any error, cancellations included."""
        with self._lock:
            return sum(self.failures_by_class.values())

    def to_dict(self) -> dict[str, Any]:
        """Snapshot the counters as a plain dictionary.

        Returns:
            Dictionary suitable for structured logging.
        """
        with self._lock:
            durations = list(self.durations_ms)
            failures = dict(self.failures_by_class)
            submitted = self.jobs_submitted
            succeeded = self.jobs_succeeded

        return {
            "jobs_submitted": submitted,
            "jobs_succeeded": succeeded,
            "jobs_failed": sum(failures.values()),
            "failures_by_class": failures,
            "duration_ms_total": round(sum(durations), 2),
            "duration_ms_max": round(max(durations), 2) if durations else 0.0,
        }
