"""Global ticking gate limiting how fast jobs enter execution."""

import math
import threading
import time
from typing import TypeVar

import structlog

from smart_digest.errors import CancellationError, ConfigurationError


logger = structlog.get_logger()

T = TypeVar("T")


class RateGate:
    """Admits at most one item per fixed interval.

    The interval is ``1 / rate_per_second``. The first admission is
    immediate; each later one waits until a full interval has passed
    since the previous admission, so K admissions take at least
    (K - 1) / rate seconds. Idle time does not accumulate into bursts.

    One gate is shared by the whole pipeline, so the ceiling holds
    regardless of worker count. Thread-safe: concurrent callers are
    admitted one at a time.
    """

    def __init__(self, rate_per_second: float) -> None:
        """Initialize the gate.

        Args:
            rate_per_second: Admissions per second (e.g. 0.05 = 3 per minute).

        Raises:
            ConfigurationError: If the rate is not a positive finite number.
        """
        if not math.isfinite(rate_per_second) or rate_per_second <= 0:
            msg = f"rate limit must be a positive number, got {rate_per_second}"
            raise ConfigurationError(msg)

        self._rate = rate_per_second
        self._interval = 1.0 / rate_per_second
        self._next_tick: float | None = None
        self._admitted = 0
        self._lock = threading.Lock()
        self._log = logger.bind(component="pipeline", subcomponent="rate_gate")

    @property
    def rate_per_second(self) -> float:
        """Configured admission rate."""
        return self._rate

    @property
    def interval(self) -> float:
        """Seconds between admissions."""
        return self._interval

    @property
    def admitted_count(self) -> int:
        """Number of items admitted since creation."""
        with self._lock:
            return self._admitted

    def admit(self, item: T, cancel: threading.Event | None = None) -> T:
        """Block until the next tick, then admit ``item``.

        Args:
            item: The job being admitted; returned unchanged.
            cancel: Event that aborts the wait once set.

        Returns:
            The admitted item.

        Raises:
            CancellationError: If ``cancel`` is set before the tick.
        """
        with self._lock:
            now = time.monotonic()
            if self._next_tick is None:
                self._next_tick = now

            wait_time = self._next_tick - now
            if cancel is not None:
                # Event.wait returns True as soon as the event is set
                if cancel.wait(max(wait_time, 0.0)):
                    self._log.debug("rate_gate_cancelled", admitted=self._admitted)
                    msg = "admission cancelled"
                    raise CancellationError(msg)
            elif wait_time > 0:
                time.sleep(wait_time)

            self._next_tick = max(self._next_tick, time.monotonic()) + self._interval
            self._admitted += 1
            return item
