"""Unit tests for the rate gate."""

import math
import threading
import time

import pytest

from smart_digest.errors import CancellationError, ConfigurationError
from smart_digest.processor.rate_gate import RateGate


class TestRateGateConstruction:
    """Tests for RateGate construction."""

    @pytest.mark.parametrize("rate", [0, -1.0, math.inf, math.nan])
    def test_invalid_rate_rejected(self, rate: float) -> None:
        """Non-positive or non-finite rates are configuration errors."""
        with pytest.raises(ConfigurationError, match="rate limit"):
            RateGate(rate)

    def test_interval(self) -> None:
        """Interval is the reciprocal of the rate."""
        gate = RateGate(4.0)
        assert gate.interval == pytest.approx(0.25)
        assert gate.rate_per_second == 4.0


class TestRateGateAdmission:
    """Tests for RateGate.admit."""

    def test_first_admission_is_immediate(self) -> None:
        """The first item does not wait for a tick."""
        gate = RateGate(1.0)
        start = time.monotonic()
        assert gate.admit("job", threading.Event()) == "job"
        assert time.monotonic() - start < 0.1

    def test_admissions_are_spaced_by_interval(self) -> None:
        """K admissions take at least (K - 1) intervals."""
        gate = RateGate(20.0)
        cancel = threading.Event()

        start = time.monotonic()
        for i in range(5):
            gate.admit(i, cancel)
        elapsed = time.monotonic() - start

        assert elapsed >= 0.19  # 4 * 0.05s, small tolerance
        assert gate.admitted_count == 5

    def test_admit_without_cancel_event(self) -> None:
        """The cancel event is optional."""
        gate = RateGate(50.0)
        start = time.monotonic()
        gate.admit(1)
        gate.admit(2)
        assert time.monotonic() - start >= 0.015

    def test_idle_time_does_not_accumulate_burst(self) -> None:
        """After idling, only one admission is immediate."""
        gate = RateGate(10.0)
        gate.admit(0)
        time.sleep(0.3)

        start = time.monotonic()
        gate.admit(1)
        gate.admit(2)
        assert time.monotonic() - start >= 0.08

    def test_concurrent_callers_share_the_ceiling(self) -> None:
        """Several threads admitting together still respect the rate."""
        gate = RateGate(20.0)
        cancel = threading.Event()

        start = time.monotonic()
        threads = [
            threading.Thread(target=gate.admit, args=(i, cancel)) for i in range(6)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert time.monotonic() - start >= 0.24  # 5 * 0.05s, small tolerance
        assert gate.admitted_count == 6


class TestRateGateCancellation:
    """Tests for cancellation while waiting on the gate."""

    def test_cancel_during_wait_raises(self) -> None:
        """Setting the event releases the waiter with CancellationError."""
        gate = RateGate(0.5)  # 2 second interval
        cancel = threading.Event()
        gate.admit("first", cancel)

        threading.Timer(0.1, cancel.set).start()
        start = time.monotonic()
        with pytest.raises(CancellationError):
            gate.admit("second", cancel)

        assert time.monotonic() - start < 1.0
        assert gate.admitted_count == 1

    def test_already_cancelled_rejects_first_item(self) -> None:
        """Nothing is admitted once the event is set."""
        gate = RateGate(10.0)
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(CancellationError):
            gate.admit("job", cancel)
        assert gate.admitted_count == 0
