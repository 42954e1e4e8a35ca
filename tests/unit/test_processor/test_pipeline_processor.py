"""Unit tests for the pipeline coordinator."""

import threading
import time
from collections import Counter
from unittest.mock import patch

import pytest

from smart_digest.errors import ConfigurationError, ErrorClass
from smart_digest.observability.metrics import PipelineMetrics
from smart_digest.processor.models import Job, Result
from smart_digest.processor.processor import Processor
from tests.helpers.fakes import FakeContentSource, FakeScoringBackend


def _make_jobs(count: int) -> list[Job]:
    """Create distinct jobs."""
    return [Job(url=f"https://example.com/post/{i}") for i in range(count)]


def _make_processor(
    source: FakeContentSource | None = None,
    backend: FakeScoringBackend | None = None,
    max_workers: int = 2,
    rate_limit: float = 1000.0,
    metrics: PipelineMetrics | None = None,
) -> Processor:
    """Create a processor with fake collaborators and a fast gate."""
    return Processor(
        content_source=source or FakeContentSource(),
        scoring_backend=backend or FakeScoringBackend(),
        interests=["Go"],
        max_workers=max_workers,
        rate_limit=rate_limit,
        metrics=metrics or PipelineMetrics(),
    )


def _assert_one_result_per_job(jobs: list[Job], results: list[Result]) -> None:
    counts = Counter(r.job for r in results)
    assert len(results) == len(jobs)
    assert counts == Counter(jobs)


class TestProcessorConstruction:
    """Tests for Processor construction."""

    def test_invalid_workers(self) -> None:
        """max_workers below 1 is rejected up front."""
        with pytest.raises(ConfigurationError):
            _make_processor(max_workers=0)

    def test_invalid_rate(self) -> None:
        """A non-positive rate is rejected up front."""
        with pytest.raises(ConfigurationError):
            _make_processor(rate_limit=0)


class TestProcessorProcess:
    """Tests for Processor.process."""

    def test_empty_batch(self) -> None:
        """No jobs returns immediately without calling back."""
        calls: list[int] = []
        results = _make_processor().process(
            [], on_progress=lambda c, t, r: calls.append(c)
        )

        assert results == []
        assert calls == []

    def test_every_job_yields_one_result(self) -> None:
        """Completeness holds for a larger batch."""
        jobs = _make_jobs(25)
        results = _make_processor(max_workers=4).process(jobs)

        _assert_one_result_per_job(jobs, results)
        assert all(r.success for r in results)

    def test_failure_is_isolated(self) -> None:
        """Three jobs, two workers, one failing fetch."""
        jobs = _make_jobs(3)
        source = FakeContentSource(failing=frozenset({jobs[1].url}))
        results = _make_processor(source=source, max_workers=2).process(jobs)

        _assert_one_result_per_job(jobs, results)
        by_job = {r.job: r for r in results}
        assert by_job[jobs[0]].success
        assert by_job[jobs[2]].success
        assert by_job[jobs[1]].error_class == ErrorClass.FETCH

    def test_analysis_failure_is_isolated(self) -> None:
        """An analysis failure does not affect other jobs."""
        jobs = _make_jobs(4)
        backend = FakeScoringBackend(error=RuntimeError("backend down"))
        results = _make_processor(backend=backend).process(jobs)

        _assert_one_result_per_job(jobs, results)
        assert {r.error_class for r in results} == {ErrorClass.ANALYSIS}

    def test_progress_callback(self) -> None:
        """The callback sees 1..N on the caller's thread."""
        jobs = _make_jobs(6)
        seen: list[tuple[int, int]] = []
        threads: set[int] = set()

        def on_progress(completed: int, total: int, result: Result) -> None:
            seen.append((completed, total))
            threads.add(threading.get_ident())

        results = _make_processor().process(jobs, on_progress=on_progress)

        assert seen == [(i, 6) for i in range(1, 7)]
        assert threads == {threading.get_ident()}
        assert len(results) == 6

    def test_rate_bound(self) -> None:
        """Five jobs at one per second take at least four seconds."""
        jobs = _make_jobs(5)
        processor = _make_processor(max_workers=5, rate_limit=1.0)

        start = time.monotonic()
        results = processor.process(jobs)
        elapsed = time.monotonic() - start

        assert elapsed >= 3.9
        _assert_one_result_per_job(jobs, results)

    def test_workers_run_concurrently(self) -> None:
        """Slow fetches overlap across workers."""
        jobs = _make_jobs(4)
        source = FakeContentSource(delay=0.2)

        start = time.monotonic()
        _make_processor(source=source, max_workers=4).process(jobs)

        assert time.monotonic() - start < 0.7

    def test_reusable_across_batches(self) -> None:
        """One processor can run several batches."""
        processor = _make_processor()
        assert len(processor.process(_make_jobs(3))) == 3
        assert len(processor.process(_make_jobs(2))) == 2

    def test_same_settings_classify_jobs_alike(self) -> None:
        """Processors built from the same settings agree on every outcome."""
        jobs = _make_jobs(8)
        failing = frozenset({jobs[1].url, jobs[4].url, jobs[6].url})

        def classify(processor: Processor) -> dict[str, ErrorClass | None]:
            return {r.job.url: r.error_class for r in processor.process(jobs)}

        first = _make_processor(source=FakeContentSource(failing=failing))
        second = _make_processor(source=FakeContentSource(failing=failing))

        outcomes = classify(first)
        assert outcomes == classify(second)
        assert {url for url, c in outcomes.items() if c is not None} == failing
        assert set(outcomes.values()) == {None, ErrorClass.FETCH}

    def test_admission_follows_input_order(self) -> None:
        """The gate admits jobs in the order they were submitted."""
        jobs = _make_jobs(10)
        processor = _make_processor(max_workers=4)
        gate = processor.rate_gate

        with patch.object(gate, "admit", wraps=gate.admit) as admit:
            processor.process(jobs)

        assert [c.args[0] for c in admit.call_args_list] == jobs

    def test_single_worker_fetches_in_input_order(self) -> None:
        """With one worker, execution order matches the input order."""
        jobs = _make_jobs(6)
        source = FakeContentSource()
        _make_processor(source=source, max_workers=1).process(jobs)

        assert source.calls == [job.url for job in jobs]

    def test_records_metrics(self) -> None:
        """Outcomes are counted by class."""
        metrics = PipelineMetrics()
        jobs = _make_jobs(3)
        source = FakeContentSource(failing=frozenset({jobs[0].url}))
        _make_processor(source=source, metrics=metrics).process(jobs)

        snapshot = metrics.to_dict()
        assert snapshot["jobs_submitted"] == 3
        assert snapshot["jobs_succeeded"] == 2
        assert snapshot["failures_by_class"] == {"FETCH": 1}


class TestProcessorCancellation:
    """Tests for cancellation behavior."""

    def test_cancelled_before_start(self) -> None:
        """An already-set event cancels every job."""
        jobs = _make_jobs(5)
        source = FakeContentSource()
        cancel = threading.Event()
        cancel.set()

        results = _make_processor(source=source).process(jobs, cancel=cancel)

        _assert_one_result_per_job(jobs, results)
        assert {r.error_class for r in results} == {ErrorClass.CANCELLED}
        assert source.calls == []

    def test_cancel_mid_batch_keeps_completeness(self) -> None:
        """Cancelling after work starts still yields one result per job."""
        jobs = _make_jobs(20)
        cancel = threading.Event()
        source = FakeContentSource(delay=0.05, on_fetch=lambda _url: cancel.set())

        results = _make_processor(source=source, max_workers=3).process(
            jobs, cancel=cancel
        )

        _assert_one_result_per_job(jobs, results)
        cancelled = [r for r in results if r.error_class == ErrorClass.CANCELLED]
        assert cancelled
        assert len(source.calls) < len(jobs)

    def test_cancel_releases_rate_wait(self) -> None:
        """Cancelling while jobs wait on a slow gate returns promptly."""
        jobs = _make_jobs(4)
        cancel = threading.Event()
        processor = _make_processor(rate_limit=0.5)  # 2 second interval

        threading.Timer(0.2, cancel.set).start()
        start = time.monotonic()
        results = processor.process(jobs, cancel=cancel)

        assert time.monotonic() - start < 1.5
        _assert_one_result_per_job(jobs, results)
        by_job = {r.job: r for r in results}
        assert by_job[jobs[0]].success
        for job in jobs[1:]:
            assert by_job[job].error_class == ErrorClass.CANCELLED

    def test_callback_sees_every_cancelled_job(self) -> None:
        """The progress count reaches the total even when cancelled."""
        jobs = _make_jobs(8)
        cancel = threading.Event()
        cancel.set()
        seen: list[int] = []

        _make_processor().process(
            jobs, on_progress=lambda c, t, r: seen.append(c), cancel=cancel
        )

        assert seen == list(range(1, 9))
