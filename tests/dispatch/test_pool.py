"""
Tests for JobDispatcher and JobHandle.
"""

import threading

import pytest

from pystatcore.core.exceptions import ValidationError
from pystatcore.core.sample import Sample
from pystatcore.dispatch import (
    AnalysisRequest,
    AnalysisError,
    AnalysisOutput,
    ErrorKind,
    JobDispatcher,
)
from pystatcore.dispatch import pool


def _chi_square(values, name="grade"):
    return AnalysisRequest.chi_square([Sample.of(name, values)])


@pytest.fixture
def dispatcher():
    d = JobDispatcher(max_workers=2)
    yield d
    d.shutdown(wait=True, cancel_pending=True)


# ═══════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════


class TestConstruction:

    def test_defaults(self, dispatcher):
        assert dispatcher.executor == 'thread'
        assert dispatcher.timeout == 60.0
        assert "thread" in repr(dispatcher)

    def test_bad_executor(self):
        with pytest.raises(ValidationError, match="executor"):
            JobDispatcher(executor='cluster')

    def test_bad_timeout(self):
        with pytest.raises(ValidationError, match="timeout"):
            JobDispatcher(timeout=0)

    def test_bad_workers(self):
        with pytest.raises(ValidationError, match="max_workers"):
            JobDispatcher(max_workers=0)


# ═══════════════════════════════════════════════════════════════════════
# Submission
# ═══════════════════════════════════════════════════════════════════════


class TestSubmit:

    def test_submit_and_result(self, dispatcher):
        handle = dispatcher.submit(_chi_square([1, 1, 1, 2, 2, 3]))
        outcome = handle.result()
        assert isinstance(outcome, AnalysisOutput)
        assert handle.done()
        assert handle.job_id == 1

    def test_result_is_cached(self, dispatcher):
        handle = dispatcher.submit(_chi_square([1, 2, 2]))
        assert handle.result() is handle.result()

    def test_error_delivered_as_value(self, dispatcher):
        outcome = dispatcher.submit(_chi_square([5, 5])).result()
        assert isinstance(outcome, AnalysisError)
        assert outcome.kind is ErrorKind.INSUFFICIENT_DATA

    def test_map_preserves_order(self, dispatcher):
        requests = [
            _chi_square([1, 2, 2], "a"),
            _chi_square([3, 3], "b"),
            _chi_square([1, 2, 3, 3], "c"),
        ]
        outcomes = dispatcher.map(requests)
        assert isinstance(outcomes[0], AnalysisOutput)
        assert isinstance(outcomes[1], AnalysisError)
        assert outcomes[2].tables[0].title == "c"

    def test_as_completed_yields_every_handle(self, dispatcher):
        handles = [dispatcher.submit(_chi_square([1, 2, 2, i])) for i in range(4)]
        finished = list(JobDispatcher.as_completed(handles, timeout=30))
        assert sorted(h.job_id for h in finished) == [h.job_id for h in handles]

    def test_context_manager(self):
        with JobDispatcher() as d:
            outcome = d.submit(_chi_square([1, 2])).result()
        assert isinstance(outcome, AnalysisOutput)

    def test_process_pool(self):
        with JobDispatcher(max_workers=1, executor='process') as d:
            outcome = d.submit(_chi_square([1, 1, 1, 2, 2, 3])).result()
        assert isinstance(outcome, AnalysisOutput)
        assert outcome.table("Test Statistics").row("df").cells['V0'] == 2


# ═══════════════════════════════════════════════════════════════════════
# Timeouts and cancellation
# ═══════════════════════════════════════════════════════════════════════


class TestTimeout:

    def test_slow_job_abandoned(self, monkeypatch):
        release = threading.Event()

        def stuck(request):
            release.wait(5)
            return AnalysisError(ErrorKind.INTERNAL, "finished late")

        monkeypatch.setattr(pool, "run_analysis", stuck)
        d = JobDispatcher(timeout=0.05)
        try:
            outcome = d.submit(_chi_square([1, 2])).result()
        finally:
            release.set()
            d.shutdown(wait=True)
        assert isinstance(outcome, AnalysisError)
        assert outcome.kind is ErrorKind.INTERNAL
        assert outcome.message == "Analysis did not finish within 0.05 seconds"

    def test_cancel_pending(self, monkeypatch):
        release = threading.Event()

        def blocking(request):
            release.wait(5)
            return AnalysisOutput(title="done", tables=())

        monkeypatch.setattr(pool, "run_analysis", blocking)
        d = JobDispatcher(max_workers=1)
        try:
            first = d.submit(_chi_square([1, 2]))
            second = d.submit(_chi_square([1, 2]))
            assert second.cancel()
            release.set()
            assert first.result().title == "done"
            outcome = second.result()
        finally:
            release.set()
            d.shutdown(wait=True)
        assert outcome.message == "Analysis was cancelled"

    def test_poll_then_result(self, monkeypatch):
        release = threading.Event()

        def blocking(request):
            release.wait(5)
            return AnalysisOutput(title="done", tables=())

        monkeypatch.setattr(pool, "run_analysis", blocking)
        d = JobDispatcher(max_workers=1)
        try:
            handle = d.submit(_chi_square([1, 2]))
            assert handle.result(timeout=0) is None
            assert not handle.done()
            release.set()
            outcome = handle.result()
        finally:
            release.set()
            d.shutdown(wait=True)
        assert isinstance(outcome, AnalysisOutput)
        assert outcome.title == "done"
        assert handle.result() is outcome
