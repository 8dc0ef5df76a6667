"""
JobDispatcher: run analyses on a swappable worker pool.

Each submitted request runs in exactly one unit of work (a thread or a
process) and produces one AnalysisOutput or AnalysisError. Independent
requests complete in no particular order. A request that exceeds the
wall-clock budget is abandoned: its handle reports an error and whatever
the worker eventually computes is discarded.
"""

import itertools
import logging
import threading
import time
from concurrent import futures
from concurrent.futures import Executor, Future, ThreadPoolExecutor, ProcessPoolExecutor
from typing import Iterable, Iterator

from pystatcore.core.defaults import dispatch_defaults
from pystatcore.core.exceptions import ValidationError
from pystatcore.dispatch.errors import AnalysisError, ErrorKind
from pystatcore.dispatch.output import AnalysisOutput
from pystatcore.dispatch.request import AnalysisRequest
from pystatcore.dispatch.runner import run_analysis

logger = logging.getLogger(__name__)

EXECUTORS = ('thread', 'process')

Outcome = AnalysisOutput | AnalysisError


class JobHandle:
    """
    Handle on one submitted analysis.

    The outcome is delivered once: the first call to result() that
    resolves it caches the value and later calls return the same object.
    """

    def __init__(self, request: AnalysisRequest, future: Future, job_id: int, timeout: float):
        self._request = request
        self._future = future
        self._job_id = job_id
        self._timeout = timeout
        self._deadline = time.monotonic() + timeout
        self._outcome: Outcome | None = None
        self._lock = threading.Lock()

    @property
    def request(self) -> AnalysisRequest:
        return self._request

    @property
    def job_id(self) -> int:
        return self._job_id

    def done(self) -> bool:
        return self._outcome is not None or self._future.done()

    def cancel(self) -> bool:
        """Cancel if not yet started. Running work cannot be interrupted."""
        return self._future.cancel()

    def result(self, timeout: float | None = None) -> Outcome | None:
        """
        Wait for the outcome.

        A timeout shorter than the dispatcher's remaining budget is a poll:
        if the work is still running when it elapses, None is returned and
        the job keeps running. Only the dispatcher's own deadline abandons
        the job with an error.

        Args:
            timeout: Seconds to wait; default is whatever remains of the
                dispatcher's budget, counted from submission

        Returns:
            AnalysisOutput or AnalysisError once resolved, None while the
            job is still within its budget; never raises
        """
        with self._lock:
            if self._outcome is None:
                self._outcome = self._resolve(timeout)
            return self._outcome

    def _resolve(self, timeout: float | None) -> Outcome | None:
        remaining = max(0.0, self._deadline - time.monotonic())
        wait = remaining if timeout is None else min(max(0.0, timeout), remaining)
        try:
            return self._future.result(timeout=wait)
        except futures.TimeoutError:
            if time.monotonic() < self._deadline:
                return None
            self._future.cancel()
            logger.warning("Job %d abandoned after %gs", self._job_id, self._timeout)
            return AnalysisError(
                ErrorKind.INTERNAL,
                f"Analysis did not finish within {self._timeout:g} seconds",
            )
        except futures.CancelledError:
            return AnalysisError(ErrorKind.INTERNAL, "Analysis was cancelled")
        except Exception as exc:
            # run_analysis does not raise; this is a worker failure such as
            # a broken process pool
            logger.exception("Job %d failed in its worker", self._job_id)
            return AnalysisError.from_exception(exc)

    def __repr__(self) -> str:
        state = 'done' if self.done() else 'pending'
        return f"JobHandle(job_id={self._job_id}, kind={self._request.kind.value}, {state})"


class JobDispatcher:
    """
    Submit AnalysisRequests to a thread or process pool.

    Args:
        max_workers: Pool size (None: the executor's default)
        executor: 'thread' or 'process'
        timeout: Wall-clock budget per request in seconds (default 60)

    Example:
        >>> with JobDispatcher() as dispatcher:
        ...     handle = dispatcher.submit(request)
        ...     outcome = handle.result()
    """

    def __init__(
        self,
        max_workers: int | None = None,
        executor: str | None = None,
        timeout: float | None = None,
    ):
        defaults = dispatch_defaults()
        executor = defaults.executor if executor is None else executor
        timeout = defaults.timeout if timeout is None else float(timeout)
        max_workers = defaults.max_workers if max_workers is None else max_workers

        if executor not in EXECUTORS:
            raise ValidationError(f"executor: must be one of {EXECUTORS}, got {executor!r}")
        if timeout <= 0:
            raise ValidationError(f"timeout: must be positive, got {timeout}")
        if max_workers is not None and max_workers < 1:
            raise ValidationError(f"max_workers: must be >= 1, got {max_workers}")

        self._kind = executor
        self._timeout = timeout
        self._pool: Executor = (
            ThreadPoolExecutor(max_workers=max_workers)
            if executor == 'thread'
            else ProcessPoolExecutor(max_workers=max_workers)
        )
        self._ids = itertools.count(1)

    @property
    def executor(self) -> str:
        return self._kind

    @property
    def timeout(self) -> float:
        return self._timeout

    def submit(self, request: AnalysisRequest) -> JobHandle:
        """
        Queue one request.

        Raises:
            RuntimeError: If the dispatcher has been shut down
        """
        job_id = next(self._ids)
        future = self._pool.submit(run_analysis, request)
        logger.debug("Submitted job %d (%s) to %s pool", job_id, request.kind.value, self._kind)
        return JobHandle(request, future, job_id, self._timeout)

    def map(self, requests: Iterable[AnalysisRequest]) -> list[Outcome]:
        """Run every request and return the outcomes in request order."""
        handles = [self.submit(r) for r in requests]
        return [h.result() for h in handles]

    @staticmethod
    def as_completed(
        handles: Iterable[JobHandle],
        timeout: float | None = None,
    ) -> Iterator[JobHandle]:
        """
        Yield handles as their work finishes.

        Raises:
            TimeoutError: If timeout elapses before every handle finishes
        """
        by_future = {h._future: h for h in handles}
        for future in futures.as_completed(by_future, timeout=timeout):
            yield by_future[future]

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        self._pool.shutdown(wait=wait, cancel_futures=cancel_pending)

    def __enter__(self) -> 'JobDispatcher':
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)

    def __repr__(self) -> str:
        return f"JobDispatcher(executor={self._kind!r}, timeout={self._timeout:g})"
