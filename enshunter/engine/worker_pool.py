"""Fixed-size worker pool draining the job queue into the result stream."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Thread

import structlog

from ..errors import OracleError
from .deadline import DeadlineGovernor
from .queues import ClosableQueue
from .results import CheckResult
from .retry import RateLimitedRetryClient


class WorkerPool:
    """Run ``workers`` identical loops: pull job, check, emit, pace.

    Once every loop has returned, a join thread closes the result stream so
    the single consumer knows no more results will arrive.
    """

    def __init__(
        self,
        client: RateLimitedRetryClient,
        deadline: DeadlineGovernor,
        workers: int,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.client = client
        self.deadline = deadline
        self.workers = workers
        self.logger = logger or structlog.get_logger("enshunter.worker_pool")
        self._executor: ThreadPoolExecutor | None = None
        self._joiner: Thread | None = None
        self._futures: list[Future[int]] = []

    def start(self, jobs: ClosableQueue[str], results: ClosableQueue[CheckResult]) -> None:
        if self._executor is not None:
            raise RuntimeError("WorkerPool.start called twice")
        self._executor = ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="enshunter-worker"
        )
        self._futures = [
            self._executor.submit(self._work, index, jobs, results)
            for index in range(self.workers)
        ]
        self._joiner = Thread(
            target=self._join, args=(results,), name="enshunter-join", daemon=True
        )
        self._joiner.start()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the join barrier; return ``True`` if the pool has finished."""

        if self._joiner is None:
            return True
        self._joiner.join(timeout)
        return not self._joiner.is_alive()

    # ------------------------------------------------------------------
    def _work(
        self, index: int, jobs: ClosableQueue[str], results: ClosableQueue[CheckResult]
    ) -> int:
        log = self.logger.bind(worker=index)
        processed = 0
        for identifier in jobs.drain():
            try:
                result = self.client.check(identifier, self.deadline)
            except Exception as exc:  # noqa: BLE001
                log.error("job_crashed", identifier=identifier, error=str(exc))
                error = OracleError(f"{type(exc).__name__}: {exc}", identifier=identifier)
                error.__cause__ = exc
                result = CheckResult.failed(identifier, error)
            results.put(result)
            processed += 1
            self.client.pace()
        log.debug("worker_drained", processed=processed)
        return processed

    def _join(self, results: ClosableQueue[CheckResult]) -> None:
        try:
            wait(self._futures)
            for future in self._futures:
                error = future.exception()
                if error is not None:
                    self.logger.error("worker_crashed", error=str(error))
        finally:
            results.close()
            if self._executor is not None:
                self._executor.shutdown(wait=False)


__all__ = ["WorkerPool"]
