"""Scan orchestrator wiring loader, queues, workers, aggregator and sinks."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import structlog

from .config import ScanConfig
from .engine import (
    ClosableQueue,
    CheckResult,
    DeadlineGovernor,
    FileExporter,
    Oracle,
    RateLimitedRetryClient,
    ResultAggregator,
    RetryPolicy,
    WorkerPool,
    read_identifiers,
)
from .engine.deadline import Clock
from .engine.exporter import BaseExporter
from .engine.retry import Sleeper
from .errors import NoInputError
from .ui import MessageSink, NullMessages, NullProgress, ProgressSink


@dataclass(slots=True)
class ScanSummary:
    total: int
    checked: int
    available: int
    unavailable: int
    errored: int
    write_errors: int
    output_path: Path
    deadline_reached: bool
    interrupted: bool
    elapsed: float

    def as_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "checked": self.checked,
            "available": self.available,
            "unavailable": self.unavailable,
            "errored": self.errored,
            "write_errors": self.write_errors,
            "output_path": str(self.output_path),
            "deadline_reached": self.deadline_reached,
            "interrupted": self.interrupted,
            "elapsed": round(self.elapsed, 3),
        }


class ScanOrchestrator:
    """Run one availability scan from an immutable :class:`ScanConfig`."""

    def __init__(
        self,
        config: ScanConfig,
        oracle: Oracle,
        *,
        progress: ProgressSink | None = None,
        messages: MessageSink | None = None,
        sleeper: Sleeper = time.sleep,
        clock: Clock = time.monotonic,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.oracle = oracle
        self.progress = progress or NullProgress()
        self.messages = messages or NullMessages()
        self.sleeper = sleeper
        self.clock = clock
        self.logger = logger or structlog.get_logger("enshunter").bind(component="orchestrator")

    def load(self) -> list[str]:
        return read_identifiers(self.config.input_path, self.config.suffix)

    def run(
        self,
        identifiers: Sequence[str] | None = None,
        exporter: BaseExporter | None = None,
    ) -> ScanSummary:
        """Check every identifier and return the run totals.

        Raises ``NoInputError``/``OSError`` before any oracle call is made when
        the input is empty or the output cannot be created. Per-identifier
        failures never escape; they are counted as ``errored``.
        """

        if identifiers is None:
            identifiers = self.load()
        identifiers = list(identifiers)
        if not identifiers:
            raise NoInputError("No identifiers found in input")
        exporter = exporter or FileExporter(self.config.output_path)

        started = self.clock()
        deadline = DeadlineGovernor(self.config.timeout_s, clock=self.clock)
        jobs: ClosableQueue[str] = ClosableQueue(maxsize=len(identifiers))
        results: ClosableQueue[CheckResult] = ClosableQueue(maxsize=len(identifiers))
        client = RateLimitedRetryClient(
            self.oracle,
            RetryPolicy.from_config(self.config),
            sleeper=self.sleeper,
            on_retry=self._on_retry,
        )
        pool = WorkerPool(client, deadline, self.config.workers)
        aggregator = ResultAggregator(exporter, self.progress, self.messages)
        interrupted = False

        self.logger.info(
            "scan_started",
            total=len(identifiers),
            workers=self.config.workers,
            rate_limit_ms=self.config.rate_limit_ms,
            retries=self.config.retries,
            timeout_s=self.config.timeout_s,
        )
        self._start_progress(len(identifiers))
        try:
            pool.start(jobs, results)
            try:
                for identifier in identifiers:
                    jobs.put(identifier)
                jobs.close()
                aggregator.consume(results)
            except KeyboardInterrupt:
                # Expire the shared deadline so every worker fails fast, then drain
                interrupted = True
                self.logger.warning("scan_interrupted")
                deadline.cancel()
                jobs.close()
                aggregator.consume(results)
            pool.join()
        finally:
            jobs.close()
            if not pool.join(timeout=0):
                deadline.cancel()
            self._close_progress()
            exporter.close()

        counters = aggregator.counters.as_dict()
        summary = ScanSummary(
            total=len(identifiers),
            checked=counters["checked"],
            available=counters["available"],
            unavailable=counters["unavailable"],
            errored=counters["errored"],
            write_errors=counters["write_errors"],
            output_path=self.config.output_path,
            deadline_reached=deadline.expired and not interrupted,
            interrupted=interrupted,
            elapsed=self.clock() - started,
        )
        self.logger.info("scan_finished", **summary.as_dict())
        return summary

    # ------------------------------------------------------------------
    def _on_retry(self, identifier: str, attempt: int, error: Exception) -> None:
        self.messages.info(f"Retry {attempt} for domain {identifier}")

    def _start_progress(self, total: int) -> None:
        try:
            self.progress.start(total)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("progress_start_failed", error=str(exc))

    def _close_progress(self) -> None:
        try:
            self.progress.close()
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("progress_close_failed", error=str(exc))


__all__ = ["ScanOrchestrator", "ScanSummary"]
