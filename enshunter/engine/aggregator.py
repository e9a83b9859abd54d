"""Single consumer of the result stream: counters, output, progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Callable

import structlog

from ..ui.sinks import MessageSink, NullMessages, NullProgress, ProgressSink
from .exporter import BaseExporter
from .queues import ClosableQueue
from .results import CheckResult, Outcome


@dataclass
class Counters:
    """Run totals; increments are serialised, reads mid-run are best-effort."""

    checked: int = 0
    available: int = 0
    unavailable: int = 0
    errored: int = 0
    write_errors: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def record(self, outcome: Outcome) -> None:
        with self._lock:
            self.checked += 1
            if outcome is Outcome.AVAILABLE:
                self.available += 1
            elif outcome is Outcome.UNAVAILABLE:
                self.unavailable += 1
            else:
                self.errored += 1

    def record_write_error(self) -> None:
        with self._lock:
            self.write_errors += 1

    def as_dict(self) -> dict[str, int]:
        with self._lock:
            return {
                "checked": self.checked,
                "available": self.available,
                "unavailable": self.unavailable,
                "errored": self.errored,
                "write_errors": self.write_errors,
            }


class ResultAggregator:
    """Drain CheckResults until the stream closes."""

    def __init__(
        self,
        exporter: BaseExporter,
        progress: ProgressSink | None = None,
        messages: MessageSink | None = None,
        counters: Counters | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.exporter = exporter
        self.progress = progress or NullProgress()
        self.messages = messages or NullMessages()
        self.counters = counters or Counters()
        self.logger = logger or structlog.get_logger("enshunter.aggregator")

    def consume(self, results: ClosableQueue[CheckResult]) -> Counters:
        for result in results.drain():
            self.handle(result)
        return self.counters

    def handle(self, result: CheckResult) -> None:
        self.counters.record(result.outcome)
        if result.outcome is Outcome.FAILED:
            self._say(self.messages.error, f"Error checking {result.identifier}: {result.error}")
            self.logger.info(
                "check_failed",
                identifier=result.identifier,
                attempts=result.attempts,
                error=str(result.error),
            )
        elif result.outcome is Outcome.AVAILABLE:
            self._say(self.messages.success, f"Domain {result.identifier} is available")
            self._write(result.identifier)
        else:
            self._say(self.messages.info, f"Domain {result.identifier} is not available")
        self._tick(result)

    def _write(self, identifier: str) -> None:
        try:
            self.exporter.export(identifier)
        except (OSError, ValueError) as exc:
            self.counters.record_write_error()
            self._say(self.messages.error, f"Error writing to file: {exc}")
            self.logger.error("output_write_failed", identifier=identifier, error=str(exc))

    def _say(self, emit: Callable[[str], None], message: str) -> None:
        try:
            emit(message)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("message_sink_failed", error=str(exc))

    def _tick(self, result: CheckResult) -> None:
        try:
            self.progress.advance(result)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("progress_update_failed", error=str(exc))


__all__ = ["Counters", "ResultAggregator"]
