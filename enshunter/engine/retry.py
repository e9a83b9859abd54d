"""Rate-limited retry wrapper around an oracle call."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

import structlog

from ..config.models import ScanConfig
from ..errors import OracleError
from .deadline import DeadlineGovernor
from .oracle import Oracle
from .results import CheckResult


class Sleeper(Protocol):
    def __call__(self, seconds: float) -> None: ...


RetryCallback = Callable[[str, int, Exception], None]


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Attempt budget and delays for one identifier.

    ``backoff`` is a fixed ``multiplier * interval`` for every attempt, not a
    growing curve.
    """

    interval: float
    max_retries: int
    multiplier: float = 2.0

    @classmethod
    def from_config(cls, config: ScanConfig) -> "RetryPolicy":
        return cls(interval=config.rate_limit_interval, max_retries=config.retries)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff(self, attempt: int) -> float:
        """Delay after failed ``attempt`` (0-based) before the next one."""

        return self.multiplier * self.interval

    def pacing(self) -> float:
        """Delay a worker observes after each identifier, whatever the outcome."""

        return self.interval


class RateLimitedRetryClient:
    """Run up to ``max_retries + 1`` sequential oracle attempts for an identifier."""

    def __init__(
        self,
        oracle: Oracle,
        policy: RetryPolicy,
        sleeper: Sleeper = time.sleep,
        on_retry: RetryCallback | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.oracle = oracle
        self.policy = policy
        self.sleeper = sleeper
        self.on_retry = on_retry
        self.logger = logger or structlog.get_logger("enshunter.retry")

    def check(self, identifier: str, deadline: DeadlineGovernor) -> CheckResult:
        last_error: OracleError | None = None
        for attempt in range(self.policy.max_attempts):
            if attempt > 0:
                if last_error is not None:
                    self._notify_retry(identifier, attempt, last_error)
                self.logger.debug("oracle_retry", identifier=identifier, attempt=attempt)
            try:
                available = self.oracle.available(identifier, deadline)
            except OracleError as exc:
                last_error = exc
            except Exception as exc:  # noqa: BLE001
                last_error = OracleError(f"{type(exc).__name__}: {exc}", identifier=identifier)
                last_error.__cause__ = exc
            else:
                return CheckResult.from_availability(identifier, available, attempts=attempt + 1)
            if attempt + 1 < self.policy.max_attempts:
                self._sleep(self.policy.backoff(attempt))
        if last_error is None:
            raise RuntimeError("retry policy allows no attempts")
        self.logger.debug(
            "oracle_attempts_exhausted",
            identifier=identifier,
            attempts=self.policy.max_attempts,
            error=str(last_error),
        )
        return CheckResult.failed(identifier, last_error, attempts=self.policy.max_attempts)

    def _notify_retry(self, identifier: str, attempt: int, error: OracleError) -> None:
        if self.on_retry is None:
            return
        try:
            self.on_retry(identifier, attempt, error)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("retry_callback_failed", identifier=identifier, error=str(exc))

    def pace(self) -> None:
        self._sleep(self.policy.pacing())

    def _sleep(self, seconds: float) -> None:
        if seconds > 0:
            self.sleeper(seconds)


__all__ = ["RateLimitedRetryClient", "RetryCallback", "RetryPolicy", "Sleeper"]
