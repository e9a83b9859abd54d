"""Run-wide deadline shared by every oracle call."""

from __future__ import annotations

import time
from threading import Event
from typing import Callable

from ..errors import DeadlineExceeded

Clock = Callable[[], float]


class DeadlineGovernor:
    """Single cancellation context created once per run.

    Expiry is cooperative: oracle calls consult :meth:`check` before starting
    and clamp their own timeouts with :meth:`bound`, so every call in flight
    returns no later than the deadline. Pacing sleeps are not interrupted.
    """

    def __init__(self, timeout: float, clock: Clock = time.monotonic) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self.timeout = timeout
        self._clock = clock
        self._deadline = clock() + timeout
        self._cancelled = Event()

    def remaining(self) -> float:
        if self._cancelled.is_set():
            return 0.0
        return max(0.0, self._deadline - self._clock())

    @property
    def expired(self) -> bool:
        return self._cancelled.is_set() or self._clock() >= self._deadline

    def cancel(self) -> None:
        """Expire the deadline immediately for every holder of this governor."""

        self._cancelled.set()

    def check(self, identifier: str | None = None) -> None:
        if self.expired:
            raise DeadlineExceeded("context deadline exceeded", identifier=identifier)

    def bound(self, timeout: float | None, identifier: str | None = None) -> float:
        """Clamp a per-call timeout to the time left before the deadline."""

        self.check(identifier)
        remaining = self.remaining()
        if timeout is None:
            return remaining
        return min(timeout, remaining)


__all__ = ["Clock", "DeadlineGovernor"]
