"""Value types flowing through the result stream."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Outcome(str, Enum):
    """Final outcome of one identifier check."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CheckResult:
    identifier: str
    outcome: Outcome
    error: Exception | None = None
    attempts: int = 1

    @classmethod
    def from_availability(cls, identifier: str, available: bool, attempts: int = 1) -> "CheckResult":
        outcome = Outcome.AVAILABLE if available else Outcome.UNAVAILABLE
        return cls(identifier=identifier, outcome=outcome, attempts=attempts)

    @classmethod
    def failed(cls, identifier: str, error: Exception, attempts: int = 1) -> "CheckResult":
        return cls(identifier=identifier, outcome=Outcome.FAILED, error=error, attempts=attempts)


__all__ = ["CheckResult", "Outcome"]
