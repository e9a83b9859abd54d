from __future__ import annotations

import pytest

from enshunter.engine.deadline import DeadlineGovernor
from enshunter.errors import DeadlineExceeded, OracleError


def test_deadline_expires_with_clock(manual_clock) -> None:
    governor = DeadlineGovernor(5, clock=manual_clock)
    assert not governor.expired
    assert governor.remaining() == pytest.approx(5)
    manual_clock.advance(4)
    assert governor.bound(10) == pytest.approx(1)
    assert governor.bound(0.5) == pytest.approx(0.5)
    manual_clock.advance(1)
    assert governor.expired
    assert governor.remaining() == 0
    with pytest.raises(DeadlineExceeded):
        governor.check("alice.eth")


def test_cancel_expires_immediately(manual_clock) -> None:
    governor = DeadlineGovernor(60, clock=manual_clock)
    governor.cancel()
    assert governor.expired
    assert governor.remaining() == 0
    with pytest.raises(DeadlineExceeded) as info:
        governor.bound(1, "bob.eth")
    assert info.value.identifier == "bob.eth"


def test_deadline_error_is_an_oracle_error() -> None:
    assert issubclass(DeadlineExceeded, OracleError)


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValueError):
        DeadlineGovernor(0)
