from __future__ import annotations

import pytest

from enshunter.engine.deadline import DeadlineGovernor
from enshunter.engine.results import Outcome
from enshunter.engine.retry import RateLimitedRetryClient, RetryPolicy
from enshunter.errors import DeadlineExceeded, OracleError


def test_policy_backoff_is_fixed_double_interval() -> None:
    policy = RetryPolicy(interval=0.1, max_retries=3)
    assert policy.max_attempts == 4
    assert [policy.backoff(n) for n in range(4)] == [pytest.approx(0.2)] * 4
    assert policy.pacing() == pytest.approx(0.1)


def test_policy_from_config(scan_config) -> None:
    policy = RetryPolicy.from_config(scan_config(rate_limit_ms=250, retries=5))
    assert policy.interval == pytest.approx(0.25)
    assert policy.max_retries == 5


def test_fails_twice_then_succeeds(oracle_factory, sleeper, manual_clock) -> None:
    oracle = oracle_factory({"alice.eth": [OracleError("boom"), OracleError("boom"), True]})
    client = RateLimitedRetryClient(oracle, RetryPolicy(interval=0.1, max_retries=2), sleeper)
    result = client.check("alice.eth", DeadlineGovernor(30, clock=manual_clock))
    assert result.outcome is Outcome.AVAILABLE
    assert result.attempts == 3
    assert oracle.calls["alice.eth"] == 3
    assert sleeper.calls == [pytest.approx(0.2), pytest.approx(0.2)]


def test_exhausted_retries_return_last_error(oracle_factory, sleeper, manual_clock) -> None:
    errors = [OracleError("first"), OracleError("second"), OracleError("last")]
    oracle = oracle_factory({"bob.eth": errors})
    client = RateLimitedRetryClient(oracle, RetryPolicy(interval=0.05, max_retries=2), sleeper)
    result = client.check("bob.eth", DeadlineGovernor(30, clock=manual_clock))
    assert result.outcome is Outcome.FAILED
    assert result.error is errors[-1]
    assert oracle.calls["bob.eth"] == 3
    # no backoff after the final attempt
    assert len(sleeper.calls) == 2


@pytest.mark.parametrize("retries", [0, 1, 3, 5])
def test_call_count_within_budget(oracle_factory, sleeper, manual_clock, retries: int) -> None:
    oracle = oracle_factory(default=OracleError("down"))
    client = RateLimitedRetryClient(oracle, RetryPolicy(interval=0, max_retries=retries), sleeper)
    client.check("carol.eth", DeadlineGovernor(30, clock=manual_clock))
    assert 1 <= oracle.calls["carol.eth"] <= retries + 1
    assert sleeper.calls == []


def test_first_attempt_success_makes_one_call(oracle_factory, sleeper, manual_clock) -> None:
    oracle = oracle_factory(default=False)
    client = RateLimitedRetryClient(oracle, RetryPolicy(interval=0.1, max_retries=3), sleeper)
    result = client.check("dave.eth", DeadlineGovernor(30, clock=manual_clock))
    assert result.outcome is Outcome.UNAVAILABLE
    assert oracle.calls["dave.eth"] == 1
    assert sleeper.calls == []


def test_unexpected_exception_is_wrapped(oracle_factory, sleeper, manual_clock) -> None:
    oracle = oracle_factory({"eve.eth": [KeyError("result")]}, default=True)
    client = RateLimitedRetryClient(oracle, RetryPolicy(interval=0, max_retries=0), sleeper)
    result = client.check("eve.eth", DeadlineGovernor(30, clock=manual_clock))
    assert result.outcome is Outcome.FAILED
    assert isinstance(result.error, OracleError)
    assert isinstance(result.error.__cause__, KeyError)


def test_expired_deadline_fails_every_attempt(oracle_factory, sleeper, manual_clock) -> None:
    deadline = DeadlineGovernor(1, clock=manual_clock)
    manual_clock.advance(2)
    oracle = oracle_factory(default=True)
    client = RateLimitedRetryClient(oracle, RetryPolicy(interval=0.1, max_retries=2), sleeper)
    result = client.check("frank.eth", deadline)
    assert result.outcome is Outcome.FAILED
    assert isinstance(result.error, DeadlineExceeded)
    assert oracle.calls["frank.eth"] == 3


def test_retry_callback_reports_attempt_numbers(oracle_factory, sleeper, manual_clock) -> None:
    seen: list[tuple[str, int]] = []
    oracle = oracle_factory({"gina.eth": [OracleError("x"), OracleError("y"), True]})
    client = RateLimitedRetryClient(
        oracle,
        RetryPolicy(interval=0, max_retries=3),
        sleeper,
        on_retry=lambda identifier, attempt, error: seen.append((identifier, attempt)),
    )
    client.check("gina.eth", DeadlineGovernor(30, clock=manual_clock))
    assert seen == [("gina.eth", 1), ("gina.eth", 2)]


def test_pace_sleeps_one_interval(oracle_factory, sleeper) -> None:
    client = RateLimitedRetryClient(oracle_factory(), RetryPolicy(interval=0.1, max_retries=0), sleeper)
    client.pace()
    assert sleeper.calls == [pytest.approx(0.1)]


def test_failing_retry_callback_does_not_stop_retries(oracle_factory, sleeper, manual_clock) -> None:
    def explode(identifier: str, attempt: int, error: Exception) -> None:
        raise RuntimeError("console closed")

    oracle = oracle_factory({"hana.eth": [OracleError("x"), True]})
    client = RateLimitedRetryClient(
        oracle, RetryPolicy(interval=0, max_retries=1), sleeper, on_retry=explode
    )
    result = client.check("hana.eth", DeadlineGovernor(30, clock=manual_clock))
    assert result.outcome is Outcome.AVAILABLE
    assert oracle.calls["hana.eth"] == 2


def test_zero_attempt_policy_is_rejected(oracle_factory, sleeper, manual_clock) -> None:
    client = RateLimitedRetryClient(oracle_factory(), RetryPolicy(interval=0, max_retries=-1), sleeper)
    with pytest.raises(RuntimeError):
        client.check("ivy.eth", DeadlineGovernor(30, clock=manual_clock))
