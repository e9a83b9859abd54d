"""Shared fixtures: config builder, scripted oracle, fake sleeper and clock."""

from __future__ import annotations

import time
from collections import defaultdict
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Iterable, Sequence

import pytest

from enshunter.config import ScanConfig
from enshunter.engine import DeadlineGovernor


class ScriptedOracle:
    """Oracle stub replaying a per-identifier script of answers.

    Each script entry is ``True``/``False`` (available or not) or an exception
    instance to raise. When a script runs out, ``default`` is used.
    """

    def __init__(
        self,
        scripts: dict[str, Sequence[Any]] | None = None,
        default: Any = False,
        delay: float = 0.0,
    ) -> None:
        self.scripts = {key: list(value) for key, value in (scripts or {}).items()}
        self.default = default
        self.delay = delay
        self.calls: dict[str, int] = defaultdict(int)
        self._lock = Lock()

    @property
    def total_calls(self) -> int:
        with self._lock:
            return sum(self.calls.values())

    def available(self, identifier: str, deadline: DeadlineGovernor) -> bool:
        with self._lock:
            index = self.calls[identifier]
            self.calls[identifier] += 1
            script = self.scripts.get(identifier, [])
            answer = script[index] if index < len(script) else self.default
        deadline.check(identifier)
        if self.delay:
            time.sleep(min(self.delay, deadline.remaining()))
            deadline.check(identifier)
        if isinstance(answer, BaseException):
            raise answer
        if callable(answer):
            return answer(identifier)
        return bool(answer)


class RecordingSleeper:
    def __init__(self) -> None:
        self.calls: list[float] = []
        self._lock = Lock()

    def __call__(self, seconds: float) -> None:
        with self._lock:
            self.calls.append(seconds)


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def scan_config(tmp_path: Path) -> Callable[..., ScanConfig]:
    def _builder(**overrides: Any) -> ScanConfig:
        base: dict[str, Any] = {
            "infura_key": "test-key",
            "workers": 2,
            "rate_limit_ms": 0,
            "retries": 3,
            "timeout_s": 30,
            "input_path": tmp_path / "names.txt",
            "output_path": tmp_path / "available.txt",
        }
        base.update(overrides)
        return ScanConfig(**base)

    return _builder


@pytest.fixture
def oracle_factory() -> Callable[..., ScriptedOracle]:
    return ScriptedOracle


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def write_names(tmp_path: Path) -> Callable[[Iterable[str]], Path]:
    def _write(lines: Iterable[str], name: str = "names.txt") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    monkeypatch.setenv("ENSHUNTER_HOME", str(home))
    for name in ("INFURA_KEY", "WORKERS", "RATE_LIMIT", "RETRIES", "TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return home
