"""Capability interfaces the pipeline reports through."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from rich.console import Console

if TYPE_CHECKING:
    from ..engine.results import CheckResult


class ProgressSink(Protocol):
    def start(self, total: int) -> None: ...

    def advance(self, result: "CheckResult") -> None: ...

    def close(self) -> None: ...


class MessageSink(Protocol):
    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class NullProgress:
    """Progress sink that records nothing."""

    def start(self, total: int) -> None:
        return

    def advance(self, result: "CheckResult") -> None:
        return

    def close(self) -> None:
        return


class NullMessages:
    def info(self, message: str) -> None:
        return

    def success(self, message: str) -> None:
        return

    def error(self, message: str) -> None:
        return


class ConsoleMessages:
    """Colored per-identifier messages, printed only in verbose mode."""

    def __init__(self, console: Console | None = None, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose

    def info(self, message: str) -> None:
        if self.verbose:
            self.console.print(message, style="cyan", markup=False, highlight=False)

    def success(self, message: str) -> None:
        if self.verbose:
            self.console.print(message, style="bold green", markup=False, highlight=False)

    def error(self, message: str) -> None:
        if self.verbose:
            self.console.print(message, style="bold red", markup=False, highlight=False)


__all__ = [
    "ConsoleMessages",
    "MessageSink",
    "NullMessages",
    "NullProgress",
    "ProgressSink",
]
