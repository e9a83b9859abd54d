"""Terminal progress rendering with Rich."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    Task,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from ..engine.results import CheckResult, Outcome


@dataclass
class ProgressState:
    total: int
    available: int = 0
    unavailable: int = 0
    failed: int = 0

    @property
    def completed(self) -> int:
        return self.available + self.unavailable + self.failed


class RateColumn(ProgressColumn):
    """Render checks per second as ``X.X name/s``."""

    def render(self, task: Task) -> Text:
        speed = task.finished_speed or task.speed
        if speed is None:
            return Text("", style="progress.percentage")
        return Text(f"{speed:.1f} name/s", style="progress.percentage")


class ProgressReporter:
    """Rich progress bar with available/unavailable/error counters.

    Falls back to silently counting when stdout is not a terminal or another
    live display already owns the console.
    """

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self._console = console
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._lock = Lock()
        self.state: ProgressState | None = None

    def start(self, total: int) -> None:
        self.state = ProgressState(total=total)
        if not self.enabled:
            return
        if self._console is None:
            self._console = Console()
        if not self._console.is_terminal:
            self.enabled = False
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            RateColumn(),
            TextColumn("[green]✓{task.fields[available]:>3}", justify="right"),
            TextColumn("[dim]·{task.fields[unavailable]:>3}", justify="right"),
            TextColumn("[red]✗{task.fields[failed]:>3}", justify="right"),
            TextColumn("[dim]{task.fields[current]}", justify="left"),
            refresh_per_second=10,
            expand=True,
            console=self._console,
        )
        try:
            self._progress.start()
        except LiveError:
            self.enabled = False
            self._progress = None
            return
        self._task_id = self._progress.add_task(
            "scan", total=total, available=0, unavailable=0, failed=0, current=""
        )

    def advance(self, result: CheckResult) -> None:
        if not self.state:
            raise RuntimeError("ProgressReporter.start must be called before advance")
        with self._lock:
            if result.outcome is Outcome.AVAILABLE:
                self.state.available += 1
            elif result.outcome is Outcome.UNAVAILABLE:
                self.state.unavailable += 1
            else:
                self.state.failed += 1
            if self._progress is not None and self._task_id is not None:
                display = result.identifier
                if len(display) > 40:
                    display = display[:37] + "..."
                self._progress.update(
                    self._task_id,
                    advance=1,
                    available=self.state.available,
                    unavailable=self.state.unavailable,
                    failed=self.state.failed,
                    current=display,
                )

    def close(self) -> None:
        if self._progress is not None:
            try:
                self._progress.stop()
            finally:
                self._progress = None
                self._task_id = None


__all__ = ["ProgressReporter", "ProgressState", "RateColumn"]
