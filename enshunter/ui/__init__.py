"""User interaction helpers."""

from .progress import ProgressReporter
from .sinks import ConsoleMessages, MessageSink, NullMessages, NullProgress, ProgressSink

__all__ = [
    "ConsoleMessages",
    "MessageSink",
    "NullMessages",
    "NullProgress",
    "ProgressReporter",
    "ProgressSink",
]
