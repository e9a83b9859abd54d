"""Newline-delimited file exporter for available identifiers."""

from __future__ import annotations

import os
from pathlib import Path
from threading import Lock

from .base import BaseExporter


class FileExporter(BaseExporter):
    """Append identifiers to a text file, one per line, flushed per write.

    The file is created or truncated on construction. Every write happens
    under one lock and is flushed before the lock is released, so a line is
    never split across writers and survives the process being killed right
    after ``export`` returns. ``fsync=True`` additionally forces it to disk.
    """

    def __init__(self, path: Path, *, fsync: bool = False) -> None:
        self.path = Path(path)
        self.fsync = fsync
        if self.path.parent != Path("."):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open("w", encoding="utf-8", newline="\n")
        self._lock = Lock()
        self._written: set[str] = set()

    def export(self, identifier: str) -> bool:
        with self._lock:
            if identifier in self._written:
                return False
            self._file.write(identifier + "\n")
            self._flush_locked()
            self._written.add(identifier)
            return True

    def flush(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._flush_locked()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.flush()
                self._file.close()

    def _flush_locked(self) -> None:
        self._file.flush()
        if self.fsync:
            os.fsync(self._file.fileno())


__all__ = ["FileExporter"]
