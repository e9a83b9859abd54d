"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

class BaseExporter(ABC):
    """Uniform contract for the sink receiving confirmed-available identifiers."""

    @abstractmethod
    def export(self, identifier: str) -> bool:
        """Persist one identifier; return ``False`` if it was already written."""

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered data to destination."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""

    def __enter__(self) -> "BaseExporter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["BaseExporter"]
