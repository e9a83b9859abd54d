"""Closable bounded queue used for the job queue and the result stream."""

from __future__ import annotations

from collections import deque
from threading import Condition
from typing import Deque, Generic, Iterator, TypeVar

T = TypeVar("T")


class _Closed:
    def __repr__(self) -> str:
        return "CLOSED"


CLOSED = _Closed()


class QueueClosed(RuntimeError):
    """Raised when putting into a queue that has already been closed."""


class ClosableQueue(Generic[T]):
    """Bounded FIFO with an explicit end-of-stream signal.

    ``get`` blocks while the queue is empty and open, and returns ``CLOSED``
    once the queue is both empty and closed. Each item is handed to exactly
    one consumer.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self.maxsize = maxsize
        self._items: Deque[T] = deque()
        self._closed = False
        self._cond = Condition()

    def put(self, item: T) -> None:
        with self._cond:
            if self._closed:
                raise QueueClosed("put() on a closed queue")
            while self.maxsize > 0 and len(self._items) >= self.maxsize:
                self._cond.wait()
                if self._closed:
                    raise QueueClosed("queue closed while waiting for space")
            self._items.append(item)
            self._cond.notify_all()

    def get(self, timeout: float | None = None) -> T | _Closed:
        with self._cond:
            if not self._cond.wait_for(lambda: self._items or self._closed, timeout):
                raise TimeoutError("timed out waiting for an item")
            if self._items:
                item = self._items.popleft()
                self._cond.notify_all()
                return item
            return CLOSED

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def drain(self) -> Iterator[T]:
        """Yield items until the queue is closed and empty."""

        while True:
            item = self.get()
            if item is CLOSED:
                return
            yield item  # type: ignore[misc]


__all__ = ["CLOSED", "ClosableQueue", "QueueClosed"]
