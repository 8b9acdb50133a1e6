"""Bounded queue holding transformed spans and metrics until the next harvest."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Fixed-capacity FIFO of pending records.

    When full, the oldest record is evicted so a stalled delivery handler
    costs old telemetry rather than memory. The harvester serializes writers
    and drains from a single harvest at a time.
    """

    def __init__(self, maxsize: int) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be positive")
        self._buffer: deque[T] = deque(maxlen=maxsize)
        self._drop_count: int = 0
        self._maxsize = maxsize

    def enqueue(self, item: T) -> None:
        """Append a record, evicting the oldest one at capacity."""
        if len(self._buffer) == self._maxsize:
            self._drop_count += 1
        self._buffer.append(item)

    def drain(self, max_items: int) -> list[T]:
        """Pop at most max_items records, oldest first."""
        items: list[T] = []
        while self._buffer and len(items) < max_items:
            items.append(self._buffer.popleft())
        return items

    @property
    def drop_count(self) -> int:
        """Records evicted since creation."""
        return self._drop_count

    def __len__(self) -> int:
        return len(self._buffer)
