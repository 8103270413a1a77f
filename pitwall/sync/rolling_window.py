"""Fixed-capacity trailing history for recent-trend display."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Generic, TypeVar


T = TypeVar("T")
S = TypeVar("S")


class RollingWindow(Generic[T]):
    """Drop-oldest ring buffer with O(1) append and seek-time rebuild."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._capacity = int(capacity)
        self._items: list[T | None] = [None] * self._capacity
        self._write_index = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, value: T) -> None:
        self._items[self._write_index] = value
        self._write_index = (self._write_index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1

    def extend(self, values: Sequence[T]) -> None:
        for value in values[-self._capacity :]:
            self.append(value)

    def clear(self) -> None:
        self._items = [None] * self._capacity
        self._write_index = 0
        self._size = 0

    def rebuild_from(
        self,
        series: Sequence[S],
        index: int,
        value: Callable[[S], T] | None = None,
    ) -> None:
        """Reset to the last `capacity` entries of `series` ending at `index`."""
        self.clear()
        if index < 0 or not series:
            return
        end = min(index, len(series) - 1)
        start = max(0, end - self._capacity + 1)
        for item in series[start : end + 1]:
            self.append(value(item) if value is not None else item)  # type: ignore[arg-type]

    def values(self) -> tuple[T, ...]:
        """Return entries oldest first."""
        if self._size == 0:
            return ()
        start = 0 if self._size < self._capacity else self._write_index
        return tuple(
            self._items[(start + i) % self._capacity]  # type: ignore[misc]
            for i in range(self._size)
        )
