"""Per-series playback position."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Generic, TypeVar

from pitwall.sync.indexer import locate


T = TypeVar("T")


class StreamCursor(Generic[T]):
    """Index into one sorted series that follows the playback instant.

    Forward play steps the index one sample at a time; seeks jump through
    binary search in either direction.
    """

    def __init__(
        self,
        samples: Sequence[T],
        timestamp: Callable[[T], datetime],
    ) -> None:
        self._samples: tuple[T, ...] = tuple(samples)
        self._timestamps: tuple[datetime, ...] = tuple(timestamp(item) for item in self._samples)
        self._index = 0 if self._samples else -1
        self._last_emitted_index = -1

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def index(self) -> int:
        return self._index

    @property
    def last_emitted_index(self) -> int:
        return self._last_emitted_index

    @property
    def samples(self) -> tuple[T, ...]:
        return self._samples

    def advance_to(self, instant: datetime) -> bool:
        """Step forward to the last sample at or before `instant`.

        Callers guarantee `instant` never decreases between calls. Returns
        whether the visible sample changed since the last emission.
        """
        last = len(self._samples) - 1
        while self._index < last and self._timestamps[self._index + 1] <= instant:
            self._index += 1
        changed = self._index != self._last_emitted_index
        self._last_emitted_index = self._index
        return changed

    def seek_to(self, instant: datetime) -> bool:
        self._index = locate(self._timestamps, instant)
        self._last_emitted_index = self._index
        return True

    def current_sample(self) -> T | None:
        if 0 <= self._index < len(self._samples):
            return self._samples[self._index]
        return None
