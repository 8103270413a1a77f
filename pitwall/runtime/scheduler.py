"""Deferred and repeating callbacks for the playback tick loop."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from heapq import heappop, heappush

TaskCallback = Callable[[], None]


@dataclass(order=True, slots=True)
class _Entry:
    due_seconds: float
    task_id: int
    callback: TaskCallback = field(compare=False)
    interval_seconds: float | None = field(default=None, compare=False)
    coalesce: bool = field(default=True, compare=False)
    cancelled: bool = field(default=False, compare=False)

    @property
    def recurring(self) -> bool:
        return self.interval_seconds is not None


class TickScheduler:
    """Heap of callbacks keyed on an externally supplied elapsed-seconds reading.

    The scheduler never reads a clock itself; `run_due` and `advance` move
    its notion of now forward. A recurring task that fell behind by several
    intervals runs once when `coalesce` is set (the default) and its next
    due time jumps to the first boundary after now; the dropped intervals
    are counted in `skipped_intervals`.
    """

    def __init__(self) -> None:
        self._now_seconds = 0.0
        self._ids = 0
        self._heap: list[_Entry] = []
        self._live: dict[int, _Entry] = {}
        self._skipped_intervals = 0

    @property
    def now_seconds(self) -> float:
        return self._now_seconds

    @property
    def queued_task_count(self) -> int:
        return sum(1 for entry in self._live.values() if not entry.cancelled)

    @property
    def skipped_intervals(self) -> int:
        return self._skipped_intervals

    def next_due_seconds(self) -> float | None:
        """Due time of the earliest live task; cancelled heads are discarded."""
        while self._heap:
            head = self._heap[0]
            if not head.cancelled:
                return head.due_seconds
            heappop(self._heap)
            self._live.pop(head.task_id, None)
        return None

    def call_later(self, delay_seconds: float, callback: TaskCallback) -> int:
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        return self._push(self._now_seconds + delay_seconds, callback)

    def call_every(
        self,
        interval_seconds: float,
        callback: TaskCallback,
        *,
        coalesce: bool = True,
    ) -> int:
        """Run `callback` every `interval_seconds`, first one interval from now."""
        if interval_seconds <= 0.0:
            raise ValueError("interval_seconds must be > 0")
        return self._push(
            self._now_seconds + interval_seconds,
            callback,
            interval_seconds=interval_seconds,
            coalesce=coalesce,
        )

    def cancel(self, task_id: int) -> None:
        entry = self._live.get(task_id)
        if entry is not None:
            entry.cancelled = True

    def cancel_all(self) -> None:
        for entry in self._live.values():
            entry.cancelled = True

    def advance(self, delta_seconds: float) -> int:
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        return self.run_due(self._now_seconds + delta_seconds)

    def run_due(self, now_seconds: float) -> int:
        """Move now forward and run every callback due by then; returns the run count."""
        if now_seconds < self._now_seconds:
            raise ValueError("now_seconds cannot move backwards")
        self._now_seconds = now_seconds
        executed = 0
        while self._heap and self._heap[0].due_seconds <= now_seconds:
            entry = heappop(self._heap)
            if entry.cancelled:
                self._live.pop(entry.task_id, None)
                continue
            entry.callback()
            executed += 1
            if entry.cancelled or not entry.recurring:
                self._live.pop(entry.task_id, None)
                continue
            self._reschedule(entry)
        return executed

    def _reschedule(self, entry: _Entry) -> None:
        assert entry.interval_seconds is not None
        entry.due_seconds += entry.interval_seconds
        behind = self._now_seconds - entry.due_seconds
        if entry.coalesce and behind >= 0.0:
            missed = math.floor(behind / entry.interval_seconds) + 1
            self._skipped_intervals += missed
            entry.due_seconds += missed * entry.interval_seconds
        heappush(self._heap, entry)

    def _push(
        self,
        due_seconds: float,
        callback: TaskCallback,
        *,
        interval_seconds: float | None = None,
        coalesce: bool = True,
    ) -> int:
        self._ids += 1
        entry = _Entry(
            due_seconds=due_seconds,
            task_id=self._ids,
            callback=callback,
            interval_seconds=interval_seconds,
            coalesce=coalesce,
        )
        self._live[entry.task_id] = entry
        heappush(self._heap, entry)
        return entry.task_id
