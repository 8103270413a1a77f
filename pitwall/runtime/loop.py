"""Cancellable fixed-cadence tick loop."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from time import monotonic

from pitwall.runtime.scheduler import TickScheduler

_LOG = logging.getLogger("pitwall.loop")

TickFn = Callable[[float], object]


class PlaybackLoop:
    """Invoke `tick(now)` at a fixed interval until stopped.

    The loop owns all waiting; the ticked object never sleeps. `stop()` may
    be called from any thread and takes effect between ticks.
    """

    def __init__(
        self,
        tick: TickFn,
        *,
        interval_seconds: float = 0.05,
        time_source: Callable[[], float] | None = None,
        wait: Callable[[float], object] | None = None,
        scheduler: TickScheduler | None = None,
    ) -> None:
        if interval_seconds <= 0.0:
            raise ValueError("interval_seconds must be > 0")
        self._tick = tick
        self._interval_seconds = interval_seconds
        self._time_source = time_source or monotonic
        self._stop_event = threading.Event()
        self._wait = wait or self._stop_event.wait
        self._scheduler = scheduler or TickScheduler()
        self._task_id: int | None = None
        self._origin: float | None = None
        self._pending_now = 0.0
        self._tick_count = 0

    @property
    def is_running(self) -> bool:
        return self._task_id is not None

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def skipped_intervals(self) -> int:
        return self._scheduler.skipped_intervals

    def start(self) -> None:
        """Register the repeating tick; the first tick runs immediately."""
        if self._task_id is not None:
            return
        self._stop_event.clear()
        now = self._time_source()
        self._origin = now - self._scheduler.now_seconds
        self._task_id = self._scheduler.call_every(self._interval_seconds, self._run_tick)
        self._pending_now = now
        self._run_tick()

    def pump(self, now: float | None = None) -> int:
        """Run ticks that are due at `now` and return how many ran."""
        if self._task_id is None or self._origin is None:
            return 0
        reading = self._time_source() if now is None else now
        self._pending_now = reading
        elapsed = max(reading - self._origin, self._scheduler.now_seconds)
        return self._scheduler.run_due(elapsed)

    def stop(self) -> None:
        """Stop scheduling further ticks."""
        self._stop_event.set()
        if self._task_id is not None:
            self._scheduler.cancel(self._task_id)
            self._task_id = None

    def run(self, *, max_seconds: float | None = None) -> int:
        """Block, ticking at the configured cadence, until stopped or timed out."""
        self.start()
        started = self._time_source()
        _LOG.info("playback_loop_started interval_s=%.3f", self._interval_seconds)
        try:
            while not self._stop_event.is_set():
                now = self._time_source()
                if max_seconds is not None and now - started >= max_seconds:
                    break
                self.pump(now)
                next_due = self._scheduler.next_due_seconds()
                if next_due is None or self._origin is None:
                    break
                remaining = next_due - (self._time_source() - self._origin)
                if max_seconds is not None:
                    remaining = min(remaining, max_seconds - (now - started))
                self._wait(max(0.0, remaining))
        finally:
            self.stop()
        _LOG.info("playback_loop_stopped ticks=%d", self._tick_count)
        return self._tick_count

    def _run_tick(self) -> None:
        self._tick_count += 1
        self._tick(self._pending_now)
