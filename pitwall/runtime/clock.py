"""Virtual session clock for replay playback."""

from __future__ import annotations

import logging
import math

_LOG = logging.getLogger("pitwall.clock")


def is_valid_rate(rate: float) -> bool:
    try:
        value = float(rate)
    except (TypeError, ValueError):
        return False
    return value > 0.0 and math.isfinite(value)


class PlaybackClock:
    """Rate-scaled virtual clock bounded to `[0, duration]`.

    Real time enters only through `tick(now)`; the delta since the previous
    tick is scaled by the current rate. Seeking and resuming drop the previous
    real-time reference so the next tick never applies a stale delta.
    """

    def __init__(
        self,
        duration_seconds: float,
        *,
        rate: float = 1.0,
        playing: bool = True,
    ) -> None:
        if not is_valid_rate(rate):
            raise ValueError("rate must be > 0")
        self._duration = max(0.0, float(duration_seconds))
        self._rate = float(rate)
        self._playing = bool(playing)
        self._offset = 0.0
        self._last_real_tick: float | None = None
        self._loop_count = 0

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def offset(self) -> float:
        return self._offset

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def last_real_tick(self) -> float | None:
        return self._last_real_tick

    @property
    def loop_count(self) -> int:
        """Number of times playback wrapped from the end back to zero."""
        return self._loop_count

    @property
    def progress(self) -> float:
        if self._duration <= 0.0:
            return 0.0
        return min(max(self._offset / self._duration, 0.0), 1.0)

    def tick(self, now: float) -> float:
        """Advance by the scaled real delta and return the bounded offset."""
        if self._last_real_tick is not None and self._playing:
            delta = max(0.0, now - self._last_real_tick)
            self._offset += delta * self._rate
        self._last_real_tick = now

        # Only a playing tick can pass the end; seek_to clamps every other path.
        if self._offset > self._duration:
            self._loop_count += 1
            _LOG.debug("playback_loop count=%d", self._loop_count)
            self.seek_to(0.0)
        return self._offset

    def set_rate(self, rate: float) -> bool:
        """Apply a new rate from the next tick on; reject non-positive values."""
        if not is_valid_rate(rate):
            _LOG.warning("playback_rate_rejected rate=%r current=%r", rate, self._rate)
            return False
        self._rate = float(rate)
        return True

    def toggle_play(self) -> bool:
        if self._playing:
            self.pause()
        else:
            self.resume()
        return self._playing

    def pause(self) -> None:
        self._playing = False

    def resume(self) -> None:
        if not self._playing:
            self._last_real_tick = None
        self._playing = True

    def seek_to(self, offset: float) -> float:
        """Set the offset clamped to the session and drop the real-time reference."""
        value = float(offset)
        if not math.isfinite(value):
            value = 0.0
        self._offset = min(max(value, 0.0), self._duration)
        self._last_real_tick = None
        return self._offset
