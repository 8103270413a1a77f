"""Playback synchronization engine."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pitwall.data.models import (
    CarSample,
    LapSample,
    LocationSample,
    SessionSeries,
    SessionWindow,
    StintSample,
)
from pitwall.data.session import compute_session_window
from pitwall.runtime.clock import PlaybackClock, is_valid_rate
from pitwall.sync.channels import CHANNEL_SPECS, Channel, dated_series
from pitwall.sync.cursor import StreamCursor
from pitwall.sync.rolling_window import RollingWindow
from pitwall.sync.snapshot import EMPTY_SNAPSHOT, PlaybackSnapshot

_LOG = logging.getLogger("pitwall.sync")

NO_TELEMETRY_MESSAGE = "No telemetry data found for the replay session."


class EngineState(StrEnum):
    IDLE = "idle"
    READY = "ready"
    FAILED = "failed"


def _speed(sample: CarSample) -> float:
    return sample.speed


def _trail_point(sample: LocationSample) -> tuple[float, float]:
    return (sample.x, sample.y)


def last_completed_lap_time(laps: tuple[LapSample, ...], index: int) -> float | None:
    """Most recent lap duration at or before `index`; laps without one are skipped."""
    if not laps or index < 0:
        return None
    for position in range(min(index, len(laps) - 1), -1, -1):
        duration = laps[position].lap_duration
        if duration is not None:
            return duration
    return None


def best_lap_time_until(laps: tuple[LapSample, ...], index: int) -> float | None:
    if not laps or index < 0:
        return None
    durations = [
        lap.lap_duration for lap in laps[: min(index, len(laps) - 1) + 1] if lap.lap_duration is not None
    ]
    return min(durations) if durations else None


def active_stint(stints: tuple[StintSample, ...], lap_number: int | None) -> StintSample | None:
    if lap_number is None:
        return None
    for stint in stints:
        if stint.covers(lap_number):
            return stint
    return None


class SyncEngine:
    """Keep every channel cursor aligned with one virtual playback clock.

    One engine replays one loaded session. All mutation happens through
    `on_load`, `tick` and the seek/rate/play calls, which must be serialized
    by the caller. Every call that changes state publishes a complete new
    `PlaybackSnapshot`; the previous one is never modified.
    """

    def __init__(
        self,
        *,
        rate: float = 1.0,
        playing: bool = True,
        speed_history_length: int = 140,
        trail_length: int = 200,
    ) -> None:
        if not is_valid_rate(rate):
            raise ValueError("rate must be > 0")
        self._rate = float(rate)
        self._playing = bool(playing)
        self._speed_history = RollingWindow[float](speed_history_length)
        self._trail = RollingWindow[tuple[float, float]](trail_length)
        self._series = SessionSeries()
        self._window: SessionWindow | None = None
        self._clock: PlaybackClock | None = None
        self._cursors: dict[Channel, StreamCursor[Any]] = {}
        self._state = EngineState.IDLE
        self._failure: str | None = None
        self._snapshot = EMPTY_SNAPSHOT
        self._tick_count = 0
        self._current_stint: StintSample | None = None
        self._last_completed_lap_time: float | None = None
        self._best_lap_time: float | None = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def failure(self) -> str | None:
        return self._failure

    @property
    def snapshot(self) -> PlaybackSnapshot:
        return self._snapshot

    @property
    def series(self) -> SessionSeries:
        return self._series

    @property
    def window(self) -> SessionWindow | None:
        return self._window

    @property
    def duration(self) -> float:
        return 0.0 if self._clock is None else self._clock.duration

    @property
    def offset(self) -> float:
        return 0.0 if self._clock is None else self._clock.offset

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def is_playing(self) -> bool:
        return self._playing

    def cursor(self, channel: Channel) -> StreamCursor[Any] | None:
        return self._cursors.get(channel)

    def on_load(
        self,
        series: SessionSeries,
        window: SessionWindow | None = None,
        *,
        resume_offset: float | None = None,
    ) -> bool:
        """Replace all series and reset playback; False when nothing is playable."""
        resolved = window or series.window or compute_session_window(series.cars, series.locations)
        self._series = series
        self._cursors = {}
        self._clock = None
        self._speed_history.clear()
        self._trail.clear()
        self._reset_derived()
        self._tick_count = 0
        if resolved is None:
            self._window = None
            self._state = EngineState.FAILED
            self._failure = NO_TELEMETRY_MESSAGE
            self._snapshot = EMPTY_SNAPSHOT
            _LOG.warning("session_load_failed reason=%s", NO_TELEMETRY_MESSAGE)
            return False

        self._window = resolved
        self._clock = PlaybackClock(
            resolved.duration_seconds, rate=self._rate, playing=self._playing
        )
        for channel, spec in CHANNEL_SPECS.items():
            self._cursors[channel] = StreamCursor(
                dated_series(series, channel), timestamp=spec.timestamp
            )
        self._state = EngineState.READY
        self._failure = None
        self._reposition(self._clock.seek_to(resume_offset or 0.0))
        self._publish()
        _LOG.info(
            "session_loaded duration_s=%.3f resume_s=%.3f samples=%s",
            self._clock.duration,
            self._clock.offset,
            {channel.value: len(cursor) for channel, cursor in self._cursors.items()},
        )
        return True

    def tick(self, now: float) -> PlaybackSnapshot:
        """Advance by real time `now` and return the new snapshot."""
        clock = self._clock
        if self._state is not EngineState.READY or clock is None:
            return self._snapshot
        loops_before = clock.loop_count
        offset = clock.tick(now)
        self._tick_count += 1
        if clock.loop_count != loops_before:
            _LOG.debug("playback_restarted_at_end loop_count=%d", clock.loop_count)
            self._reposition(offset)
            return self._publish()

        instant = self._instant_at(offset)
        for channel, cursor in self._cursors.items():
            previous = cursor.index
            if cursor.advance_to(instant):
                self._on_advanced(channel, cursor, previous)
        return self._publish()

    def seek(self, progress: float) -> PlaybackSnapshot:
        """Jump to a fraction of the session; values outside [0, 1] are clamped."""
        value = float(progress)
        if not math.isfinite(value):
            value = 0.0
        clamped = min(max(value, 0.0), 1.0)
        return self.seek_offset(self.duration * clamped)

    def seek_offset(self, seconds: float) -> PlaybackSnapshot:
        clock = self._clock
        if self._state is not EngineState.READY or clock is None:
            return self._snapshot
        offset = clock.seek_to(seconds)
        _LOG.debug("playback_seek offset_s=%.3f", offset)
        self._reposition(offset)
        return self._publish()

    def restart(self) -> PlaybackSnapshot:
        return self.seek(0.0)

    def set_rate(self, rate: float) -> bool:
        if self._clock is not None:
            accepted = self._clock.set_rate(rate)
        else:
            accepted = is_valid_rate(rate)
            if not accepted:
                _LOG.warning("playback_rate_rejected rate=%r current=%r", rate, self._rate)
        if accepted:
            self._rate = float(rate)
            self._publish()
        return accepted

    def toggle_play(self) -> bool:
        if self._playing:
            self.pause()
        else:
            self.resume()
        return self._playing

    def pause(self) -> None:
        self._playing = False
        if self._clock is not None:
            self._clock.pause()
        self._publish()

    def resume(self) -> None:
        self._playing = True
        if self._clock is not None:
            self._clock.resume()
        self._publish()

    def _instant_at(self, offset: float) -> datetime:
        assert self._window is not None
        return self._window.base_instant + timedelta(seconds=offset)

    def _reposition(self, offset: float) -> None:
        """Seek every cursor and rebuild windows and derived fields from scratch."""
        instant = self._instant_at(offset)
        for cursor in self._cursors.values():
            cursor.seek_to(instant)
        car = self._cursors[Channel.CAR]
        location = self._cursors[Channel.LOCATION]
        self._speed_history.rebuild_from(car.samples, car.index, _speed)
        self._trail.rebuild_from(location.samples, location.index, _trail_point)
        lap = self._cursors[Channel.LAP]
        current_lap = lap.current_sample()
        self._last_completed_lap_time = last_completed_lap_time(lap.samples, lap.index)
        self._best_lap_time = best_lap_time_until(lap.samples, lap.index)
        self._current_stint = active_stint(
            self._series.stints, None if current_lap is None else current_lap.lap_number
        )

    def _on_advanced(self, channel: Channel, cursor: StreamCursor[Any], previous: int) -> None:
        if channel is Channel.CAR:
            self._speed_history.extend(
                [_speed(item) for item in self._passed(cursor, previous, self._speed_history)]
            )
        elif channel is Channel.LOCATION:
            self._trail.extend(
                [_trail_point(item) for item in self._passed(cursor, previous, self._trail)]
            )
        elif channel is Channel.LAP:
            passed = cursor.samples[max(previous + 1, 0) : cursor.index + 1]
            for lap in passed:
                if lap.lap_duration is None:
                    continue
                self._last_completed_lap_time = lap.lap_duration
                if self._best_lap_time is None or lap.lap_duration < self._best_lap_time:
                    self._best_lap_time = lap.lap_duration
            current_lap = cursor.current_sample()
            self._current_stint = active_stint(
                self._series.stints, None if current_lap is None else current_lap.lap_number
            )

    @staticmethod
    def _passed(
        cursor: StreamCursor[Any], previous: int, window: RollingWindow[Any]
    ) -> tuple[Any, ...]:
        """Samples stepped over since `previous`, limited to what the window keeps."""
        start = max(previous + 1, cursor.index + 1 - window.capacity, 0)
        return cursor.samples[start : cursor.index + 1]

    def _reset_derived(self) -> None:
        self._current_stint = None
        self._last_completed_lap_time = None
        self._best_lap_time = None

    def _publish(self) -> PlaybackSnapshot:
        clock = self._clock
        if clock is None or self._window is None:
            self._snapshot = PlaybackSnapshot(is_playing=self._playing, rate=self._rate)
            return self._snapshot
        self._snapshot = PlaybackSnapshot(
            is_playing=clock.is_playing,
            rate=clock.rate,
            elapsed_seconds=clock.offset,
            duration_seconds=clock.duration,
            progress=clock.progress,
            session_start=self._window.base_instant,
            playback_instant=self._instant_at(clock.offset),
            current=MappingProxyType(
                {channel: cursor.current_sample() for channel, cursor in self._cursors.items()}
            ),
            current_stint=self._current_stint,
            last_completed_lap_time=self._last_completed_lap_time,
            best_lap_time=self._best_lap_time,
            speed_history=self._speed_history.values(),
            trail=self._trail.values(),
            tick_count=self._tick_count,
            loop_count=clock.loop_count,
        )
        return self._snapshot
