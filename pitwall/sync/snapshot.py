"""Immutable per-tick playback snapshot."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from pitwall.data.models import (
    CarSample,
    IntervalSample,
    LapSample,
    LocationSample,
    PitSample,
    PositionSample,
    RaceControlMessage,
    StintSample,
    TeamRadioSample,
    WeatherSample,
)
from pitwall.sync.channels import Channel

_NO_SAMPLES: Mapping[Channel, Any] = MappingProxyType({channel: None for channel in Channel})


@dataclass(frozen=True, slots=True)
class PlaybackSnapshot:
    """Read-only view of playback consumed by rendering callers."""

    is_playing: bool = False
    rate: float = 1.0
    elapsed_seconds: float = 0.0
    duration_seconds: float = 0.0
    progress: float = 0.0
    session_start: datetime | None = None
    playback_instant: datetime | None = None
    current: Mapping[Channel, Any] = field(default_factory=lambda: _NO_SAMPLES)
    current_stint: StintSample | None = None
    last_completed_lap_time: float | None = None
    best_lap_time: float | None = None
    speed_history: tuple[float, ...] = ()
    trail: tuple[tuple[float, float], ...] = ()
    tick_count: int = 0
    loop_count: int = 0

    def sample(self, channel: Channel) -> Any | None:
        return self.current.get(channel)

    @property
    def car(self) -> CarSample | None:
        return self.current.get(Channel.CAR)

    @property
    def location(self) -> LocationSample | None:
        return self.current.get(Channel.LOCATION)

    @property
    def position(self) -> PositionSample | None:
        return self.current.get(Channel.POSITION)

    @property
    def lap(self) -> LapSample | None:
        return self.current.get(Channel.LAP)

    @property
    def last_pit_stop(self) -> PitSample | None:
        return self.current.get(Channel.PIT)

    @property
    def weather(self) -> WeatherSample | None:
        return self.current.get(Channel.WEATHER)

    @property
    def race_control(self) -> RaceControlMessage | None:
        return self.current.get(Channel.RACE_CONTROL)

    @property
    def radio(self) -> TeamRadioSample | None:
        return self.current.get(Channel.RADIO)

    @property
    def interval(self) -> IntervalSample | None:
        return self.current.get(Channel.INTERVAL)


EMPTY_SNAPSHOT = PlaybackSnapshot()
