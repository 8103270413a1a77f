"""Typed telemetry records and the loaded session bundle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SessionInfo:
    meeting_key: int
    session_key: int
    location: str
    session_name: str
    country_name: str
    circuit_short_name: str
    date_start: datetime
    date_end: datetime
    year: int


@dataclass(frozen=True, slots=True)
class DriverInfo:
    driver_number: int
    full_name: str
    name_acronym: str
    team_name: str
    team_colour: str
    headshot_url: str | None = None


@dataclass(frozen=True, slots=True)
class CarSample:
    date: datetime
    speed: float
    throttle: float
    brake: float
    rpm: float
    gear: int
    drs: int


@dataclass(frozen=True, slots=True)
class LocationSample:
    date: datetime
    x: float
    y: float
    z: float


@dataclass(frozen=True, slots=True)
class PositionSample:
    date: datetime
    position: int
    driver_number: int


@dataclass(frozen=True, slots=True)
class LapSample:
    lap_number: int
    date_start: datetime | None = None
    lap_duration: float | None = None
    sector_1_duration: float | None = None
    sector_2_duration: float | None = None
    sector_3_duration: float | None = None
    i1_speed: int | None = None
    i2_speed: int | None = None
    st_speed: int | None = None
    is_pit_out_lap: bool | None = None


@dataclass(frozen=True, slots=True)
class StintSample:
    stint_number: int
    lap_start: int
    lap_end: int | None
    compound: str
    tyre_age_at_start: int | None = None

    def covers(self, lap_number: int) -> bool:
        """Return whether the lap falls inside this stint; open stints never end."""
        if lap_number < self.lap_start:
            return False
        return self.lap_end is None or lap_number <= self.lap_end


@dataclass(frozen=True, slots=True)
class PitSample:
    date: datetime
    lap_number: int
    pit_duration: float | None = None


@dataclass(frozen=True, slots=True)
class WeatherSample:
    date: datetime
    air_temperature: float | None = None
    track_temperature: float | None = None
    humidity: float | None = None
    pressure: float | None = None
    rainfall: float | None = None
    wind_speed: float | None = None
    wind_direction: float | None = None


@dataclass(frozen=True, slots=True)
class RaceControlMessage:
    date: datetime
    category: str
    message: str
    driver_number: int | None = None
    lap_number: int | None = None
    flag: str | None = None
    scope: str | None = None
    sector: int | None = None


@dataclass(frozen=True, slots=True)
class TeamRadioSample:
    date: datetime
    recording_url: str


@dataclass(frozen=True, slots=True)
class IntervalSample:
    date: datetime
    driver_number: int
    gap_to_leader: float | None = None
    interval: float | None = None


@dataclass(frozen=True, slots=True)
class TrackBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float


UNIT_TRACK_BOUNDS = TrackBounds(min_x=0.0, max_x=1.0, min_y=0.0, max_y=1.0)


@dataclass(frozen=True, slots=True)
class TrackOutline:
    """Decimated track shape used as the static map underlay."""

    bounds: TrackBounds = UNIT_TRACK_BOUNDS
    points: tuple[tuple[float, float], ...] = ()


@dataclass(frozen=True, slots=True)
class SessionWindow:
    base_instant: datetime
    end_instant: datetime

    @property
    def duration_seconds(self) -> float:
        return max((self.end_instant - self.base_instant).total_seconds(), 0.0)


@dataclass(frozen=True, slots=True)
class SessionSeries:
    """All series of one load, sorted and aligned on one timeline."""

    cars: tuple[CarSample, ...] = ()
    locations: tuple[LocationSample, ...] = ()
    positions: tuple[PositionSample, ...] = ()
    laps: tuple[LapSample, ...] = ()
    stints: tuple[StintSample, ...] = ()
    pits: tuple[PitSample, ...] = ()
    weather: tuple[WeatherSample, ...] = ()
    race_control: tuple[RaceControlMessage, ...] = ()
    radio: tuple[TeamRadioSample, ...] = ()
    intervals: tuple[IntervalSample, ...] = ()
    window: SessionWindow | None = None
    session: SessionInfo | None = None
    drivers: tuple[DriverInfo, ...] = ()
    driver: DriverInfo | None = None
    driver_number: int = 0
    best_lap_time: float | None = None
    track: TrackOutline = field(default_factory=TrackOutline)
