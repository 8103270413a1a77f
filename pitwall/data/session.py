"""Load-time assembly of one replay session.

Raw endpoint records are decoded, stably sorted, aligned on the telemetry
timeline and bundled into an immutable `SessionSeries`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, TypeVar

import numpy as np

from pitwall.data import schema
from pitwall.data.models import (
    UNIT_TRACK_BOUNDS,
    CarSample,
    DriverInfo,
    LapSample,
    LocationSample,
    SessionInfo,
    SessionSeries,
    SessionWindow,
    TrackBounds,
    TrackOutline,
)
from pitwall.data.source import RawSession, SessionRequest

T = TypeVar("T")

_LOG = logging.getLogger("pitwall.data")

DEFAULT_OUTLINE_POINTS = 1400


def stable_sorted(samples: Iterable[T], key: Callable[[T], Any]) -> tuple[T, ...]:
    """Sort ascending by `key`; equal keys keep their fetch order."""
    return tuple(sorted(samples, key=key))


def compute_session_window(
    cars: Sequence[CarSample],
    locations: Sequence[LocationSample],
) -> SessionWindow | None:
    """Span of the primary series, or None when neither has samples."""
    firsts = [series[0].date for series in (cars, locations) if series]
    lasts = [series[-1].date for series in (cars, locations) if series]
    if not firsts:
        return None
    return SessionWindow(base_instant=min(firsts), end_instant=max(lasts))


def compute_track_outline(
    locations: Sequence[LocationSample],
    *,
    max_points: int = DEFAULT_OUTLINE_POINTS,
) -> TrackOutline:
    if not locations:
        return TrackOutline(bounds=UNIT_TRACK_BOUNDS, points=())
    count = len(locations)
    xs = np.fromiter((item.x for item in locations), dtype=np.float64, count=count)
    ys = np.fromiter((item.y for item in locations), dtype=np.float64, count=count)
    bounds = TrackBounds(
        min_x=float(xs.min()),
        max_x=float(xs.max()),
        min_y=float(ys.min()),
        max_y=float(ys.max()),
    )
    stride = max(count // max(1, int(max_points)), 1)
    points = tuple(zip(xs[::stride].tolist(), ys[::stride].tolist(), strict=True))
    return TrackOutline(bounds=bounds, points=points)


def best_lap_time(laps: Iterable[LapSample]) -> float | None:
    durations = [lap.lap_duration for lap in laps if lap.lap_duration is not None]
    return min(durations) if durations else None


def resolve_driver(drivers: Sequence[DriverInfo], driver_number: int) -> DriverInfo | None:
    for driver in drivers:
        if driver.driver_number == driver_number:
            return driver
    return drivers[0] if drivers else None


def shift_secondary_series(series: SessionSeries, shift: timedelta) -> SessionSeries:
    """Move every non-telemetry series by `shift`; car and location stay put."""

    def moved(samples: tuple[T, ...]) -> tuple[T, ...]:
        return tuple(replace(item, date=item.date + shift) for item in samples)  # type: ignore[attr-defined]

    laps = tuple(
        replace(lap, date_start=None if lap.date_start is None else lap.date_start + shift)
        for lap in series.laps
    )
    return replace(
        series,
        positions=moved(series.positions),
        laps=laps,
        pits=moved(series.pits),
        weather=moved(series.weather),
        race_control=moved(series.race_control),
        radio=moved(series.radio),
        intervals=moved(series.intervals),
    )


def _session_start(session: SessionInfo | None) -> datetime | None:
    return None if session is None else session.date_start


def build_session_series(
    raw: RawSession,
    request: SessionRequest,
    *,
    outline_points: int = DEFAULT_OUTLINE_POINTS,
) -> SessionSeries:
    """Decode, sort and align every endpoint of one load."""

    def records(endpoint: str) -> list[Any]:
        return list(raw.get(endpoint) or [])

    sessions = schema.decode_records("sessions", records("sessions"), schema.payload_to_session)
    session = sessions[0] if sessions else None
    drivers = tuple(
        sorted(
            schema.decode_records("drivers", records("drivers"), schema.payload_to_driver),
            key=lambda item: item.driver_number,
        )
    )
    driver = resolve_driver(drivers, request.driver_number)

    def by_date(item: Any) -> datetime:
        return item.date

    cars = stable_sorted(
        schema.decode_records("car_data", records("car_data"), schema.payload_to_car), by_date
    )
    locations = stable_sorted(
        schema.decode_records("location", records("location"), schema.payload_to_location),
        by_date,
    )
    laps_all = schema.decode_records("laps", records("laps"), schema.payload_to_lap)
    laps = stable_sorted(
        (lap for lap in laps_all if lap.date_start is not None),
        lambda lap: lap.date_start,
    )
    stints = stable_sorted(
        schema.decode_records("stints", records("stints"), schema.payload_to_stint),
        lambda stint: stint.stint_number,
    )
    window = compute_session_window(cars, locations)

    series = SessionSeries(
        cars=cars,
        locations=locations,
        positions=stable_sorted(
            schema.decode_records("position", records("position"), schema.payload_to_position),
            by_date,
        ),
        laps=laps,
        stints=stints,
        pits=stable_sorted(
            schema.decode_records("pit", records("pit"), schema.payload_to_pit), by_date
        ),
        weather=stable_sorted(
            schema.decode_records("weather", records("weather"), schema.payload_to_weather),
            by_date,
        ),
        race_control=stable_sorted(
            schema.decode_records(
                "race_control", records("race_control"), schema.payload_to_race_control
            ),
            by_date,
        ),
        radio=stable_sorted(
            schema.decode_records("team_radio", records("team_radio"), schema.payload_to_radio),
            by_date,
        ),
        intervals=stable_sorted(
            schema.decode_records("intervals", records("intervals"), schema.payload_to_interval),
            by_date,
        ),
        window=window,
        session=session,
        drivers=drivers,
        driver=driver,
        driver_number=driver.driver_number if driver is not None else request.driver_number,
        best_lap_time=best_lap_time(laps_all),
        track=compute_track_outline(locations, max_points=outline_points),
    )

    primary_start = _session_start(session)
    if request.uses_telemetry_fallback and window is not None and primary_start is not None:
        shift = window.base_instant - primary_start
        _LOG.info(
            "session_time_shift session=%d telemetry_session=%d shift_s=%.3f",
            request.session_key,
            request.telemetry_session_key,
            shift.total_seconds(),
        )
        series = shift_secondary_series(series, shift)
    return series
