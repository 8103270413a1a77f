from __future__ import annotations

from datetime import datetime, timedelta

from pitwall.data.models import UNIT_TRACK_BOUNDS, LocationSample
from pitwall.data.session import (
    build_session_series,
    compute_session_window,
    compute_track_outline,
)
from pitwall.data.source import SessionRequest


def _iso(base_time: datetime, seconds: float) -> str:
    return (base_time + timedelta(seconds=seconds)).isoformat()


def _car(base_time: datetime, seconds: float, speed: float) -> dict[str, object]:
    return {
        "date": _iso(base_time, seconds),
        "speed": speed,
        "throttle": 50,
        "brake": 0,
        "rpm": 10000,
        "n_gear": 6,
        "drs": 0,
        "driver_number": 1,
    }


def _location(base_time: datetime, seconds: float, x: float, y: float) -> dict[str, object]:
    return {"date": _iso(base_time, seconds), "x": x, "y": y, "z": 0, "driver_number": 1}


def _session(base_time: datetime, start_s: float) -> dict[str, object]:
    return {
        "meeting_key": 1219,
        "session_key": 9165,
        "location": "Marina Bay",
        "session_name": "Race",
        "country_name": "Singapore",
        "circuit_short_name": "Singapore",
        "date_start": _iso(base_time, start_s),
        "date_end": _iso(base_time, start_s + 7200),
        "year": 2023,
    }


def _driver(number: int, acronym: str) -> dict[str, object]:
    return {
        "driver_number": number,
        "full_name": acronym,
        "name_acronym": acronym,
        "team_name": "Team",
        "team_colour": "3671C6",
    }


def test_samples_are_sorted_stably_by_timestamp(base_time) -> None:
    raw = {
        "car_data": [
            _car(base_time, 2, 200),
            _car(base_time, 1, 100),
            _car(base_time, 2, 201),
            _car(base_time, 0, 50),
        ]
    }

    series = build_session_series(raw, SessionRequest(1, 1, 1))

    assert [car.speed for car in series.cars] == [50.0, 100.0, 200.0, 201.0]


def test_window_spans_both_primary_series(base_time) -> None:
    raw = {
        "car_data": [_car(base_time, 5, 100), _car(base_time, 40, 100)],
        "location": [_location(base_time, 0, 0, 0), _location(base_time, 30, 1, 1)],
    }

    series = build_session_series(raw, SessionRequest(1, 1, 1))

    assert series.window is not None
    assert series.window.base_instant == base_time
    assert series.window.duration_seconds == 40.0
    assert compute_session_window((), ()) is None


def test_laps_without_start_are_dropped_but_count_toward_best(base_time) -> None:
    raw = {
        "car_data": [_car(base_time, 0, 100)],
        "laps": [
            {"lap_number": 2, "date_start": _iso(base_time, 100), "lap_duration": 99.0},
            {"lap_number": 1, "date_start": None, "lap_duration": 97.5},
            {"lap_number": 3, "date_start": _iso(base_time, 200), "lap_duration": None},
        ],
    }

    series = build_session_series(raw, SessionRequest(1, 1, 1))

    assert [lap.lap_number for lap in series.laps] == [2, 3]
    assert series.best_lap_time == 97.5


def test_drivers_are_sorted_and_selected_by_number(base_time) -> None:
    raw = {"drivers": [_driver(44, "HAM"), _driver(1, "VER"), _driver(16, "LEC")]}

    series = build_session_series(raw, SessionRequest(1, 1, 16))
    assert [driver.driver_number for driver in series.drivers] == [1, 16, 44]
    assert series.driver is not None and series.driver.name_acronym == "LEC"

    fallback = build_session_series(raw, SessionRequest(1, 1, 99))
    assert fallback.driver_number == 1


def test_secondary_series_shift_onto_telemetry_timeline(base_time) -> None:
    raw = {
        "sessions": [_session(base_time, 1000)],
        "car_data": [_car(base_time, 0, 100), _car(base_time, 60, 120)],
        "position": [{"date": _iso(base_time, 1010), "position": 1, "driver_number": 1}],
        "laps": [{"lap_number": 1, "date_start": _iso(base_time, 1005), "lap_duration": 98.0}],
        "weather": [{"date": _iso(base_time, 1030), "air_temperature": 30.1}],
    }

    series = build_session_series(raw, SessionRequest(9165, 9158, 1))

    assert series.cars[0].date == base_time
    assert series.positions[0].date == base_time + timedelta(seconds=10)
    assert series.laps[0].date_start == base_time + timedelta(seconds=5)
    assert series.weather[0].date == base_time + timedelta(seconds=30)
    assert series.session is not None
    assert series.session.date_start == base_time + timedelta(seconds=1000)


def test_same_session_keys_leave_timestamps_untouched(base_time) -> None:
    raw = {
        "sessions": [_session(base_time, 1000)],
        "car_data": [_car(base_time, 0, 100)],
        "position": [{"date": _iso(base_time, 1010), "position": 1, "driver_number": 1}],
    }

    series = build_session_series(raw, SessionRequest(9165, 9165, 1))

    assert series.positions[0].date == base_time + timedelta(seconds=1010)


def test_track_outline_bounds_and_decimation(base_time) -> None:
    locations = [
        LocationSample(date=base_time + timedelta(seconds=step), x=float(step), y=float(-2 * step), z=0.0)
        for step in range(5)
    ]

    outline = compute_track_outline(locations, max_points=2)

    assert outline.bounds.min_x == 0.0
    assert outline.bounds.max_x == 4.0
    assert outline.bounds.min_y == -8.0
    assert outline.bounds.max_y == 0.0
    assert outline.points == ((0.0, 0.0), (2.0, -4.0), (4.0, -8.0))

    empty = compute_track_outline([])
    assert empty.bounds == UNIT_TRACK_BOUNDS
    assert empty.points == ()
