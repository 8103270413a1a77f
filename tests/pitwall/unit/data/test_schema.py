from __future__ import annotations

from datetime import UTC, datetime

import pytest

from pitwall.data import schema
from pitwall.runtime.errors import LoadFailure


def _car(date: str = "2023-09-17T12:00:00.250000+00:00") -> dict[str, object]:
    return {
        "date": date,
        "speed": 287,
        "throttle": 100,
        "brake": 0,
        "rpm": 11250,
        "n_gear": 7,
        "drs": 12,
        "driver_number": 1,
        "session_key": 9158,
    }


def test_parse_instant_accepts_iso_variants() -> None:
    expected = datetime(2023, 9, 17, 12, 0, tzinfo=UTC)

    assert schema.parse_instant("2023-09-17T12:00:00Z") == expected
    assert schema.parse_instant("2023-09-17T12:00:00+00:00") == expected
    assert schema.parse_instant("2023-09-17T12:00:00") == expected
    assert schema.parse_instant("2023-09-17T12:00:00.125000+00:00").microsecond == 125000


@pytest.mark.parametrize("value", ["yesterday", "", None, 17])
def test_parse_instant_rejects_invalid_values(value: object) -> None:
    with pytest.raises(LoadFailure):
        schema.parse_instant(value)


def test_car_payload_maps_gear_field() -> None:
    car = schema.payload_to_car(_car())

    assert car.speed == 287.0
    assert car.gear == 7
    assert car.drs == 12


def test_missing_required_field_is_a_load_failure() -> None:
    record = _car()
    del record["speed"]

    with pytest.raises(LoadFailure, match="speed"):
        schema.payload_to_car(record)


def test_optional_lap_fields_default_to_none() -> None:
    lap = schema.payload_to_lap({"lap_number": 1, "date_start": None, "lap_duration": None})

    assert lap.lap_number == 1
    assert lap.date_start is None
    assert lap.lap_duration is None
    assert lap.sector_1_duration is None
    assert lap.is_pit_out_lap is None


def test_lap_payload_reads_sector_durations() -> None:
    lap = schema.payload_to_lap(
        {
            "lap_number": 12,
            "date_start": "2023-09-17T12:20:00.500",
            "lap_duration": 98.123,
            "duration_sector_1": 30.1,
            "duration_sector_2": 38.0,
            "duration_sector_3": 30.023,
            "is_pit_out_lap": False,
        }
    )

    assert lap.lap_duration == 98.123
    assert lap.sector_2_duration == 38.0
    assert lap.is_pit_out_lap is False
    assert lap.date_start is not None and lap.date_start.tzinfo is not None


def test_stint_without_compound_and_end_is_open_unknown() -> None:
    stint = schema.payload_to_stint({"stint_number": 2, "lap_start": 16, "lap_end": None})

    assert stint.compound == "UNKNOWN"
    assert stint.lap_end is None
    assert stint.covers(16) is True
    assert stint.covers(62) is True
    assert stint.covers(15) is False


def test_race_control_optional_fields() -> None:
    message = schema.payload_to_race_control(
        {"date": "2023-09-17T12:01:00", "category": "Flag", "message": "GREEN LIGHT - PIT EXIT OPEN", "flag": "GREEN"}
    )

    assert message.flag == "GREEN"
    assert message.driver_number is None
    assert message.sector is None


def test_decode_records_names_endpoint_and_position() -> None:
    with pytest.raises(LoadFailure, match=r"car_data\[1\]"):
        schema.decode_records("car_data", [_car(), _car(date="not-a-date")], schema.payload_to_car)

    with pytest.raises(LoadFailure, match="not a JSON object"):
        schema.decode_records("laps", ["lap"], schema.payload_to_lap)
