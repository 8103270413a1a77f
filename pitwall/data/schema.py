"""Decoding of upstream JSON records into typed samples.

Field names follow the OpenF1 payloads. Required fields raise `LoadFailure`
when missing or malformed; optional fields decode to `None`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any, TypeVar

from pitwall.data.models import (
    CarSample,
    DriverInfo,
    IntervalSample,
    LapSample,
    LocationSample,
    PitSample,
    PositionSample,
    RaceControlMessage,
    SessionInfo,
    StintSample,
    TeamRadioSample,
    WeatherSample,
)
from pitwall.runtime.errors import LoadFailure

T = TypeVar("T")


def parse_instant(value: object) -> datetime:
    """Parse an ISO 8601 instant, with or without fractional seconds."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise LoadFailure(f"Invalid date: {value!r}") from exc
    else:
        raise LoadFailure(f"Invalid date: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def _optional_instant(value: object) -> datetime | None:
    if value is None:
        return None
    return parse_instant(value)


def _required(record: dict[str, Any], key: str) -> Any:
    if key not in record or record[key] is None:
        raise LoadFailure(f"Missing required field {key!r}.")
    return record[key]


def _number(record: dict[str, Any], key: str) -> float:
    try:
        return float(_required(record, key))
    except (TypeError, ValueError) as exc:
        raise LoadFailure(f"Field {key!r} must be numeric.") from exc


def _integer(record: dict[str, Any], key: str) -> int:
    try:
        return int(_required(record, key))
    except (TypeError, ValueError) as exc:
        raise LoadFailure(f"Field {key!r} must be an integer.") from exc


def _optional_number(record: dict[str, Any], key: str) -> float | None:
    value = record.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_integer(record: dict[str, Any], key: str) -> int | None:
    value = record.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_text(record: dict[str, Any], key: str) -> str | None:
    value = record.get(key)
    return None if value is None else str(value)


def payload_to_session(record: dict[str, Any]) -> SessionInfo:
    return SessionInfo(
        meeting_key=_integer(record, "meeting_key"),
        session_key=_integer(record, "session_key"),
        location=str(record.get("location", "")),
        session_name=str(record.get("session_name", "")),
        country_name=str(record.get("country_name", "")),
        circuit_short_name=str(record.get("circuit_short_name", "")),
        date_start=parse_instant(_required(record, "date_start")),
        date_end=parse_instant(_required(record, "date_end")),
        year=_integer(record, "year"),
    )


def payload_to_driver(record: dict[str, Any]) -> DriverInfo:
    return DriverInfo(
        driver_number=_integer(record, "driver_number"),
        full_name=str(record.get("full_name") or ""),
        name_acronym=str(record.get("name_acronym") or ""),
        team_name=str(record.get("team_name") or ""),
        team_colour=str(record.get("team_colour") or ""),
        headshot_url=_optional_text(record, "headshot_url"),
    )


def payload_to_car(record: dict[str, Any]) -> CarSample:
    return CarSample(
        date=parse_instant(_required(record, "date")),
        speed=_number(record, "speed"),
        throttle=_number(record, "throttle"),
        brake=_number(record, "brake"),
        rpm=_number(record, "rpm"),
        gear=_integer(record, "n_gear"),
        drs=_integer(record, "drs"),
    )


def payload_to_location(record: dict[str, Any]) -> LocationSample:
    return LocationSample(
        date=parse_instant(_required(record, "date")),
        x=_number(record, "x"),
        y=_number(record, "y"),
        z=_number(record, "z"),
    )


def payload_to_position(record: dict[str, Any]) -> PositionSample:
    return PositionSample(
        date=parse_instant(_required(record, "date")),
        position=_integer(record, "position"),
        driver_number=_integer(record, "driver_number"),
    )


def payload_to_lap(record: dict[str, Any]) -> LapSample:
    return LapSample(
        lap_number=_integer(record, "lap_number"),
        date_start=_optional_instant(record.get("date_start")),
        lap_duration=_optional_number(record, "lap_duration"),
        sector_1_duration=_optional_number(record, "duration_sector_1"),
        sector_2_duration=_optional_number(record, "duration_sector_2"),
        sector_3_duration=_optional_number(record, "duration_sector_3"),
        i1_speed=_optional_integer(record, "i1_speed"),
        i2_speed=_optional_integer(record, "i2_speed"),
        st_speed=_optional_integer(record, "st_speed"),
        is_pit_out_lap=None if record.get("is_pit_out_lap") is None else bool(record["is_pit_out_lap"]),
    )


def payload_to_stint(record: dict[str, Any]) -> StintSample:
    return StintSample(
        stint_number=_integer(record, "stint_number"),
        lap_start=_integer(record, "lap_start"),
        lap_end=_optional_integer(record, "lap_end"),
        compound=str(record.get("compound") or "UNKNOWN"),
        tyre_age_at_start=_optional_integer(record, "tyre_age_at_start"),
    )


def payload_to_pit(record: dict[str, Any]) -> PitSample:
    return PitSample(
        date=parse_instant(_required(record, "date")),
        lap_number=_integer(record, "lap_number"),
        pit_duration=_optional_number(record, "pit_duration"),
    )


def payload_to_weather(record: dict[str, Any]) -> WeatherSample:
    return WeatherSample(
        date=parse_instant(_required(record, "date")),
        air_temperature=_optional_number(record, "air_temperature"),
        track_temperature=_optional_number(record, "track_temperature"),
        humidity=_optional_number(record, "humidity"),
        pressure=_optional_number(record, "pressure"),
        rainfall=_optional_number(record, "rainfall"),
        wind_speed=_optional_number(record, "wind_speed"),
        wind_direction=_optional_number(record, "wind_direction"),
    )


def payload_to_race_control(record: dict[str, Any]) -> RaceControlMessage:
    return RaceControlMessage(
        date=parse_instant(_required(record, "date")),
        category=str(record.get("category") or ""),
        message=str(record.get("message") or ""),
        driver_number=_optional_integer(record, "driver_number"),
        lap_number=_optional_integer(record, "lap_number"),
        flag=_optional_text(record, "flag"),
        scope=_optional_text(record, "scope"),
        sector=_optional_integer(record, "sector"),
    )


def payload_to_radio(record: dict[str, Any]) -> TeamRadioSample:
    return TeamRadioSample(
        date=parse_instant(_required(record, "date")),
        recording_url=str(_required(record, "recording_url")),
    )


def payload_to_interval(record: dict[str, Any]) -> IntervalSample:
    return IntervalSample(
        date=parse_instant(_required(record, "date")),
        driver_number=_integer(record, "driver_number"),
        gap_to_leader=_optional_number(record, "gap_to_leader"),
        interval=_optional_number(record, "interval"),
    )


def decode_records(
    endpoint: str,
    records: Iterable[object],
    decoder: Callable[[dict[str, Any]], T],
) -> list[T]:
    """Decode every record of one endpoint, naming the endpoint on failure."""
    out: list[T] = []
    for position, item in enumerate(records):
        if not isinstance(item, dict):
            raise LoadFailure(f"{endpoint}[{position}] is not a JSON object.")
        try:
            out.append(decoder(item))
        except LoadFailure as exc:
            raise LoadFailure(f"{endpoint}[{position}]: {exc}") from exc
    return out
