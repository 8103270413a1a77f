"""Channel enumeration and per-channel series access."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from pitwall.data.models import SessionSeries


class Channel(StrEnum):
    """Timestamped telemetry channels replayed in sync."""

    CAR = "car"
    LOCATION = "location"
    POSITION = "position"
    LAP = "lap"
    PIT = "pit"
    WEATHER = "weather"
    RACE_CONTROL = "race_control"
    RADIO = "radio"
    INTERVAL = "interval"


@dataclass(frozen=True, slots=True)
class ChannelSpec:
    channel: Channel
    series_field: str
    timestamp: Callable[[Any], datetime | None]


def _dated(sample: Any) -> datetime | None:
    return sample.date


def _lap_start(sample: Any) -> datetime | None:
    return sample.date_start


CHANNEL_SPECS: dict[Channel, ChannelSpec] = {
    Channel.CAR: ChannelSpec(Channel.CAR, "cars", _dated),
    Channel.LOCATION: ChannelSpec(Channel.LOCATION, "locations", _dated),
    Channel.POSITION: ChannelSpec(Channel.POSITION, "positions", _dated),
    Channel.LAP: ChannelSpec(Channel.LAP, "laps", _lap_start),
    Channel.PIT: ChannelSpec(Channel.PIT, "pits", _dated),
    Channel.WEATHER: ChannelSpec(Channel.WEATHER, "weather", _dated),
    Channel.RACE_CONTROL: ChannelSpec(Channel.RACE_CONTROL, "race_control", _dated),
    Channel.RADIO: ChannelSpec(Channel.RADIO, "radio", _dated),
    Channel.INTERVAL: ChannelSpec(Channel.INTERVAL, "intervals", _dated),
}


def series_for(series: SessionSeries, channel: Channel) -> tuple[Any, ...]:
    return getattr(series, CHANNEL_SPECS[channel].series_field)


def dated_series(series: SessionSeries, channel: Channel) -> tuple[Any, ...]:
    """Samples of `channel` that carry a timestamp; undated laps cannot be placed."""
    timestamp = CHANNEL_SPECS[channel].timestamp
    return tuple(item for item in series_for(series, channel) if timestamp(item) is not None)
