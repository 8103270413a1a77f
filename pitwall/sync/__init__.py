"""Playback synchronization core."""

from pitwall.sync.channels import CHANNEL_SPECS, Channel, ChannelSpec, dated_series, series_for
from pitwall.sync.cursor import StreamCursor
from pitwall.sync.engine import (
    EngineState,
    SyncEngine,
    active_stint,
    best_lap_time_until,
    last_completed_lap_time,
)
from pitwall.sync.indexer import locate
from pitwall.sync.rolling_window import RollingWindow
from pitwall.sync.snapshot import EMPTY_SNAPSHOT, PlaybackSnapshot

__all__ = [
    "CHANNEL_SPECS",
    "Channel",
    "ChannelSpec",
    "EMPTY_SNAPSHOT",
    "EngineState",
    "PlaybackSnapshot",
    "RollingWindow",
    "StreamCursor",
    "SyncEngine",
    "active_stint",
    "best_lap_time_until",
    "dated_series",
    "last_completed_lap_time",
    "locate",
    "series_for",
]
