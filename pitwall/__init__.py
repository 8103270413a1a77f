"""Telemetry session replay: synchronized multi-channel playback."""

from pitwall.controller import LoadState, LoadStatus, ReplayController
from pitwall.sync import Channel, PlaybackSnapshot, SyncEngine

__all__ = [
    "Channel",
    "LoadState",
    "LoadStatus",
    "PlaybackSnapshot",
    "ReplayController",
    "SyncEngine",
]
