"""Replay runtime primitives: clock, scheduling, config, logging."""

from pitwall.runtime.clock import PlaybackClock
from pitwall.runtime.config import ReplayConfig, load_replay_config
from pitwall.runtime.errors import LoadFailure
from pitwall.runtime.loop import PlaybackLoop
from pitwall.runtime.scheduler import TickScheduler
from pitwall.runtime.snapshot_exchange import SnapshotExchange

__all__ = [
    "LoadFailure",
    "PlaybackClock",
    "PlaybackLoop",
    "ReplayConfig",
    "SnapshotExchange",
    "TickScheduler",
    "load_replay_config",
]
