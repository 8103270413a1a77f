from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pitwall.controller import ReplayController
from pitwall.data.file_source import FileSessionSource
from pitwall.data.openf1 import OpenF1Source
from pitwall.data.source import SessionSource
from pitwall.runtime.config import ReplayConfig
from pitwall.runtime.loop import PlaybackLoop
from pitwall.sync.snapshot import PlaybackSnapshot

_LOG = logging.getLogger("pitwall.console")


def build_source(config: ReplayConfig, data_dir: Path | None = None) -> SessionSource:
    if data_dir is not None:
        return FileSessionSource(data_dir)
    return OpenF1Source(config.openf1_url, timeout_seconds=config.http_timeout_seconds)


def _fmt(value: float | None, spec: str = ".3f") -> str:
    return "-" if value is None else format(value, spec)


def format_status(snapshot: PlaybackSnapshot) -> str:
    car = snapshot.car
    lap = snapshot.lap
    position = snapshot.position
    stint = snapshot.current_stint
    parts = [
        f"t={snapshot.elapsed_seconds:.1f}/{snapshot.duration_seconds:.1f}s",
        f"progress={snapshot.progress:.3f}",
        f"rate={snapshot.rate:g}",
        f"playing={snapshot.is_playing}",
        f"lap={'-' if lap is None else lap.lap_number}",
        f"pos={'-' if position is None else position.position}",
        f"speed={'-' if car is None else format(car.speed, '.0f')}",
        f"gear={'-' if car is None else car.gear}",
        f"last_lap={_fmt(snapshot.last_completed_lap_time)}",
        f"best_lap={_fmt(snapshot.best_lap_time)}",
        f"tyre={'-' if stint is None else stint.compound}",
        f"loops={snapshot.loop_count}",
    ]
    return " ".join(parts)


def run_replay(
    controller: ReplayController,
    *,
    interval_seconds: float,
    seconds: float | None = None,
    status_every: int = 20,
    time_source: Callable[[], float] | None = None,
    wait: Callable[[float], object] | None = None,
) -> int:
    """Load the session and replay it headless; returns a process exit code."""
    state = controller.load()
    if not state.is_ready:
        _LOG.error("replay_load_failed message=%s", state.message)
        return 1

    driver = controller.driver
    _LOG.info(
        "replay_ready driver=%s duration_s=%.1f",
        controller.selected_driver_number if driver is None else driver.name_acronym,
        controller.snapshot.duration_seconds,
    )
    ticks = 0

    def on_tick(now: float) -> None:
        nonlocal ticks
        snapshot = controller.tick(now)
        ticks += 1
        if status_every > 0 and ticks % status_every == 0:
            _LOG.info("replay_status %s", format_status(snapshot))

    loop = PlaybackLoop(
        on_tick,
        interval_seconds=interval_seconds,
        time_source=time_source,
        wait=wait,
    )
    try:
        loop.run(max_seconds=seconds)
    except KeyboardInterrupt:
        loop.stop()
    _LOG.info("replay_finished %s", format_status(controller.snapshot))
    return 0
