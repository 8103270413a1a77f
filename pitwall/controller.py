"""Replay controller exposed to UI callers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from time import monotonic

from pitwall.data.models import DriverInfo, SessionInfo, SessionSeries, TrackOutline
from pitwall.data.session import build_session_series
from pitwall.data.source import SessionRequest, SessionSource
from pitwall.runtime.clock import is_valid_rate
from pitwall.runtime.config import ReplayConfig, load_replay_config
from pitwall.runtime.errors import RECOVERABLE_LOAD_ERRORS, log_recoverable
from pitwall.runtime.snapshot_exchange import SnapshotExchange
from pitwall.sync.engine import SyncEngine
from pitwall.sync.snapshot import EMPTY_SNAPSHOT, PlaybackSnapshot

_LOG = logging.getLogger("pitwall.controller")

FETCH_FAILED_MESSAGE = "OpenF1 request failed. Check your network and try again."


class LoadStatus(StrEnum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class LoadState:
    status: LoadStatus
    message: str | None = None

    @classmethod
    def loading(cls) -> LoadState:
        return cls(LoadStatus.LOADING)

    @classmethod
    def ready(cls) -> LoadState:
        return cls(LoadStatus.READY)

    @classmethod
    def failed(cls, message: str) -> LoadState:
        return cls(LoadStatus.FAILED, message)

    @property
    def is_ready(self) -> bool:
        return self.status is LoadStatus.READY


class ReplayController:
    """Own one session load and its engine; recreate both on driver switch.

    Calls are expected from a single writer (the tick loop and the UI event
    handler serialized on one thread). Snapshots are published to `exchange`
    and may be read from anywhere.
    """

    def __init__(
        self,
        source: SessionSource,
        *,
        config: ReplayConfig | None = None,
        time_source: Callable[[], float] | None = None,
        exchange: SnapshotExchange[PlaybackSnapshot] | None = None,
    ) -> None:
        self._source = source
        self._config = config or load_replay_config()
        self._time_source = time_source or monotonic
        self._exchange = exchange or SnapshotExchange[PlaybackSnapshot]()
        preset = self._config.preset
        self._session_key = preset.session_key
        self._telemetry_session_key = preset.telemetry_session_key
        self._driver_number = preset.driver_number
        self._rate = self._config.playback_rate
        self._playing = self._config.autoplay
        self._state = LoadState.loading()
        self._series = SessionSeries()
        self._engine: SyncEngine | None = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def exchange(self) -> SnapshotExchange[PlaybackSnapshot]:
        return self._exchange

    @property
    def snapshot(self) -> PlaybackSnapshot:
        return EMPTY_SNAPSHOT if self._engine is None else self._engine.snapshot

    @property
    def engine(self) -> SyncEngine | None:
        return self._engine

    @property
    def session(self) -> SessionInfo | None:
        return self._series.session

    @property
    def drivers(self) -> tuple[DriverInfo, ...]:
        return self._series.drivers

    @property
    def driver(self) -> DriverInfo | None:
        return self._series.driver

    @property
    def selected_driver_number(self) -> int:
        return self._driver_number

    @property
    def track(self) -> TrackOutline:
        return self._series.track

    @property
    def session_best_lap_time(self) -> float | None:
        return self._series.best_lap_time

    @property
    def rate(self) -> float:
        return self._rate if self._engine is None else self._engine.rate

    @property
    def is_playing(self) -> bool:
        return self._playing if self._engine is None else self._engine.is_playing

    def request(self) -> SessionRequest:
        return SessionRequest(
            session_key=self._session_key,
            telemetry_session_key=self._telemetry_session_key,
            driver_number=self._driver_number,
        )

    def load(self, resume_offset: float | None = None) -> LoadState:
        """Fetch and load the session, replacing any previous engine."""
        if self._engine is not None:
            self._rate = self._engine.rate
            self._playing = self._engine.is_playing
        self._engine = None
        self._state = LoadState.loading()
        self._exchange.publish(None)
        request = self.request()
        _LOG.info(
            "session_load_started session=%d telemetry_session=%d driver=%d",
            request.session_key,
            request.telemetry_session_key,
            request.driver_number,
        )
        try:
            raw = self._source.fetch(request)
            series = build_session_series(
                raw, request, outline_points=self._config.track_outline_points
            )
        except RECOVERABLE_LOAD_ERRORS:
            log_recoverable(
                _LOG,
                "session_load_failed",
                level=logging.ERROR,
                session_key=request.session_key,
                driver_number=request.driver_number,
            )
            self._state = LoadState.failed(FETCH_FAILED_MESSAGE)
            return self._state

        self._series = series
        self._driver_number = series.driver_number
        engine = SyncEngine(
            rate=self._rate,
            playing=self._playing,
            speed_history_length=self._config.speed_history_length,
            trail_length=self._config.trail_length,
        )
        if not engine.on_load(series, resume_offset=resume_offset):
            self._state = LoadState.failed(engine.failure or "Session could not be loaded.")
            return self._state

        self._engine = engine
        self._state = LoadState.ready()
        self._exchange.publish(engine.snapshot)
        return self._state

    def tick(self, now: float | None = None) -> PlaybackSnapshot:
        engine = self._engine
        if engine is None:
            return EMPTY_SNAPSHOT
        snapshot = engine.tick(self._time_source() if now is None else now)
        self._exchange.publish(snapshot)
        return snapshot

    def toggle_play(self) -> bool:
        if self._engine is None:
            self._playing = not self._playing
            return self._playing
        playing = self._engine.toggle_play()
        self._exchange.publish(self._engine.snapshot)
        return playing

    def set_rate(self, rate: float) -> bool:
        if self._engine is None:
            if not is_valid_rate(rate):
                _LOG.warning("playback_rate_rejected rate=%r current=%r", rate, self._rate)
                return False
            self._rate = float(rate)
            return True
        accepted = self._engine.set_rate(rate)
        if accepted:
            self._exchange.publish(self._engine.snapshot)
        return accepted

    def restart(self) -> None:
        if self._engine is None or not self._state.is_ready:
            return
        self._exchange.publish(self._engine.restart())

    def seek(self, progress: float) -> None:
        if self._engine is None or not self._state.is_ready:
            return
        if self._engine.duration <= 0.0:
            return
        self._exchange.publish(self._engine.seek(progress))

    def select_driver(self, driver_number: int) -> LoadState:
        """Switch the replayed driver, resuming at the current offset."""
        if driver_number == self._driver_number:
            return self._state
        resume_offset = 0.0 if self._engine is None else self._engine.offset
        self._driver_number = int(driver_number)
        _LOG.info("driver_selected driver=%d resume_s=%.3f", driver_number, resume_offset)
        return self.load(resume_offset=resume_offset)
