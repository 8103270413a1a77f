"""Centralized replay configuration sourced from environment."""

from __future__ import annotations

import math
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_OPENF1_URL = "https://api.openf1.org/v1"


@dataclass(frozen=True, slots=True)
class ReplayPreset:
    """Session pair and driver replayed by default."""

    session_key: int
    telemetry_session_key: int
    driver_number: int
    label: str
    subtitle: str


SINGAPORE_2023_RACE = ReplayPreset(
    session_key=9165,
    telemetry_session_key=9158,
    driver_number=1,
    label="Singapore 2023",
    subtitle="Race - Replay",
)


@dataclass(frozen=True, slots=True)
class ReplayConfig:
    tick_interval_seconds: float
    playback_rate: float
    autoplay: bool
    speed_history_length: int
    trail_length: int
    track_outline_points: int
    openf1_url: str
    http_timeout_seconds: float
    preset: ReplayPreset
    log_level: str
    log_format: str
    log_file: str | None


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _parsed(
    name: str,
    default: Any,
    parse: Callable[[str], Any],
    *,
    env: Mapping[str, str] | None,
) -> Any:
    raw = _raw(name, env=env)
    if raw is None:
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        return default


def _int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    value: int = _parsed(name, int(default), int, env=env)
    return value if minimum is None else max(int(minimum), value)


def _float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    env: Mapping[str, str] | None = None,
) -> float:
    value: float = _parsed(name, float(default), float, env=env)
    if not math.isfinite(value):
        value = float(default)
    return value if minimum is None else max(float(minimum), value)


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def resolve_log_level_name(
    default: str = "INFO", *, env: Mapping[str, str] | None = None
) -> str:
    """Resolve log level with replay-prefixed override."""
    value = _raw("PITWALL_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env) or default
    return value.strip().upper() or default


def load_replay_config(env: Mapping[str, str] | None = None) -> ReplayConfig:
    """Load immutable replay configuration from env vars."""
    tick_ms = _float("PITWALL_TICK_INTERVAL_MS", 50.0, minimum=1.0, env=env)
    rate = _float("PITWALL_PLAYBACK_RATE", 1.35, env=env)
    if rate <= 0.0:
        rate = 1.35
    log_file = _text("PITWALL_LOG_FILE", "", env=env)
    return ReplayConfig(
        tick_interval_seconds=tick_ms / 1000.0,
        playback_rate=rate,
        autoplay=_flag("PITWALL_AUTOPLAY", True, env=env),
        speed_history_length=_int("PITWALL_SPEED_HISTORY", 140, minimum=1, env=env),
        trail_length=_int("PITWALL_TRAIL_LENGTH", 200, minimum=1, env=env),
        track_outline_points=_int("PITWALL_TRACK_OUTLINE_POINTS", 1400, minimum=1, env=env),
        openf1_url=_text("PITWALL_OPENF1_URL", DEFAULT_OPENF1_URL, env=env).rstrip("/"),
        http_timeout_seconds=_float("PITWALL_HTTP_TIMEOUT_S", 30.0, minimum=0.1, env=env),
        preset=ReplayPreset(
            session_key=_int(
                "PITWALL_SESSION_KEY", SINGAPORE_2023_RACE.session_key, env=env
            ),
            telemetry_session_key=_int(
                "PITWALL_TELEMETRY_SESSION_KEY",
                SINGAPORE_2023_RACE.telemetry_session_key,
                env=env,
            ),
            driver_number=_int(
                "PITWALL_DRIVER_NUMBER", SINGAPORE_2023_RACE.driver_number, env=env
            ),
            label=_text("PITWALL_PRESET_LABEL", SINGAPORE_2023_RACE.label, env=env),
            subtitle=_text("PITWALL_PRESET_SUBTITLE", SINGAPORE_2023_RACE.subtitle, env=env),
        ),
        log_level=resolve_log_level_name(env=env),
        log_format=_text("PITWALL_LOG_FORMAT", "text", env=env).lower(),
        log_file=log_file or None,
    )
