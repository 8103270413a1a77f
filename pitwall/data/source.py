"""Session data source contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

RawRecord = dict[str, Any]
RawSession = dict[str, list[RawRecord]]

# Endpoints read with the telemetry session key; everything else uses the primary key.
TELEMETRY_ENDPOINTS: tuple[str, ...] = ("car_data", "location")
DRIVER_ENDPOINTS: tuple[str, ...] = (
    "car_data",
    "location",
    "position",
    "laps",
    "stints",
    "pit",
    "team_radio",
    "intervals",
)
SESSION_ENDPOINTS: tuple[str, ...] = ("sessions", "drivers", "weather", "race_control")
ALL_ENDPOINTS: tuple[str, ...] = SESSION_ENDPOINTS + DRIVER_ENDPOINTS


@dataclass(frozen=True, slots=True)
class SessionRequest:
    """Which session pair and driver to load."""

    session_key: int
    telemetry_session_key: int
    driver_number: int

    @property
    def uses_telemetry_fallback(self) -> bool:
        return self.session_key != self.telemetry_session_key

    def session_key_for(self, endpoint: str) -> int:
        if endpoint in TELEMETRY_ENDPOINTS:
            return self.telemetry_session_key
        return self.session_key


class SessionSource(Protocol):
    def fetch(self, request: SessionRequest) -> RawSession:
        """Return raw JSON records keyed by endpoint name."""
        ...
