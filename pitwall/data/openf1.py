"""One-shot OpenF1 HTTP source."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode
from urllib.request import urlopen

from pitwall.data.source import (
    DRIVER_ENDPOINTS,
    SESSION_ENDPOINTS,
    RawRecord,
    RawSession,
    SessionRequest,
)
from pitwall.runtime.config import DEFAULT_OPENF1_URL
from pitwall.runtime.errors import LoadFailure

_LOG = logging.getLogger("pitwall.openf1")

Opener = Callable[[str, float], bytes]


def _urlopen_bytes(url: str, timeout: float) -> bytes:
    with urlopen(url, timeout=timeout) as resp:  # noqa: S310
        return resp.read()


class OpenF1Source:
    """Fetch every endpoint of one session once; no retry."""

    def __init__(
        self,
        base_url: str = DEFAULT_OPENF1_URL,
        *,
        timeout_seconds: float = 30.0,
        opener: Opener | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._opener = opener or _urlopen_bytes

    def url_for(self, endpoint: str, params: dict[str, int]) -> str:
        return f"{self._base_url}/{endpoint}?{urlencode(params)}"

    def fetch_array(self, endpoint: str, params: dict[str, int]) -> list[RawRecord]:
        url = self.url_for(endpoint, params)
        raw = self._opener(url, self._timeout_seconds)
        try:
            payload: Any = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LoadFailure(f"{endpoint}: response is not valid JSON.") from exc
        if not isinstance(payload, list):
            raise LoadFailure(f"{endpoint}: expected a JSON array.")
        return payload

    def fetch(self, request: SessionRequest) -> RawSession:
        raw: RawSession = {}
        for endpoint in SESSION_ENDPOINTS:
            raw[endpoint] = self.fetch_array(
                endpoint, {"session_key": request.session_key_for(endpoint)}
            )
        for endpoint in DRIVER_ENDPOINTS:
            raw[endpoint] = self.fetch_array(
                endpoint,
                {
                    "session_key": request.session_key_for(endpoint),
                    "driver_number": request.driver_number,
                },
            )
        _LOG.info(
            "openf1_fetched session=%d telemetry_session=%d driver=%d records=%d",
            request.session_key,
            request.telemetry_session_key,
            request.driver_number,
            sum(len(items) for items in raw.values()),
        )
        return raw
