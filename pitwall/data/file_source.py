"""Offline session source reading one JSON dump per endpoint."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pitwall.data.source import (
    ALL_ENDPOINTS,
    DRIVER_ENDPOINTS,
    RawRecord,
    RawSession,
    SessionRequest,
)
from pitwall.runtime.errors import LoadFailure

_LOG = logging.getLogger("pitwall.data")


class FileSessionSource:
    """Read `<root>/<endpoint>.json`; a missing file is an empty endpoint.

    Per-driver endpoints keep only records of the requested driver, or
    records that carry no driver number at all.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def fetch(self, request: SessionRequest) -> RawSession:
        if not self._root.is_dir():
            raise LoadFailure(f"Session directory '{self._root}' not found.")
        raw: RawSession = {}
        for endpoint in ALL_ENDPOINTS:
            records = self._load_endpoint(endpoint)
            if endpoint in DRIVER_ENDPOINTS:
                records = [
                    item
                    for item in records
                    if not isinstance(item, dict)
                    or item.get("driver_number") in (None, request.driver_number)
                ]
            raw[endpoint] = records
        _LOG.info(
            "file_session_loaded root=%s driver=%d records=%d",
            self._root,
            request.driver_number,
            sum(len(items) for items in raw.values()),
        )
        return raw

    def _load_endpoint(self, endpoint: str) -> list[RawRecord]:
        path = self._root / f"{endpoint}.json"
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise LoadFailure(f"{path.name} is not valid JSON.") from exc
        if not isinstance(payload, list):
            raise LoadFailure(f"{path.name} must hold a JSON array.")
        return payload
