"""Telemetry records, decoding and session sources."""

from pitwall.data.file_source import FileSessionSource
from pitwall.data.models import SessionSeries, SessionWindow
from pitwall.data.openf1 import OpenF1Source
from pitwall.data.session import build_session_series, compute_session_window
from pitwall.data.source import SessionRequest, SessionSource

__all__ = [
    "FileSessionSource",
    "OpenF1Source",
    "SessionRequest",
    "SessionSeries",
    "SessionSource",
    "SessionWindow",
    "build_session_series",
    "compute_session_window",
]
