"""Replay logging setup.

Console output is plain text or JSON lines. When a log file is configured,
both sinks sit behind a `QueueListener` so the tick thread only enqueues.
"""

from __future__ import annotations

import json
import logging
import queue
from dataclasses import dataclass
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from pitwall.runtime.config import ReplayConfig, load_replay_config

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_listener: QueueListener | None = None


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json

    @classmethod
    def from_replay_config(cls, config: ReplayConfig) -> LoggingConfig:
        return cls(
            level_name=config.log_level,
            console_format=config.log_format,
            file_path=config.log_file,
        )


class JsonFormatter(logging.Formatter):
    """One JSON object per record; `extra=` values land under `fields`."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = {
            key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        }
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter(_TEXT_FORMAT)


def _sinks(config: LoggingConfig) -> list[logging.Handler]:
    console = logging.StreamHandler()
    console.setFormatter(_formatter(config.console_format))
    sinks: list[logging.Handler] = [console]
    if config.file_path:
        path = Path(config.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_sink = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
        file_sink.setFormatter(_formatter(config.file_format))
        sinks.append(file_sink)
    return sinks


def configure_logging(config: LoggingConfig) -> None:
    """Replace root handlers according to `config`."""
    global _listener

    shutdown_logging()
    sinks = _sinks(config)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, config.level_name.upper(), logging.INFO))
    if len(sinks) == 1:
        root.addHandler(sinks[0])
        return

    records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    root.addHandler(QueueHandler(records))
    _listener = QueueListener(records, *sinks, respect_handler_level=True)
    _listener.start()


def setup_logging() -> None:
    """Configure from environment unless the root logger already has handlers."""
    if logging.getLogger().handlers:
        return
    configure_logging(LoggingConfig.from_replay_config(load_replay_config()))


def shutdown_logging() -> None:
    """Drain and stop the queued sinks, if any."""
    global _listener

    if _listener is not None:
        _listener.stop()
        _listener = None
