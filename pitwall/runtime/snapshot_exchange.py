"""Latest-snapshot exchange between the tick writer and any number of readers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Lock
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class SnapshotExchange(Generic[T]):
    """Atomic single-slot exchange.

    The writer publishes whole snapshots; readers either peek at the latest
    one (shared reads) or consume it once (change-driven readers).
    """

    _clone_fn: Callable[[T], T] | None = None
    _lock: Lock = field(default_factory=Lock)
    _latest: T | None = None
    _version: int = 0
    _consumed_version: int = 0

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def publish(self, snapshot: T | None) -> None:
        """Publish latest snapshot. None clears the slot."""
        with self._lock:
            if snapshot is None:
                self._latest = None
                self._consumed_version = self._version
                return
            payload = self._clone_fn(snapshot) if self._clone_fn is not None else snapshot
            self._latest = payload
            self._version += 1

    def latest(self) -> T | None:
        """Return the latest snapshot without marking it consumed."""
        with self._lock:
            return self._latest

    def consume_latest(self) -> T | None:
        """Return the latest snapshot once per publish, else None."""
        with self._lock:
            if self._latest is None or self._consumed_version == self._version:
                return None
            self._consumed_version = self._version
            return self._latest
