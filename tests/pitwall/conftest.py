from __future__ import annotations

from datetime import UTC, datetime

import pytest

BASE_TIME = datetime(2023, 9, 17, 12, 0, tzinfo=UTC)


class FakeTime:
    """Manual monotonic clock whose `wait` advances time instead of sleeping."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.waits: list[float] = []

    def __call__(self) -> float:
        return self.now

    def wait(self, seconds: float) -> None:
        self.waits.append(seconds)
        self.now += seconds


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()
