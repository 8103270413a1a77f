from __future__ import annotations

import random

import pytest

from pitwall.sync.rolling_window import RollingWindow


def test_rolling_window_requires_positive_capacity() -> None:
    with pytest.raises(ValueError):
        RollingWindow[int](0)


def test_rolling_window_drops_oldest_entries() -> None:
    window = RollingWindow[int](3)
    for value in range(1, 6):
        window.append(value)

    assert len(window) == 3
    assert window.values() == (3, 4, 5)


def test_extend_keeps_only_the_newest_capacity_values() -> None:
    window = RollingWindow[int](4)
    window.append(-1)
    window.extend(list(range(10)))

    assert window.values() == (6, 7, 8, 9)


def test_rebuild_matches_sequential_appends() -> None:
    rng = random.Random(5)
    for _ in range(100):
        capacity = rng.randint(1, 12)
        series = [rng.random() for _ in range(rng.randint(1, 40))]
        index = rng.randrange(len(series))

        rebuilt = RollingWindow[float](capacity)
        rebuilt.append(123.0)
        rebuilt.rebuild_from(series, index)

        appended = RollingWindow[float](capacity)
        for value in series[: index + 1]:
            appended.append(value)

        assert rebuilt.values() == appended.values()


def test_rebuild_maps_values_and_handles_out_of_range_index() -> None:
    window = RollingWindow[str](2)

    window.rebuild_from([1, 2, 3], 99, value=str)
    assert window.values() == ("2", "3")

    window.rebuild_from([1, 2, 3], -1, value=str)
    assert window.values() == ()
