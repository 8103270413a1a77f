from __future__ import annotations

import random

from pitwall.sync.indexer import locate


def _linear_locate(timestamps: list[int], target: int) -> int:
    if not timestamps:
        return -1
    found = 0
    for index, value in enumerate(timestamps):
        if value <= target:
            found = index
    return found


def test_locate_matches_linear_scan_on_random_series() -> None:
    rng = random.Random(1234)
    for _ in range(200):
        timestamps = sorted(rng.randint(0, 40) for _ in range(rng.randint(0, 25)))
        for target in range(-3, 45):
            assert locate(timestamps, target) == _linear_locate(timestamps, target)


def test_locate_clamps_and_handles_empty() -> None:
    assert locate([], 5) == -1
    assert locate([10, 20, 30], 0) == 0
    assert locate([10, 20, 30], 30) == 2
    assert locate([10, 20, 30], 99) == 2
    assert locate([10, 20, 30], 25) == 1


def test_locate_picks_last_of_equal_timestamps() -> None:
    assert locate([1, 2, 2, 2, 3], 2) == 3
