"""Binary search from an instant to the sample current at that instant."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence
from typing import Any


def locate(timestamps: Sequence[Any], target: Any) -> int:
    """Return the index of the last timestamp `<= target`.

    Clamps to `0` before the first timestamp and to `len - 1` at or after the
    last one. An empty sequence yields `-1`. `timestamps` must be sorted.
    """
    count = len(timestamps)
    if count == 0:
        return -1
    return max(bisect_right(timestamps, target) - 1, 0)
