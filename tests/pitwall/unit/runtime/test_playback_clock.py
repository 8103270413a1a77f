from __future__ import annotations

import math

import pytest

from pitwall.runtime.clock import PlaybackClock, is_valid_rate


def test_first_tick_sets_baseline_without_advancing() -> None:
    clock = PlaybackClock(60.0)

    assert clock.tick(100.0) == 0.0
    assert clock.last_real_tick == 100.0
    assert clock.tick(101.5) == pytest.approx(1.5)


def test_sixty_second_session_at_double_rate_wraps_after_end() -> None:
    clock = PlaybackClock(60.0, rate=2.0)
    clock.tick(0.0)
    for step in range(1, 31):
        offset = clock.tick(float(step))
    assert offset == 60.0
    assert clock.progress == 1.0

    assert clock.tick(31.0) == 0.0
    assert clock.loop_count == 1
    assert clock.last_real_tick is None
    assert clock.tick(32.0) == 0.0
    assert clock.tick(33.0) == 2.0


def test_paused_clock_does_not_advance_and_stays_clamped() -> None:
    clock = PlaybackClock(60.0, playing=False)
    assert clock.seek_to(100.0) == 60.0

    clock.tick(0.0)
    assert clock.tick(50.0) == 60.0
    assert clock.loop_count == 0


def test_clock_paused_at_end_holds_then_wraps_after_resume() -> None:
    clock = PlaybackClock(10.0)
    clock.tick(0.0)
    clock.tick(10.0)
    clock.pause()

    for now in (11.0, 50.0, 500.0):
        assert clock.tick(now) == 10.0
    assert clock.loop_count == 0

    clock.resume()
    assert clock.tick(501.0) == 10.0
    assert clock.tick(502.0) == 0.0
    assert clock.loop_count == 1


def test_resume_drops_stale_real_time_reference() -> None:
    clock = PlaybackClock(60.0)
    clock.tick(0.0)
    clock.tick(1.0)
    clock.pause()
    assert clock.tick(5.0) == 1.0

    clock.resume()
    assert clock.last_real_tick is None
    assert clock.tick(10.0) == 1.0
    assert clock.tick(11.0) == 2.0


def test_backwards_real_time_never_rewinds() -> None:
    clock = PlaybackClock(60.0)
    clock.tick(10.0)
    clock.tick(12.0)

    assert clock.tick(5.0) == 2.0


def test_seek_clamps_and_clears_reference() -> None:
    clock = PlaybackClock(60.0)
    clock.tick(0.0)

    assert clock.seek_to(-4.0) == 0.0
    assert clock.seek_to(math.nan) == 0.0
    assert clock.seek_to(42.0) == 42.0
    assert clock.last_real_tick is None


def test_rate_validation() -> None:
    with pytest.raises(ValueError):
        PlaybackClock(60.0, rate=0.0)

    clock = PlaybackClock(60.0, rate=1.5)
    for rate in (0.0, -2.0, math.nan, math.inf):
        assert clock.set_rate(rate) is False
    assert clock.rate == 1.5
    assert clock.set_rate(3.0) is True
    assert clock.rate == 3.0
    assert is_valid_rate("2") is True
    assert is_valid_rate("fast") is False


def test_zero_duration_progress_is_zero() -> None:
    clock = PlaybackClock(0.0)
    assert clock.progress == 0.0
    assert clock.toggle_play() is False
    assert clock.toggle_play() is True
