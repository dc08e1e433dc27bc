from __future__ import annotations

import math

import pytest

from engine.core.animation import (
    CURVE_INTERVAL,
    PARAMETRIC_INTERVAL,
    AnimationClock,
)


def test_surface_preset_is_frame_locked() -> None:
    c = AnimationClock.surface()
    assert c.frame_locked
    assert c.interval is None
    assert c.t == 0.0
    assert c.advance() == 1.0
    assert c.advance() == 2.0
    assert c.ticks == 2


def test_curve_presets_have_independent_intervals() -> None:
    curve = AnimationClock.curve()
    para = AnimationClock.parametric_curve()
    assert curve.interval == pytest.approx(CURVE_INTERVAL)
    assert para.interval == pytest.approx(PARAMETRIC_INTERVAL)
    assert curve.step == pytest.approx(0.1)
    assert para.step == pytest.approx(0.1)
    assert not curve.frame_locked


def test_t_is_monotonic_non_decreasing() -> None:
    c = AnimationClock.curve()
    prev = c.t
    for _ in range(50):
        now = c.advance()
        assert now >= prev
        prev = now
    assert c.t == pytest.approx(5.0)


def test_zero_step_is_allowed() -> None:
    c = AnimationClock(step=0.0)
    c.advance()
    assert c.t == 0.0
    assert c.ticks == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"step": -1.0},
        {"step": math.inf},
        {"step": 1.0, "t": -0.5},
        {"step": 1.0, "interval": 0.0},
        {"step": 1.0, "interval": math.nan},
    ],
)
def test_invalid_arguments_raise(kwargs) -> None:
    with pytest.raises(ValueError):
        AnimationClock(**kwargs)


def test_clocks_do_not_share_state() -> None:
    a = AnimationClock.surface()
    b = AnimationClock.surface()
    a.advance()
    a.advance()
    assert a.t == 2.0
    assert b.t == 0.0


def test_repr_mentions_mode() -> None:
    assert "every=frame" in repr(AnimationClock.surface())
    assert "every=0.1s" in repr(AnimationClock.parametric_curve())
