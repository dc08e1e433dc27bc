from __future__ import annotations

import logging
import math

import pytest

from engine.core.animation import AnimationClock
from engine.runtime.primitive import CurvePrimitive, SurfacePrimitive
from sandbox.registration import FunctionKind, RegisteredFunction


def _fn(fn, kind: FunctionKind = FunctionKind.SURFACE, index: int = 0) -> RegisteredFunction:
    return RegisteredFunction(fn=fn, kind=kind, index=index, name=getattr(fn, "__name__", "f"))


def _plane(u, v, t):
    return (u, v, t)


def test_start_commits_at_t0_then_ticks_each_frame(driver) -> None:
    seen: list[float] = []
    prim = SurfacePrimitive(
        _fn(_plane), driver.scheduler, resolution=3, on_commit=lambda p: seen.append(p.t)
    )
    prim.start()
    assert seen == [0.0]
    assert prim.mesh is not None
    assert prim.mesh.vertices[0, 2] == 0.0

    driver.frames(3)
    assert seen == [0.0, 1.0, 2.0, 3.0]
    assert prim.generation == 4
    # 確定済みジオメトリは最新の t で生成されている
    assert prim.mesh.vertices[0, 2] == pytest.approx(3.0)


def test_start_is_idempotent(driver) -> None:
    prim = SurfacePrimitive(_fn(_plane), driver.scheduler, resolution=2)
    prim.start()
    prim.start()
    driver.frames(1)
    # 予約が二重にならない
    assert prim.t == 1.0


def test_tick_advances_clock_before_generating(driver) -> None:
    ts: list[float] = []

    def f(u, v, t):
        ts.append(t)
        return (u, v, t)

    prim = SurfacePrimitive(_fn(f), driver.scheduler, resolution=1)
    prim.start()
    driver.frames(1)
    assert ts == [0.0, 1.0]


def test_dispose_cancels_pending_tick(driver) -> None:
    prim = SurfacePrimitive(_fn(_plane), driver.scheduler, resolution=2)
    prim.start()
    driver.frames(2)
    prim.dispose()
    assert prim.disposed
    assert prim.geometry is None
    t_before = prim.t
    driver.frames(5)
    assert prim.t == t_before
    # 二重 dispose / 破棄後の refresh は何もしない
    prim.dispose()
    prim.refresh()
    assert prim.geometry is None


def test_late_tick_after_dispose_is_ignored(driver) -> None:
    prim = SurfacePrimitive(_fn(_plane), driver.scheduler, resolution=2)
    prim.start()
    prim.dispose()
    prim._on_tick(0.016)
    assert prim.t == 0.0


def test_primitives_have_independent_clocks(driver) -> None:
    a = SurfacePrimitive(_fn(_plane, index=0), driver.scheduler, resolution=2)
    a.start()
    driver.frames(3)
    b = SurfacePrimitive(_fn(_plane, index=1), driver.scheduler, resolution=2)
    b.start()
    driver.frames(2)
    assert a.t == 5.0
    assert b.t == 2.0


def test_set_resolution_refreshes_without_advancing(driver) -> None:
    prim = SurfacePrimitive(_fn(_plane), driver.scheduler, resolution=3)
    prim.start()
    gen = prim.generation
    prim.set_resolution(5)
    assert prim.resolution == 5
    assert prim.mesh is not None and prim.mesh.n_vertices == 25
    assert prim.generation == gen + 1
    assert prim.t == 0.0
    prim.set_resolution(5)
    assert prim.generation == gen + 1


def test_surface_primitive_requires_surface_kind(driver) -> None:
    with pytest.raises(ValueError):
        SurfacePrimitive(_fn(lambda x, t: x, FunctionKind.CURVE), driver.scheduler, resolution=3)
    with pytest.raises(ValueError):
        CurvePrimitive(_fn(_plane), driver.scheduler, visible_range=(0.0, 10.0))


def test_degraded_mesh_warns_once_then_debug(driver, caplog: pytest.LogCaptureFixture) -> None:
    def holey(u, v, t):
        if u == 0.5:
            return (math.nan, 0.0, 0.0)
        return (u, v, t)

    prim = SurfacePrimitive(_fn(holey), driver.scheduler, resolution=3)
    with caplog.at_level(logging.DEBUG, logger="engine.runtime.primitive"):
        prim.start()
        driver.frames(2)
    records = [r for r in caplog.records if r.name == "engine.runtime.primitive"]
    assert [r.levelno for r in records] == [logging.WARNING, logging.DEBUG, logging.DEBUG]
    assert "3/9 samples failed" in records[0].getMessage()
    # 補完済みのメッシュは描画を続ける
    assert prim.mesh is not None and prim.mesh.n_vertices == 9


def test_all_failing_surface_keeps_ticking(driver) -> None:
    prim = SurfacePrimitive(_fn(lambda u, v, t: 1 / 0), driver.scheduler, resolution=2)
    prim.start()
    assert prim.geometry is None
    driver.frames(2)
    assert prim.t == 2.0
    assert prim.geometry is None


def test_curve_primitive_uses_visible_range(driver) -> None:
    prim = CurvePrimitive(
        _fn(lambda x, t: x, FunctionKind.CURVE), driver.scheduler, visible_range=(0.0, 10.0)
    )
    assert prim.clock.interval == pytest.approx(0.016)
    prim.start()
    assert prim.polyline is not None and prim.polyline.n_points == 10
    prim.set_visible_range((5.0, 20.0))
    assert prim.polyline.n_points == 20
    assert prim.polyline.points[0, 0] == pytest.approx(5.0)


def test_curve_primitive_advances_by_tenth(driver) -> None:
    prim = CurvePrimitive(
        _fn(lambda x, t: t, FunctionKind.CURVE), driver.scheduler, visible_range=(0.0, 2.0)
    )
    prim.start()
    driver.frames(3)
    assert prim.t == pytest.approx(0.3)
    assert prim.polyline.points[0, 1] == pytest.approx(-0.3)


def test_curve_failure_skips_frame(driver) -> None:
    prim = CurvePrimitive(
        _fn(lambda x, t: 1 / x, FunctionKind.CURVE), driver.scheduler, visible_range=(-1.0, 3.0)
    )
    prim.start()
    assert prim.polyline is None
    prim.set_visible_range((1.0, 3.0))
    assert prim.polyline is not None


def test_parametric_primitive_ignores_visible_range(driver) -> None:
    prim = CurvePrimitive(
        _fn(lambda s, t: (s, t), FunctionKind.PARAMETRIC_CURVE),
        driver.scheduler,
        visible_range=(0.0, 10.0),
        samples=8,
    )
    assert prim.is_parametric
    assert prim.clock.interval == pytest.approx(0.1)
    prim.start()
    gen = prim.generation
    prim.set_visible_range((3.0, 4.0))
    assert prim.generation == gen
    assert prim.polyline.n_points == 8
    driver.frames(6)
    assert prim.t > 0.0


def test_custom_clock_is_respected(driver) -> None:
    prim = SurfacePrimitive(
        _fn(_plane), driver.scheduler, resolution=2, clock=AnimationClock(step=0.5, interval=0.039)
    )
    prim.start()
    driver.frames(4)
    # 約 0.04s 間隔 / 0.02s フレーム → 2 回
    assert prim.t == pytest.approx(1.0)


def test_sampler_error_skips_frame_and_keeps_ticking(driver, monkeypatch, caplog) -> None:
    import engine.runtime.primitive as primitive_mod

    def exploding(*args, **kwargs):
        raise MemoryError("too many samples")

    monkeypatch.setattr(primitive_mod, "sample_curve", exploding)
    prim = CurvePrimitive(
        _fn(lambda x, t: x, FunctionKind.CURVE), driver.scheduler, visible_range=(0.0, 10.0)
    )
    with caplog.at_level(logging.WARNING, logger="engine.runtime.primitive"):
        prim.start()
        prim.set_visible_range((0.0, 20.0))
    assert prim.polyline is None
    assert any("generation failed" in r.getMessage() for r in caplog.records)
    driver.frames(3)
    assert prim.t == pytest.approx(0.3)


def test_prime_commits_without_scheduling(driver) -> None:
    prim = SurfacePrimitive(_fn(_plane), driver.scheduler, resolution=2)
    mesh = prim.prime()
    assert mesh is not None and prim.generation == 1
    driver.frames(2)
    assert prim.t == 0.0
    prim.start()
    # start は確定済みのジオメトリを作り直さない
    assert prim.generation == 1
    driver.frames(1)
    assert prim.t == 1.0
