from __future__ import annotations

import pytest

from engine.core.viewport import ScreenRect, ViewBox, ViewportTransform
from engine.scene.composer import CompileStatus
from engine.scene.editor import TextEditorSource
from engine.scene.plot import PlotComposer, viewport_from_config

CURVES = """
def wave(x, t):
    return math.sin(x / 50 + t) * 100

@render(kind="parametric_curve")
def circle(s, t):
    return (math.cos(s * 2 * math.pi) * 100, math.sin(s * 2 * math.pi) * 100)

def surf(u, v, t):
    return (u, v, t)

render(wave)
render(surf)
"""


def _plot(driver, text: str = CURVES, **kwargs) -> PlotComposer:
    composer = PlotComposer(TextEditorSource(text), scheduler=driver.scheduler, **kwargs)
    composer.resize(ScreenRect(0.0, 0.0, 100.0, 100.0))
    return composer


def test_compile_builds_curve_primitives_only(driver) -> None:
    composer = _plot(driver, samples=50)
    report = composer.compile()
    assert report.status is CompileStatus.OK
    assert report.started == 2
    assert report.skipped == 1
    items = composer.polylines()
    # 登録順: circle(0), wave(1)
    assert [i.index for i in items] == [0, 1]
    assert items[0].polyline.n_points == 50
    # 既定の表示範囲は幅 1000 → 1000 点
    assert items[1].polyline.n_points == 1000
    assert items[1].polyline.points[0, 0] == pytest.approx(-500.0)
    assert items[0].color == composer.color_for(0)


def test_pan_updates_visible_range_of_curves(driver) -> None:
    composer = _plot(driver, "render(lambda x, t: 0.0)\n")
    composer.compile()
    prim = composer.primitives[0]
    composer.drag_start(50.0, 50.0)
    assert composer.drag_move(40.0, 50.0)
    composer.drag_end()
    assert composer.view_box.x == pytest.approx(-400.0)
    assert prim.visible_range == (pytest.approx(-400.0), pytest.approx(1000.0))
    assert composer.polylines()[0].polyline.points[0, 0] == pytest.approx(-400.0)


def test_wheel_zoom_narrows_range_and_resamples(driver) -> None:
    composer = _plot(driver, "render(lambda x, t: 0.0)\n")
    composer.compile()
    gen = composer.primitives[0].generation
    assert composer.wheel(50.0, 50.0, -1.0)
    assert composer.view_box.width == pytest.approx(990.0)
    assert composer.primitives[0].generation == gen + 1
    assert composer.polylines()[0].polyline.n_points == int(composer.view_box.width)
    assert not composer.wheel(50.0, 50.0, 0.0)


def test_failed_curve_frame_is_skipped(driver) -> None:
    composer = _plot(driver, "render(lambda x, t: 1 / x)\n")
    composer.compile()
    # 表示範囲が x=0 を含む間は描かない
    assert composer.polylines() == []
    composer.drag_start(0.0, 0.0)
    composer.drag_move(-60.0, 0.0)
    assert composer.view_box.x > 0.0
    assert len(composer.polylines()) == 1


def test_curves_keep_animating(driver) -> None:
    composer = _plot(driver, "render(lambda x, t: t)\n")
    composer.compile()
    driver.frames(5)
    prim = composer.primitives[0]
    assert prim.t == pytest.approx(0.5)
    assert composer.polylines()[0].polyline.points[0, 1] == pytest.approx(-0.5)


def test_viewport_from_config() -> None:
    vt = viewport_from_config(
        {"viewport": {"initial": [0, 0, 200, 100], "zoom_step": 0.1, "min_extent": 0.5}}
    )
    assert vt.view_box == ViewBox(0.0, 0.0, 200.0, 100.0)
    # 不正な initial は既定へ
    fallback = viewport_from_config({"viewport": {"initial": [0, 0, -1, 1]}})
    assert fallback.view_box == ViewBox(-500.0, -500.0, 1000.0, 1000.0)


def test_from_config_uses_parametric_samples(driver) -> None:
    cfg = {"clock": {"parametric_samples": 12}}
    composer = PlotComposer.from_config(
        TextEditorSource("@render(kind='parametric_curve')\ndef c(s, t):\n    return (s, s)\n"),
        cfg,
        scheduler=driver.scheduler,
    )
    composer.compile()
    assert composer.polylines()[0].polyline.n_points == 12


def test_dispose_releases_curves(driver) -> None:
    composer = _plot(driver)
    composer.compile()
    prims = composer.primitives
    composer.dispose()
    assert all(p.disposed for p in prims)
    assert composer.polylines() == []


def test_huge_view_compiles_with_bounded_samples(driver) -> None:
    viewport = ViewportTransform(ViewBox(-5e11, -5e11, 1e12, 1e12))
    composer = PlotComposer(
        TextEditorSource("render(lambda x, t: 0.0)\n"),
        scheduler=driver.scheduler,
        viewport=viewport,
        max_samples=64,
    )
    report = composer.compile()
    assert report.ok
    line = composer.polylines()[0].polyline
    assert line.n_points == 64
    assert line.points[0, 0] == pytest.approx(-5e11)
    driver.frames(2)
    assert composer.primitives[0].t == pytest.approx(0.2)


def test_zooming_far_out_keeps_sample_count_bounded(driver) -> None:
    composer = _plot(
        driver,
        "render(lambda x, t: 0.0)\n",
        viewport=ViewportTransform(zoom_step=0.5),
        max_samples=256,
    )
    composer.compile()
    for _ in range(40):
        composer.wheel(50.0, 50.0, 1.0)
    assert composer.view_box.width > 1e9
    assert composer.polylines()[0].polyline.n_points == 256


def test_from_config_reads_curve_sample_cap(driver) -> None:
    cfg = {"viewport": {"initial": [0, 0, 10000, 10000]}, "clock": {"curve_max_samples": 100}}
    composer = PlotComposer.from_config(
        TextEditorSource("render(lambda x, t: x)\n"), cfg, scheduler=driver.scheduler
    )
    composer.compile()
    assert composer.polylines()[0].polyline.n_points == 100
