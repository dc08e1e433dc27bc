"""
どこで: `api.plotter`（2D 実行ランナー、旧曲線経路）。
何を: `y = f(x, t)` / 媒介変数曲線を表示範囲でサンプリングし、方眼付きのパン/ズーム可能なウィンドウへ描く。
なぜ: ViewBox を明示的に曲線プリミティブへ渡す経路を、3D ビューアと同じ構成（設定→コンポーザ→描画）で動かすため。

操作:
- 左ドラッグ: パン
- ホイール: カーソル位置を固定してズーム
- Enter / F5: コンパイル、Esc: 終了
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from engine.core.viewport import ScreenRect
from engine.runtime.scheduler import TickScheduler
from engine.scene.plot import PlotComposer
from util.utils import load_config

from .examples import CURVE_EXAMPLE_SOURCE
from .runner.utils import (
    StatusTicker,
    configure_logging,
    resolve_background,
    resolve_fps,
    resolve_window_size,
    select_editor,
)

logger = logging.getLogger(__name__)


def _status_text(composer: PlotComposer) -> str:
    view = composer.view_box
    parts = [f"view {view.to_svg_view_box()}"]
    report = composer.last_report
    if report is not None:
        parts.append(report.summary())
    return " | ".join(parts)


def run_plotter(
    source: str | None = None,
    *,
    path: str | Path | None = None,
    window_size: tuple[int, int] | None = None,
    background: Any = None,
    fps: float | None = None,
    init_only: bool = False,
) -> PlotComposer | None:
    """2D 曲線プロッタを実行する（引数の意味は `run_viewer` と同じ）。

    `init_only=True` のときはウィンドウを作らずに `PlotComposer` を返す。
    """
    cfg = load_config()
    configure_logging(cfg)
    fps = resolve_fps(fps, cfg)

    editor = select_editor(source, path, CURVE_EXAMPLE_SOURCE)
    scheduler = TickScheduler(fps=fps)
    composer = PlotComposer.from_config(editor, cfg, scheduler=scheduler)

    width, height = resolve_window_size(window_size, cfg)
    composer.resize(ScreenRect(0.0, 0.0, float(width), float(height)))

    if init_only:
        return composer

    bg_rgba = resolve_background(background, cfg)

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import pyglet
    from pyglet.window import key, mouse

    from engine.core.frame_clock import FrameClock
    from engine.render.polyline_renderer import PolylineRenderer

    from .runner.render import create_window_and_context

    rendering_window, mgl_ctx = create_window_and_context(
        width, height, background=bg_rgba, caption="SurfacePad Plotter", depth=False
    )
    renderer = PolylineRenderer(mgl_ctx, composer.polylines, lambda: composer.view_box)
    rendering_window.add_draw_callback(renderer.draw)

    status = StatusTicker(lambda: _status_text(composer), rendering_window.set_status)
    frame_clock = FrameClock([renderer, status])
    scheduler.schedule_interval(frame_clock.tick)
    composer.schedule_autocompile()

    # pyglet は左下原点、ScreenRect は左上原点
    def _flip(y: float) -> float:
        return float(rendering_window.height) - y

    @rendering_window.event
    def on_resize(w, h):  # noqa: ANN001
        if w > 0 and h > 0:
            composer.resize(ScreenRect(0.0, 0.0, float(w), float(h)))

    @rendering_window.event
    def on_mouse_press(x, y, button, modifiers):  # noqa: ANN001
        if button == mouse.LEFT:
            composer.drag_start(x, _flip(y))

    @rendering_window.event
    def on_mouse_drag(x, y, dx, dy, buttons, modifiers):  # noqa: ANN001
        if buttons & mouse.LEFT:
            composer.drag_move(x, _flip(y))

    @rendering_window.event
    def on_mouse_release(x, y, button, modifiers):  # noqa: ANN001
        if button == mouse.LEFT:
            composer.drag_end()

    @rendering_window.event
    def on_mouse_scroll(x, y, scroll_x, scroll_y):  # noqa: ANN001
        # 上スクロール（正）で拡大表示
        composer.wheel(x, _flip(y), -scroll_y)

    @rendering_window.event
    def on_key_press(sym, mods):  # noqa: ANN001
        if sym == key.ESCAPE:
            rendering_window.close()
        elif sym in (key.ENTER, key.RETURN, key.F5):
            report = composer.compile()
            logger.info("compile: %s", report.summary())

    @rendering_window.event
    def on_close():  # noqa: ANN001
        if getattr(on_close, "_closed", False):
            return
        setattr(on_close, "_closed", True)
        scheduler.cancel(frame_clock.tick)
        composer.dispose()
        renderer.release()
        pyglet.app.exit()

    pyglet.app.run()
    return None


__all__ = ["run_plotter"]
