"""
どこで: `api.viewer`（3D 実行ランナー）。
何を: エディタのソースをコンパイルし、登録された曲面を毎フレーム再テッセレーションして ModernGL で描画する。
なぜ: 少ない記述で「関数を書く→すぐ 3D で見る」ループを回せるようにするため。

実行フロー（概要）:
1) 設定解決: `util.utils.load_config()` の YAML と `SFP_*` 環境変数からロギング/解像度/パレット/予算を決める。
2) コンポーザ: エディタ入力（文字列 or ファイル）と `TickScheduler` から `SceneComposer` を組み立てる。
3) `init_only=True` ならここで返す（ウィンドウ/GL を作らない）。
4) ウィンドウ/GL: `RenderWindow` と ModernGL コンテキスト、`MeshRenderer` を生成する。
5) フレーム駆動: `FrameClock([renderer, status])` を `pyglet.clock` で駆動し、起動 ~1 秒後に自動コンパイルする。

キー操作:
- Enter / F5 : コンパイル（ファイル入力なら再読込）
- W          : ワイヤフレーム切替
- Up / Down  : 解像度 ±1（Shift で ±10）
- Esc        : 終了
マウス: ドラッグでカメラ軌道回転、スクロールでズーム。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from engine.runtime.scheduler import TickScheduler
from engine.scene.composer import SceneComposer
from util.utils import load_config

from .examples import EXAMPLE_SOURCE
from .runner.utils import (
    StatusTicker,
    configure_logging,
    resolve_background,
    resolve_fps,
    resolve_window_size,
    select_editor,
)

logger = logging.getLogger(__name__)

ORBIT_SPEED = 0.01
ZOOM_BASE = 1.1


def _status_text(composer: SceneComposer) -> str:
    s = composer.settings
    parts = [f"res {s.resolution}"]
    if s.wireframe:
        parts.append("wireframe")
    report = composer.last_report
    if report is not None:
        parts.append(report.summary())
    return " | ".join(parts)


def run_viewer(
    source: str | None = None,
    *,
    path: str | Path | None = None,
    resolution: int | None = None,
    wireframe: bool | None = None,
    window_size: tuple[int, int] | None = None,
    background: Any = None,
    fps: float | None = None,
    init_only: bool = False,
) -> SceneComposer | None:
    """3D 曲面ビューアを実行する。

    Parameters
    ----------
    source : str | None
        ユーザプログラム（Python ソース）。None かつ `path` も None ならサンプルを使う。
    path : str | Path | None
        ソースファイル。コンパイルのたびに読み直す（`source` とは排他）。
    resolution : int | None
        初期解像度（1..2000 に丸め）。None で設定ファイル（既定 15）。
    wireframe : bool | None
        初期ワイヤフレーム。None で設定ファイル。
    window_size, background, fps :
        ウィンドウサイズ [px]、背景色、フレームレート。None で設定ファイル。
    init_only : bool
        True でウィンドウ/GL を作らずに組み立て済みのコンポーザを返す。

    Returns
    -------
    `init_only=True` のときは `SceneComposer`、それ以外はイベントループ終了後に None。
    """
    cfg = load_config()
    configure_logging(cfg)
    fps = resolve_fps(fps, cfg)

    editor = select_editor(source, path, EXAMPLE_SOURCE)
    scheduler = TickScheduler(fps=fps)
    composer = SceneComposer.from_config(editor, cfg, scheduler=scheduler)
    if resolution is not None:
        composer.set_resolution(resolution)
    if wireframe is not None:
        composer.set_wireframe(wireframe)

    if init_only:
        return composer

    width, height = resolve_window_size(window_size, cfg)
    bg_rgba = resolve_background(background, cfg)

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import pyglet
    from pyglet.window import key, mouse

    from engine.core.frame_clock import FrameClock
    from engine.render.camera import OrbitCamera
    from engine.render.mesh_renderer import MeshRenderer

    from .runner.render import create_window_and_context

    rendering_window, mgl_ctx = create_window_and_context(
        width, height, background=bg_rgba, caption="SurfacePad", depth=True
    )
    camera = OrbitCamera()
    renderer = MeshRenderer(mgl_ctx, composer.render_items, camera)
    renderer.resize(*rendering_window.get_framebuffer_size())
    rendering_window.add_draw_callback(renderer.draw)

    status = StatusTicker(lambda: _status_text(composer), rendering_window.set_status)
    frame_clock = FrameClock([renderer, status])
    scheduler.schedule_interval(frame_clock.tick)
    composer.schedule_autocompile()

    @rendering_window.event
    def on_resize(w, h):  # noqa: ANN001
        renderer.resize(*rendering_window.get_framebuffer_size())

    @rendering_window.event
    def on_key_press(sym, mods):  # noqa: ANN001
        step = 10 if mods & key.MOD_SHIFT else 1
        if sym == key.ESCAPE:
            rendering_window.close()
        elif sym in (key.ENTER, key.RETURN, key.F5):
            report = composer.compile()
            logger.info("compile: %s", report.summary())
        elif sym == key.W:
            composer.toggle_wireframe()
        elif sym == key.UP:
            composer.set_resolution(composer.settings.resolution + step)
        elif sym == key.DOWN:
            composer.set_resolution(composer.settings.resolution - step)

    @rendering_window.event
    def on_mouse_drag(x, y, dx, dy, buttons, modifiers):  # noqa: ANN001
        if buttons & mouse.LEFT:
            camera.orbit(-dx * ORBIT_SPEED, -dy * ORBIT_SPEED)

    @rendering_window.event
    def on_mouse_scroll(x, y, scroll_x, scroll_y):  # noqa: ANN001
        camera.zoom(ZOOM_BASE ** (-scroll_y))

    @rendering_window.event
    def on_close():  # noqa: ANN001
        # 冪等なクリーンアップ
        if getattr(on_close, "_closed", False):
            return
        setattr(on_close, "_closed", True)
        scheduler.cancel(frame_clock.tick)
        composer.dispose()
        renderer.release()
        pyglet.app.exit()

    pyglet.app.run()
    return None


__all__ = ["run_viewer"]
