"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（MSAA/深度バッファ/背景クリア）と描画コールバック登録を提供。
なぜ: レンダラ/コンポーザ層から GUI 依存を切り離し、3D ビューアと 2D プロッタで共通化するため。

使用例:
    win = RenderWindow(1280, 720, caption="SurfacePad", bg_color=(0.93, 0.93, 0.93, 1))

    def draw_scene():
        renderer.draw()

    win.add_draw_callback(draw_scene)
    pyglet.app.run()
"""

from typing import Callable

import pyglet
from pyglet.gl import Config, glClearColor


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        caption: str = "SurfacePad",
        bg_color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0),
        depth: bool = True,
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。
            height: ウィンドウ高さ（ピクセル）。
            caption: タイトル（ステータス表示にも使う）。
            bg_color: 背景色 RGBA（0.0〜1.0）。
            depth: 深度バッファを確保するか（3D ビューアでは True）。
        """
        config = Config(
            double_buffer=True,
            sample_buffers=1,
            samples=4,
            depth_size=24 if depth else 0,
            major_version=3,
            minor_version=3,
            forward_compatible=True,
        )
        super().__init__(
            width=width, height=height, caption=caption, config=config, resizable=True, vsync=True
        )
        self._bg_color = bg_color
        self._base_caption = caption
        self._draw_callbacks: list[Callable[[], None]] = []

    def add_draw_callback(self, func: Callable[[], None]) -> None:
        """
        `on_draw` 中に呼び出す描画関数を登録する。

        - 関数は引数を取らず、副作用で描画を行うこと。
        - 登録順に呼び出される。
        """
        self._draw_callbacks.append(func)

    def on_draw(self):  # Pyglet 既定のイベント名
        """ウィンドウ描画イベントハンドラ。登録された描画コールバックを呼び出す。"""
        r, g, b, a = self._bg_color
        glClearColor(r, g, b, a)
        self.clear()
        for cb in self._draw_callbacks:
            cb()

    # ---- helpers ----
    def set_status(self, text: str | None) -> None:
        """タイトルバーへ `"<caption> | <text>"` 形式でステータスを表示する。"""
        self.set_caption(self._base_caption if not text else f"{self._base_caption} | {text}")
