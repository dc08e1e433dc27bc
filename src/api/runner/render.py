"""
どこで: `api.runner.render`
何を: RenderWindow と ModernGL コンテキストの初期化（ブレンド有効化）。
なぜ: ビューア/プロッタの両ランナーで描画初期化の手順を共有するため。
"""

from __future__ import annotations

from typing import Any

import moderngl


def create_window_and_context(
    window_width: int,
    window_height: int,
    *,
    background: Any,
    caption: str,
    depth: bool,
):
    """ウィンドウと ModernGL コンテキストを生成して返す。

    Returns
    -------
    (rendering_window, mgl_ctx)
    """
    from engine.core.render_window import RenderWindow

    rendering_window = RenderWindow(
        window_width, window_height, caption=caption, bg_color=background, depth=depth
    )

    mgl_ctx: moderngl.Context = moderngl.create_context()
    mgl_ctx.enable(moderngl.BLEND)
    mgl_ctx.blend_func = (moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA)
    return rendering_window, mgl_ctx


__all__ = ["create_window_and_context"]
