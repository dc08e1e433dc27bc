"""
どこで: `engine.render` 型定義。
何を: コンポーザからレンダラへ渡す描画単位 `RenderItem` / `PlotItem`。
なぜ: レンダラがサンドボックスやプリミティブを知らずに、色/ワイヤフレーム/ジオメトリだけで描けるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass

from common.types import RGBA
from engine.core.geometry import Mesh, Polyline


@dataclass(frozen=True)
class RenderItem:
    """曲面 1 つぶんの描画指示。`index` は登録順（色の選択に使った値）。"""

    index: int
    color: RGBA
    wireframe: bool
    mesh: Mesh


@dataclass(frozen=True)
class PlotItem:
    """2D 曲線 1 本ぶんの描画指示。"""

    index: int
    color: RGBA
    polyline: Polyline


__all__ = ["RenderItem", "PlotItem", "RGBA"]
