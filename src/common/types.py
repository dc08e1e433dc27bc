"""
どこで: `common` の型定義。
何を: RGBA と、範囲 `(x0, width)` の軽量エイリアス。
なぜ: 依存の少ない場所に置き、sampling/engine/api の間で循環や分散定義を避けるため。
"""

RGBA = tuple[float, float, float, float]

# 横方向の可視範囲（左端 x と幅）。ViewBox → Curve Sampler の受け渡しに使う。
HorizontalRange = tuple[float, float]


__all__ = ["RGBA", "HorizontalRange"]
