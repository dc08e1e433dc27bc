"""
どこで: `sampling` パッケージ。
何を: 登録関数を格子/区間でサンプリングし `Mesh` / `Polyline` を生成する。
"""

from .curve import DEFAULT_PARAMETRIC_SAMPLES, sample_curve, sample_parametric_curve
from .grid import grid_indices, grid_parameters, triangle_count
from .tessellate import tessellate

__all__ = [
    "DEFAULT_PARAMETRIC_SAMPLES",
    "sample_curve",
    "sample_parametric_curve",
    "grid_indices",
    "grid_parameters",
    "triangle_count",
    "tessellate",
]
