"""
どこで: `sampling.grid`。
何を: 正方パラメータ格子の座標列と、三角形 index 配列（Numba カーネル + LRU キャッシュ）。
なぜ: 接続情報は格子トポロジ `(r, wrap_u, wrap_v)` だけで決まるため、毎フレームの再計算を避けるため。

規約:
- 頂点 index は `j * r + i`（v 外側・u 内側）。
- セル (i, j) は a=(i,j) b=(i+1,j) c=(i+1,j+1) d=(i,j+1) の 2 三角形 (a,b,d)/(b,c,d)。
- wrap 軸は `r >= 3` のとき継ぎ目セル（i=r-1 → 0）を追加する。`r < 3` では追加しない（重複面になるため）。
"""

from __future__ import annotations

import logging
from collections import OrderedDict

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from common.settings import get as _get_settings

logger = logging.getLogger(__name__)

_INDICES_CACHE: "OrderedDict[tuple[int, bool, bool], np.ndarray]" = OrderedDict()


def grid_parameters(resolution: int, wrap: bool = False) -> np.ndarray:
    """1 軸ぶんのパラメータ列 (r,) float64 を返す。

    - wrap なし: `i / (r - 1)`（r == 1 は `[0.0]`）
    - wrap あり: `i / r`（終端 1.0 を含まない）
    """
    r = int(resolution)
    if r < 1:
        raise ValueError(f"resolution は 1 以上である必要があります: {resolution}")
    if wrap:
        return np.arange(r, dtype=np.float64) / r
    if r == 1:
        return np.zeros(1, dtype=np.float64)
    return np.arange(r, dtype=np.float64) / (r - 1)


def cell_count(resolution: int, wrap: bool) -> int:
    """1 軸あたりのセル数。"""
    r = int(resolution)
    if wrap and r >= 3:
        return r
    return max(r - 1, 0)


@njit(fastmath=True, cache=True)
def _grid_indices_core(r: int, cu: int, cv: int) -> np.ndarray:
    """格子セルを走査して (2*cu*cv, 3) uint32 の三角形 index を埋める（Numba 最適化）。"""
    out = np.empty((2 * cu * cv, 3), dtype=np.uint32)
    k = 0
    for j in range(cv):
        j1 = (j + 1) % r
        for i in range(cu):
            i1 = (i + 1) % r
            a = j * r + i
            b = j * r + i1
            c = j1 * r + i1
            d = j1 * r + i
            out[k, 0] = a
            out[k, 1] = b
            out[k, 2] = d
            out[k + 1, 0] = b
            out[k + 1, 1] = c
            out[k + 1, 2] = d
            k += 2
    return out


def triangle_count(resolution: int, wrap_u: bool = False, wrap_v: bool = False) -> int:
    return 2 * cell_count(resolution, wrap_u) * cell_count(resolution, wrap_v)


def grid_indices(resolution: int, wrap_u: bool = False, wrap_v: bool = False) -> np.ndarray:
    """三角形 index (T, 3) uint32 を返す（読み取り専用・キャッシュ共有）。"""
    r = int(resolution)
    if r < 1:
        raise ValueError(f"resolution は 1 以上である必要があります: {resolution}")
    key = (r, bool(wrap_u), bool(wrap_v))
    cached = _INDICES_CACHE.get(key)
    if cached is not None:
        _INDICES_CACHE.move_to_end(key)
        return cached

    cu = cell_count(r, key[1])
    cv = cell_count(r, key[2])
    if cu == 0 or cv == 0:
        arr = np.empty((0, 3), dtype=np.uint32)
    else:
        arr = _grid_indices_core(r, cu, cv)
    arr.setflags(write=False)

    maxsize = _get_settings().INDICES_CACHE_MAXSIZE
    if maxsize > 0:
        _INDICES_CACHE[key] = arr
        while len(_INDICES_CACHE) > maxsize:
            _INDICES_CACHE.popitem(last=False)
    logger.debug("built grid indices r=%d wrap=(%s, %s): %d triangles", r, key[1], key[2], len(arr))
    return arr


def clear_indices_cache() -> None:
    _INDICES_CACHE.clear()


__all__ = [
    "grid_parameters",
    "grid_indices",
    "cell_count",
    "triangle_count",
    "clear_indices_cache",
]
