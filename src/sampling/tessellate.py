"""
どこで: `sampling.tessellate`。
何を: 曲面関数 `f(u, v, t) -> (x, y, z)` を正方格子でサンプリングし `Mesh` を生成する。
なぜ: 1 サンプルの失敗で形状全体を失わないよう、失敗を値として集計し直前の成功頂点で補完するため。

補完規則:
- 失敗サンプルはサンプリング順で直前の成功頂点を使う
- 先頭から続く失敗は最初の成功頂点を使う
- 全サンプル失敗なら `None`
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np

from common.settings import get as _get_settings
from engine.core.geometry import Mesh
from engine.core.sample import SampleFailure

from .grid import grid_indices, grid_parameters
from .result import evaluate_surface

logger = logging.getLogger(__name__)


def _check_resolution(resolution: Any) -> int:
    if isinstance(resolution, bool):
        raise ValueError(f"resolution は整数である必要があります: {resolution!r}")
    try:
        r = int(resolution)
    except (TypeError, ValueError):
        raise ValueError(f"resolution は整数である必要があります: {resolution!r}") from None
    if r != resolution or r < 1:
        raise ValueError(f"resolution は 1 以上の整数である必要があります: {resolution!r}")
    return r


def tessellate(
    f: Callable[..., Any],
    resolution: int,
    t: float,
    *,
    wrap_u: bool = False,
    wrap_v: bool = False,
) -> Mesh | None:
    """`f` を `resolution x resolution` 格子でサンプリングして `Mesh` を返す。

    引数:
        f: `(u, v, t)` を受け取り長さ 3 の有限実数列を返す関数。
        resolution: 1 軸あたりの頂点数（1 以上）。
        t: アニメーション時刻（各プリミティブの時計から明示的に渡す）。
        wrap_u, wrap_v: 継ぎ目を接続する軸（パラメータは終端を含まない）。

    返り値:
        `Mesh`。全サンプルが失敗した場合は `None`。
    """
    r = _check_resolution(resolution)
    us = grid_parameters(r, wrap_u)
    vs = grid_parameters(r, wrap_v)
    tt = float(t)
    debug_samples = _get_settings().DEBUG_SAMPLES

    verts = np.empty((r * r, 3), dtype=np.float64)
    failed = 0
    first_failure: SampleFailure | None = None
    first_ok = -1
    last: tuple[float, ...] | None = None

    k = 0
    for v in vs:
        fv = float(v)
        for u in us:
            outcome = evaluate_surface(f, float(u), fv, tt)
            if outcome.failure is None:
                last = outcome.value
                verts[k] = last
                if first_ok < 0:
                    first_ok = k
            else:
                failed += 1
                if first_failure is None:
                    first_failure = outcome.failure
                if debug_samples:
                    logger.debug("sample failed: %s", outcome.failure.describe())
                if last is not None:
                    verts[k] = last
            k += 1

    if first_ok < 0:
        return None
    if first_ok > 0:
        verts[:first_ok] = verts[first_ok]

    return Mesh(
        verts,
        grid_indices(r, wrap_u, wrap_v),
        nu=r,
        nv=r,
        wrap_u=wrap_u,
        wrap_v=wrap_v,
        failed_samples=failed,
        first_failure=first_failure,
    )


__all__ = ["tessellate"]
