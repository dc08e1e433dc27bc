"""
どこで: `sampling.curve`。
何を: 2D 曲線のサンプリング（`y = f(x, t)` の表示範囲サンプリングと、媒介変数曲線 `(x, y) = f(s, t)`）。
なぜ: 旧 2D プロット経路で、表示中の横範囲だけを 1 単位刻みで評価して `Polyline` を得るため。

失敗方針:
- 1 サンプルでも例外/非有限値/非実数なら `None`（そのフレームは曲線ごとスキップ）
- `width < 1`（および非有限の範囲）は空の Polyline
- 評価点数は `max_samples`（既定 4096）で打ち切り、範囲全体へ等間隔に広げる
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

import numpy as np

from common.types import HorizontalRange
from engine.core.geometry import Polyline

from .result import evaluate_curve, evaluate_parametric

logger = logging.getLogger(__name__)

DEFAULT_PARAMETRIC_SAMPLES = 1000
# 大きく縮小した表示範囲でも 1 フレームの評価回数を有界にする
DEFAULT_MAX_CURVE_SAMPLES = 4096


def sample_curve(
    f: Callable[..., Any],
    visible_range: HorizontalRange,
    t: float,
    max_samples: int = DEFAULT_MAX_CURVE_SAMPLES,
) -> Polyline | None:
    """`x0 + i`（`i in 0..int(width)-1`）で評価し、点 `(x, -f(x, t))` の列を返す。

    y を反転するのは、プロット座標が SVG 同様に下向き y だからである。
    `int(width)` が `max_samples` を超える場合は `max_samples` 点を `[x0, x0 + width)` に等間隔で置く。
    """
    base = float(visible_range[0])
    width = float(visible_range[1])
    if not (math.isfinite(base) and math.isfinite(width)) or width < 1:
        return Polyline.empty()
    cap = max(int(max_samples), 1)
    if width > cap:
        n, step = cap, width / cap
    else:
        n, step = int(width), 1.0
    tt = float(t)
    pts = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        x = base + i * step
        outcome = evaluate_curve(f, x, tt)
        if outcome.failure is not None:
            logger.debug("curve sample failed: %s", outcome.failure.describe())
            return None
        pts[i, 0] = x
        pts[i, 1] = -outcome.value[0]  # type: ignore[index]
    return Polyline(pts)


def sample_parametric_curve(
    f: Callable[..., Any], t: float, samples: int = DEFAULT_PARAMETRIC_SAMPLES
) -> Polyline | None:
    """`s = i / samples`（`i in 0..samples-1`）で評価し、`f(s, t)` の `(x, y)` をそのまま並べる。"""
    n = int(samples)
    if n < 1:
        return Polyline.empty()
    tt = float(t)
    pts = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        outcome = evaluate_parametric(f, i / n, tt)
        if outcome.failure is not None:
            logger.debug("parametric sample failed: %s", outcome.failure.describe())
            return None
        pts[i] = outcome.value
    return Polyline(pts)


__all__ = [
    "sample_curve",
    "sample_parametric_curve",
    "DEFAULT_PARAMETRIC_SAMPLES",
    "DEFAULT_MAX_CURVE_SAMPLES",
]
