"""
どこで: `engine.core.animation`。
何を: プリミティブごとに独立した時間パラメータ `t` を持つ `AnimationClock`。
なぜ: グローバル時刻を参照せず、`t` を各サンプリング呼び出しへ明示的に渡すため。

プリセット:
- surface         : 1 フレームごとに +1（フレーム同期、`interval=None`）
- curve           : 約 16ms ごとに +0.1（表示リフレッシュと独立）
- parametric_curve: 100ms ごとに +0.1
"""

from __future__ import annotations

import math

SURFACE_STEP = 1.0
CURVE_STEP = 0.1
CURVE_INTERVAL = 0.016
PARAMETRIC_STEP = 0.1
PARAMETRIC_INTERVAL = 0.1


class AnimationClock:
    """単調非減少のスカラー `t` と、その刻み幅・刻み間隔。

    - `t` は 0 以上から始まり `advance()` でのみ増える（リセット手段は持たない）。
    - `interval is None` はフレーム同期（表示フレームごとに 1 回進む）を意味する。
    """

    __slots__ = ("_t", "_step", "_interval", "_ticks")

    def __init__(self, step: float, interval: float | None = None, t: float = 0.0) -> None:
        step = float(step)
        t = float(t)
        if not math.isfinite(step) or step < 0.0:
            raise ValueError(f"step は 0 以上の有限値である必要があります: {step}")
        if not math.isfinite(t) or t < 0.0:
            raise ValueError(f"t は 0 以上の有限値である必要があります: {t}")
        if interval is not None:
            interval = float(interval)
            if not math.isfinite(interval) or interval <= 0.0:
                raise ValueError(f"interval は正の有限値である必要があります: {interval}")
        self._t = t
        self._step = step
        self._interval = interval
        self._ticks = 0

    # ── プリセット ───────────────────
    @classmethod
    def surface(cls, step: float = SURFACE_STEP) -> "AnimationClock":
        return cls(step=step, interval=None)

    @classmethod
    def curve(cls, step: float = CURVE_STEP, interval: float = CURVE_INTERVAL) -> "AnimationClock":
        return cls(step=step, interval=interval)

    @classmethod
    def parametric_curve(
        cls, step: float = PARAMETRIC_STEP, interval: float = PARAMETRIC_INTERVAL
    ) -> "AnimationClock":
        return cls(step=step, interval=interval)

    # ── 状態 ───────────────────
    @property
    def t(self) -> float:
        return self._t

    @property
    def step(self) -> float:
        return self._step

    @property
    def interval(self) -> float | None:
        return self._interval

    @property
    def frame_locked(self) -> bool:
        return self._interval is None

    @property
    def ticks(self) -> int:
        """`advance()` が呼ばれた回数。"""
        return self._ticks

    def advance(self) -> float:
        """`t` を 1 刻み進め、新しい値を返す。"""
        self._ticks += 1
        self._t = self._t + self._step
        return self._t

    def __repr__(self) -> str:
        mode = "frame" if self._interval is None else f"{self._interval:g}s"
        return f"AnimationClock(t={self._t:g}, step={self._step:g}, every={mode})"


__all__ = [
    "AnimationClock",
    "SURFACE_STEP",
    "CURVE_STEP",
    "CURVE_INTERVAL",
    "PARAMETRIC_STEP",
    "PARAMETRIC_INTERVAL",
]
