"""
どこで: `engine.core` のウィンドウ側フレームドライバ。
何を: 1 フレーム更新 `tick(dt)` を持つ `Tickable` と、それらを登録順に呼ぶ `FrameClock`。
なぜ: GPU 転送とステータス表示を、プリミティブの再生成とは別の周期で毎フレーム同じ順序に行うため。
"""

from __future__ import annotations

import time
from typing import Protocol, Sequence


class Tickable(Protocol):
    def tick(self, dt: float) -> None:
        """前フレームから `dt` 秒経過した時点の状態へ更新する。"""


class FrameClock:
    """登録された Tickable を固定順序で呼ぶ。

    `pyglet.clock.schedule_interval(clock.tick, ...)` から dt 付きで呼ばれる前提。
    dt が渡されない場合（手動駆動）は前回呼び出しからの経過秒を使う。
    """

    def __init__(self, tickables: Sequence[Tickable]):
        self._tickables = tuple(tickables)
        self._last = time.perf_counter()
        self._frames = 0
        self._elapsed = 0.0

    @property
    def frames(self) -> int:
        return self._frames

    @property
    def elapsed(self) -> float:
        """これまでに受け取った dt の合計 [s]。"""
        return self._elapsed

    def tick(self, dt: float | None = None) -> None:
        now = time.perf_counter()
        if dt is None:
            dt = now - self._last
        self._last = now
        self._frames += 1
        self._elapsed += dt
        for t in self._tickables:
            t.tick(dt)


__all__ = ["FrameClock", "Tickable"]
