"""
どこで: `engine.runtime.scheduler`。
何を: `pyglet.clock.Clock` の薄いラッパ `TickScheduler`（単発予約/取消/フレーム間隔）。
なぜ: プリミティブ/コンポーザを pyglet のグローバル時計から切り離し、テストで偽の時刻関数を注入できるようにするため。

注意:
- フレーム同期の予約（`delay=None`）は 0 秒ではなく `frame_interval` で予約する。
  0 秒予約は同一 tick 内で再実行され得るため使わない。
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

import pyglet

from util.utils import config_float, config_section

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60.0

TickCallback = Callable[[float], None]


class TickScheduler:
    def __init__(self, clock: "pyglet.clock.Clock | None" = None, *, fps: float = DEFAULT_FPS):
        if not fps or fps <= 0:
            raise ValueError(f"fps は正の値である必要があります: {fps}")
        self._clock = clock if clock is not None else pyglet.clock.get_default()
        self._frame_interval = 1.0 / float(fps)

    @classmethod
    def from_config(
        cls, cfg: Mapping[str, Any] | None, clock: "pyglet.clock.Clock | None" = None
    ) -> "TickScheduler":
        fps = config_float(config_section(cfg, "clock"), "fps", DEFAULT_FPS)
        return cls(clock, fps=fps if fps > 0 else DEFAULT_FPS)

    @property
    def clock(self) -> "pyglet.clock.Clock":
        return self._clock

    @property
    def frame_interval(self) -> float:
        return self._frame_interval

    def schedule(self, callback: TickCallback, delay: float | None = None) -> None:
        """`callback(dt)` を `delay` 秒後に 1 回だけ呼ぶ。`None` は 1 フレーム後。"""
        wait = self._frame_interval if delay is None else max(float(delay), 0.0)
        self._clock.schedule_once(callback, wait)

    def schedule_interval(self, callback: TickCallback, interval: float | None = None) -> None:
        """`callback(dt)` を一定間隔で呼び続ける（FrameClock 駆動用）。"""
        self._clock.schedule_interval(
            callback, self._frame_interval if interval is None else float(interval)
        )

    def cancel(self, callback: TickCallback) -> None:
        """予約済みの `callback` をすべて取り消す（未予約なら何もしない）。"""
        self._clock.unschedule(callback)

    def tick(self) -> float:
        """時計を 1 回進めて期限の来たコールバックを実行する（テスト/手動駆動用）。"""
        return self._clock.tick()


__all__ = ["TickScheduler", "TickCallback", "DEFAULT_FPS"]
