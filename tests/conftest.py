"""共通フィクスチャ。

- 乱数シード固定
- 偽の時刻関数で駆動する pyglet 時計と TickScheduler
- サンドボックスに渡す小さなソース試料
"""

from __future__ import annotations

import numpy as np
import pyglet
import pytest

from engine.runtime.scheduler import TickScheduler


class FakeTime:
    """`pyglet.clock.Clock(time_function=...)` に渡す手動時計。"""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class ClockDriver:
    """偽時刻を進めて `clock.tick()` を呼ぶテスト用ヘルパ。"""

    def __init__(self) -> None:
        self.time = FakeTime()
        self.clock = pyglet.clock.Clock(time_function=self.time)
        self.scheduler = TickScheduler(self.clock, fps=60.0)

    def advance(self, seconds: float) -> None:
        self.time.now += seconds
        self.clock.tick()

    def frames(self, n: int, dt: float = 0.02) -> None:
        """`n` 回ぶん `dt` 秒ずつ進める（既定 dt は 1/60 秒より少し長い）。"""
        for _ in range(n):
            self.advance(dt)


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture()
def driver() -> ClockDriver:
    return ClockDriver()


@pytest.fixture()
def scheduler(driver: ClockDriver) -> TickScheduler:
    return driver.scheduler


TORUS_SOURCE = """
def torus(u, v, t):
    r = 2 * (2 + math.cos(t / 10))
    return (
        15 + math.cos(u * math.pi * 2) * (r + 2 * math.cos(v * math.pi * 2)),
        math.sin(u * math.pi * 2) * (r + 2 * math.cos(v * math.pi * 2)),
        2 * math.sin(v * math.pi * 2),
    )

render(torus)
"""

TWO_SURFACES_SOURCE = """
def a(u, v, t):
    return (u, v, 0.0)

def b(u, v, t):
    return (u, v, 1.0)

render(a)
render(b)
"""


@pytest.fixture()
def torus_source() -> str:
    return TORUS_SOURCE


@pytest.fixture()
def two_surfaces_source() -> str:
    return TWO_SURFACES_SOURCE
