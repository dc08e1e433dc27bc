"""
どこで: `engine.runtime.primitive`。
何を: 登録関数 1 つ・専用の `AnimationClock`・スケジューラを束ね、ジオメトリを毎 tick 作り直す `Primitive`。
なぜ: 「現在のジオメトリを確定してから次の tick を予約する」順序と、破棄時の予約取消を 1 箇所で保証するため。

tick の順序:
    1) 破棄済みなら何もしない
    2) 時計を進める
    3) ジオメトリを再生成して確定する
    4) 次の tick を予約する

`SurfacePrimitive` は `tessellate`、`CurvePrimitive` は `sample_curve` / `sample_parametric_curve` を使う。
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from common.types import HorizontalRange
from engine.core.animation import AnimationClock
from engine.core.geometry import Mesh, Polyline
from sampling.curve import (
    DEFAULT_MAX_CURVE_SAMPLES,
    DEFAULT_PARAMETRIC_SAMPLES,
    sample_curve,
    sample_parametric_curve,
)
from sampling.tessellate import tessellate
from sandbox.registration import FunctionKind, RegisteredFunction

from .scheduler import TickScheduler

logger = logging.getLogger(__name__)

G = TypeVar("G", Mesh, Polyline)


class Primitive(Generic[G]):
    """1 つの登録関数に対応する描画単位の基底クラス。"""

    def __init__(
        self,
        function: RegisteredFunction,
        scheduler: TickScheduler,
        clock: AnimationClock,
        *,
        on_commit: Callable[["Primitive[G]"], None] | None = None,
    ) -> None:
        self._function = function
        self._scheduler = scheduler
        self._clock = clock
        self._on_commit = on_commit
        self._geometry: G | None = None
        self._generation = 0
        self._started = False
        self._primed = False
        self._disposed = False
        self._reported = False

    # ── 公開状態 ───────────────────
    @property
    def function(self) -> RegisteredFunction:
        return self._function

    @property
    def index(self) -> int:
        return self._function.index

    @property
    def clock(self) -> AnimationClock:
        return self._clock

    @property
    def t(self) -> float:
        return self._clock.t

    @property
    def geometry(self) -> G | None:
        """最後に確定したジオメトリ（失敗フレームでは None）。"""
        return self._geometry

    @property
    def generation(self) -> int:
        """ジオメトリを確定した回数。"""
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ── ライフサイクル ───────────────────
    def prime(self) -> G | None:
        """予約せずに現在の `t` で最初のジオメトリを確定して返す（2 回目以降は何もしない）。"""
        if not self._disposed and not self._primed:
            self._primed = True
            self._commit(self._safe_generate())
        return self._geometry

    def start(self) -> None:
        """最初のジオメトリを確定し（未確定なら）、最初の tick を予約する。"""
        if self._disposed or self._started:
            return
        self._started = True
        self.prime()
        self._schedule_next()

    def refresh(self) -> None:
        """時計を進めずに現在の `t` で作り直す（解像度/表示範囲の変更時）。"""
        if self._disposed:
            return
        self._commit(self._safe_generate())

    def dispose(self) -> None:
        """予約済みの tick を取り消し、以後の tick を無視する。"""
        if self._disposed:
            return
        self._disposed = True
        self._scheduler.cancel(self._on_tick)
        self._geometry = None

    def _on_tick(self, dt: float) -> None:
        if self._disposed:
            return
        self._clock.advance()
        self._commit(self._safe_generate())
        self._schedule_next()

    def _safe_generate(self) -> G | None:
        # サンプラ自体の失敗（MemoryError 等）もそのフレームの欠落として扱い、tick は続ける
        try:
            return self._generate()
        except Exception as e:
            logger.warning(
                "%s #%d: geometry generation failed: %s: %s",
                self._function.name,
                self.index,
                type(e).__name__,
                e,
            )
            return None

    def _schedule_next(self) -> None:
        self._scheduler.schedule(self._on_tick, self._clock.interval)

    def _commit(self, geometry: G | None) -> None:
        self._geometry = geometry
        self._generation += 1
        self._report(geometry)
        if self._on_commit is not None:
            self._on_commit(self)

    def _report(self, geometry: G | None) -> None:
        problem = self._problem(geometry)
        if problem is None:
            return
        # 2 回目以降は DEBUG へ落とす
        level = logging.DEBUG if self._reported else logging.WARNING
        self._reported = True
        logger.log(level, "%s #%d at t=%g: %s", self._function.name, self.index, self.t, problem)

    # ── サブクラス実装 ───────────────────
    def _generate(self) -> G | None:
        raise NotImplementedError

    def _problem(self, geometry: G | None) -> str | None:
        return "no geometry (all samples failed)" if geometry is None else None

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "live"
        return f"{type(self).__name__}({self._function.name!r}, index={self.index}, t={self.t:g}, {state})"


class SurfacePrimitive(Primitive[Mesh]):
    """曲面関数 → `Mesh`。既定の時計はフレーム同期（1 フレームごとに +1）。"""

    def __init__(
        self,
        function: RegisteredFunction,
        scheduler: TickScheduler,
        *,
        resolution: int,
        clock: AnimationClock | None = None,
        wrap_u: bool = False,
        wrap_v: bool = False,
        on_commit: Callable[[Primitive[Mesh]], None] | None = None,
    ) -> None:
        if function.kind is not FunctionKind.SURFACE:
            raise ValueError(f"曲面関数ではありません: {function.name} ({function.kind.value})")
        super().__init__(
            function,
            scheduler,
            clock if clock is not None else AnimationClock.surface(),
            on_commit=on_commit,
        )
        self._resolution = int(resolution)
        self._wrap_u = bool(wrap_u)
        self._wrap_v = bool(wrap_v)

    @property
    def resolution(self) -> int:
        return self._resolution

    @property
    def mesh(self) -> Mesh | None:
        return self._geometry

    def set_resolution(self, resolution: int) -> None:
        """解像度を差し替えて現在の `t` で作り直す。"""
        resolution = int(resolution)
        if resolution == self._resolution:
            return
        self._resolution = resolution
        self.refresh()

    def _generate(self) -> Mesh | None:
        return tessellate(
            self._function.fn,
            self._resolution,
            self._clock.t,
            wrap_u=self._wrap_u,
            wrap_v=self._wrap_v,
        )

    def _problem(self, geometry: Mesh | None) -> str | None:
        if geometry is None:
            return "no geometry (all samples failed)"
        if geometry.is_degraded:
            first = geometry.first_failure.describe() if geometry.first_failure else "?"
            return f"{geometry.failed_samples}/{geometry.n_vertices} samples failed, first: {first}"
        return None


class CurvePrimitive(Primitive[Polyline]):
    """2D 曲線関数 → `Polyline`。

    - CURVE: `sample_curve(fn, visible_range, t, max_samples)`（表示範囲は呼び出し側から明示的に渡す）
    - PARAMETRIC_CURVE: `sample_parametric_curve(fn, t, samples)`
    """

    def __init__(
        self,
        function: RegisteredFunction,
        scheduler: TickScheduler,
        *,
        visible_range: HorizontalRange,
        clock: AnimationClock | None = None,
        samples: int = DEFAULT_PARAMETRIC_SAMPLES,
        max_samples: int = DEFAULT_MAX_CURVE_SAMPLES,
        on_commit: Callable[[Primitive[Polyline]], None] | None = None,
    ) -> None:
        if function.kind is FunctionKind.SURFACE:
            raise ValueError(f"曲線関数ではありません: {function.name} ({function.kind.value})")
        if clock is None:
            clock = (
                AnimationClock.curve()
                if function.kind is FunctionKind.CURVE
                else AnimationClock.parametric_curve()
            )
        super().__init__(function, scheduler, clock, on_commit=on_commit)
        self._visible_range: HorizontalRange = (float(visible_range[0]), float(visible_range[1]))
        self._samples = int(samples)
        self._max_samples = int(max_samples)

    @property
    def visible_range(self) -> HorizontalRange:
        return self._visible_range

    @property
    def polyline(self) -> Polyline | None:
        return self._geometry

    @property
    def is_parametric(self) -> bool:
        return self._function.kind is FunctionKind.PARAMETRIC_CURVE

    def set_visible_range(self, visible_range: HorizontalRange) -> None:
        """表示範囲を差し替える。通常の曲線は現在の `t` で即座に作り直す。"""
        new_range = (float(visible_range[0]), float(visible_range[1]))
        if new_range == self._visible_range:
            return
        self._visible_range = new_range
        if not self.is_parametric:
            self.refresh()

    def _generate(self) -> Polyline | None:
        if self.is_parametric:
            return sample_parametric_curve(self._function.fn, self._clock.t, self._samples)
        return sample_curve(
            self._function.fn, self._visible_range, self._clock.t, self._max_samples
        )

    def _problem(self, geometry: Polyline | None) -> str | None:
        return "frame skipped (curve evaluation failed)" if geometry is None else None


__all__ = ["Primitive", "SurfacePrimitive", "CurvePrimitive"]
