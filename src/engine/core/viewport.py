"""
どこで: `engine.core.viewport`。
何を: 2D プロット面の可視矩形 `ViewBox` と、ドラッグ（パン）/ホイール（カーソル固定ズーム）による更新。
なぜ: ポインタ入力から連続的に再計算される数値状態を、GUI 非依存の純関数として検証可能にするため。

座標系:
- プロット座標は SVG と同じく y 下向き（曲線側で `-f(x)` として上向きへ反転する）。
- ポインタ位置はバウンディング矩形 `ScreenRect` に対する正規化座標 `(nx, ny)`（左上が 0）。

パン:
    origin = drag_origin + (drag_n - current_n) * extent

ズーム（カーソル下の点を固定）:
    anchor     = origin + extent * n
    new_extent = max(extent * (1 ± zoom_step), min_extent)
    new_origin = anchor - new_extent * n

範囲の下限 `min_extent` は、病的な連続ホイール入力で幅/高さが 0 へ潰れるのを防ぐ床。
下限で丸めた後も anchor の式は丸め後の extent で計算するため、カーソル固定性は保たれる。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from common.types import HorizontalRange

DEFAULT_VIEW_BOX = (-500.0, -500.0, 1000.0, 1000.0)
DEFAULT_ZOOM_STEP = 0.01
DEFAULT_MIN_EXTENT = 1e-6


@dataclass(frozen=True, slots=True)
class ViewBox:
    """可視矩形 `(x, y, width, height)`（プロット単位）。幅/高さは常に正。"""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"ViewBox.{name} は有限値である必要があります")
        if self.width <= 0.0 or self.height <= 0.0:
            raise ValueError(
                f"ViewBox の幅/高さは正である必要があります: {self.width}x{self.height}"
            )

    @classmethod
    def from_sequence(cls, values) -> "ViewBox":
        x, y, w, h = (float(v) for v in values)
        return cls(x, y, w, h)

    @property
    def visible_range(self) -> HorizontalRange:
        """横方向の可視範囲 `(x0, width)`。Curve Sampler へ明示的に渡す。"""
        return (self.x, self.width)

    def point_at(self, nx: float, ny: float) -> tuple[float, float]:
        """正規化位置 `(nx, ny)` にあるプロット座標。"""
        return (self.x + self.width * nx, self.y + self.height * ny)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def to_svg_view_box(self) -> str:
        return " ".join(f"{v:g}" for v in self.as_tuple())


@dataclass(frozen=True, slots=True)
class ScreenRect:
    """ポインタイベントのバウンディング矩形（ピクセル、左上原点）。"""

    left: float
    top: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            raise ValueError(f"ScreenRect の幅/高さは正である必要があります: {self.width}x{self.height}")

    def normalize(self, px: float, py: float) -> tuple[float, float]:
        return ((px - self.left) / self.width, (py - self.top) / self.height)


@dataclass(frozen=True, slots=True)
class DragState:
    """ドラッグ開始時点の ViewBox 原点と正規化ポインタ位置。"""

    origin_x: float
    origin_y: float
    nx: float
    ny: float


# ── 純関数 ───────────────────


def begin_drag(view: ViewBox, nx: float, ny: float) -> DragState:
    return DragState(view.x, view.y, nx, ny)


def pan(view: ViewBox, drag: DragState, nx: float, ny: float) -> ViewBox:
    """ドラッグ中のポインタ位置から新しい ViewBox を返す（範囲は維持）。"""
    return ViewBox(
        drag.origin_x + (drag.nx - nx) * view.width,
        drag.origin_y + (drag.ny - ny) * view.height,
        view.width,
        view.height,
    )


def wheel_direction(delta: float) -> int:
    """ホイール量をズーム方向へ変換する（正: 縮小表示 +1、負: 拡大表示 -1、0: 無変化）。"""
    if delta > 0:
        return 1
    if delta < 0:
        return -1
    return 0


def zoom_at(
    view: ViewBox,
    nx: float,
    ny: float,
    direction: int,
    *,
    step: float = DEFAULT_ZOOM_STEP,
    min_extent: float = DEFAULT_MIN_EXTENT,
) -> ViewBox:
    """カーソル下の点を固定したまま 1 ティック分ズームした ViewBox を返す。"""
    if direction == 0:
        return view
    factor = 1.0 + (1.0 if direction > 0 else -1.0) * step
    w = max(view.width * factor, min_extent)
    h = max(view.height * factor, min_extent)
    cx, cy = view.point_at(nx, ny)
    return ViewBox(cx - w * nx, cy - h * ny, w, h)


def ortho_projection(view: ViewBox) -> np.ndarray:
    """ViewBox をクリップ空間へ写す正射影行列（ModernGL 用の転置済み、y 下向き）。"""
    w, h = view.width, view.height
    proj = np.array(
        [
            [2.0 / w, 0.0, 0.0, -(2.0 * view.x / w + 1.0)],
            [0.0, -2.0 / h, 0.0, 2.0 * view.y / h + 1.0],
            [0.0, 0.0, -1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype="f4",
    ).T
    return proj


def grid_lines(view: ViewBox, spacing: float, *, max_lines: int = 400) -> np.ndarray:
    """可視範囲を覆う格子線の線分 (M, 2, 2) を返す。

    線数が `max_lines` を超える間隔（ズームアウトしすぎ）では空配列を返す。
    """
    if spacing <= 0.0:
        raise ValueError(f"spacing は正である必要があります: {spacing}")
    x0, x1 = view.x, view.x + view.width
    y0, y1 = view.y, view.y + view.height
    ix0, ix1 = math.ceil(x0 / spacing), math.floor(x1 / spacing)
    iy0, iy1 = math.ceil(y0 / spacing), math.floor(y1 / spacing)
    if max(0, ix1 - ix0 + 1) + max(0, iy1 - iy0 + 1) > max_lines:
        return np.empty((0, 2, 2), dtype=np.float32)
    xs = np.arange(ix0, ix1 + 1, dtype=np.float64) * spacing
    ys = np.arange(iy0, iy1 + 1, dtype=np.float64) * spacing
    segs = np.empty((xs.size + ys.size, 2, 2), dtype=np.float32)
    segs[: xs.size, 0, 0] = xs
    segs[: xs.size, 0, 1] = y0
    segs[: xs.size, 1, 0] = xs
    segs[: xs.size, 1, 1] = y1
    segs[xs.size :, 0, 0] = x0
    segs[xs.size :, 0, 1] = ys
    segs[xs.size :, 1, 0] = x1
    segs[xs.size :, 1, 1] = ys
    return segs


def axis_lines(view: ViewBox) -> np.ndarray:
    """可視範囲に入っている座標軸（x=0 / y=0）の線分 (M, 2, 2)。"""
    segs: list[list[list[float]]] = []
    x0, x1 = view.x, view.x + view.width
    y0, y1 = view.y, view.y + view.height
    if y0 <= 0.0 <= y1:
        segs.append([[x0, 0.0], [x1, 0.0]])
    if x0 <= 0.0 <= x1:
        segs.append([[0.0, y0], [0.0, y1]])
    return np.asarray(segs, dtype=np.float32).reshape(-1, 2, 2)


# ── 状態保持 ───────────────────


class ViewportTransform:
    """ViewBox とドラッグ状態を所有し、ポインタジェスチャで更新する。

    各操作は ViewBox が変化したかどうかを返す（呼び出し側が子へ再通知する判断に使う）。
    """

    def __init__(
        self,
        view_box: ViewBox | None = None,
        *,
        bounds: ScreenRect | None = None,
        zoom_step: float = DEFAULT_ZOOM_STEP,
        min_extent: float = DEFAULT_MIN_EXTENT,
    ) -> None:
        if not (0.0 < zoom_step < 1.0):
            raise ValueError(f"zoom_step は (0, 1) の範囲である必要があります: {zoom_step}")
        if min_extent <= 0.0:
            raise ValueError(f"min_extent は正である必要があります: {min_extent}")
        self._view = view_box if view_box is not None else ViewBox(*DEFAULT_VIEW_BOX)
        self._bounds = bounds if bounds is not None else ScreenRect(0.0, 0.0, 1.0, 1.0)
        self._zoom_step = float(zoom_step)
        self._min_extent = float(min_extent)
        self._drag: DragState | None = None

    @property
    def view_box(self) -> ViewBox:
        return self._view

    @property
    def bounds(self) -> ScreenRect:
        return self._bounds

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    def resize(self, bounds: ScreenRect) -> None:
        """ポインタ正規化に使うバウンディング矩形を更新する（ViewBox は変えない）。"""
        self._bounds = bounds

    def drag_start(self, px: float, py: float) -> None:
        nx, ny = self._bounds.normalize(px, py)
        self._drag = begin_drag(self._view, nx, ny)

    def drag_move(self, px: float, py: float) -> bool:
        if self._drag is None:
            return False
        nx, ny = self._bounds.normalize(px, py)
        new_view = pan(self._view, self._drag, nx, ny)
        changed = new_view != self._view
        self._view = new_view
        return changed

    def drag_end(self) -> None:
        self._drag = None

    def wheel(self, px: float, py: float, delta: float) -> bool:
        nx, ny = self._bounds.normalize(px, py)
        new_view = zoom_at(
            self._view,
            nx,
            ny,
            wheel_direction(delta),
            step=self._zoom_step,
            min_extent=self._min_extent,
        )
        changed = new_view != self._view
        self._view = new_view
        return changed


__all__ = [
    "ViewBox",
    "ScreenRect",
    "DragState",
    "ViewportTransform",
    "begin_drag",
    "pan",
    "zoom_at",
    "wheel_direction",
    "ortho_projection",
    "grid_lines",
    "axis_lines",
    "DEFAULT_VIEW_BOX",
    "DEFAULT_ZOOM_STEP",
    "DEFAULT_MIN_EXTENT",
]
