"""
どこで: `engine.render` の 2D 描画。
何を: ViewBox 正射影で方眼（細 10 / 太 100 単位）・座標軸・曲線 Polyline を描く。
なぜ: プロッタ経路の描画を、コンポーザの `PlotItem` と現在の ViewBox だけに依存させるため。
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

import moderngl as mgl
import numpy as np

from ..core.frame_clock import Tickable
from ..core.viewport import ViewBox, axis_lines, grid_lines, ortho_projection
from .gpu_mesh import GpuMesh
from .shader import Shader
from .types import PlotItem

logger = logging.getLogger(__name__)

LINE_LAYOUT = ("2f", "in_vert")
MINOR_SPACING = 10.0
MAJOR_SPACING = 100.0
MINOR_COLOR = (0.0, 0.0, 0.0, 0.08)
MAJOR_COLOR = (0.0, 0.0, 0.0, 0.2)
AXIS_COLOR = (0.0, 0.0, 0.0, 0.6)


def _segments_to_vertices(segs: np.ndarray) -> np.ndarray:
    return np.ascontiguousarray(segs.reshape(-1, 2), dtype=np.float32)


class PolylineRenderer(Tickable):
    """`source()` の PlotItem 列と `view()` の ViewBox を tick で転送し、draw で描く。"""

    def __init__(
        self,
        mgl_context: Any,
        source: Callable[[], Sequence[PlotItem]],
        view: Callable[[], ViewBox],
        *,
        show_grid: bool = True,
    ):
        self.ctx = mgl_context
        self._source = source
        self._view = view
        self.show_grid = show_grid

        self.program = Shader.create_line_program(mgl_context)
        self._minor = GpuMesh(mgl_context, self.program, LINE_LAYOUT, indexed=False)
        self._major = GpuMesh(mgl_context, self.program, LINE_LAYOUT, indexed=False)
        self._axes = GpuMesh(mgl_context, self.program, LINE_LAYOUT, indexed=False)
        self._pool: list[GpuMesh] = []
        self._items: list[PlotItem] = []
        self._grid_view: ViewBox | None = None
        self._current_view: ViewBox | None = None

    # -------- Tickable interface --------
    def tick(self, dt: float) -> None:
        view = self._view()
        self._current_view = view
        if self.show_grid and view != self._grid_view:
            self._minor.upload(_segments_to_vertices(grid_lines(view, MINOR_SPACING)))
            self._major.upload(_segments_to_vertices(grid_lines(view, MAJOR_SPACING)))
            self._axes.upload(_segments_to_vertices(axis_lines(view)))
            self._grid_view = view

        items = list(self._source())
        while len(self._pool) < len(items):
            self._pool.append(GpuMesh(self.ctx, self.program, LINE_LAYOUT, indexed=False))
        while len(self._pool) > len(items):
            self._pool.pop().release()
        for gpu, item in zip(self._pool, items):
            gpu.upload(item.polyline.points)
        self._items = items

    # -------- drawing --------
    def draw(self) -> None:
        if self._current_view is None:
            return
        self.ctx.disable(mgl.DEPTH_TEST)
        self.program["projection"].write(ortho_projection(self._current_view).tobytes())
        if self.show_grid:
            for gpu, color in (
                (self._minor, MINOR_COLOR),
                (self._major, MAJOR_COLOR),
                (self._axes, AXIS_COLOR),
            ):
                self.program["color"].value = color
                gpu.render(mgl.LINES)
        for gpu, item in zip(self._pool, self._items):
            self.program["color"].value = tuple(item.color)
            gpu.render(mgl.LINE_STRIP)

    def release(self) -> None:
        for gpu in self._pool:
            gpu.release()
        self._pool.clear()
        for gpu in (self._minor, self._major, self._axes):
            gpu.release()
        self.program.release()


__all__ = ["PolylineRenderer"]
