"""
どこで: `engine.render` の 3D 描画。
何を: コンポーザの `RenderItem` 列を毎フレーム GPU へ転送し、陰影付き曲面/ワイヤフレームと座標軸を描く。
なぜ: 転送（tick）と描画（draw）を分け、ウィンドウの on_draw を描画だけに保つため。
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

import moderngl as mgl
import numpy as np

from ..core.frame_clock import Tickable
from .camera import OrbitCamera
from .gpu_mesh import GpuMesh
from .shader import Shader
from .types import RenderItem

logger = logging.getLogger(__name__)

MESH_LAYOUT = ("3f 3f", "in_vert", "in_normal")
AXIS_LENGTH = 20.0
AXIS_COLORS = (
    (0.85, 0.2, 0.2, 1.0),
    (0.2, 0.7, 0.2, 1.0),
    (0.2, 0.3, 0.9, 1.0),
)


def axis_vertices(length: float = AXIS_LENGTH) -> np.ndarray:
    """x/y/z 軸の線分（各 2 頂点、法線は +Z）を (6, 6) float32 で返す。"""
    out = np.zeros((6, 6), dtype=np.float32)
    for k in range(3):
        out[2 * k + 1, k] = length
        out[2 * k : 2 * k + 2, 5] = 1.0
    return out


class MeshRenderer(Tickable):
    """
    `source()` が返す RenderItem 列を tick ごとにアップロードし、draw で描く。

    GpuMesh はスロット（描画順）ごとにプールし、数が減ったぶんだけ解放する。
    """

    def __init__(
        self,
        mgl_context: Any,
        source: Callable[[], Sequence[RenderItem]],
        camera: OrbitCamera | None = None,
        *,
        show_axes: bool = True,
    ):
        self.ctx = mgl_context
        self._source = source
        self.camera = camera if camera is not None else OrbitCamera()
        self.show_axes = show_axes
        self._aspect = 1.0

        self.program = Shader.create_mesh_program(mgl_context)
        self._pool: list[GpuMesh] = []
        self._items: list[RenderItem] = []
        self._axes = GpuMesh(mgl_context, self.program, MESH_LAYOUT, indexed=False)
        self._axes.upload(axis_vertices())
        self._last_triangle_count = 0

    # -------- Tickable interface --------
    def tick(self, dt: float) -> None:
        """現在の RenderItem 列を取得し、GPU へ転送する。"""
        items = list(self._source())
        while len(self._pool) < len(items):
            self._pool.append(GpuMesh(self.ctx, self.program, MESH_LAYOUT))
        while len(self._pool) > len(items):
            self._pool.pop().release()
        tris = 0
        for gpu, item in zip(self._pool, items):
            gpu.upload(item.mesh.interleaved(), item.mesh.indices)
            tris += item.mesh.n_triangles
        self._items = items
        self._last_triangle_count = tris

    # -------- drawing --------
    def resize(self, width: int, height: int) -> None:
        self._aspect = max(float(width), 1.0) / max(float(height), 1.0)

    @property
    def triangle_count(self) -> int:
        return self._last_triangle_count

    def draw(self) -> None:
        self.ctx.enable(mgl.DEPTH_TEST)
        self.program["mvp"].write(self.camera.view_projection(self._aspect).tobytes())
        try:
            for gpu, item in zip(self._pool, self._items):
                self.ctx.wireframe = item.wireframe
                self.program["shaded"].value = 0.0 if item.wireframe else 1.0
                self.program["color"].value = tuple(item.color)
                gpu.render(mgl.TRIANGLES)
        finally:
            self.ctx.wireframe = False
        if self.show_axes:
            self.program["shaded"].value = 0.0
            for k, color in enumerate(AXIS_COLORS):
                self.program["color"].value = color
                self._axes.vao.render(mode=mgl.LINES, vertices=2, first=2 * k)

    def release(self) -> None:
        """GPU リソースを解放。"""
        for gpu in self._pool:
            gpu.release()
        self._pool.clear()
        self._axes.release()
        self.program.release()


__all__ = ["MeshRenderer", "axis_vertices"]
