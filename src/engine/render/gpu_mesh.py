"""
どこで: `engine.render` の低レベルバッファ層。
何を: VBO/IBO/VAO の確保・更新・解放を担当する `GpuMesh`（頂点フォーマットは生成時に指定）。
なぜ: GPU 転送の詳細をレンダラから切り離し、容量拡張時の VAO 張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np


class GpuMesh:
    """
    1 つの描画単位（曲面 1 枚、または線分群）の GPU バッファ。

    - `layout`: `(format, *attributes)`。例: `("3f 3f", "in_vert", "in_normal")`
    - `indexed=False` のときは IBO を持たず、頂点順に描画する
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        layout: Sequence[str],
        *,
        indexed: bool = True,
        initial_reserve: int = 256 * 1024,
    ):
        self.ctx = ctx
        self.program = program
        self.layout = tuple(layout)
        self.indexed = indexed
        self.initial_reserve = initial_reserve

        self.vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.ibo = ctx.buffer(reserve=initial_reserve, dynamic=True) if indexed else None
        self.vao = self._build_vao()

        # 描画する要素数（indexed: index 数、非 indexed: 頂点数）
        self.count: int = 0

    def _build_vao(self) -> Any:
        content = [(self.vbo, *self.layout)]
        if self.ibo is not None:
            return self.ctx.vertex_array(
                self.program, content, index_buffer=self.ibo, index_element_size=4
            )
        return self.ctx.vertex_array(self.program, content)

    # ---------- バッファ操作 ----------
    def _ensure_capacity(self, vbo_size: int, ibo_size: int) -> None:
        """容量が足りなければ再確保し、VAO を張り直す。"""
        grown = False
        if vbo_size > self.vbo.size:
            self.vbo.release()
            self.vbo = self.ctx.buffer(reserve=max(vbo_size, self.initial_reserve), dynamic=True)
            grown = True
        if self.ibo is not None and ibo_size > self.ibo.size:
            self.ibo.release()
            self.ibo = self.ctx.buffer(reserve=max(ibo_size, self.initial_reserve), dynamic=True)
            grown = True
        if grown:
            self.vao.release()
            self.vao = self._build_vao()

    def upload(self, vertices: np.ndarray, indices: np.ndarray | None = None) -> None:
        """頂点（と index）を GPU へ送る。"""
        verts = np.ascontiguousarray(vertices, dtype=np.float32)
        idx = None
        if self.ibo is not None:
            idx = np.ascontiguousarray(
                indices if indices is not None else np.empty(0), dtype=np.uint32
            )
        self._ensure_capacity(verts.nbytes, idx.nbytes if idx is not None else 0)

        self.vbo.orphan()
        self.vbo.write(verts.tobytes())
        if idx is not None and self.ibo is not None:
            self.ibo.orphan()
            self.ibo.write(idx.tobytes())
            self.count = int(idx.size)
        else:
            self.count = int(verts.shape[0]) if verts.ndim > 1 else 0

    def render(self, mode: int) -> None:
        if self.count <= 0:
            return
        self.vao.render(mode=mode, vertices=self.count)

    def release(self) -> None:
        """GPU メモリを解放する（終了時/プール縮小時）。"""
        self.vbo.release()
        if self.ibo is not None:
            self.ibo.release()
        self.vao.release()


__all__ = ["GpuMesh"]
