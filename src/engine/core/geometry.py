"""
描画用ジオメトリ型（プロジェクト中核モジュール）

本モジュールは、サンプリング層（`sampling`）が生成しレンダラが消費する 2 つの幾何表現
`Mesh`（3D パラメトリック曲面）と `Polyline`（2D 曲線）を提供する。

データモデル（不変条件）:
- `Mesh.vertices: float32 ndarray (N, 3)` — 格子頂点。`N == nu * nv`。
- `Mesh.indices: uint32 ndarray (T, 3)` — 三角形の頂点 index。格子トポロジだけで決まる。
- 頂点の並びは v 外側・u 内側（index = j * nu + i）。
- `Polyline.points: float32 ndarray (K, 2)` — 順序付きの 2D 点列。
- dtype/形状は生成時に検証・正規化され、以後は不変（毎フレーム丸ごと作り直す）。

直感図（resolution=3, wrap なし）:

    v
    ^  6 --- 7 --- 8
    |  | \\   | \\   |
    |  3 --- 4 --- 5
    |  | \\   | \\   |
    |  0 --- 1 --- 2   --> u

    セル (i, j) は a=(i,j) b=(i+1,j) c=(i+1,j+1) d=(i,j+1) の 2 三角形 (a,b,d)/(b,c,d)
    三角形数 = 2 * (3-1) * (3-1) = 8

補足:
- サンプル失敗（ユーザ関数の例外/非有限値）は `sampling.tessellate` 側で補完済み。
  `failed_samples` はその件数、`first_failure` は最初の失敗の記録（診断用）。
"""

from __future__ import annotations

import numpy as np

from .sample import SampleFailure


def _as_readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.setflags(write=False)
    return view


class Mesh:
    """格子由来の三角形メッシュ。

    フィールド:
    - `vertices (N,3) float32`
    - `indices (T,3) uint32`
    - `nu, nv`: u/v 方向の頂点数（`nu * nv == N`）
    - `wrap_u, wrap_v`: 継ぎ目を接続した軸
    - `failed_samples`: 補完された頂点数
    - `first_failure`: 最初のサンプル失敗（無ければ None）
    """

    __slots__ = (
        "vertices",
        "indices",
        "nu",
        "nv",
        "wrap_u",
        "wrap_v",
        "failed_samples",
        "first_failure",
        "_normals",
    )

    def __init__(
        self,
        vertices: np.ndarray,
        indices: np.ndarray,
        *,
        nu: int,
        nv: int,
        wrap_u: bool = False,
        wrap_v: bool = False,
        failed_samples: int = 0,
        first_failure: SampleFailure | None = None,
    ) -> None:
        verts = np.ascontiguousarray(vertices, dtype=np.float32)
        if verts.ndim != 2 or verts.shape[1] != 3:
            raise ValueError("vertices は形状 (N, 3) の配列である必要があります。")
        if int(nu) < 1 or int(nv) < 1:
            raise ValueError(f"格子サイズは 1 以上である必要があります: nu={nu}, nv={nv}")
        if verts.shape[0] != int(nu) * int(nv):
            raise ValueError(
                f"頂点数 {verts.shape[0]} が格子サイズ {nu}x{nv} と一致しません。"
            )
        idx = np.ascontiguousarray(indices, dtype=np.uint32)
        if idx.size == 0:
            idx = idx.reshape(0, 3)
        if idx.ndim != 2 or idx.shape[1] != 3:
            raise ValueError("indices は形状 (T, 3) の配列である必要があります。")
        if idx.size and int(idx.max()) >= verts.shape[0]:
            raise ValueError("indices が頂点数の範囲外を参照しています。")
        if failed_samples < 0 or failed_samples > verts.shape[0]:
            raise ValueError(f"failed_samples が不正です: {failed_samples}")

        self.vertices = verts
        self.indices = idx
        self.nu = int(nu)
        self.nv = int(nv)
        self.wrap_u = bool(wrap_u)
        self.wrap_v = bool(wrap_v)
        self.failed_samples = int(failed_samples)
        self.first_failure = first_failure
        self._normals: np.ndarray | None = None

    # ── 基本プロパティ ───────────────────
    @property
    def resolution(self) -> int:
        """正方格子の解像度（u 方向の頂点数）。"""
        return self.nu

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_triangles(self) -> int:
        return int(self.indices.shape[0])

    @property
    def is_degraded(self) -> bool:
        """一部の頂点が補完値かどうか。"""
        return self.failed_samples > 0

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        """`(vertices, indices)` の読み取り専用ビューを返す。"""
        return _as_readonly(self.vertices), _as_readonly(self.indices)

    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """軸平行バウンディングボックス `(min_xyz, max_xyz)`。"""
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def normals(self) -> np.ndarray:
        """頂点法線 (N,3) float32 を返す（面法線の面積加重平均、初回計算後はキャッシュ）。

        縮退した頂点（隣接面の面積がすべて 0）は +Z を返す。
        """
        if self._normals is not None:
            return self._normals
        v = self.vertices.astype(np.float64)
        acc = np.zeros_like(v)
        if self.n_triangles:
            tri = self.indices.astype(np.int64)
            p0 = v[tri[:, 0]]
            p1 = v[tri[:, 1]]
            p2 = v[tri[:, 2]]
            face = np.cross(p1 - p0, p2 - p0)
            for k in range(3):
                np.add.at(acc, tri[:, k], face)
        length = np.linalg.norm(acc, axis=1)
        out = np.zeros_like(acc)
        out[:, 2] = 1.0
        ok = length > 1e-12
        out[ok] = acc[ok] / length[ok, None]
        self._normals = _as_readonly(out.astype(np.float32))
        return self._normals

    def interleaved(self) -> np.ndarray:
        """GPU 転送用に `[x, y, z, nx, ny, nz]` を行ごとに並べた (N,6) float32 を返す。"""
        return np.ascontiguousarray(np.hstack([self.vertices, self.normals()]), dtype=np.float32)

    def __len__(self) -> int:
        return self.n_vertices

    def __repr__(self) -> str:
        return (
            f"Mesh(vertices={self.n_vertices}, triangles={self.n_triangles}, "
            f"grid={self.nu}x{self.nv}, failed={self.failed_samples})"
        )


class Polyline:
    """順序付き 2D 点列（曲線 1 本）。"""

    __slots__ = ("points",)

    def __init__(self, points: np.ndarray) -> None:
        pts = np.ascontiguousarray(points, dtype=np.float32)
        if pts.size == 0:
            pts = pts.reshape(0, 2)
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise ValueError("points は形状 (K, 2) の配列である必要があります。")
        self.points = pts

    @classmethod
    def empty(cls) -> "Polyline":
        return cls(np.empty((0, 2), dtype=np.float32))

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.n_points == 0

    def as_array(self) -> np.ndarray:
        """点列の読み取り専用ビュー。"""
        return _as_readonly(self.points)

    def to_svg_points(self) -> str:
        """SVG `points` 属性形式（`"x,y x,y ..."`）へ整形する。"""
        return " ".join(f"{x:g},{y:g}" for x, y in self.points.tolist())

    def __len__(self) -> int:
        return self.n_points

    def __repr__(self) -> str:
        return f"Polyline(points={self.n_points})"


__all__ = ["Mesh", "Polyline"]
