"""
どこで: `engine.render.camera`。
何を: 原点を注視する軌道カメラ（ヨー/ピッチ/距離）と、透視投影・視点行列の numpy 実装。
なぜ: 3D ビューアの MVP 行列を GL 非依存の純関数として計算し、ヘッドレスで検証できるようにするため。

行列の規約:
- 関数は行優先（数学的な表記どおり）の 4x4 を返す。
- `OrbitCamera.view_projection()` は ModernGL へそのまま書ける転置済み f4 を返す。
"""

from __future__ import annotations

import math

import numpy as np

DEFAULT_FOV = 75.0
DEFAULT_DISTANCE = 35.0
_PITCH_LIMIT = math.radians(89.0)


def perspective(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL 形式の透視投影行列（行優先）。"""
    if aspect <= 0.0:
        raise ValueError(f"aspect は正である必要があります: {aspect}")
    if not (0.0 < near < far):
        raise ValueError(f"0 < near < far である必要があります: near={near}, far={far}")
    f = 1.0 / math.tan(math.radians(fov_deg) / 2.0)
    return np.array(
        [
            [f / aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, (far + near) / (near - far), 2.0 * far * near / (near - far)],
            [0.0, 0.0, -1.0, 0.0],
        ],
        dtype=np.float64,
    )


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """視点行列（行優先）。`eye` から `target` を向き、`up` を上とする。"""
    eye = np.asarray(eye, dtype=np.float64)
    fwd = np.asarray(target, dtype=np.float64) - eye
    fwd /= np.linalg.norm(fwd)
    side = np.cross(fwd, np.asarray(up, dtype=np.float64))
    side /= np.linalg.norm(side)
    upv = np.cross(side, fwd)
    m = np.identity(4, dtype=np.float64)
    m[0, :3] = side
    m[1, :3] = upv
    m[2, :3] = -fwd
    m[:3, 3] = -m[:3, :3] @ eye
    return m


class OrbitCamera:
    """原点を中心に回る透視カメラ。"""

    def __init__(
        self,
        *,
        fov: float = DEFAULT_FOV,
        distance: float = DEFAULT_DISTANCE,
        yaw: float = 0.0,
        pitch: float = 0.0,
        near: float = 0.1,
        far: float = 1000.0,
    ) -> None:
        self.fov = float(fov)
        self.distance = float(distance)
        self.yaw = float(yaw)
        self.pitch = float(pitch)
        self.near = float(near)
        self.far = float(far)

    def orbit(self, dyaw: float, dpitch: float) -> None:
        """ヨー/ピッチをラジアンで加算する（ピッチは ±89° に制限）。"""
        self.yaw += dyaw
        self.pitch = max(-_PITCH_LIMIT, min(_PITCH_LIMIT, self.pitch + dpitch))

    def zoom(self, factor: float) -> None:
        """距離を `factor` 倍する（0.5 未満には寄らない）。"""
        self.distance = max(0.5, self.distance * float(factor))

    def eye(self) -> np.ndarray:
        cp = math.cos(self.pitch)
        return np.array(
            [
                self.distance * cp * math.sin(self.yaw),
                self.distance * math.sin(self.pitch),
                self.distance * cp * math.cos(self.yaw),
            ],
            dtype=np.float64,
        )

    def view_matrix(self) -> np.ndarray:
        return look_at(self.eye(), np.zeros(3), np.array([0.0, 1.0, 0.0]))

    def view_projection(self, aspect: float) -> np.ndarray:
        """`P @ V` を ModernGL 用に転置した f4 行列。"""
        vp = perspective(self.fov, aspect, self.near, self.far) @ self.view_matrix()
        return np.ascontiguousarray(vp.T, dtype="f4")


__all__ = ["OrbitCamera", "perspective", "look_at", "DEFAULT_FOV", "DEFAULT_DISTANCE"]
