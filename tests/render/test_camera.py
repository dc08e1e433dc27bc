from __future__ import annotations

import math

import numpy as np
import pytest

from engine.render.camera import OrbitCamera, look_at, perspective


def test_perspective_validates_arguments() -> None:
    with pytest.raises(ValueError):
        perspective(75.0, 0.0, 0.1, 100.0)
    with pytest.raises(ValueError):
        perspective(75.0, 1.0, 10.0, 1.0)


def test_perspective_maps_near_and_far_planes() -> None:
    p = perspective(90.0, 1.0, 1.0, 10.0)
    near = p @ np.array([0.0, 0.0, -1.0, 1.0])
    far = p @ np.array([0.0, 0.0, -10.0, 1.0])
    assert near[2] / near[3] == pytest.approx(-1.0)
    assert far[2] / far[3] == pytest.approx(1.0)


def test_look_at_moves_target_onto_negative_z() -> None:
    v = look_at(np.array([0.0, 0.0, 5.0]), np.zeros(3), np.array([0.0, 1.0, 0.0]))
    origin = v @ np.array([0.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(origin[:3], [0.0, 0.0, -5.0], atol=1e-12)


def test_orbit_clamps_pitch_and_zoom_floor() -> None:
    cam = OrbitCamera(distance=10.0)
    cam.orbit(0.3, 10.0)
    assert cam.pitch == pytest.approx(math.radians(89.0))
    assert cam.yaw == pytest.approx(0.3)
    cam.zoom(0.001)
    assert cam.distance == 0.5


def test_eye_keeps_distance() -> None:
    cam = OrbitCamera(distance=35.0, yaw=1.2, pitch=-0.4)
    assert np.linalg.norm(cam.eye()) == pytest.approx(35.0)


def test_view_projection_is_transposed_f4() -> None:
    cam = OrbitCamera()
    vp = cam.view_projection(16 / 9)
    assert vp.dtype == np.float32
    assert vp.shape == (4, 4)
    assert vp.flags["C_CONTIGUOUS"]
    expected = perspective(cam.fov, 16 / 9, cam.near, cam.far) @ cam.view_matrix()
    np.testing.assert_allclose(vp, expected.T, rtol=1e-5, atol=1e-6)
