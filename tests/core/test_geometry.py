from __future__ import annotations

import numpy as np
import pytest

from engine.core.geometry import Mesh, Polyline
from engine.core.sample import SampleFailure


def _quad_mesh() -> Mesh:
    # 2x2 格子（4 頂点 / 2 三角形）
    verts = np.array(
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]], dtype=np.float64
    )
    idx = np.array([[0, 1, 2], [1, 3, 2]], dtype=np.int64)
    return Mesh(verts, idx, nu=2, nv=2)


def test_mesh_normalizes_dtypes() -> None:
    m = _quad_mesh()
    assert m.vertices.dtype == np.float32
    assert m.indices.dtype == np.uint32
    assert m.n_vertices == 4
    assert m.n_triangles == 2
    assert m.resolution == 2
    assert len(m) == 4
    assert not m.is_degraded


def test_mesh_rejects_grid_mismatch() -> None:
    with pytest.raises(ValueError):
        Mesh(np.zeros((5, 3)), np.empty((0, 3)), nu=2, nv=2)


def test_mesh_rejects_out_of_range_index() -> None:
    with pytest.raises(ValueError):
        Mesh(np.zeros((4, 3)), np.array([[0, 1, 4]]), nu=2, nv=2)


def test_mesh_rejects_bad_vertex_shape() -> None:
    with pytest.raises(ValueError):
        Mesh(np.zeros((4, 2)), np.empty((0, 3)), nu=2, nv=2)


def test_mesh_accepts_empty_indices() -> None:
    m = Mesh(np.zeros((1, 3)), np.empty(0), nu=1, nv=1)
    assert m.indices.shape == (0, 3)
    # 三角形が無い頂点の法線は +Z
    np.testing.assert_allclose(m.normals(), [[0.0, 0.0, 1.0]])


def test_mesh_as_arrays_are_readonly() -> None:
    v, i = _quad_mesh().as_arrays()
    with pytest.raises(ValueError):
        v[0, 0] = 1.0
    with pytest.raises(ValueError):
        i[0, 0] = 1


def test_mesh_normals_of_flat_quad_point_up() -> None:
    m = _quad_mesh()
    n = m.normals()
    assert n.shape == (4, 3)
    np.testing.assert_allclose(n, np.tile([0.0, 0.0, 1.0], (4, 1)), atol=1e-6)
    # キャッシュされる
    assert m.normals() is n


def test_mesh_interleaved_layout() -> None:
    m = _quad_mesh()
    inter = m.interleaved()
    assert inter.shape == (4, 6)
    assert inter.dtype == np.float32
    np.testing.assert_array_equal(inter[:, :3], m.vertices)


def test_mesh_bounds() -> None:
    lo, hi = _quad_mesh().bounds()
    np.testing.assert_array_equal(lo, [0.0, 0.0, 0.0])
    np.testing.assert_array_equal(hi, [1.0, 1.0, 0.0])


def test_mesh_failed_samples_range_and_first_failure() -> None:
    fail = SampleFailure((0.0, 0.0, 0.0), "ZeroDivisionError", "division by zero")
    m = Mesh(np.zeros((4, 3)), np.empty((0, 3)), nu=2, nv=2, failed_samples=1, first_failure=fail)
    assert m.is_degraded
    assert m.first_failure is fail
    assert "failed=1" in repr(m)
    with pytest.raises(ValueError):
        Mesh(np.zeros((4, 3)), np.empty((0, 3)), nu=2, nv=2, failed_samples=5)


def test_polyline_basics() -> None:
    p = Polyline(np.array([[0, 0], [1, -2]], dtype=np.float64))
    assert p.points.dtype == np.float32
    assert p.n_points == 2
    assert not p.is_empty
    assert len(p) == 2
    assert p.to_svg_points() == "0,0 1,-2"


def test_polyline_empty() -> None:
    p = Polyline.empty()
    assert p.is_empty
    assert p.points.shape == (0, 2)
    assert p.to_svg_points() == ""


def test_polyline_rejects_3d_points() -> None:
    with pytest.raises(ValueError):
        Polyline(np.zeros((3, 3)))


def test_sample_failure_describe() -> None:
    f = SampleFailure.from_exception((0.5, 0.25), ValueError("bad"))
    assert f.error_type == "ValueError"
    assert f.describe() == "f(0.5, 0.25) -> ValueError: bad"
