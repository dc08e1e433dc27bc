import math

import numpy as np
import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a dev optional dependency")
from hypothesis import given, strategies as st  # type: ignore

from engine.core.viewport import ViewBox, begin_drag, pan, zoom_at
from sampling import tessellate
from sampling.grid import grid_indices, triangle_count

_coord = st.floats(-1e4, 1e4, allow_nan=False, allow_infinity=False)
_extent = st.floats(1e-3, 1e4, allow_nan=False, allow_infinity=False)
_unit = st.floats(0.0, 1.0, allow_nan=False)


@pytest.mark.optional
@given(x=_coord, y=_coord, w=_extent, h=_extent, nx=_unit, ny=_unit, d=st.sampled_from([1, -1]))
def test_zoom_keeps_anchor(x, y, w, h, nx, ny, d):
    v = ViewBox(x, y, w, h)
    before = v.point_at(nx, ny)
    after = zoom_at(v, nx, ny, d).point_at(nx, ny)
    tol = 1e-9 * max(1.0, abs(x) + w, abs(y) + h)
    assert math.isclose(after[0], before[0], abs_tol=tol)
    assert math.isclose(after[1], before[1], abs_tol=tol)


@pytest.mark.optional
@given(w=_extent, n=st.integers(1, 400))
def test_zoom_in_respects_floor(w, n):
    v = ViewBox(0.0, 0.0, w, w)
    for _ in range(n):
        v = zoom_at(v, 0.5, 0.5, -1, step=0.5, min_extent=1e-3)
    assert v.width >= 1e-3
    assert v.height >= 1e-3


@pytest.mark.optional
@given(x=_coord, y=_coord, w=_extent, h=_extent, sx=_unit, sy=_unit, mx=_unit, my=_unit)
def test_pan_is_reversible(x, y, w, h, sx, sy, mx, my):
    v = ViewBox(x, y, w, h)
    drag = begin_drag(v, sx, sy)
    moved = pan(v, drag, mx, my)
    assert (moved.width, moved.height) == (w, h)
    back = pan(moved, drag, sx, sy)
    np.testing.assert_allclose(back.as_tuple(), v.as_tuple(), rtol=1e-12, atol=1e-9)


@pytest.mark.optional
@given(r=st.integers(1, 12), wu=st.booleans(), wv=st.booleans())
def test_grid_indices_are_in_range(r, wu, wv):
    idx = grid_indices(r, wu, wv)
    assert idx.shape == (triangle_count(r, wu, wv), 3)
    if idx.size:
        assert int(idx.max()) < r * r
        # 退化三角形を作らない
        assert np.all((idx[:, 0] != idx[:, 1]) & (idx[:, 1] != idx[:, 2]) & (idx[:, 0] != idx[:, 2]))


@pytest.mark.optional
@given(r=st.integers(1, 10), t=st.floats(0, 1e3, allow_nan=False))
def test_tessellation_counts(r, t):
    mesh = tessellate(lambda u, v, tt: (math.sin(u + tt), v, u * v), r, t)
    assert mesh is not None
    assert mesh.n_vertices == r * r
    assert mesh.n_triangles == 2 * (r - 1) ** 2
    assert np.all(np.isfinite(mesh.vertices))
