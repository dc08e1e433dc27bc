from __future__ import annotations

import numpy as np
import pytest

from api import CURVE_EXAMPLE_SOURCE, EXAMPLE_SOURCE, FunctionKind, FunctionSandbox
from sampling import sample_curve, sample_parametric_curve, tessellate

# What this tests
# - The bundled example programs compile, register the expected kinds and sample cleanly.


@pytest.mark.smoke
def test_surface_example_registers_torus_and_klein():
    result = FunctionSandbox().load(EXAMPLE_SOURCE)
    assert [(f.name, f.kind) for f in result.functions] == [
        ("torus", FunctionKind.SURFACE),
        ("klein", FunctionKind.SURFACE),
    ]
    for f in result.functions:
        mesh = tessellate(f.fn, 15, 0.0)
        assert mesh is not None
        assert mesh.n_vertices == 225
        assert mesh.failed_samples == 0
        assert np.all(np.isfinite(mesh.vertices))


@pytest.mark.smoke
def test_curve_example_registers_wave_and_rose():
    result = FunctionSandbox().load(CURVE_EXAMPLE_SOURCE)
    by_name = {f.name: f for f in result.functions}
    assert by_name["rose"].kind is FunctionKind.PARAMETRIC_CURVE
    assert by_name["wave"].kind is FunctionKind.CURVE
    assert sample_curve(by_name["wave"].fn, (-500.0, 1000.0), 0.0).n_points == 1000
    assert sample_parametric_curve(by_name["rose"].fn, 0.0).n_points == 1000
