from __future__ import annotations

import numpy as np
import pytest

from printuke.modeling import linear_extrude, make_circle, make_polygon, make_rect


def test_linear_extrude_positive():
    mesh = linear_extrude(make_rect(size=(2.0, 3.0)), height=4.0)
    assert mesh.n_faces > 0
    assert mesh.volume == pytest.approx(24.0)
    assert np.allclose(mesh.bounds[4:], (0.0, 4.0))


def test_linear_extrude_invalid_height():
    with pytest.raises(ValueError):
        linear_extrude(make_rect(size=(1.0, 0.6)), height=0.0)


def test_linear_extrude_taper_scales_about_origin():
    mesh = linear_extrude(make_rect(size=(2.0, 2.0)), height=3.0, scale_top=0.5)
    top = mesh.vertices[np.isclose(mesh.vertices[:, 2], 3.0)]
    assert np.allclose(np.abs(top[:, :2]).max(axis=0), (0.5, 0.5))
    # Frustum of squares 4 and 1 over height 3.
    assert mesh.volume == pytest.approx(3.0 / 3.0 * (4.0 + 1.0 + 2.0), rel=1e-6)


def test_linear_extrude_anisotropic_scale():
    mesh = linear_extrude(make_rect(size=(2.0, 2.0)), height=1.0, scale_top=(0.5, 1.0))
    top = mesh.vertices[np.isclose(mesh.vertices[:, 2], 1.0)]
    assert np.allclose(np.abs(top).max(axis=0)[:2], (0.5, 1.0))


def test_linear_extrude_center_offset():
    mesh = linear_extrude(make_circle(radius=1.0, segments=16), height=2.0, center=(5.0, 0.0, -2.0))
    assert mesh.bounds[4] == pytest.approx(-2.0)
    assert mesh.bounds[5] == pytest.approx(0.0)
    assert mesh.bounds[1] == pytest.approx(6.0)


def test_linear_extrude_concave_profile():
    ell = make_polygon([(0, 0), (3, 0), (3, 1), (1, 1), (1, 3), (0, 3)])
    mesh = linear_extrude(ell, height=1.0)
    assert mesh.volume == pytest.approx(5.0)
