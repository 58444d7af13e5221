from __future__ import annotations

import numpy as np
import pytest

from printuke.modeling import (
    along_x,
    along_y,
    make_box,
    make_cylinder,
    mirror,
    place_on_bed,
    rotate,
    scale,
    translate,
)


def _bounds(mesh):
    return np.array(mesh.bounds, dtype=float)


def test_translate_bounds():
    base = make_box(size=(2.0, 4.0, 6.0))
    moved = translate(base, (1.0, 2.0, 3.0))
    assert np.allclose(_bounds(moved), [0.0, 2.0, 0.0, 4.0, 0.0, 6.0])
    assert np.allclose(_bounds(base), [-1.0, 1.0, -2.0, 2.0, -3.0, 3.0])


def test_rotate_axis_z_90():
    base = make_box(size=(2.0, 4.0, 1.0))
    turned = rotate(base, axis=(0.0, 0.0, 1.0), angle_deg=90.0)
    bounds = _bounds(turned)
    assert np.allclose(bounds[[0, 1]], [-2.0, 2.0], atol=1e-6)
    assert np.allclose(bounds[[2, 3]], [-1.0, 1.0], atol=1e-6)


def test_rotate_about_origin_point():
    base = make_box(size=(2.0, 2.0, 2.0), center=(3.0, 0.0, 0.0))
    turned = rotate(base, (0.0, 0.0, 1.0), 180.0, origin=(2.0, 0.0, 0.0))
    assert np.allclose(_bounds(turned)[[0, 1]], [0.0, 2.0], atol=1e-6)


def test_scale_bounds_and_origin():
    base = make_box(size=(2.0, 4.0, 6.0))
    assert np.allclose(_bounds(scale(base, (2.0, 0.5, 1.0))), [-2.0, 2.0, -1.0, 1.0, -3.0, 3.0])
    shrunk = scale(base, 0.5, origin=(1.0, 2.0, 3.0))
    assert np.allclose(_bounds(shrunk), [0.0, 1.0, 0.0, 2.0, 0.0, 3.0])


def test_scale_rejects_zero():
    with pytest.raises(ValueError):
        scale(make_box(), (1.0, 0.0, 1.0))


def test_mirror_flips_axis_and_keeps_volume_positive():
    base = make_box(size=(2.0, 2.0, 2.0), center=(2.0, 0.0, 0.0))
    flipped = mirror(base, (1.0, 0.0, 0.0))
    assert np.allclose(_bounds(flipped)[[0, 1]], [-3.0, -1.0])
    assert flipped.volume == pytest.approx(8.0)


def test_along_x_and_along_y_remap_axes():
    rod = make_cylinder(radius=1.0, height=10.0, center=(0.0, 0.0, 5.0), segments=16)
    along = along_x(rod)
    assert along.extents[0] == pytest.approx(10.0)
    assert along.bounds[0] == pytest.approx(0.0, abs=1e-6)
    across = along_y(rod)
    assert across.extents[1] == pytest.approx(10.0)
    assert across.volume > 0


def test_place_on_bed():
    box = make_box(size=(1.0, 1.0, 4.0), center=(0.0, 0.0, -7.0))
    assert place_on_bed(box).bounds[4] == pytest.approx(0.0)
