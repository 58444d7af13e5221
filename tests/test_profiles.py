from __future__ import annotations

import numpy as np
import pytest

from printuke.modeling import Profile2D, make_circle, make_ngon, make_polygon, make_rect, profile_hull, profile_intersection, profile_union


def test_rect_area_and_bounds():
    rect = make_rect(size=(4.0, 2.0), center=(1.0, 0.0))
    assert rect.area == pytest.approx(8.0)
    assert rect.bounds == pytest.approx((-1.0, 3.0, -1.0, 1.0))


def test_winding_is_normalised():
    clockwise = Profile2D(np.array([(0, 0), (0, 1), (1, 1), (1, 0)]), [np.array([(0.2, 0.2), (0.4, 0.2), (0.4, 0.4)])])
    assert clockwise.area == pytest.approx(1.0 - 0.02)


def test_duplicate_closing_point_dropped():
    tri = make_polygon([(0, 0), (1, 0), (0, 1), (0, 0)])
    assert tri.outer.shape == (3, 2)


def test_too_few_points_rejected():
    with pytest.raises(ValueError):
        make_polygon([(0, 0), (1, 0)])


def test_ngon_circumradius():
    octagon = make_ngon(sides=8, radius=2.0, rotation_deg=22.5)
    assert np.allclose(np.linalg.norm(octagon.outer, axis=1), 2.0)
    assert octagon.bounds[1] == pytest.approx(2.0 * np.cos(np.deg2rad(22.5)))


def test_scale_about_point():
    rect = make_rect(size=(2.0, 2.0), center=(3.0, 0.0)).scale((0.5, 1.0), origin=(2.0, 0.0))
    assert rect.bounds == pytest.approx((2.0, 3.0, -1.0, 1.0))


def test_span_at():
    rect = make_rect(size=(4.0, 2.0))
    assert rect.span_at(0.5) == pytest.approx((-1.0, 1.0))
    assert rect.span_at(5.0) is None


def test_hull_of_two_circles():
    hulled = profile_hull([make_circle(1.0, (0.0, 0.0), 32), make_circle(2.0, (10.0, 0.0), 32)])
    xmin, xmax, ymin, ymax = hulled.bounds
    assert xmin == pytest.approx(-1.0, abs=1e-6)
    assert xmax == pytest.approx(12.0, abs=1e-6)
    assert ymax == pytest.approx(2.0, abs=0.05)


def test_union_of_overlapping_rects():
    merged = profile_union([make_rect((2.0, 2.0)), make_rect((2.0, 2.0), center=(1.0, 0.0))])
    assert merged.area == pytest.approx(6.0)


def test_intersection_clips_circle_to_half_plane():
    circle = make_circle(2.0, (0.0, 0.0), 64)
    lower = profile_intersection([circle, make_rect((6.0, 3.0), center=(0.0, -1.5))])
    xmin, xmax, ymin, ymax = lower.bounds
    assert ymax == pytest.approx(0.0, abs=1e-9)
    assert ymin == pytest.approx(-2.0, abs=1e-6)
    assert lower.area == pytest.approx(circle.area / 2.0, rel=1e-6)
