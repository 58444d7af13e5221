from __future__ import annotations

import warnings

import pytest

from printuke.modeling import make_box
from printuke.printability import warn_min_feature, warn_min_wall
from printuke.validation import (
    ValidationError,
    check_registration,
    inradius_from,
    min_wall_thickness,
    require_positive,
)


def test_require_positive():
    require_positive("width", 1.0)
    with pytest.raises(ValidationError):
        require_positive("width", 0.0)
    with pytest.raises(ValidationError):
        require_positive("width", float("nan"))


def test_validation_error_is_value_error():
    assert issubclass(ValidationError, ValueError)


def test_inradius_from_centre_of_box():
    box = make_box(size=(10.0, 4.0, 6.0))
    assert inradius_from(box, (0.0, 0.0, 0.0)) == pytest.approx(2.0)
    assert inradius_from(box, (0.0, 0.0, 2.5)) == pytest.approx(0.5)
    assert inradius_from(box, (0.0, 0.0, 10.0)) < 0


def test_min_wall_uniform_shrink():
    box = make_box(size=(10.0, 10.0, 10.0))
    # Shrinking by 0.8 about the centre leaves 1 mm walls.
    assert min_wall_thickness(box, 0.8, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)) == pytest.approx(1.0)


def test_min_wall_with_offset_thins_one_side():
    box = make_box(size=(10.0, 10.0, 10.0))
    wall = min_wall_thickness(box, 0.8, (0.0, 0.0, 0.0), (0.0, 0.0, -0.5))
    # Bottom wall is 5 - 4 - 0.5.
    assert wall == pytest.approx(0.5)


def test_min_wall_rejects_bad_scale():
    with pytest.raises(ValidationError):
        min_wall_thickness(make_box(), 1.0, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


def test_check_registration():
    check_registration(4.0, 4.2, 0.2)
    check_registration(4.0, 4.0, 0.2)
    with pytest.raises(ValidationError):
        check_registration(4.0, 4.5, 0.2)


def test_printability_warnings():
    with pytest.warns(RuntimeWarning, match="nozzle"):
        warn_min_feature("rib", 0.2, nozzle_diameter=0.4)
    with pytest.warns(RuntimeWarning, match="perimeters"):
        warn_min_wall("skin", 0.6, nozzle_diameter=0.4)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        warn_min_feature("rib", 0.6, nozzle_diameter=0.4)
        warn_min_wall("skin", 0.8, nozzle_diameter=0.4)
