from __future__ import annotations

import numpy as np
import pytest

from printuke.parts.accessories import (
    TAILPIECE_HEIGHT,
    TAILPIECE_ROUNDING,
    bridge_height,
    bridge_width,
    make_bridge,
    make_nut,
    make_tailpiece,
    nut_height,
    string_gauges,
    tailpiece_x,
)
from printuke.parts.fingerboard import FRET_CROWN
from printuke.validation import ValidationError

from tests.helpers import is_watertight


def test_heights_give_action_at_octave(params):
    string_at_octave = (nut_height(params) + bridge_height(params)) / 2.0
    assert string_at_octave == pytest.approx(params.fingerboard_thickness + FRET_CROWN + params.action)


def test_low_variants(params):
    assert nut_height(params, low=True) == pytest.approx(nut_height(params) - 0.5)
    assert bridge_height(params, low=True) == pytest.approx(bridge_height(params) - 1.0)


def test_string_gauges():
    assert np.allclose(string_gauges(4), (1.3, 1.1, 0.9, 0.7))
    assert np.allclose(string_gauges(1), (1.3,))
    six = string_gauges(6)
    assert six[0] == pytest.approx(1.3) and six[-1] == pytest.approx(0.7)
    with pytest.raises(ValueError):
        string_gauges(0)


def test_nut_sits_in_front_of_fingerboard(params, quality):
    nut = make_nut(params, quality)
    xmin, xmax, ymin, ymax, zmin, zmax = nut.bounds
    assert (xmin, xmax) == pytest.approx((-5.0, 0.0), abs=1e-4)
    assert (ymin, ymax) == pytest.approx((-params.neck_width / 2.0, params.neck_width / 2.0), abs=1e-4)
    assert zmin == pytest.approx(0.0, abs=1e-4)
    assert zmax == pytest.approx(nut_height(params), abs=1e-4)
    assert is_watertight(nut)[0]


def test_low_nut_is_lower(params, quality):
    assert make_nut(params, quality, low=True).bounds[5] == pytest.approx(nut_height(params, low=True), abs=1e-4)


def test_bridge_centred_on_saddle(params, quality):
    bridge = make_bridge(params, quality)
    xmin, xmax, ymin, ymax, zmin, zmax = bridge.bounds
    assert (xmin + xmax) / 2.0 == pytest.approx(params.scale_length, abs=1e-4)
    assert ymax - ymin == pytest.approx(bridge_width(params), abs=1e-4)
    assert zmin == pytest.approx(0.0, abs=1e-4)
    assert zmax == pytest.approx(bridge_height(params), abs=1e-4)
    assert is_watertight(bridge)[0]


def test_bridge_arches_relieve_the_blade(params, quality):
    bridge = make_bridge(params, quality)
    height = bridge_height(params)
    full = (10.0 + 3.0) / 2.0 * height * bridge_width(params)
    assert bridge.volume < 0.9 * full


def test_bridge_too_low_rejected(params, quality):
    thin = params.replace(fingerboard_thickness=0.5, action=0.5)
    with pytest.raises(ValidationError):
        make_bridge(thin, quality)


def test_tailpiece_rounded_and_drilled(params, quality):
    tail = make_tailpiece(params, quality)
    xmin, xmax, ymin, ymax, zmin, zmax = tail.bounds
    assert (xmin + xmax) / 2.0 == pytest.approx(tailpiece_x(params), abs=0.1)
    assert zmin == pytest.approx(-TAILPIECE_ROUNDING, abs=0.05)
    assert zmax == pytest.approx(TAILPIECE_HEIGHT + TAILPIECE_ROUNDING, abs=0.05)
    assert is_watertight(tail)[0]


def test_thin_notch_warns_for_wide_nozzle(params, quality):
    with pytest.warns(RuntimeWarning, match="string notch"):
        make_nut(params.replace(nozzle_diameter=0.8), quality)
