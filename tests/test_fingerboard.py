from __future__ import annotations

import numpy as np
import pytest

from printuke.frets import fret_offset, marker_offset
from printuke.parts.fingerboard import (
    FRET_SLOT_DEPTH,
    FRET_SLOT_WIDTH,
    SIDE_DOT_DIAMETER,
    fingerboard_length,
    fingerboard_registration,
    fingerboard_width_at,
    make_fingerboard,
    split_fingerboard,
    split_x,
)

from tests.helpers import is_watertight, solid_fraction_at


def test_length_runs_past_last_fret(params):
    assert fingerboard_length(params) == pytest.approx(fret_offset(params.scale_length, params.num_frets) + 8.0)


def test_width_flares_towards_body(params):
    assert fingerboard_width_at(params, 0.0) == pytest.approx(params.neck_width)
    assert fingerboard_width_at(params, fingerboard_length(params)) == pytest.approx(params.neck_width + 8.0)


def test_board_bounds(params, quality):
    board = make_fingerboard(params, quality)
    xmin, xmax, ymin, ymax, zmin, zmax = board.bounds
    assert xmin == pytest.approx(0.0, abs=1e-4)
    assert xmax == pytest.approx(fingerboard_length(params), abs=1e-4)
    assert zmin == pytest.approx(0.0, abs=1e-4)
    assert zmax == pytest.approx(params.fingerboard_thickness, abs=1e-4)
    assert ymax == pytest.approx((params.neck_width + 8.0) / 2.0, abs=1e-4)
    assert is_watertight(board)[0]


def test_fret_slots_cut_at_fret_offsets(params, quality):
    board = make_fingerboard(params, quality)
    slot_floor = params.fingerboard_thickness - FRET_SLOT_DEPTH
    x12 = fret_offset(params.scale_length, 12)
    near = np.isclose(board.vertices[:, 0], x12 - FRET_SLOT_WIDTH / 2.0, atol=1e-3)
    assert np.any(np.isclose(board.vertices[near, 2], slot_floor, atol=1e-3))


def test_split_between_seventh_and_eighth_fret(params):
    x = split_x(params)
    assert fret_offset(params.scale_length, 7) < x < fret_offset(params.scale_length, 8)


def test_split_halves_meet_at_plane(params, quality):
    nut_side, body_side = split_fingerboard(params, quality)
    x = split_x(params)
    assert nut_side.bounds[1] == pytest.approx(x, abs=1e-4)
    assert body_side.bounds[0] == pytest.approx(x, abs=1e-4)
    assert nut_side.volume > 0 and body_side.volume > 0


def test_registration_sockets_match_on_both_faces(params):
    features = fingerboard_registration(params)
    nut = sorted(f.position for f in features if f.part == "fingerboard-nut")
    body = sorted(f.position for f in features if f.part == "fingerboard-body")
    assert nut == body
    assert len(nut) == 2
    for feature in features:
        assert feature.role == "socket"
        assert feature.diameter == pytest.approx(params.filament_diameter + params.peg_clearance)


def test_top_dots_are_sunk_into_the_face(params, quality):
    board = make_fingerboard(params, quality)
    top = params.fingerboard_thickness
    single = marker_offset(params.scale_length, 5)
    assert solid_fraction_at(board, (single, 0.0, top - 0.5)) == pytest.approx(0.0, abs=1e-3)
    assert solid_fraction_at(board, (single, 0.0, top - 1.5)) == pytest.approx(1.0, abs=1e-3)

    octave = marker_offset(params.scale_length, 12)
    quarter = fingerboard_width_at(params, octave) / 4.0
    for y in (-quarter, quarter):
        assert solid_fraction_at(board, (octave, y, top - 0.5)) == pytest.approx(0.0, abs=1e-3)
    assert solid_fraction_at(board, (octave, 0.0, top - 0.5)) == pytest.approx(1.0, abs=1e-3)


def test_side_dots_on_bass_edge_only(params, quality):
    board = make_fingerboard(params, quality)
    x = marker_offset(params.scale_length, 5)
    z = params.fingerboard_thickness - SIDE_DOT_DIAMETER
    edge = fingerboard_width_at(params, x) / 2.0
    assert solid_fraction_at(board, (x, -edge + 0.6, z), size=0.3) == pytest.approx(0.0, abs=1e-3)
    assert solid_fraction_at(board, (x, edge - 0.6, z), size=0.3) == pytest.approx(1.0, abs=1e-3)
