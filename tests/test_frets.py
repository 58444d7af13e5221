from __future__ import annotations

import pytest

from printuke.frets import (
    fret_distance,
    fret_offset,
    fret_offsets,
    fret_position,
    marker_frets,
    marker_offset,
)

SCALE = 457.2


def test_octave_is_half_scale():
    assert fret_position(SCALE, 12) == pytest.approx(SCALE / 2.0)
    assert fret_offset(SCALE, 12) == pytest.approx(SCALE / 2.0)


def test_nut_is_fret_zero():
    assert fret_position(SCALE, 0) == pytest.approx(SCALE)
    assert fret_offset(SCALE, 0) == pytest.approx(0.0)


def test_positions_positive_and_decreasing():
    positions = [fret_position(SCALE, n) for n in range(0, 18)]
    assert all(p > 0 for p in positions)
    assert all(a > b for a, b in zip(positions, positions[1:]))


def test_distance_is_gap_between_neighbours():
    for n in range(1, 18):
        assert fret_distance(SCALE, n) == pytest.approx(fret_offset(SCALE, n) - fret_offset(SCALE, n - 1))
        assert fret_distance(SCALE, n) > 0
    assert fret_distance(SCALE, 1) == pytest.approx(SCALE * (1 - 2 ** (-1 / 12)))


def test_distances_shrink_up_the_neck():
    gaps = [fret_distance(SCALE, n) for n in range(1, 18)]
    assert all(a > b for a, b in zip(gaps, gaps[1:]))


def test_fret_offsets_count():
    offsets = fret_offsets(SCALE, 17)
    assert len(offsets) == 17
    assert offsets[11] == pytest.approx(SCALE / 2.0)


def test_marker_sits_between_frets():
    x = marker_offset(SCALE, 5)
    assert fret_offset(SCALE, 4) < x < fret_offset(SCALE, 5)


def test_marker_frets_for_short_board():
    assert marker_frets(10) == [(3, 1), (5, 1), (7, 1), (9, 1)]
    assert (12, 2) in marker_frets(17)


@pytest.mark.parametrize("n", [0, -1, 1.5])
def test_fret_distance_rejects_bad_index(n):
    with pytest.raises(ValueError):
        fret_distance(SCALE, n)


def test_non_positive_scale_rejected():
    with pytest.raises(ValueError):
        fret_position(0.0, 1)
