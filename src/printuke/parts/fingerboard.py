"""Fingerboard: a flat plate with fret slots, position dots and a two-piece print split."""

from __future__ import annotations

from printuke.frets import fret_offset, marker_frets, marker_offset
from printuke.mesh import Mesh
from printuke.mesh_quality import MeshQuality, resolve_quality
from printuke.modeling import (
    boolean_difference,
    linear_extrude,
    make_box_between,
    make_cylinder,
    make_polygon,
    split_at,
)
from printuke.modeling.profiles import Profile2D
from printuke.params import InstrumentParams
from printuke.printability import warn_min_feature

from .hardware import RegistrationFeature, dowel_socket

TAIL_PAST_LAST_FRET = 8.0
FLARE = 8.0
FRET_SLOT_WIDTH = 0.6
FRET_SLOT_DEPTH = 1.5
FRET_CROWN = 1.2
DOT_DIAMETER = 5.0
DOT_DEPTH = 1.0
SIDE_DOT_DIAMETER = 2.0
SIDE_DOT_DEPTH = 1.5
SPLIT_AFTER_FRET = 7
DOWEL_DEPTH = 6.0


def fingerboard_length(params: InstrumentParams) -> float:
    return fret_offset(params.scale_length, params.num_frets) + TAIL_PAST_LAST_FRET


def fingerboard_width_at(params: InstrumentParams, x: float) -> float:
    return params.neck_width + FLARE * x / fingerboard_length(params)


def fingerboard_outline(params: InstrumentParams) -> Profile2D:
    length = fingerboard_length(params)
    nut_half = params.neck_width / 2.0
    end_half = fingerboard_width_at(params, length) / 2.0
    return make_polygon([(0.0, -nut_half), (length, -end_half), (length, end_half), (0.0, nut_half)])


def split_x(params: InstrumentParams) -> float:
    """Split plane between two frets clear of any marker."""
    if params.num_frets > SPLIT_AFTER_FRET:
        return (
            fret_offset(params.scale_length, SPLIT_AFTER_FRET)
            + fret_offset(params.scale_length, SPLIT_AFTER_FRET + 1)
        ) / 2.0
    return fingerboard_length(params) / 2.0


def _fret_slots(params: InstrumentParams) -> list[Mesh]:
    top = params.fingerboard_thickness
    margin = 2.0 + FLARE
    half = params.neck_width / 2.0 + margin
    slots = []
    for n in range(1, params.num_frets + 1):
        x = fret_offset(params.scale_length, n)
        slots.append(
            make_box_between(
                (x - FRET_SLOT_WIDTH / 2.0, -half, top - FRET_SLOT_DEPTH),
                (x + FRET_SLOT_WIDTH / 2.0, half, top + 1.0),
            )
        )
    return slots


def _position_dots(params: InstrumentParams, quality: MeshQuality) -> list[Mesh]:
    top = params.fingerboard_thickness
    dots = []
    for fret, count in marker_frets(params.num_frets):
        x = marker_offset(params.scale_length, fret)
        quarter = fingerboard_width_at(params, x) / 4.0
        ys = (0.0,) if count == 1 else (-quarter, quarter)
        for y in ys:
            dots.append(
                make_cylinder(
                    radius=DOT_DIAMETER / 2.0,
                    height=2.0 * DOT_DEPTH,
                    center=(x, y, top),
                    segments=quality.segments,
                )
            )
    return dots


def _side_dots(params: InstrumentParams, quality: MeshQuality) -> list[Mesh]:
    """Dots drilled into the bass edge, readable from the player's side."""
    z = params.fingerboard_thickness - SIDE_DOT_DIAMETER
    dots = []
    for fret, count in marker_frets(params.num_frets):
        x = marker_offset(params.scale_length, fret)
        edge = -fingerboard_width_at(params, x) / 2.0
        xs = (x,) if count == 1 else (x - 2.0, x + 2.0)
        for dot_x in xs:
            dots.append(
                make_cylinder(
                    radius=SIDE_DOT_DIAMETER / 2.0,
                    height=2.0 * SIDE_DOT_DEPTH,
                    center=(dot_x, edge, z),
                    direction=(0.0, 1.0, 0.0),
                    segments=quality.segments // 2,
                )
            )
    return dots


def fingerboard_registration(params: InstrumentParams) -> list[RegistrationFeature]:
    """Filament dowel sockets on both faces of the split; filament is the pin."""
    x = split_x(params)
    quarter = fingerboard_width_at(params, x) / 4.0
    z = params.fingerboard_thickness / 2.0
    diameter = params.filament_diameter + params.peg_clearance
    features = []
    for part, axis in (("fingerboard-nut", (1.0, 0.0, 0.0)), ("fingerboard-body", (-1.0, 0.0, 0.0))):
        for y in (-quarter, quarter):
            features.append(
                RegistrationFeature(
                    part=part,
                    role="socket",
                    position=(x, y, z),
                    axis=axis,
                    diameter=diameter,
                    depth=DOWEL_DEPTH,
                )
            )
    return features


def make_fingerboard(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    """The whole board in instrument coordinates, sitting on z = 0."""

    quality = resolve_quality(quality)
    warn_min_feature("fret slot width", FRET_SLOT_WIDTH, params.nozzle_diameter)
    blank = linear_extrude(fingerboard_outline(params), height=params.fingerboard_thickness)
    cutters = _fret_slots(params) + _position_dots(params, quality) + _side_dots(params, quality)
    return boolean_difference(blank, cutters)


def split_fingerboard(params: InstrumentParams, quality: MeshQuality | None = None) -> tuple[Mesh, Mesh]:
    """Return (nut side, body side) with filament dowel sockets in the joint."""

    quality = resolve_quality(quality)
    board = make_fingerboard(params, quality)
    sockets = [
        dowel_socket(f.position, (1.0, 0.0, 0.0), f.diameter, f.depth, segments=quality.segments // 2)
        for f in fingerboard_registration(params)
        if f.part == "fingerboard-nut"
    ]
    board = boolean_difference(board, sockets)
    return split_at(board, axis=0, offset=split_x(params))


__all__ = [
    "FRET_CROWN",
    "fingerboard_length",
    "fingerboard_outline",
    "fingerboard_registration",
    "fingerboard_width_at",
    "make_fingerboard",
    "split_fingerboard",
    "split_x",
]
