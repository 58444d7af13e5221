"""Neck: half-cylinder blank, truss-rod channel, heel block and headstock."""

from __future__ import annotations

import math
from typing import List, NamedTuple

from printuke.mesh import Mesh
from printuke.mesh_quality import MeshQuality, resolve_quality
from printuke.modeling import (
    along_x,
    boolean_difference,
    boolean_union,
    hull,
    linear_extrude,
    make_box_between,
    make_circle,
    make_cylinder,
    make_ngon,
    make_rect,
    mirror,
    profile_intersection,
    profile_union,
    scale,
    split_at,
)
from printuke.params import InstrumentParams
from printuke.validation import ValidationError

from .hardware import RegistrationFeature, alignment_peg, bolt_hole, dowel_socket, maker_mark, tapered_slot

BLANK_START_X = -8.0

# Truss-rod channel, cut down from the top plane.
ROD_SLOT_WIDTH = 4.5
ROD_SLOT_DEPTH = 6.0
ROD_SLOT_START_X = 20.0
ROD_SLOT_END_BEFORE_JOINT = 10.0
ADJUSTER_WIDTH = 8.0
ADJUSTER_DEPTH = 8.0
ADJUSTER_START_X = -16.0
ADJUSTER_END_X = 10.0
COUNTERBORE_DIAMETER = 9.0
COUNTERBORE_X = -12.0
ROD_MARGIN = 2.0

HEEL_LENGTH = 45.0
HEEL_OVERLAP = 5.0
HEEL_DROP = 12.0
HEEL_TAPER = (0.85, 1.0)
HEEL_BOLT_X = (12.0, 30.0)
HEEL_BOLT_Y = 9.0
BOLT_HEAD_DIAMETER = 8.0
BOLT_HEAD_DEPTH = 4.0

HEADSTOCK_THICKNESS = 14.0
HEADSTOCK_TAPER = 0.9
HEADSTOCK_OCTAGONS = ((-50.0, 30.0), (-85.0, 28.0))
HEADSTOCK_ROOT_X = -30.0
HEADSTOCK_ROOT_WIDTH = 44.0
TUNER_HOLE_DIAMETER = 6.0
TUNER_HOLES = ((-55.0, 17.0), (-85.0, 17.0))
MARK_POSITION = (-100.0, 0.0)
MARK_SIZE = 12.0

SPLIT_X = 40.0
PEG_DIAMETER = 4.0
PEG_LENGTH = 8.0
PEG_POSITIONS = ((-10.0, -8.0), (10.0, -8.0))


class TrussStation(NamedTuple):
    x: float
    channel_width: float
    channel_depth: float
    blank_width: float
    blank_depth: float


def _rod_slot_end(params: InstrumentParams) -> float:
    return params.neck_offset - ROD_SLOT_END_BEFORE_JOINT


def _channel_section(params: InstrumentParams, x: float) -> tuple[float, float]:
    if x <= ADJUSTER_END_X:
        width, depth = ADJUSTER_WIDTH, ADJUSTER_DEPTH
    elif x < ROD_SLOT_START_X:
        t = (x - ADJUSTER_END_X) / (ROD_SLOT_START_X - ADJUSTER_END_X)
        width = ADJUSTER_WIDTH + t * (ROD_SLOT_WIDTH - ADJUSTER_WIDTH)
        depth = ADJUSTER_DEPTH + t * (ROD_SLOT_DEPTH - ADJUSTER_DEPTH)
    else:
        width, depth = ROD_SLOT_WIDTH, ROD_SLOT_DEPTH
    radius = COUNTERBORE_DIAMETER / 2.0
    dx = abs(x - COUNTERBORE_X)
    if dx < radius:
        width = max(width, 2.0 * math.sqrt(radius * radius - dx * dx))
    return width, depth


def _blank_section(params: InstrumentParams, x: float, half_width: float) -> tuple[float, float]:
    """Blank width and the depth of solid material under the channel edge at ``x``."""
    if x < BLANK_START_X:
        return min(params.neck_width, HEADSTOCK_ROOT_WIDTH), HEADSTOCK_THICKNESS
    radius = params.neck_width / 2.0
    if half_width >= radius:
        return params.neck_width, 0.0
    return params.neck_width, params.neck_depth * math.sqrt(1.0 - (half_width / radius) ** 2)


def truss_rod_stations(params: InstrumentParams, step: float = 1.0) -> List[TrussStation]:
    start = ADJUSTER_START_X
    end = _rod_slot_end(params)
    count = max(int(math.ceil((end - start) / step)), 1)
    stations = []
    for i in range(count + 1):
        x = start + (end - start) * i / count
        width, depth = _channel_section(params, x)
        blank_width, blank_depth = _blank_section(params, x, width / 2.0)
        stations.append(TrussStation(x, width, depth, blank_width, blank_depth))
    return stations


def validate_truss_rod(params: InstrumentParams, margin: float = ROD_MARGIN) -> None:
    """The channel must stay enclosed by ``margin`` of blank at every station."""
    if _rod_slot_end(params) <= ROD_SLOT_START_X:
        raise ValidationError("neck_offset is too short for the truss-rod slot.")
    for station in truss_rod_stations(params):
        if station.channel_width + 2.0 * margin > station.blank_width:
            raise ValidationError(
                f"Truss-rod channel ({station.channel_width:.2f} mm) breaks out of the "
                f"{station.blank_width:.2f} mm neck at x = {station.x:.1f}."
            )
        if station.channel_depth + margin > station.blank_depth:
            raise ValidationError(
                f"Truss-rod channel ({station.channel_depth:.2f} mm deep) breaks through the "
                f"back of the neck at x = {station.x:.1f}."
            )


def truss_rod_channel(params: InstrumentParams, quality: MeshQuality) -> Mesh:
    overcut = 1.0
    slot = make_box_between(
        (ROD_SLOT_START_X, -ROD_SLOT_WIDTH / 2.0, -ROD_SLOT_DEPTH),
        (_rod_slot_end(params), ROD_SLOT_WIDTH / 2.0, overcut),
    )
    adjuster = make_box_between(
        (ADJUSTER_START_X, -ADJUSTER_WIDTH / 2.0, -ADJUSTER_DEPTH),
        (ADJUSTER_END_X, ADJUSTER_WIDTH / 2.0, overcut),
    )
    transition = tapered_slot(
        ADJUSTER_END_X,
        ROD_SLOT_START_X,
        ADJUSTER_WIDTH,
        ROD_SLOT_WIDTH,
        ADJUSTER_DEPTH,
        ROD_SLOT_DEPTH,
        overcut=overcut,
    )
    counterbore = make_cylinder(
        radius=COUNTERBORE_DIAMETER / 2.0,
        height=ADJUSTER_DEPTH + overcut,
        center=(COUNTERBORE_X, 0.0, (overcut - ADJUSTER_DEPTH) / 2.0),
        segments=quality.segments,
    )
    return boolean_union([slot, adjuster, transition, counterbore])


def _half_cylinder(params: InstrumentParams, x_start: float, x_end: float, quality: MeshQuality) -> Mesh:
    """Neck cross-section along x: a cylinder halved at z = 0 and squashed to ``neck_depth``."""
    radius = params.neck_width / 2.0
    length = x_end - x_start
    cylinder = make_cylinder(
        radius=radius,
        height=length,
        center=((x_start + x_end) / 2.0, 0.0, 0.0),
        direction=(1.0, 0.0, 0.0),
        segments=quality.segments,
    )
    cap = make_box_between((x_start - 1.0, -radius - 1.0, 0.0), (x_end + 1.0, radius + 1.0, radius + 1.0))
    half = boolean_difference(cylinder, [cap])
    return scale(half, (1.0, 1.0, params.neck_depth / radius))


def neck_blank(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    quality = resolve_quality(quality)
    return _half_cylinder(params, BLANK_START_X, params.neck_offset, quality)


def heel_block(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    """Circle-plus-square section extruded along x with a taper towards the tail.

    The section is clipped at the top plane so the heel stays under the fingerboard.
    """
    quality = resolve_quality(quality)
    radius = params.neck_width / 2.0
    bottom = heel_bottom_z(params)
    rounded = profile_union(
        [
            make_circle(radius=radius, center=(0.0, -HEEL_DROP), segments=quality.segments),
            make_rect(size=(params.neck_width, HEEL_DROP), center=(0.0, -HEEL_DROP / 2.0)),
        ]
    )
    below_top = make_rect(size=(params.neck_width + 2.0, 1.0 - bottom), center=(0.0, (bottom - 1.0) / 2.0))
    section = profile_intersection([rounded, below_top])
    heel = along_x(linear_extrude(section, height=HEEL_LENGTH, scale_top=HEEL_TAPER))
    return heel.translate((params.neck_offset - HEEL_OVERLAP, 0.0, 0.0))


def heel_bottom_z(params: InstrumentParams) -> float:
    return -(HEEL_DROP + params.neck_width / 2.0)


def heel_bolt_positions(params: InstrumentParams) -> list[tuple[float, float]]:
    return [
        (params.neck_offset + dx, sign * HEEL_BOLT_Y)
        for dx in HEEL_BOLT_X
        for sign in (-1.0, 1.0)
    ]


def _heel_bores(params: InstrumentParams, quality: MeshQuality) -> list[Mesh]:
    depth = -heel_bottom_z(params) + 2.0
    bores = []
    for x, y in heel_bolt_positions(params):
        bores.append(bolt_hole((x, y, 1.0 - depth / 2.0), depth, segments=quality.segments // 2))
        bores.append(
            make_cylinder(
                radius=BOLT_HEAD_DIAMETER / 2.0,
                height=BOLT_HEAD_DEPTH + 1.0,
                center=(x, y, (1.0 - BOLT_HEAD_DEPTH) / 2.0),
                segments=quality.segments // 2,
            )
        )
    return bores


def _octagon_plate(center_x: float, circumradius: float) -> Mesh:
    octagon = make_ngon(sides=8, radius=circumradius, rotation_deg=22.5)
    plate = linear_extrude(octagon, height=HEADSTOCK_THICKNESS, scale_top=HEADSTOCK_TAPER)
    # Full size on the face, tapering towards the back.
    return mirror(plate, (0.0, 0.0, 1.0)).translate((center_x, 0.0, 0.0))


def headstock(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    quality = resolve_quality(quality)
    plates = [_octagon_plate(cx, r) for cx, r in HEADSTOCK_OCTAGONS]
    root = linear_extrude(
        make_rect(size=(2.0, HEADSTOCK_ROOT_WIDTH), center=(HEADSTOCK_ROOT_X, 0.0)),
        height=HEADSTOCK_THICKNESS,
        center=(0.0, 0.0, -HEADSTOCK_THICKNESS),
    )
    throat = hull([_half_cylinder(params, BLANK_START_X, BLANK_START_X + 4.0, quality), root])
    return boolean_union(plates + [throat])


def _tuner_holes(quality: MeshQuality) -> list[Mesh]:
    depth = HEADSTOCK_THICKNESS + 2.0
    holes = []
    for x, y in TUNER_HOLES:
        for sign in (-1.0, 1.0):
            holes.append(
                make_cylinder(
                    radius=TUNER_HOLE_DIAMETER / 2.0,
                    height=depth,
                    center=(x, sign * y, -HEADSTOCK_THICKNESS / 2.0),
                    segments=quality.segments // 2,
                )
            )
    return holes


def neck_envelope(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    """Solid outline of blank and heel; the body subtracts it to form the neck socket."""
    quality = resolve_quality(quality)
    return boolean_union([neck_blank(params, quality), heel_block(params, quality)])


def make_neck(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    quality = resolve_quality(quality)
    validate_truss_rod(params)
    solid = boolean_union(
        [
            neck_blank(params, quality),
            heel_block(params, quality),
            headstock(params, quality),
        ]
    )
    cutters = [truss_rod_channel(params, quality)]
    cutters += _tuner_holes(quality)
    cutters.append(maker_mark((MARK_POSITION[0], MARK_POSITION[1], 0.0), size=MARK_SIZE))
    if not params.fused:
        cutters += _heel_bores(params, quality)
    return boolean_difference(solid, cutters)


def neck_registration(params: InstrumentParams) -> list[RegistrationFeature]:
    socket_diameter = PEG_DIAMETER + params.peg_clearance
    features = []
    for y, z in PEG_POSITIONS:
        features.append(
            RegistrationFeature(
                part="neck-heel",
                role="peg",
                position=(SPLIT_X, y, z),
                axis=(-1.0, 0.0, 0.0),
                diameter=PEG_DIAMETER,
                depth=PEG_LENGTH,
            )
        )
        features.append(
            RegistrationFeature(
                part="neck-head",
                role="socket",
                position=(SPLIT_X, y, z),
                axis=(-1.0, 0.0, 0.0),
                diameter=socket_diameter,
                depth=PEG_LENGTH + 0.5,
            )
        )
    return features


def split_neck(params: InstrumentParams, quality: MeshQuality | None = None) -> tuple[Mesh, Mesh]:
    """Return (head half, heel half); the heel half carries the alignment pegs."""

    quality = resolve_quality(quality)
    neck = make_neck(params, quality)
    head, heel = split_at(neck, axis=0, offset=SPLIT_X)
    segments = quality.segments // 2
    pegs = []
    sockets = []
    for feature in neck_registration(params):
        if feature.role == "peg":
            pegs.append(alignment_peg(feature.position, feature.axis, feature.diameter, feature.depth, segments))
        else:
            sockets.append(
                dowel_socket(feature.position, feature.axis, feature.diameter, feature.depth, segments)
            )
    return boolean_difference(head, sockets), boolean_union([heel] + pegs)


__all__ = [
    "TrussStation",
    "headstock",
    "heel_block",
    "heel_bolt_positions",
    "heel_bottom_z",
    "make_neck",
    "neck_blank",
    "neck_envelope",
    "neck_registration",
    "split_neck",
    "truss_rod_channel",
    "truss_rod_stations",
    "validate_truss_rod",
]
