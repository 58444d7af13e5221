"""Small reusable cutters and features shared by several parts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Sequence

import numpy as np

from printuke.mesh import Mesh
from printuke.modeling import (
    boolean_union,
    hull,
    make_box,
    make_box_between,
    make_cylinder,
    make_prism,
    make_prismoid,
)

FeatureRole = Literal["peg", "socket"]

# M4 hardware
BOLT_DIAMETER = 4.3
NUT_ACROSS_FLATS = 7.2
NUT_THICKNESS = 3.4


@dataclass(frozen=True)
class RegistrationFeature:
    """A peg or socket on a split face, reported for both halves of a split."""

    part: str
    role: FeatureRole
    position: tuple[float, float, float]
    axis: tuple[float, float, float]
    diameter: float
    depth: float


def hex_nut_slot(
    center: Sequence[float],
    across_flats: float = NUT_ACROSS_FLATS,
    thickness: float = NUT_THICKNESS,
) -> Mesh:
    """Vertical hexagonal nut pocket with its flats facing x."""

    if across_flats <= 0 or thickness <= 0:
        raise ValueError("nut dimensions must be positive.")
    circumradius = across_flats / math.sqrt(3.0)
    pocket = make_prism(sides=6, radius=circumradius, height=thickness, rotation_deg=30.0)
    return pocket.translate(center)


def bolt_hole(
    center: Sequence[float],
    length: float,
    diameter: float = BOLT_DIAMETER,
    direction: Sequence[float] = (0.0, 0.0, 1.0),
    segments: int = 32,
) -> Mesh:
    return make_cylinder(radius=diameter / 2.0, height=length, center=center, direction=direction, segments=segments)


def tapered_slot(
    x_start: float,
    x_end: float,
    width_start: float,
    width_end: float,
    depth_start: float,
    depth_end: float,
    top: float = 0.0,
    overcut: float = 1.0,
) -> Mesh:
    """Channel cutter running along x whose cross-section morphs linearly.

    The cutter hangs from ``top`` (plus ``overcut`` above it so the cut opens
    cleanly) and its section blends between the two rectangles.
    """

    if x_end <= x_start:
        raise ValueError("x_end must be greater than x_start.")
    slab = 1e-3

    def section(x: float, width: float, depth: float) -> Mesh:
        return make_box(
            size=(slab, width, depth + overcut),
            center=(x, 0.0, top - depth / 2.0 + overcut / 2.0),
        )

    return hull(
        [
            section(x_start + slab / 2.0, width_start, depth_start),
            section(x_end - slab / 2.0, width_end, depth_end),
        ]
    )


def keel(
    x_start: float,
    x_end: float,
    base_width: float,
    top_width: float,
    height: float,
    z_base: float,
) -> Mesh:
    """Tapered brace lying along x with its wide face at ``z_base``."""

    length = x_end - x_start
    if length <= 0:
        raise ValueError("x_end must be greater than x_start.")
    return make_prismoid(
        base_size=(length, base_width),
        top_size=(length, top_width),
        height=height,
        center=((x_start + x_end) / 2.0, 0.0, z_base),
    )


def dowel_socket(
    position: Sequence[float],
    axis: Sequence[float],
    diameter: float,
    depth: float,
    segments: int = 24,
) -> Mesh:
    """Cutter reaching ``depth`` into both sides of a split plane through ``position``."""
    return make_cylinder(
        radius=diameter / 2.0,
        height=2.0 * depth,
        center=position,
        direction=axis,
        segments=segments,
    )


def alignment_peg(
    position: Sequence[float],
    axis: Sequence[float],
    diameter: float,
    length: float,
    segments: int = 24,
) -> Mesh:
    """Peg standing ``length`` out of a split face along ``axis``, plus a 1 mm root."""
    direction = np.asarray(axis, dtype=float)
    direction = direction / np.linalg.norm(direction)
    root = 1.0
    centre = np.asarray(position, dtype=float) + direction * (length - root) / 2.0
    return make_cylinder(
        radius=diameter / 2.0,
        height=length + root,
        center=centre,
        direction=direction,
        segments=segments,
    )


# Glyph elements in a unit cell, y up: boxes (cx, cy, w, h) and bevelled
# prismoids (cx, cy, base_w, base_h, top_w, top_h).
_MARK_BOXES = (
    (-0.32, 0.0, 0.16, 1.0),
    (-0.02, 0.42, 0.5, 0.16),
    (-0.02, 0.0, 0.5, 0.16),
)
_MARK_PRISMOIDS = (
    (0.3, -0.32, 0.36, 0.36, 0.06, 0.06),
    (-0.32, -0.5, 0.3, 0.12, 0.16, 0.04),
)


def maker_mark(center: Sequence[float], size: float = 16.0, depth: float = 0.6) -> Mesh:
    """Fixed maker's glyph as a cutter whose top face sits at ``center``."""

    if size <= 0 or depth <= 0:
        raise ValueError("size and depth must be positive.")
    cx, cy, cz = (float(v) for v in center)
    overcut = 0.5
    height = depth + overcut
    pieces: list[Mesh] = []
    for bx, by, w, h in _MARK_BOXES:
        pieces.append(
            make_box_between(
                ((bx - w / 2.0) * size, (by - h / 2.0) * size, -depth),
                ((bx + w / 2.0) * size, (by + h / 2.0) * size, overcut),
            )
        )
    for px, py, bw, bh, tw, th in _MARK_PRISMOIDS:
        # Wide face at the surface so the bevel opens upwards.
        pieces.append(
            make_prismoid(
                base_size=(bw * size, bh * size),
                top_size=(tw * size, th * size),
                height=height,
                center=(px * size, py * size, overcut),
                direction=(0.0, 0.0, -1.0),
            )
        )
    return boolean_union(pieces).translate((cx, cy, cz))


__all__ = [
    "BOLT_DIAMETER",
    "NUT_ACROSS_FLATS",
    "NUT_THICKNESS",
    "RegistrationFeature",
    "alignment_peg",
    "bolt_hole",
    "dowel_socket",
    "hex_nut_slot",
    "keel",
    "maker_mark",
    "tapered_slot",
]
