"""Nut, bridge and tailpiece."""

from __future__ import annotations

import numpy as np

from printuke.mesh import Mesh
from printuke.mesh_quality import MeshQuality, resolve_quality
from printuke.modeling import (
    along_y,
    boolean_difference,
    linear_extrude,
    make_cylinder,
    make_polygon,
    make_prismoid,
    minkowski_sphere,
    scale,
)
from printuke.params import InstrumentParams
from printuke.printability import warn_min_feature
from printuke.validation import ValidationError

from .fingerboard import FRET_CROWN

NUT_BASE = 5.0
NUT_TOP = 3.5
NUT_CLEARANCE = 0.5
LOW_NUT_DROP = 0.5
# Bass to treble.
STRING_GAUGES = (1.3, 1.1, 0.9, 0.7)
NOTCH_PLAY = 0.1

BRIDGE_BASE = 10.0
BRIDGE_TOP = 3.0
BRIDGE_OVERHANG = 8.0
BRIDGE_FOOT = 7.0
BRIDGE_BLADE_MIN = 3.0
LOW_BRIDGE_DROP = 1.0

TAILPIECE_GAP = 26.0
TAILPIECE_LENGTH = 24.0
TAILPIECE_NEAR_HALF = 26.0
TAILPIECE_FAR_HALF = 22.0
TAILPIECE_HEIGHT = 6.0
TAILPIECE_TAPER = 0.8
TAILPIECE_ROUNDING = 1.5
ANCHOR_DIAMETER = 1.5


def string_gauges(count: int) -> np.ndarray:
    """Gauges for ``count`` strings spread over the thickest-to-thinnest range."""
    if count < 1:
        raise ValueError("count must be >= 1.")
    if count == len(STRING_GAUGES):
        return np.asarray(STRING_GAUGES, dtype=float)
    if count == 1:
        return np.array([STRING_GAUGES[0]])
    return np.linspace(STRING_GAUGES[0], STRING_GAUGES[-1], count)


def nut_height(params: InstrumentParams, low: bool = False) -> float:
    height = params.fingerboard_thickness + FRET_CROWN + NUT_CLEARANCE
    return height - LOW_NUT_DROP if low else height


def _string_notches(
    ys: np.ndarray, top: float, x: float, length: float, quality: MeshQuality, nozzle_diameter: float
) -> list[Mesh]:
    notches = []
    for y, gauge in zip(ys, string_gauges(len(ys))):
        warn_min_feature("string notch", gauge, nozzle_diameter)
        notches.append(
            make_cylinder(
                radius=(gauge + NOTCH_PLAY) / 2.0,
                height=length,
                center=(x, float(y), top - gauge / 2.0),
                direction=(1.0, 0.0, 0.0),
                segments=max(quality.segments // 4, 8),
            )
        )
    return notches


def make_nut(params: InstrumentParams, quality: MeshQuality | None = None, low: bool = False) -> Mesh:
    """Tapered block seated at x in [-5, 0] against the end of the fingerboard."""

    quality = resolve_quality(quality)
    height = nut_height(params, low)
    block = make_prismoid(
        base_size=(NUT_BASE, params.neck_width),
        top_size=(NUT_TOP, params.neck_width),
        height=height,
        shift=((NUT_BASE - NUT_TOP) / 2.0, 0.0),
        center=(-NUT_BASE / 2.0, 0.0, 0.0),
    )
    notches = _string_notches(
        params.nut_string_y, height, -NUT_BASE / 2.0, NUT_BASE + 2.0, quality, params.nozzle_diameter
    )
    return boolean_difference(block, notches)


def bridge_height(params: InstrumentParams, low: bool = False) -> float:
    """Saddle height giving ``action`` at the 12th fret over a straight string."""
    fretted = params.fingerboard_thickness + FRET_CROWN + params.action
    height = 2.0 * fretted - nut_height(params)
    return height - LOW_BRIDGE_DROP if low else height


def bridge_width(params: InstrumentParams) -> float:
    return (params.string_count - 1) * params.bridge_string_spacing + 2.0 * BRIDGE_OVERHANG


def make_bridge(params: InstrumentParams, quality: MeshQuality | None = None, low: bool = False) -> Mesh:
    """Tapered blade across the strings at x = L, standing on three feet."""

    quality = resolve_quality(quality)
    height = bridge_height(params, low)
    if height <= BRIDGE_BLADE_MIN:
        raise ValidationError(f"Bridge height {height:.2f} mm leaves no blade above the relief arches.")
    width = bridge_width(params)
    x = params.scale_length
    section = make_polygon(
        [
            (x - BRIDGE_BASE / 2.0, 0.0),
            (x + BRIDGE_BASE / 2.0, 0.0),
            (x + BRIDGE_TOP / 2.0, height),
            (x - BRIDGE_TOP / 2.0, height),
        ]
    )
    blade = along_y(linear_extrude(section, height=width, center=(0.0, 0.0, -width / 2.0)))

    gap = (width - 3.0 * BRIDGE_FOOT) / 2.0
    arch_height = min(gap / 2.0, height - BRIDGE_BLADE_MIN)
    cutters = []
    for sign in (-1.0, 1.0):
        arch = make_cylinder(
            radius=gap / 2.0,
            height=BRIDGE_BASE + 2.0,
            direction=(1.0, 0.0, 0.0),
            segments=quality.segments,
        )
        arch = scale(arch, (1.0, 1.0, arch_height / (gap / 2.0)))
        cutters.append(arch.translate((x, sign * (BRIDGE_FOOT + gap) / 2.0, 0.0)))
    cutters += _string_notches(
        params.bridge_string_y, height, x, BRIDGE_BASE + 2.0, quality, params.nozzle_diameter
    )
    return boolean_difference(blade, cutters)


def tailpiece_x(params: InstrumentParams) -> float:
    """Centre of the tailpiece along the strings."""
    return params.scale_length + TAILPIECE_GAP + TAILPIECE_LENGTH / 2.0


def make_tailpiece(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    """Rounded trapezoid on the body top with string-anchor holes along x."""

    quality = resolve_quality(quality)
    half = TAILPIECE_LENGTH / 2.0
    outline = make_polygon(
        [
            (-half, -TAILPIECE_NEAR_HALF),
            (half, -TAILPIECE_FAR_HALF),
            (half, TAILPIECE_FAR_HALF),
            (-half, TAILPIECE_NEAR_HALF),
        ]
    )
    core = linear_extrude(outline, height=TAILPIECE_HEIGHT, scale_top=TAILPIECE_TAPER)
    rounded = minkowski_sphere(core, TAILPIECE_ROUNDING, segments=quality.sphere_resolution)
    rounded = rounded.translate((tailpiece_x(params), 0.0, 0.0))

    length = TAILPIECE_LENGTH + 2.0 * TAILPIECE_ROUNDING + 2.0
    holes = [
        make_cylinder(
            radius=ANCHOR_DIAMETER / 2.0,
            height=length,
            center=(tailpiece_x(params), float(y), TAILPIECE_HEIGHT / 2.0),
            direction=(1.0, 0.0, 0.0),
            segments=max(quality.segments // 4, 8),
        )
        for y in params.bridge_string_y
    ]
    return boolean_difference(rounded, holes)


__all__ = [
    "bridge_height",
    "bridge_width",
    "make_bridge",
    "make_nut",
    "make_tailpiece",
    "nut_height",
    "string_gauges",
    "tailpiece_x",
]
