"""Body: rounded teardrop shell, hollow interior, neck socket, brace and tailpiece."""

from __future__ import annotations

import numpy as np

from printuke.mesh import Mesh
from printuke.mesh_quality import MeshQuality, resolve_quality
from printuke.modeling import (
    boolean_difference,
    boolean_union,
    clip_to,
    hull,
    linear_extrude,
    make_box_between,
    make_circle,
    make_cylinder,
    minkowski_sphere,
    profile_hull,
    scale,
    split_at,
)
from printuke.modeling.profiles import Profile2D
from printuke.params import InstrumentParams
from printuke.printability import warn_min_wall
from printuke.validation import ValidationError, min_wall_thickness

from .accessories import make_tailpiece
from .fingerboard import fingerboard_length
from .hardware import NUT_THICKNESS, RegistrationFeature, bolt_hole, dowel_socket, hex_nut_slot, keel
from .neck import heel_bolt_positions, heel_bottom_z, neck_envelope

NECK_END_RADIUS = 36.0
BOTTOM_SCALE = (0.92, 0.85)
ROUNDING_RADIUS = 2.0
HOLLOW_SCALE = 0.92
HOLLOW_OFFSET = (0.0, 0.0, -0.4)

SOUND_HOLE_RADIUS = 30.0
SOUND_HOLE_MARGIN = 3.0

SCREW_BLOCK_BEFORE_JOINT = 10.0
SCREW_BLOCK_PAST_JOINT = 45.0
SCREW_BLOCK_SIDE = 8.0

BRACE_BASE_WIDTH = 20.0
BRACE_TOP_WIDTH = 10.0
BRACE_HEIGHT = 18.0
ROD_DIAMETER = 6.5
ROD_HEIGHT = 9.0
DOWEL_Y = 7.0
DOWEL_HEIGHT = 6.0
DOWEL_DEPTH = 6.0


def body_outline(params: InstrumentParams, inset: float = 0.0, segments: int = 64) -> Profile2D:
    """Plan view of the top: hull of the neck-end circle and the lower-bout circle."""
    neck_radius = NECK_END_RADIUS - inset
    bout_radius = params.body_width / 2.0 - inset
    if neck_radius <= 0 or bout_radius <= 0:
        raise ValidationError("Body outline inset is larger than the body.")
    neck_center = (params.joint_x + NECK_END_RADIUS / 2.0, 0.0)
    bout_center = (params.tail_x - params.body_width / 2.0, 0.0)
    return profile_hull(
        [
            make_circle(radius=neck_radius, center=neck_center, segments=segments),
            make_circle(radius=bout_radius, center=bout_center, segments=segments),
        ]
    )


def _slab(profile: Profile2D, z: float) -> Mesh:
    thin = 1e-3
    return linear_extrude(profile, height=thin, center=(0.0, 0.0, z - thin / 2.0))


def make_body_shell(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    """Solid outer shell with rounded edges; the top is flat at z = 0."""

    quality = resolve_quality(quality)
    r = ROUNDING_RADIUS
    top = body_outline(params, inset=r, segments=quality.segments)
    bottom = top.scale(BOTTOM_SCALE, origin=(params.joint_x, 0.0))
    core = hull([_slab(top, -r), _slab(bottom, -params.thickness + r)])
    return minkowski_sphere(core, r, segments=quality.sphere_resolution)


def _bounds_center(mesh: Mesh) -> np.ndarray:
    xmin, xmax, ymin, ymax, zmin, zmax = mesh.bounds
    return np.array([(xmin + xmax) / 2.0, (ymin + ymax) / 2.0, (zmin + zmax) / 2.0])


def hollow_transform(shell: Mesh) -> Mesh:
    """Interior cavity: the shell shrunk about its bounding-box centre, then dropped."""
    interior = scale(shell, HOLLOW_SCALE, origin=_bounds_center(shell))
    return interior.translate(HOLLOW_OFFSET)


def body_min_wall(params: InstrumentParams, quality: MeshQuality | None = None) -> float:
    shell = make_body_shell(params, quality)
    return min_wall_thickness(shell, HOLLOW_SCALE, _bounds_center(shell), HOLLOW_OFFSET)


def top_skin(params: InstrumentParams) -> float:
    """Thickness of the soundboard left above the cavity."""
    half = params.thickness / 2.0
    return half - HOLLOW_SCALE * half - HOLLOW_OFFSET[2]


def sound_hole_center(params: InstrumentParams) -> tuple[float, float]:
    return ((fingerboard_length(params) + params.scale_length) / 2.0, 0.0)


def _distance_to_outline(profile: Profile2D, point: tuple[float, float]) -> float:
    pts = profile.outer
    nxt = np.roll(pts, -1, axis=0)
    p = np.asarray(point, dtype=float)
    edge = nxt - pts
    length_sq = np.einsum("ij,ij->i", edge, edge)
    t = np.clip(np.einsum("ij,ij->i", p - pts, edge) / np.where(length_sq > 0, length_sq, 1.0), 0.0, 1.0)
    closest = pts + edge * t[:, np.newaxis]
    return float(np.linalg.norm(closest - p, axis=1).min())


def validate_sound_hole(
    params: InstrumentParams,
    radius: float = SOUND_HOLE_RADIUS,
    margin: float = SOUND_HOLE_MARGIN,
) -> None:
    """The hole must clear the inner outline of the cavity by ``margin``."""

    if radius <= 0:
        raise ValidationError("Sound hole radius must be positive.")
    outline = body_outline(params)
    xmin, xmax, ymin, ymax = outline.bounds
    inner = outline.scale(HOLLOW_SCALE, origin=((xmin + xmax) / 2.0, (ymin + ymax) / 2.0))
    cx, cy = sound_hole_center(params)
    span = inner.span_at(cx)
    if span is None or not span[0] < cy < span[1]:
        raise ValidationError(f"Sound hole centre x = {cx:.1f} lies outside the body cavity.")
    clearance = _distance_to_outline(inner, (cx, cy)) - radius
    if clearance < margin:
        raise ValidationError(
            f"Sound hole of radius {radius:.1f} mm leaves {clearance:.2f} mm to the cavity wall "
            f"(need {margin:.1f} mm)."
        )


def sound_hole(params: InstrumentParams, quality: MeshQuality, radius: float = SOUND_HOLE_RADIUS) -> Mesh:
    """Cutter limited to the top skin plus 1 mm so it never reaches the side walls."""
    cx, cy = sound_hole_center(params)
    depth = top_skin(params) + 1.0
    overcut = 1.0
    return make_cylinder(
        radius=radius,
        height=depth + overcut,
        center=(cx, cy, (overcut - depth) / 2.0),
        segments=quality.segments,
    )


def screw_block(params: InstrumentParams) -> Mesh:
    half = params.neck_width / 2.0 + SCREW_BLOCK_SIDE
    return make_box_between(
        (params.joint_x - SCREW_BLOCK_BEFORE_JOINT, -half, -params.thickness),
        (params.joint_x + SCREW_BLOCK_PAST_JOINT, half, 0.0),
    )


def brace(params: InstrumentParams) -> Mesh:
    """Keel along the back from the screw block to the tail."""
    return keel(
        params.joint_x + SCREW_BLOCK_PAST_JOINT - 1.0,
        params.tail_x,
        BRACE_BASE_WIDTH,
        BRACE_TOP_WIDTH,
        BRACE_HEIGHT,
        z_base=-params.thickness,
    )


def rod_channel(params: InstrumentParams, quality: MeshQuality) -> Mesh:
    """Stiffening-rod bore through the brace, open at the tail."""
    start = params.joint_x + SCREW_BLOCK_PAST_JOINT
    end = params.tail_x + 1.0
    return make_cylinder(
        radius=ROD_DIAMETER / 2.0,
        height=end - start,
        center=((start + end) / 2.0, 0.0, -params.thickness + ROD_HEIGHT),
        direction=(1.0, 0.0, 0.0),
        segments=quality.segments // 2,
    )


def _bolt_cutters(params: InstrumentParams, quality: MeshQuality) -> list[Mesh]:
    """Bolt bores down from the heel seat and nut traps opening through the back."""
    top = heel_bottom_z(params) + 1.0
    bottom = -params.thickness - 1.0
    trap = NUT_THICKNESS + 1.0
    cutters = []
    for x, y in heel_bolt_positions(params):
        cutters.append(bolt_hole((x, y, (top + bottom) / 2.0), top - bottom, segments=quality.segments // 2))
        cutters.append(
            hex_nut_slot((x, y, -params.thickness + (NUT_THICKNESS - 1.0) / 2.0), thickness=trap)
        )
    return cutters


def split_x(params: InstrumentParams) -> float:
    """Midpoint of the body along the strings."""
    start = params.joint_x + NECK_END_RADIUS / 2.0 - NECK_END_RADIUS
    return (start + params.tail_x) / 2.0


def body_registration(params: InstrumentParams) -> list[RegistrationFeature]:
    x = split_x(params)
    z = -params.thickness + DOWEL_HEIGHT
    diameter = params.filament_diameter + params.peg_clearance
    features = []
    for part, axis in (("body-neck", (1.0, 0.0, 0.0)), ("body-tail", (-1.0, 0.0, 0.0))):
        for y in (-DOWEL_Y, DOWEL_Y):
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


def make_body(params: InstrumentParams, quality: MeshQuality | None = None) -> Mesh:
    """Assemble the body; boolean operands are applied in a fixed order."""

    quality = resolve_quality(quality)
    validate_sound_hole(params)
    shell = make_body_shell(params, quality)
    wall = min_wall_thickness(shell, HOLLOW_SCALE, _bounds_center(shell), HOLLOW_OFFSET)
    if wall <= 0:
        raise ValidationError("Hollowing leaves no wall around the body cavity.")
    warn_min_wall("body wall", wall, params.nozzle_diameter)

    body = boolean_difference(shell, [hollow_transform(shell)])
    body = boolean_union([body, clip_to(screw_block(params), shell)])
    body = boolean_union([body, clip_to(brace(params), shell)])
    body = boolean_union([body, make_tailpiece(params, quality)])
    body = boolean_difference(body, [neck_envelope(params, quality)])
    body = boolean_difference(body, [sound_hole(params, quality)])
    if not params.fused:
        body = boolean_difference(body, _bolt_cutters(params, quality))
    return boolean_difference(body, [rod_channel(params, quality)])


def split_body(params: InstrumentParams, quality: MeshQuality | None = None) -> tuple[Mesh, Mesh]:
    """Return (neck side, tail side) with filament dowel sockets in the brace."""

    quality = resolve_quality(quality)
    body = make_body(params, quality)
    sockets = [
        dowel_socket(f.position, (1.0, 0.0, 0.0), f.diameter, f.depth, segments=quality.segments // 2)
        for f in body_registration(params)
        if f.part == "body-neck"
    ]
    body = boolean_difference(body, sockets)
    return split_at(body, axis=0, offset=split_x(params))


__all__ = [
    "body_min_wall",
    "body_outline",
    "body_registration",
    "hollow_transform",
    "make_body",
    "make_body_shell",
    "sound_hole_center",
    "split_body",
    "split_x",
    "top_skin",
    "validate_sound_hole",
]
