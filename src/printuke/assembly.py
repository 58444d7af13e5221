"""Part selection: the closed set of printable outputs."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from printuke.mesh import Mesh, combine_meshes
from printuke.mesh_quality import MeshQuality, resolve_quality
from printuke.modeling import boolean_union, place_on_bed, rotate
from printuke.params import InstrumentParams
from printuke.parts import (
    RegistrationFeature,
    body_min_wall,
    body_registration,
    fingerboard_registration,
    make_body,
    make_bridge,
    make_fingerboard,
    make_neck,
    make_nut,
    neck_registration,
    split_body,
    split_fingerboard,
    split_neck,
    validate_sound_hole,
    validate_truss_rod,
)
from printuke.validation import ValidationError, check_registration

PartSet = Dict[str, Mesh]

PLATE_GAP = 10.0


class Part(str, Enum):
    ASSEMBLY = "assembly"
    NECK_HEAD = "neck-head"
    NECK_HEEL = "neck-heel"
    BODY_NECK = "body-neck"
    BODY_TAIL = "body-tail"
    FINGERBOARD_NUT = "fingerboard-nut"
    FINGERBOARD_BODY = "fingerboard-body"
    BRIDGE = "bridge"
    NUT = "nut"
    ACCESSORIES = "accessories"


def parse_part(value: Part | str) -> Part:
    if isinstance(value, Part):
        return value
    try:
        return Part(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in Part)
        raise ValueError(f"Unknown part {value!r}; choose one of: {choices}.") from None


def _face_down(mesh: Mesh) -> Mesh:
    """Turn the top plane onto the bed."""
    return place_on_bed(rotate(mesh, (1.0, 0.0, 0.0), 180.0))


def _plate(meshes: List[Mesh]) -> Mesh:
    """Lay meshes side by side along y on the bed."""
    placed = []
    cursor = 0.0
    for mesh in meshes:
        mesh = place_on_bed(mesh)
        xmin, xmax, ymin, ymax, _, _ = mesh.bounds
        placed.append(mesh.translate((-(xmin + xmax) / 2.0, cursor - ymin, 0.0), inplace=False))
        cursor += (ymax - ymin) + PLATE_GAP
    return combine_meshes(placed)


def build_assembly(
    params: InstrumentParams | None = None,
    quality: MeshQuality | None = None,
    fused: bool = False,
) -> PartSet:
    """Every part in instrument coordinates; ``fused`` unions them into one solid."""

    params = params or InstrumentParams()
    quality = resolve_quality(quality)
    if fused and not params.fused:
        params = params.replace(fused=True)
    parts: PartSet = {
        "body": make_body(params, quality),
        "neck": make_neck(params, quality),
        "fingerboard": make_fingerboard(params, quality),
        "nut": make_nut(params, quality),
        "bridge": make_bridge(params, quality),
    }
    if fused:
        return {Part.ASSEMBLY.value: boolean_union(parts.values())}
    return parts


def build_part(
    part: Part | str,
    params: InstrumentParams | None = None,
    quality: MeshQuality | None = None,
) -> PartSet:
    """Build one selectable output. Everything but the assembly is laid on the bed."""

    part = parse_part(part)
    params = params or InstrumentParams()
    quality = resolve_quality(quality)

    if part is Part.ASSEMBLY:
        return build_assembly(params, quality, fused=params.fused)
    if part in (Part.NECK_HEAD, Part.NECK_HEEL):
        head, heel = split_neck(params, quality)
        mesh = head if part is Part.NECK_HEAD else heel
        return {part.value: _face_down(mesh)}
    if part in (Part.BODY_NECK, Part.BODY_TAIL):
        neck_side, tail_side = split_body(params, quality)
        mesh = neck_side if part is Part.BODY_NECK else tail_side
        return {part.value: place_on_bed(mesh)}
    if part in (Part.FINGERBOARD_NUT, Part.FINGERBOARD_BODY):
        nut_side, body_side = split_fingerboard(params, quality)
        mesh = nut_side if part is Part.FINGERBOARD_NUT else body_side
        return {part.value: place_on_bed(mesh)}
    if part is Part.BRIDGE:
        return {part.value: place_on_bed(make_bridge(params, quality))}
    if part is Part.NUT:
        return {part.value: place_on_bed(make_nut(params, quality))}
    plate = _plate(
        [
            make_bridge(params, quality),
            make_bridge(params, quality, low=True),
            make_nut(params, quality),
            make_nut(params, quality, low=True),
        ]
    )
    return {part.value: plate}


def registration_report(params: InstrumentParams | None = None) -> List[RegistrationFeature]:
    params = params or InstrumentParams()
    return neck_registration(params) + fingerboard_registration(params) + body_registration(params)


def _check_registration_pairs(params: InstrumentParams) -> None:
    groups: Dict[tuple, List[RegistrationFeature]] = defaultdict(list)
    for feature in registration_report(params):
        key = tuple(round(v, 6) for v in feature.position)
        groups[key].append(feature)
    for position, features in groups.items():
        parts = {f.part for f in features}
        if len(parts) != 2:
            raise ValidationError(f"Registration at {position} is not shared by both halves of a split.")
        pegs = [f for f in features if f.role == "peg"]
        sockets = [f for f in features if f.role == "socket"]
        if pegs:
            for peg in pegs:
                for socket in sockets:
                    check_registration(peg.diameter, socket.diameter, params.peg_clearance)
        else:
            # Both faces drilled; a length of filament is the pin.
            for socket in sockets:
                check_registration(params.filament_diameter, socket.diameter, params.peg_clearance)


@dataclass(frozen=True)
class CheckResult:
    name: str
    passed: bool
    detail: str


def design_checks(params: InstrumentParams | None = None, quality: MeshQuality | None = None) -> List[CheckResult]:
    """Run the dimensional checks and report each outcome."""

    params = params or InstrumentParams()
    results = []

    def run(name: str, check) -> None:
        try:
            detail = check() or "ok"
        except ValidationError as exc:
            results.append(CheckResult(name, False, str(exc)))
        else:
            results.append(CheckResult(name, True, detail))

    def wall() -> str:
        thickness = body_min_wall(params, quality)
        if thickness <= 0:
            raise ValidationError(f"Body wall lower bound is {thickness:.3f} mm.")
        return f"wall >= {thickness:.2f} mm"

    run("truss-rod channel", lambda: validate_truss_rod(params))
    run("sound hole", lambda: validate_sound_hole(params))
    run("body wall", wall)
    run("registration", lambda: _check_registration_pairs(params))
    return results


def validate_design(params: InstrumentParams | None = None, quality: MeshQuality | None = None) -> None:
    failures = [r for r in design_checks(params, quality) if not r.passed]
    if failures:
        raise ValidationError("; ".join(f"{r.name}: {r.detail}" for r in failures))


__all__ = [
    "CheckResult",
    "Part",
    "PartSet",
    "build_assembly",
    "build_part",
    "design_checks",
    "parse_part",
    "registration_report",
    "validate_design",
]
