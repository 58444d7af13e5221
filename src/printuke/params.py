"""Construction parameters for the instrument.

Every shape in :mod:`printuke.parts` is a pure function of an
:class:`InstrumentParams` value (plus a :class:`~printuke.mesh_quality.MeshQuality`
that only affects tessellation). Lengths are millimetres.

Frame: x runs along the strings with the nut at x = 0 and the saddle at
x = ``scale_length``; y runs across the neck; z points up with z = 0 at the
top plane of neck and body, which is also the underside of the fingerboard.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import numpy as np

from printuke.validation import ValidationError, require_non_negative, require_positive

INCH = 25.4


@dataclass(frozen=True)
class InstrumentParams:
    scale_length: float = 18 * INCH
    neck_offset: float = 100.0
    neck_width: float = 40.0
    neck_depth: float = 20.0
    body_length: float = 420.0
    body_width: float = 200.0
    thickness: float = 60.0
    num_frets: int = 17
    fingerboard_thickness: float = 6.0
    string_count: int = 4
    nut_string_spacing: float = 9.0
    bridge_string_spacing: float = 11.0
    action: float = 2.5
    filament_diameter: float = 1.75
    peg_clearance: float = 0.2
    nozzle_diameter: float = 0.4
    fused: bool = False

    def __post_init__(self) -> None:
        validate_params(self)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], defaults: Mapping[str, Any] | None = None
    ) -> "InstrumentParams":
        """Build from a mapping; keys in ``data`` win over ``defaults``."""
        known = {f.name: f for f in fields(cls)}
        # Keys starting with an underscore are comments.
        data = {key: value for key, value in data.items() if not key.startswith("_")}
        data = {**(defaults or {}), **data}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValidationError(f"Unknown instrument parameters: {', '.join(unknown)}.")
        values = {key: _coerce(key, known[key].type, raw) for key, raw in data.items()}
        return cls(**values)

    @classmethod
    def from_file(cls, path: Path, defaults: Mapping[str, Any] | None = None) -> "InstrumentParams":
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except OSError as exc:
            raise ValidationError(f"Cannot read parameters from {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ValidationError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValidationError(f"{path} must contain a JSON object.")
        return cls.from_mapping(data, defaults)

    def replace(self, **overrides: Any) -> "InstrumentParams":
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    @property
    def joint_x(self) -> float:
        return self.neck_offset

    @property
    def tail_x(self) -> float:
        return self.neck_offset + self.body_length

    @property
    def nut_string_y(self) -> np.ndarray:
        return string_offsets(self.string_count, self.nut_string_spacing)

    @property
    def bridge_string_y(self) -> np.ndarray:
        return string_offsets(self.string_count, self.bridge_string_spacing)


def string_offsets(count: int, spacing: float) -> np.ndarray:
    """Evenly spaced string y positions centred on the neck axis, bass side first."""
    return (np.arange(count, dtype=float) - (count - 1) / 2.0) * spacing


def _coerce(name: str, annotation: Any, raw: Any) -> Any:
    kind = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", "")
    try:
        if kind == "bool":
            if not isinstance(raw, bool):
                raise TypeError
            return raw
        if kind == "int":
            if isinstance(raw, bool) or float(raw) != int(raw):
                raise TypeError
            return int(raw)
        if isinstance(raw, bool):
            raise TypeError
        return float(raw)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{name} must be a {kind or 'number'} (got {raw!r}).") from exc


def validate_params(params: InstrumentParams) -> None:
    for name in (
        "scale_length",
        "neck_offset",
        "neck_width",
        "neck_depth",
        "body_length",
        "body_width",
        "thickness",
        "fingerboard_thickness",
        "nut_string_spacing",
        "bridge_string_spacing",
        "action",
        "filament_diameter",
    ):
        require_positive(name, float(getattr(params, name)))
    require_non_negative("peg_clearance", float(params.peg_clearance))
    require_non_negative("nozzle_diameter", float(params.nozzle_diameter))
    if params.num_frets < 1:
        raise ValidationError("num_frets must be at least 1.")
    if params.string_count < 1:
        raise ValidationError("string_count must be at least 1.")

    nut_span = (params.string_count - 1) * params.nut_string_spacing
    if nut_span + 4.0 > params.neck_width:
        raise ValidationError(
            f"{params.string_count} strings at {params.nut_string_spacing} mm spacing "
            f"do not fit a {params.neck_width} mm neck."
        )
    if params.body_width / 2.0 <= 36.0:
        raise ValidationError("body_width must exceed the 72 mm neck-end bout.")
    if params.body_length <= params.body_width / 2.0 + 36.0:
        raise ValidationError("body_length is too short for the body bouts.")
    if params.neck_offset <= 45.0:
        raise ValidationError("neck_offset must leave room for the neck split (> 45 mm).")
    if params.tail_x <= params.scale_length + 60.0:
        raise ValidationError("The body must extend at least 60 mm past the saddle for the tailpiece.")


__all__ = ["INCH", "InstrumentParams", "string_offsets", "validate_params"]
