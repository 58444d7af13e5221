"""printuke: a parametric, 3D-printable four-string guitar."""

from __future__ import annotations

from printuke.assembly import Part, PartSet, build_assembly, build_part, registration_report, validate_design
from printuke.mesh import Mesh
from printuke.mesh_quality import MeshQuality
from printuke.params import InstrumentParams
from printuke.validation import ValidationError

__all__ = [
    "InstrumentParams",
    "Mesh",
    "MeshQuality",
    "Part",
    "PartSet",
    "ValidationError",
    "__version__",
    "build_assembly",
    "build_part",
    "registration_report",
    "validate_design",
]

__version__ = "0.1.0"
