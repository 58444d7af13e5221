from __future__ import annotations

from typing import Sequence

import numpy as np

from printuke.mesh import Mesh


class ValidationError(ValueError):
    """Raised when validation constraints are violated."""


def require_positive(name: str, value: float) -> None:
    if not np.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive number (got {value!r}).")


def require_non_negative(name: str, value: float) -> None:
    if not np.isfinite(value) or value < 0:
        raise ValidationError(f"{name} must be a non-negative number (got {value!r}).")


def inradius_from(mesh: Mesh, point: Sequence[float]) -> float:
    """Distance from ``point`` to the surface of a convex mesh.

    Uses the face planes, so it is exact only for convex meshes. A negative
    result means the point lies outside.
    """

    if mesh.is_empty:
        raise ValidationError("Cannot measure an empty mesh.")
    p = np.asarray(point, dtype=float).reshape(3)
    v0 = mesh.vertices[mesh.faces[:, 0]]
    v1 = mesh.vertices[mesh.faces[:, 1]]
    v2 = mesh.vertices[mesh.faces[:, 2]]
    normals = np.cross(v1 - v0, v2 - v0)
    lengths = np.linalg.norm(normals, axis=1)
    keep = lengths > 1e-12
    normals = normals[keep] / lengths[keep, np.newaxis]
    distances = np.einsum("ij,ij->i", normals, v0[keep] - p)
    return float(distances.min())


def min_wall_thickness(
    outer: Mesh,
    scale: float,
    center: Sequence[float],
    offset: Sequence[float],
) -> float:
    """Lower bound on the wall left by hollowing a convex solid with a shrunk copy.

    The interior is ``center + scale * (x - center) + offset``. That map is a
    homothety about ``q = center + offset / (1 - scale)``, and for a convex
    outer solid the interior grown by ``(1 - scale) * d(q)`` still fits inside,
    so the wall is at least that thick everywhere.
    """

    if not 0 < scale < 1:
        raise ValidationError("Hollowing scale must lie strictly between 0 and 1.")
    c = np.asarray(center, dtype=float).reshape(3)
    o = np.asarray(offset, dtype=float).reshape(3)
    q = c + o / (1.0 - scale)
    return (1.0 - scale) * inradius_from(outer, q)


def check_registration(peg_diameter: float, socket_diameter: float, clearance: float, tol: float = 1e-6) -> None:
    """A peg must equal the socket or be exactly ``clearance`` smaller."""

    gap = socket_diameter - peg_diameter
    if abs(gap) > tol and abs(gap - clearance) > tol:
        raise ValidationError(
            f"Socket {socket_diameter:.3f} mm does not match peg {peg_diameter:.3f} mm "
            f"with clearance {clearance:.3f} mm."
        )
