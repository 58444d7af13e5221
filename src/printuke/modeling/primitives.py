from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from printuke.mesh import Mesh

from .csg import from_manifold, hull
from .transform import rotate


def _normalize(vector: Sequence[float]) -> Tuple[float, float, float]:
    arr = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(arr)
    if norm == 0:
        raise ValueError("Direction vector must be non-zero.")
    arr = arr / norm
    return float(arr[0]), float(arr[1]), float(arr[2])


def _orient(mesh: Mesh, direction: Sequence[float]) -> Mesh:
    """Rotate a mesh built along +z so that +z points along ``direction``."""
    target = np.asarray(_normalize(direction))
    default = np.array([0.0, 0.0, 1.0])
    if np.allclose(target, default):
        return mesh
    axis = np.cross(default, target)
    if np.linalg.norm(axis) < 1e-12:
        # opposite direction; rotate 180 around X
        return rotate(mesh, (1.0, 0.0, 0.0), 180.0)
    angle_deg = float(np.degrees(np.arccos(np.clip(np.dot(default, target), -1.0, 1.0))))
    return rotate(mesh, axis, angle_deg)


def make_box(
    size: Sequence[float] = (1.0, 1.0, 1.0),
    center: Sequence[float] = (0.0, 0.0, 0.0),
) -> Mesh:
    """Axis-aligned box specified by size (dx, dy, dz) and center."""

    from manifold3d import Manifold

    sx, sy, sz = (float(v) for v in size)
    if sx <= 0 or sy <= 0 or sz <= 0:
        raise ValueError("Box size must be positive.")
    cx, cy, cz = (float(v) for v in center)
    return from_manifold(Manifold.cube((sx, sy, sz), True).translate((cx, cy, cz)))


def make_box_between(lo: Sequence[float], hi: Sequence[float]) -> Mesh:
    """Axis-aligned box spanning two opposite corners."""
    lo_arr = np.asarray(lo, dtype=float).reshape(3)
    hi_arr = np.asarray(hi, dtype=float).reshape(3)
    return make_box(size=hi_arr - lo_arr, center=(lo_arr + hi_arr) / 2.0)


def make_cylinder(
    radius: float = 0.5,
    height: float = 1.0,
    center: Sequence[float] = (0.0, 0.0, 0.0),
    direction: Sequence[float] = (0.0, 0.0, 1.0),
    top_radius: float | None = None,
    segments: int = 64,
) -> Mesh:
    """Right circular cylinder (or frustum when ``top_radius`` differs) aligned with ``direction``."""

    from manifold3d import Manifold

    radius = float(radius)
    top = radius if top_radius is None else float(top_radius)
    if height <= 0:
        raise ValueError("height must be positive.")
    if radius < 0 or top < 0 or (radius == 0 and top == 0):
        raise ValueError("At least one cylinder radius must be > 0.")
    solid = Manifold.cylinder(float(height), radius, top, int(segments), True)
    mesh = _orient(from_manifold(solid), direction)
    return mesh.translate(center)


def make_sphere(
    radius: float = 0.5,
    center: Sequence[float] = (0.0, 0.0, 0.0),
    segments: int = 24,
) -> Mesh:
    from manifold3d import Manifold

    if radius <= 0:
        raise ValueError("radius must be positive.")
    return from_manifold(Manifold.sphere(float(radius), int(segments))).translate(center)


def make_prismoid(
    base_size: Sequence[float] = (1.0, 1.0),
    top_size: Sequence[float] | None = None,
    height: float = 1.0,
    shift: Sequence[float] = (0.0, 0.0),
    center: Sequence[float] = (0.0, 0.0, 0.0),
    direction: Sequence[float] = (0.0, 0.0, 1.0),
) -> Mesh:
    """
    Rectangular frustum whose top face may be resized and shifted off-axis.

    ``center`` is the middle of the base face, so the solid grows along ``direction``.
    A zero top size gives a pyramid.
    """

    bx, by = (float(v) for v in base_size)
    tx, ty = (bx, by) if top_size is None else (float(v) for v in top_size)
    if bx <= 0 or by <= 0 or tx < 0 or ty < 0 or height <= 0:
        raise ValueError("Prismoid dimensions must be positive.")
    dx, dy = (float(v) for v in shift)
    slab = 1e-3
    bottom = make_box(size=(bx, by, slab), center=(0.0, 0.0, slab / 2.0))
    if tx > 0 and ty > 0:
        top = make_box(size=(tx, ty, slab), center=(dx, dy, height - slab / 2.0))
    else:
        top = make_box(size=(slab, slab, slab), center=(dx, dy, height - slab / 2.0))
    mesh = _orient(hull([bottom, top]), direction)
    return mesh.translate(center)


def make_prism(
    sides: int = 6,
    radius: float = 0.5,
    height: float = 1.0,
    center: Sequence[float] = (0.0, 0.0, 0.0),
    direction: Sequence[float] = (0.0, 0.0, 1.0),
    rotation_deg: float = 0.0,
) -> Mesh:
    """Regular n-sided prism given by circumradius, centred on ``center``."""

    from .extrude import linear_extrude
    from .profiles import make_ngon

    profile = make_ngon(sides=sides, radius=radius, rotation_deg=rotation_deg)
    mesh = linear_extrude(profile, height=height, center=(0.0, 0.0, -height / 2.0))
    return _orient(mesh, direction).translate(center)


__all__ = [
    "make_box",
    "make_box_between",
    "make_cylinder",
    "make_prism",
    "make_sphere",
    "make_prismoid",
]
