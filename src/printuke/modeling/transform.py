from __future__ import annotations

from typing import Sequence

import numpy as np

from printuke.mesh import Mesh


def _normalize_axis(axis: Sequence[float]) -> np.ndarray:
    vec = np.asarray(axis, dtype=float).reshape(3)
    norm = np.linalg.norm(vec)
    if norm == 0:
        raise ValueError("Rotation axis must be non-zero.")
    return vec / norm


def _translation_matrix(offset: Sequence[float]) -> np.ndarray:
    mat = np.eye(4)
    mat[:3, 3] = np.asarray(offset, dtype=float).reshape(3)
    return mat


def _about(origin: Sequence[float], mat: np.ndarray) -> np.ndarray:
    origin = np.asarray(origin, dtype=float).reshape(3)
    return _translation_matrix(origin) @ mat @ _translation_matrix(-origin)


def _axis_rotation_matrix(axis: Sequence[float], angle_deg: float) -> np.ndarray:
    x, y, z = _normalize_axis(axis)
    angle_rad = np.deg2rad(angle_deg)
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    C = 1.0 - c
    return np.array(
        [
            [x * x * C + c, x * y * C - z * s, x * z * C + y * s, 0.0],
            [y * x * C + z * s, y * y * C + c, y * z * C - x * s, 0.0],
            [z * x * C - y * s, z * y * C + x * s, z * z * C + c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def translate(mesh: Mesh, offset: Sequence[float]) -> Mesh:
    """Return a translated copy of the mesh."""
    return mesh.translate(offset, inplace=False)


def rotate(
    mesh: Mesh,
    axis: Sequence[float],
    angle_deg: float,
    origin: Sequence[float] = (0.0, 0.0, 0.0),
) -> Mesh:
    """Return a rotated copy of the mesh around an arbitrary axis."""
    return mesh.transform(_about(origin, _axis_rotation_matrix(axis, angle_deg)), inplace=False)


def scale(
    mesh: Mesh,
    factors: Sequence[float] | float,
    origin: Sequence[float] = (0.0, 0.0, 0.0),
) -> Mesh:
    """Return a copy scaled per axis about ``origin``; a scalar scales uniformly."""
    if np.isscalar(factors):
        factors = (float(factors),) * 3
    sx, sy, sz = np.asarray(factors, dtype=float).reshape(3)
    if sx == 0 or sy == 0 or sz == 0:
        raise ValueError("Scale factors must be non-zero.")
    mat = np.diag([sx, sy, sz, 1.0])
    return mesh.transform(_about(origin, mat), inplace=False)


def mirror(mesh: Mesh, normal: Sequence[float], origin: Sequence[float] = (0.0, 0.0, 0.0)) -> Mesh:
    """Reflect across the plane through ``origin`` with the given normal."""
    axis_vec = np.asarray(normal, dtype=float).reshape(3)
    norm = np.linalg.norm(axis_vec)
    if norm == 0:
        raise ValueError("Mirror normal must be non-zero.")
    axis_vec = axis_vec / norm
    mat = np.eye(4)
    mat[:3, :3] -= 2.0 * np.outer(axis_vec, axis_vec)
    return mesh.transform(_about(origin, mat), inplace=False)


def along_x(mesh: Mesh) -> Mesh:
    """Map a shape built along +z onto +x: (u, v, w) becomes (x=w, y=u, z=v)."""
    mat = np.array(
        [
            [0.0, 0.0, 1.0, 0.0],
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return mesh.transform(mat, inplace=False)


def along_y(mesh: Mesh) -> Mesh:
    """Map a shape built along +z onto +y: (u, v, w) becomes (x=u, y=w, z=v)."""
    mat = np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    # Swapping two axes is a reflection; Mesh.transform restores outward winding.
    return mesh.transform(mat, inplace=False)


def place_on_bed(mesh: Mesh) -> Mesh:
    """Translate so the lowest point sits on z = 0."""
    _, _, _, _, zmin, _ = mesh.bounds
    return mesh.translate((0.0, 0.0, -zmin), inplace=False)


__all__ = [
    "along_x",
    "along_y",
    "mirror",
    "place_on_bed",
    "rotate",
    "scale",
    "translate",
]
