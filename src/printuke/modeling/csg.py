from __future__ import annotations

from typing import Iterable

import numpy as np

from printuke.mesh import Mesh


class KernelError(RuntimeError):
    """Raised when manifold3d rejects a mesh or produces an errored result."""


def to_manifold(mesh: Mesh):
    from manifold3d import Manifold, Mesh as ManifoldMesh

    vertices = np.ascontiguousarray(mesh.vertices, dtype=np.float32)
    faces = np.ascontiguousarray(mesh.faces, dtype=np.uint32)
    try:
        manifold_mesh = ManifoldMesh(vert_properties=vertices, tri_verts=faces)
    except TypeError:
        manifold_mesh = ManifoldMesh(vertices, faces)
    manifold = Manifold(manifold_mesh)
    _check_status(manifold)
    return manifold


def from_manifold(manifold) -> Mesh:
    _check_status(manifold)
    mesh = manifold.to_mesh()
    vertices = np.asarray(mesh.vert_properties, dtype=float)[:, :3]
    faces = np.asarray(mesh.tri_verts, dtype=int)
    return Mesh(vertices, faces)


def _check_status(manifold) -> None:
    status = manifold.status()
    name = getattr(status, "name", str(status))
    if not name.endswith("NoError"):
        raise KernelError(f"manifold3d reported {name}.")


def _operands(meshes: Iterable[Mesh], label: str) -> list:
    items = [mesh for mesh in meshes if not mesh.is_empty]
    if not items:
        raise ValueError(f"{label} requires at least one non-empty mesh.")
    return [to_manifold(mesh) for mesh in items]


def boolean_union(meshes: Iterable[Mesh]) -> Mesh:
    from manifold3d import Manifold, OpType

    manifolds = _operands(meshes, "boolean_union")
    if len(manifolds) == 1:
        return from_manifold(manifolds[0])
    return from_manifold(Manifold.batch_boolean(manifolds, OpType.Add))


def boolean_difference(base: Mesh, cutters: Iterable[Mesh]) -> Mesh:
    """Subtract every cutter from ``base``; empty cutters are ignored."""

    from manifold3d import Manifold, OpType

    if base.is_empty:
        raise ValueError("boolean_difference requires a non-empty base mesh.")
    result = to_manifold(base)
    tools = [to_manifold(mesh) for mesh in cutters if not mesh.is_empty]
    if not tools:
        return from_manifold(result)
    if len(tools) > 1:
        tool = Manifold.batch_boolean(tools, OpType.Add)
    else:
        tool = tools[0]
    return from_manifold(result - tool)


def boolean_intersection(meshes: Iterable[Mesh]) -> Mesh:
    from manifold3d import Manifold, OpType

    manifolds = _operands(meshes, "boolean_intersection")
    if len(manifolds) == 1:
        return from_manifold(manifolds[0])
    return from_manifold(Manifold.batch_boolean(manifolds, OpType.Intersect))


def hull(meshes: Iterable[Mesh]) -> Mesh:
    """Convex hull of every vertex of the inputs."""

    from manifold3d import Manifold

    manifolds = _operands(meshes, "hull")
    if len(manifolds) == 1:
        return from_manifold(manifolds[0].hull())
    return from_manifold(Manifold.batch_hull(manifolds))


def is_convex(mesh: Mesh, rel_tol: float = 1e-4) -> bool:
    if mesh.is_empty:
        return False
    own = abs(mesh.volume)
    hulled = abs(hull([mesh]).volume)
    return hulled - own <= rel_tol * max(hulled, 1.0)


def minkowski_sphere(mesh: Mesh, radius: float, segments: int = 16) -> Mesh:
    """Minkowski sum of a convex mesh with a sphere.

    For a convex operand the sum equals the hull of a sphere swept to every
    vertex, which manifold3d can evaluate directly. Non-convex operands would
    need a convex decomposition and are rejected.
    """

    from manifold3d import Manifold

    from .primitives import make_sphere

    if radius <= 0:
        raise ValueError("radius must be positive.")
    if not is_convex(mesh):
        raise ValueError("minkowski_sphere requires a convex mesh.")
    base = hull([mesh])
    ball = to_manifold(make_sphere(radius, segments=segments))
    spheres = [ball.translate(tuple(float(c) for c in vertex)) for vertex in base.vertices]
    return from_manifold(Manifold.batch_hull(spheres))


def split_at(mesh: Mesh, axis: int, offset: float) -> tuple[Mesh, Mesh]:
    """Split along a coordinate plane; returns (below, above) the plane."""

    from manifold3d import Manifold

    if axis not in (0, 1, 2):
        raise ValueError("axis must be 0, 1 or 2.")
    lo = np.asarray(mesh.bounds[0::2], dtype=float) - 1.0
    hi = np.asarray(mesh.bounds[1::2], dtype=float) + 1.0
    if not lo[axis] + 1.0 < offset < hi[axis] - 1.0:
        raise ValueError("split plane does not cross the mesh.")
    below_hi = hi.copy()
    below_hi[axis] = offset
    above_lo = lo.copy()
    above_lo[axis] = offset

    solid = to_manifold(mesh)
    below = solid ^ Manifold.cube(tuple(below_hi - lo)).translate(tuple(lo))
    above = solid ^ Manifold.cube(tuple(hi - above_lo)).translate(tuple(above_lo))
    return from_manifold(below), from_manifold(above)


def clip_to(mesh: Mesh, envelope: Mesh) -> Mesh:
    """Keep only the part of ``mesh`` inside ``envelope``."""
    return boolean_intersection([mesh, envelope])


__all__ = [
    "KernelError",
    "boolean_difference",
    "boolean_intersection",
    "boolean_union",
    "clip_to",
    "from_manifold",
    "hull",
    "is_convex",
    "minkowski_sphere",
    "split_at",
    "to_manifold",
]
