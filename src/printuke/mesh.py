from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np


@dataclass(frozen=True)
class MeshAnalysis:
    """Topology report used to refuse or flag meshes a slicer would reject."""

    n_vertices: int
    n_faces: int
    degenerate_faces: int
    boundary_edges: int
    nonmanifold_edges: int
    invalid_vertices: int

    @property
    def is_watertight(self) -> bool:
        return self.boundary_edges == 0 and self.nonmanifold_edges == 0

    def issues(self) -> list[str]:
        issues: list[str] = []
        if self.invalid_vertices:
            issues.append(f"{self.invalid_vertices} non-finite vertex coordinates")
        if self.degenerate_faces:
            issues.append(f"{self.degenerate_faces} zero-area triangles")
        if self.boundary_edges:
            issues.append(f"{self.boundary_edges} open edges")
        if self.nonmanifold_edges:
            issues.append(f"{self.nonmanifold_edges} edges shared by more than two triangles")
        return issues


@dataclass
class Mesh:
    """Triangle mesh in millimetres; faces are wound counter-clockwise seen from outside."""

    vertices: np.ndarray
    faces: np.ndarray

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3).copy()
        self.faces = np.asarray(self.faces, dtype=int).reshape(-1, 3).copy()

    def copy(self) -> "Mesh":
        return Mesh(
            vertices=self.vertices.copy(),
            faces=self.faces.copy(),
        )

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.n_faces == 0

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        if self.n_vertices == 0:
            return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        mins = self.vertices.min(axis=0)
        maxs = self.vertices.max(axis=0)
        return (float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]), float(mins[2]), float(maxs[2]))

    @property
    def extents(self) -> tuple[float, float, float]:
        xmin, xmax, ymin, ymax, zmin, zmax = self.bounds
        return (xmax - xmin, ymax - ymin, zmax - zmin)

    @property
    def volume(self) -> float:
        """Enclosed volume from the signed tetrahedra spanned with the origin."""
        if self.n_faces == 0:
            return 0.0
        v0 = self.vertices[self.faces[:, 0]]
        v1 = self.vertices[self.faces[:, 1]]
        v2 = self.vertices[self.faces[:, 2]]
        return float(np.einsum("ij,ij->i", v0, np.cross(v1, v2)).sum() / 6.0)

    def transform(self, matrix: np.ndarray, inplace: bool = True) -> "Mesh":
        mat = np.asarray(matrix, dtype=float)
        if mat.shape != (4, 4):
            raise ValueError("transform requires a 4x4 matrix.")
        verts = np.hstack([self.vertices, np.ones((self.n_vertices, 1), dtype=float)])
        transformed = (mat @ verts.T).T[:, :3]
        faces = self.faces
        # A reflection turns the surface inside out unless the winding flips too.
        if np.linalg.det(mat[:3, :3]) < 0:
            faces = faces[:, [0, 2, 1]]
        mesh = self if inplace else self.copy()
        mesh.vertices = transformed
        mesh.faces = faces.copy()
        return mesh

    def translate(self, offset: Sequence[float], inplace: bool = True) -> "Mesh":
        vec = np.asarray(offset, dtype=float).reshape(3)
        mesh = self if inplace else self.copy()
        mesh.vertices = mesh.vertices + vec
        return mesh


def combine_meshes(meshes: Iterable[Mesh]) -> Mesh:
    """Concatenate meshes into one vertex/face buffer without any boolean."""

    meshes_list = list(meshes)
    if not meshes_list:
        raise ValueError("combine_meshes requires at least one mesh.")

    vertices = []
    faces = []
    offset = 0
    for mesh in meshes_list:
        vertices.append(mesh.vertices)
        faces.append(mesh.faces + offset)
        offset += mesh.n_vertices
    return Mesh(vertices=np.vstack(vertices), faces=np.vstack(faces))


def analyze_mesh(mesh: Mesh, area_epsilon: float = 1e-12) -> MeshAnalysis:
    verts = mesh.vertices
    faces = mesh.faces
    invalid_vertices = int(np.count_nonzero(~np.isfinite(verts)))

    degenerate_faces = 0
    if faces.size > 0:
        v0 = verts[faces[:, 0]]
        v1 = verts[faces[:, 1]]
        v2 = verts[faces[:, 2]]
        cross = np.cross(v1 - v0, v2 - v0)
        areas = np.linalg.norm(cross, axis=1) * 0.5
        degenerate_faces = int(np.count_nonzero(areas <= area_epsilon))

    # Undirected edges as sorted vertex pairs; a closed 2-manifold uses each exactly twice.
    edges = np.sort(faces[:, [0, 1, 1, 2, 2, 0]].reshape(-1, 2), axis=1)
    counts = np.unique(edges, axis=0, return_counts=True)[1] if edges.size else np.zeros(0, dtype=int)
    boundary_edges = int(np.count_nonzero(counts == 1))
    nonmanifold_edges = int(np.count_nonzero(counts > 2))

    return MeshAnalysis(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_faces,
        degenerate_faces=degenerate_faces,
        boundary_edges=boundary_edges,
        nonmanifold_edges=nonmanifold_edges,
        invalid_vertices=invalid_vertices,
    )


def mesh_to_pyvista(mesh: Mesh):
    import pyvista as pv

    if mesh.n_faces == 0:
        return pv.PolyData(mesh.vertices, deep=True)
    faces = np.hstack([np.full((mesh.n_faces, 1), 3, dtype=np.int64), mesh.faces.astype(np.int64)]).ravel()
    return pv.PolyData(mesh.vertices, faces, deep=True)
