from __future__ import annotations

import numpy as np
import pyvista as pv

from printuke.mesh import Mesh, mesh_to_pyvista
from printuke.modeling import boolean_intersection, make_box


def is_watertight(mesh: Mesh | pv.DataSet) -> tuple[bool, int]:
    if isinstance(mesh, Mesh):
        mesh = mesh_to_pyvista(mesh)
    edges = mesh.extract_feature_edges(
        boundary_edges=True,
        feature_edges=False,
        non_manifold_edges=True,
        manifold_edges=False,
    )
    open_edges = edges.n_cells
    return open_edges == 0, open_edges


def bounds(mesh: Mesh) -> np.ndarray:
    return np.array(mesh.bounds, dtype=float)


def overlap_volume(a: Mesh, b: Mesh) -> float:
    """Volume shared by two solids; touching faces count as zero."""
    shared = boolean_intersection([a, b])
    return 0.0 if shared.is_empty else abs(shared.volume)


def solid_fraction_at(mesh: Mesh, point, size: float = 0.5) -> float:
    """Fraction of a small cube centred on ``point`` that lies inside ``mesh``."""
    cube = make_box(size=(size, size, size), center=point)
    return overlap_volume(mesh, cube) / size**3
