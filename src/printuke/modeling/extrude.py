from __future__ import annotations

from typing import Sequence

import numpy as np

from printuke.mesh import Mesh

from .csg import from_manifold
from .profiles import Profile2D, to_cross_section


def linear_extrude(
    profile: Profile2D,
    height: float = 1.0,
    scale_top: Sequence[float] | float = (1.0, 1.0),
    center: Sequence[float] = (0.0, 0.0, 0.0),
) -> Mesh:
    """Extrude a 2D profile along +z, optionally tapering towards the top.

    The top loop is the base loop scaled by ``scale_top`` about the profile
    origin, as OpenSCAD's ``linear_extrude(scale=...)`` does. ``center`` is
    added to every vertex afterwards.
    """

    height = float(height)
    if height <= 0:
        raise ValueError("height must be positive.")
    if np.isscalar(scale_top):
        scale_top = (float(scale_top), float(scale_top))
    sx, sy = (float(v) for v in scale_top)
    if sx < 0 or sy < 0:
        raise ValueError("scale_top must not be negative.")

    cross = to_cross_section(profile)
    args = (height, 0, 0.0, (sx, sy))
    if hasattr(cross, "extrude"):
        solid = cross.extrude(*args)
    else:
        from manifold3d import Manifold

        solid = Manifold.extrude(cross, *args)
    return from_manifold(solid).translate(center)


__all__ = ["linear_extrude"]
