"""Modeling utilities: primitives, profiles, extrusion, transforms and CSG on manifold3d."""

from __future__ import annotations

from .csg import (
    KernelError,
    boolean_difference,
    boolean_intersection,
    boolean_union,
    clip_to,
    hull,
    minkowski_sphere,
    split_at,
)
from .extrude import linear_extrude
from .primitives import (
    make_box,
    make_box_between,
    make_cylinder,
    make_prism,
    make_prismoid,
    make_sphere,
)
from .profiles import (
    Profile2D,
    make_circle,
    make_ngon,
    make_polygon,
    make_rect,
    profile_hull,
    profile_intersection,
    profile_union,
)
from .transform import (
    along_x,
    along_y,
    mirror,
    place_on_bed,
    rotate,
    scale,
    translate,
)

__all__ = [
    "KernelError",
    "Profile2D",
    "along_x",
    "along_y",
    "boolean_difference",
    "boolean_intersection",
    "boolean_union",
    "clip_to",
    "hull",
    "linear_extrude",
    "make_box",
    "make_box_between",
    "make_circle",
    "make_cylinder",
    "make_ngon",
    "make_polygon",
    "make_prism",
    "make_prismoid",
    "make_rect",
    "make_sphere",
    "minkowski_sphere",
    "mirror",
    "place_on_bed",
    "profile_hull",
    "profile_intersection",
    "profile_union",
    "rotate",
    "scale",
    "split_at",
    "translate",
]
