from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import numpy as np


def _require_vec2(value: Sequence[float], label: str) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float).reshape(2)
    except Exception as exc:
        raise ValueError(f"{label} must be a 2D coordinate.") from exc
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{label} must be finite.")
    return arr


def _signed_area(points: np.ndarray) -> float:
    if points.shape[0] < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def _ensure_winding(points: np.ndarray, clockwise: bool) -> np.ndarray:
    if points.shape[0] < 3:
        return points
    is_cw = _signed_area(points) < 0
    if is_cw != clockwise:
        return points[::-1].copy()
    return points


@dataclass(frozen=True)
class Profile2D:
    """Closed 2D region: one counter-clockwise outer loop and clockwise holes."""

    outer: np.ndarray
    holes: List[np.ndarray] = field(default_factory=list)

    def __post_init__(self) -> None:
        outer = np.asarray(self.outer, dtype=float).reshape(-1, 2)
        if outer.shape[0] > 1 and np.allclose(outer[0], outer[-1]):
            outer = outer[:-1]
        if outer.shape[0] < 3:
            raise ValueError("Profile2D outer loop needs at least three points.")
        if not np.all(np.isfinite(outer)):
            raise ValueError("Profile2D points must be finite.")
        holes = []
        for hole in self.holes:
            pts = np.asarray(hole, dtype=float).reshape(-1, 2)
            if pts.shape[0] < 3:
                raise ValueError("Profile2D hole loops need at least three points.")
            holes.append(_ensure_winding(pts, clockwise=True))
        object.__setattr__(self, "outer", _ensure_winding(outer, clockwise=False))
        object.__setattr__(self, "holes", holes)

    @property
    def loops(self) -> list[np.ndarray]:
        return [self.outer, *self.holes]

    @property
    def area(self) -> float:
        return _signed_area(self.outer) + sum(_signed_area(hole) for hole in self.holes)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        mins = self.outer.min(axis=0)
        maxs = self.outer.max(axis=0)
        return (float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]))

    def translate(self, offset: Sequence[float]) -> "Profile2D":
        vec = _require_vec2(offset, "offset")
        return Profile2D(self.outer + vec, [hole + vec for hole in self.holes])

    def scale(self, factors: Sequence[float] | float, origin: Sequence[float] = (0.0, 0.0)) -> "Profile2D":
        if np.isscalar(factors):
            factors = (float(factors), float(factors))
        vec = _require_vec2(factors, "factors")
        if np.any(vec <= 0):
            raise ValueError("Profile scale factors must be positive.")
        pivot = _require_vec2(origin, "origin")
        return Profile2D(
            (self.outer - pivot) * vec + pivot,
            [(hole - pivot) * vec + pivot for hole in self.holes],
        )

    def span_at(self, x: float) -> tuple[float, float] | None:
        """Lowest and highest y where the outer loop crosses the vertical line at ``x``."""
        pts = self.outer
        nxt = np.roll(pts, -1, axis=0)
        hits = []
        for (x0, y0), (x1, y1) in zip(pts, nxt):
            if (x0 - x) * (x1 - x) > 0 or x0 == x1:
                continue
            t = (x - x0) / (x1 - x0)
            hits.append(y0 + t * (y1 - y0))
        if not hits:
            return None
        return (float(min(hits)), float(max(hits)))


def make_rect(size: Sequence[float] = (1.0, 1.0), center: Sequence[float] = (0.0, 0.0)) -> Profile2D:
    sx, sy = float(size[0]), float(size[1])
    if sx <= 0 or sy <= 0:
        raise ValueError("size must be positive.")
    cx, cy = _require_vec2(center, "center")
    hx, hy = sx / 2.0, sy / 2.0
    return Profile2D(
        np.array([(cx - hx, cy - hy), (cx + hx, cy - hy), (cx + hx, cy + hy), (cx - hx, cy + hy)])
    )


def make_ngon(
    sides: int = 6,
    radius: float = 0.5,
    center: Sequence[float] = (0.0, 0.0),
    rotation_deg: float = 0.0,
) -> Profile2D:
    """Regular polygon given by its circumradius."""
    sides = int(sides)
    if sides < 3:
        raise ValueError("sides must be >= 3.")
    if radius <= 0:
        raise ValueError("radius must be positive.")
    center_vec = _require_vec2(center, "center")
    angles = np.linspace(0.0, 2 * np.pi, sides, endpoint=False) + np.deg2rad(rotation_deg)
    points = np.column_stack([np.cos(angles), np.sin(angles)]) * float(radius)
    return Profile2D(points + center_vec)


def make_circle(radius: float = 0.5, center: Sequence[float] = (0.0, 0.0), segments: int = 64) -> Profile2D:
    return make_ngon(sides=max(int(segments), 3), radius=radius, center=center)


def make_polygon(points: Iterable[Sequence[float]]) -> Profile2D:
    pts = [_require_vec2(p, "point") for p in points]
    if len(pts) < 3:
        raise ValueError("make_polygon requires at least three points.")
    return Profile2D(np.vstack(pts))


def to_cross_section(profile: Profile2D):
    from manifold3d import CrossSection

    return CrossSection([np.ascontiguousarray(loop, dtype=np.float64) for loop in profile.loops])


def from_cross_section(cross_section) -> Profile2D:
    contours = [np.asarray(poly, dtype=float) for poly in cross_section.to_polygons()]
    outers = [c for c in contours if _signed_area(c) > 0]
    holes = [c for c in contours if _signed_area(c) < 0]
    if not outers:
        raise ValueError("cross section is empty.")
    if len(outers) > 1:
        raise ValueError("cross section has more than one outer loop.")
    return Profile2D(outers[0], holes)


def profile_hull(profiles: Iterable[Profile2D]) -> Profile2D:
    from manifold3d import CrossSection

    items = list(profiles)
    if not items:
        raise ValueError("profile_hull requires at least one profile.")
    return from_cross_section(CrossSection.batch_hull([to_cross_section(p) for p in items]))


def profile_union(profiles: Iterable[Profile2D]) -> Profile2D:
    items = list(profiles)
    if not items:
        raise ValueError("profile_union requires at least one profile.")
    result = to_cross_section(items[0])
    for profile in items[1:]:
        result = result + to_cross_section(profile)
    return from_cross_section(result)


def profile_intersection(profiles: Iterable[Profile2D]) -> Profile2D:
    items = list(profiles)
    if not items:
        raise ValueError("profile_intersection requires at least one profile.")
    result = to_cross_section(items[0])
    for profile in items[1:]:
        result = result ^ to_cross_section(profile)
    return from_cross_section(result)


__all__ = [
    "Profile2D",
    "from_cross_section",
    "make_circle",
    "make_ngon",
    "make_polygon",
    "make_rect",
    "profile_hull",
    "profile_intersection",
    "profile_union",
    "to_cross_section",
]
