from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

MeshLOD = Literal["preview", "final"]


@dataclass(frozen=True)
class MeshQuality:
    """Controls tessellation density of curved primitives; never changes dimensions.

    The fields are the final-quality counts. ``segments`` and ``sphere_resolution``
    give the counts to tessellate with once the level of detail is applied.
    """

    circular_segments: int = 64
    sphere_segments: int = 24
    lod: MeshLOD = "final"

    def __post_init__(self) -> None:
        if self.circular_segments < 3:
            raise ValueError("circular_segments must be >= 3.")
        if self.sphere_segments < 4:
            raise ValueError("sphere_segments must be >= 4.")
        if self.lod not in ("preview", "final"):
            raise ValueError("lod must be 'preview' or 'final'.")

    @property
    def segments(self) -> int:
        return apply_lod(self).circular_segments

    @property
    def sphere_resolution(self) -> int:
        return apply_lod(self).sphere_segments


def apply_lod(quality: MeshQuality) -> MeshQuality:
    if quality.lod == "final":
        return quality
    return replace(
        quality,
        circular_segments=max(12, int(quality.circular_segments * 0.5)),
        sphere_segments=max(8, int(quality.sphere_segments * 0.5)),
    )


def resolve_quality(quality: MeshQuality | None) -> MeshQuality:
    return quality if quality is not None else MeshQuality()


PREVIEW = MeshQuality(lod="preview")
