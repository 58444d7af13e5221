"""Equal-tempered fret geometry.

``fret_position(L, n) = L / 2**(n / 12)`` is the string length left between
fret ``n`` and the saddle, so the nut is fret 0 and the octave sits at ``L / 2``.
"""

from __future__ import annotations

from typing import List

SEMITONES_PER_OCTAVE = 12

SINGLE_DOT_FRETS = (3, 5, 7, 9, 15, 17)
DOUBLE_DOT_FRETS = (12,)


def _check(scale_length: float, n: int, minimum: int = 0) -> None:
    if scale_length <= 0:
        raise ValueError("scale_length must be positive.")
    if isinstance(n, bool) or int(n) != n:
        raise ValueError("fret index must be an integer.")
    if n < minimum:
        raise ValueError(f"fret index must be >= {minimum}.")


def fret_position(scale_length: float, n: int) -> float:
    """Vibrating length from fret ``n`` to the saddle."""
    _check(scale_length, n)
    return scale_length / 2 ** (n / SEMITONES_PER_OCTAVE)


def fret_distance(scale_length: float, n: int) -> float:
    """Spacing between fret ``n - 1`` and fret ``n``."""
    _check(scale_length, n, minimum=1)
    return fret_position(scale_length, n - 1) - fret_position(scale_length, n)


def fret_offset(scale_length: float, n: int) -> float:
    """Distance of fret ``n`` from the nut."""
    return scale_length - fret_position(scale_length, n)


def fret_offsets(scale_length: float, count: int) -> List[float]:
    if count < 1:
        raise ValueError("count must be at least 1.")
    return [fret_offset(scale_length, n) for n in range(1, count + 1)]


def marker_offset(scale_length: float, n: int) -> float:
    """Midpoint between fret ``n - 1`` and fret ``n``, where position dots go."""
    _check(scale_length, n, minimum=1)
    return (fret_offset(scale_length, n - 1) + fret_offset(scale_length, n)) / 2.0


def marker_frets(count: int) -> list[tuple[int, int]]:
    """(fret, dot count) pairs for the markers that fall on a board of ``count`` frets."""
    markers = [(n, 1) for n in SINGLE_DOT_FRETS if n <= count]
    markers += [(n, 2) for n in DOUBLE_DOT_FRETS if n <= count]
    return sorted(markers)


__all__ = [
    "DOUBLE_DOT_FRETS",
    "SINGLE_DOT_FRETS",
    "fret_distance",
    "fret_offset",
    "fret_offsets",
    "fret_position",
    "marker_frets",
    "marker_offset",
]
