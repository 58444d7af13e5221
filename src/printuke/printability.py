from __future__ import annotations

import warnings

DEFAULT_NOZZLE_DIAMETER = 0.4


def warn_min_feature(name: str, value: float, nozzle_diameter: float = DEFAULT_NOZZLE_DIAMETER) -> None:
    if nozzle_diameter <= 0:
        return
    if value < nozzle_diameter:
        warnings.warn(
            f"{name} {value:.3f}mm is below nozzle diameter {nozzle_diameter:.3f}mm.",
            RuntimeWarning,
        )


def warn_min_wall(name: str, value: float, nozzle_diameter: float = DEFAULT_NOZZLE_DIAMETER, perimeters: int = 2) -> None:
    """Walls thinner than ``perimeters`` extrusion lines print but are fragile."""
    if nozzle_diameter <= 0:
        return
    if value < perimeters * nozzle_diameter:
        warnings.warn(
            f"{name} {value:.3f}mm is thinner than {perimeters} perimeters of a {nozzle_diameter:.3f}mm nozzle.",
            RuntimeWarning,
        )
