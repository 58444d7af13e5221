from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from printuke.mesh_quality import MeshQuality

CONFIG_DIR_ENV = "PRINTUKE_CONFIG_DIR"
CONFIG_NAME = "printuke.cfg"
DEFAULT_CONFIG = {
    "_comment": "Valid units: millimeters (default), meters, inches. Quality: final or preview.",
    "units": "millimeters",
    "quality": "final",
    "nozzle_diameter": 0.4,
}
_UNIT_INFO: Dict[str, Dict[str, Any]] = {
    "millimeters": {"label": "mm", "scale_to_mm": 1.0},
    "meters": {"label": "m", "scale_to_mm": 1000.0},
    "inches": {"label": "in", "scale_to_mm": 25.4},
}
_UNIT_ALIASES = {
    "millimeter": "millimeters",
    "millimeters": "millimeters",
    "mm": "millimeters",
    "meter": "meters",
    "meters": "meters",
    "m": "meters",
    "inch": "inches",
    "inches": "inches",
    "in": "inches",
}


@dataclass(frozen=True)
class UnitSettings:
    """Resolved units from printuke.cfg."""

    name: str
    label: str
    scale_to_mm: float


@dataclass(frozen=True)
class UserSettings:
    units: UnitSettings
    quality: MeshQuality
    nozzle_diameter: float


def config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".printuke"


def config_file() -> Path:
    return config_dir() / CONFIG_NAME


def ensure_user_config() -> None:
    """Ensure printuke.cfg exists with sane defaults."""

    directory = config_dir()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    path = directory / CONFIG_NAME
    if path.exists():
        return

    try:
        path.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config() -> Dict[str, Any]:
    ensure_user_config()
    try:
        data = json.loads(config_file().read_text())
    except (OSError, json.JSONDecodeError):
        return DEFAULT_CONFIG.copy()
    if not isinstance(data, dict):
        return DEFAULT_CONFIG.copy()
    return data


def _normalize_units(value: str) -> str | None:
    key = value.strip().lower()
    if key in _UNIT_INFO:
        return key
    return _UNIT_ALIASES.get(key)


def _resolve_units(raw_config: Dict[str, Any]) -> UnitSettings:
    raw_units = str(raw_config.get("units", DEFAULT_CONFIG["units"]))
    normalized = _normalize_units(raw_units)
    if normalized is None:
        normalized = DEFAULT_CONFIG["units"]
    info = _UNIT_INFO[normalized]
    return UnitSettings(name=normalized, label=info["label"], scale_to_mm=info["scale_to_mm"])


def get_unit_settings() -> UnitSettings:
    """Return the configured units and the conversion to millimeters."""

    return _resolve_units(_load_user_config())


def get_user_settings() -> UserSettings:
    raw_config = _load_user_config()
    lod = str(raw_config.get("quality", DEFAULT_CONFIG["quality"])).strip().lower()
    if lod not in ("preview", "final"):
        lod = DEFAULT_CONFIG["quality"]
    try:
        nozzle = float(raw_config.get("nozzle_diameter", DEFAULT_CONFIG["nozzle_diameter"]))
    except (TypeError, ValueError):
        nozzle = float(DEFAULT_CONFIG["nozzle_diameter"])
    return UserSettings(
        units=_resolve_units(raw_config),
        quality=MeshQuality(lod=lod),
        nozzle_diameter=nozzle,
    )
