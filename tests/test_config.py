from __future__ import annotations

import json

import pytest

from printuke._config import (
    CONFIG_NAME,
    DEFAULT_CONFIG,
    config_file,
    ensure_user_config,
    get_unit_settings,
    get_user_settings,
)


def test_config_dir_override(config_dir):
    assert config_file() == config_dir / CONFIG_NAME


def test_defaults_written_on_first_read(config_dir):
    settings = get_user_settings()
    assert (config_dir / CONFIG_NAME).exists()
    assert json.loads((config_dir / CONFIG_NAME).read_text()) == DEFAULT_CONFIG
    assert settings.units.name == "millimeters"
    assert settings.quality.lod == "final"
    assert settings.nozzle_diameter == pytest.approx(0.4)


def test_existing_config_not_replaced(config_dir):
    path = config_dir / CONFIG_NAME
    path.write_text(json.dumps({"units": "in"}))
    ensure_user_config()
    assert json.loads(path.read_text()) == {"units": "in"}


@pytest.mark.parametrize(
    "raw, name, scale",
    [("mm", "millimeters", 1.0), ("Inches", "inches", 25.4), ("m", "meters", 1000.0), ("furlongs", "millimeters", 1.0)],
)
def test_unit_aliases(config_dir, raw, name, scale):
    (config_dir / CONFIG_NAME).write_text(json.dumps({"units": raw}))
    units = get_unit_settings()
    assert units.name == name
    assert units.scale_to_mm == pytest.approx(scale)


def test_quality_and_nozzle(config_dir):
    (config_dir / CONFIG_NAME).write_text(json.dumps({"quality": "preview", "nozzle_diameter": "0.6"}))
    settings = get_user_settings()
    assert settings.quality.lod == "preview"
    assert settings.nozzle_diameter == pytest.approx(0.6)


def test_unparseable_config_falls_back(config_dir):
    (config_dir / CONFIG_NAME).write_text("{broken")
    settings = get_user_settings()
    assert settings.units.name == "millimeters"
    assert settings.quality.lod == "final"
