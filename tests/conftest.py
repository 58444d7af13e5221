from __future__ import annotations

import os
from pathlib import Path

import pytest

from printuke.mesh_quality import MeshQuality
from printuke.params import InstrumentParams

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure():
    os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def config_dir(tmp_path_factory, monkeypatch) -> Path:
    """Keep printuke.cfg out of the real home directory."""
    directory = tmp_path_factory.mktemp("printuke-config")
    monkeypatch.setenv("PRINTUKE_CONFIG_DIR", str(directory))
    return directory


@pytest.fixture
def quality() -> MeshQuality:
    return MeshQuality(circular_segments=24, sphere_segments=8, lod="preview")


@pytest.fixture
def params() -> InstrumentParams:
    return InstrumentParams()


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT
