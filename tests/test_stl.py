from __future__ import annotations

import numpy as np
import pytest

from printuke.io.stl import next_available_path, read_stl, write_part_set, write_stl
from printuke.modeling import make_box, make_cylinder


def test_binary_stl_round_trip(tmp_path):
    mesh = make_cylinder(radius=2.0, height=5.0, segments=16)
    path = tmp_path / "rod.stl"
    write_stl(mesh, path)
    data = path.read_bytes()
    assert len(data) == 84 + 50 * mesh.n_faces
    loaded = read_stl(path)
    assert loaded.n_faces == mesh.n_faces
    assert loaded.volume == pytest.approx(mesh.volume, rel=1e-5)


def test_ascii_stl(tmp_path):
    mesh = make_box(size=(1.0, 2.0, 3.0))
    path = tmp_path / "box.stl"
    write_stl(mesh, path, ascii=True, name="box")
    text = path.read_text()
    assert text.startswith("solid box")
    assert text.count("facet normal") == mesh.n_faces
    assert read_stl(path).n_faces == mesh.n_faces


def test_scale_converts_units(tmp_path):
    mesh = make_box(size=(25.4, 25.4, 25.4))
    path = tmp_path / "inch.stl"
    write_stl(mesh, path, scale=25.4)
    assert np.allclose(read_stl(path).extents, (1.0, 1.0, 1.0), atol=1e-5)


def test_scale_must_be_positive(tmp_path):
    with pytest.raises(ValueError):
        write_stl(make_box(), tmp_path / "x.stl", scale=0.0)


def test_truncated_file_rejected(tmp_path):
    path = tmp_path / "broken.stl"
    path.write_bytes(b"\0" * 80 + np.uint32(3).tobytes())
    with pytest.raises(ValueError):
        read_stl(path)


def test_next_available_path(tmp_path):
    target = tmp_path / "nut.stl"
    assert next_available_path(target) == target
    target.write_text("x")
    assert next_available_path(target).name == "nut (1).stl"


def test_write_part_set_keeps_existing_files(tmp_path):
    parts = {"nut": make_box(), "bridge": make_box(size=(2.0, 1.0, 1.0))}
    first = write_part_set(parts, tmp_path)
    assert [p.name for p in first] == ["nut.stl", "bridge.stl"]
    second = write_part_set(parts, tmp_path)
    assert [p.name for p in second] == ["nut (1).stl", "bridge (1).stl"]
    third = write_part_set(parts, tmp_path, overwrite=True)
    assert [p.name for p in third] == ["nut.stl", "bridge.stl"]
