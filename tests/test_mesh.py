from __future__ import annotations

import numpy as np
import pytest

from printuke.mesh import Mesh, analyze_mesh, combine_meshes, mesh_to_pyvista
from printuke.mesh_quality import PREVIEW, MeshQuality, apply_lod, resolve_quality
from printuke.modeling import make_box


def test_box_analysis_is_clean():
    report = analyze_mesh(make_box())
    assert report.is_watertight
    assert report.issues() == []


def test_open_mesh_reports_boundary():
    tri = Mesh(np.array([(0, 0, 0), (1, 0, 0), (0, 1, 0)], dtype=float), np.array([(0, 1, 2)]))
    report = analyze_mesh(tri)
    assert report.boundary_edges == 3
    assert not report.is_watertight
    assert report.issues() == ["3 open edges"]


def test_combine_meshes_offsets_faces():
    a = make_box()
    b = make_box(center=(3.0, 0.0, 0.0))
    combined = combine_meshes([a, b])
    assert combined.n_faces == a.n_faces + b.n_faces
    assert combined.volume == pytest.approx(2.0)
    with pytest.raises(ValueError):
        combine_meshes([])


def test_copy_is_independent():
    box = make_box()
    clone = box.copy()
    clone.translate((1.0, 0.0, 0.0))
    assert box.bounds[0] == pytest.approx(-0.5)


def test_mesh_to_pyvista():
    poly = mesh_to_pyvista(make_box())
    assert poly.n_cells == 12
    assert poly.volume == pytest.approx(1.0)


def test_preview_lod_halves_segments():
    assert PREVIEW.segments == 32
    assert PREVIEW.sphere_resolution == 12
    assert MeshQuality().segments == 64
    assert apply_lod(MeshQuality(circular_segments=16, lod="preview")).circular_segments == 12


def test_resolve_quality_is_idempotent():
    quality = resolve_quality(PREVIEW)
    assert resolve_quality(quality).segments == PREVIEW.segments
    assert resolve_quality(None).lod == "final"


def test_quality_validation():
    with pytest.raises(ValueError):
        MeshQuality(circular_segments=2)
    with pytest.raises(ValueError):
        MeshQuality(lod="draft")
