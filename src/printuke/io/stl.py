from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping

import numpy as np

from printuke.mesh import Mesh

_HEADER = b"printuke STL"
_RECORD = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("v0", "<f4", (3,)),
        ("v1", "<f4", (3,)),
        ("v2", "<f4", (3,)),
        ("attr", "<u2"),
    ]
)
_VERTEX = re.compile(rb"vertex\s+(\S+)\s+(\S+)\s+(\S+)")


def _face_normals(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    if faces.shape[0] == 0:
        return np.zeros((0, 3), dtype=float)
    v0 = vertices[faces[:, 0]]
    normals = np.cross(vertices[faces[:, 1]] - v0, vertices[faces[:, 2]] - v0)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    with np.errstate(invalid="ignore", divide="ignore"):
        normals = np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)
    return normals


def write_stl(mesh: Mesh, path: Path, ascii: bool = False, scale: float = 1.0, name: str = "printuke") -> None:
    """Write ``mesh`` to ``path``; coordinates are divided by ``scale`` (mm per output unit)."""

    if scale <= 0:
        raise ValueError("scale must be positive.")
    path = Path(path)
    vertices = mesh.vertices / scale
    faces = mesh.faces
    normals = _face_normals(vertices, faces)

    if ascii:
        lines = [f"solid {name}"]
        for normal, tri in zip(normals, faces):
            lines.append("  facet normal {:.6e} {:.6e} {:.6e}".format(*normal))
            lines.append("    outer loop")
            for vidx in tri:
                lines.append("      vertex {:.6e} {:.6e} {:.6e}".format(*vertices[vidx]))
            lines.append("    endloop")
            lines.append("  endfacet")
        lines.append(f"endsolid {name}")
        path.write_text("\n".join(lines) + "\n")
        return

    records = np.zeros(faces.shape[0], dtype=_RECORD)
    records["normal"] = normals
    records["v0"] = vertices[faces[:, 0]] if faces.size else np.zeros((0, 3))
    records["v1"] = vertices[faces[:, 1]] if faces.size else np.zeros((0, 3))
    records["v2"] = vertices[faces[:, 2]] if faces.size else np.zeros((0, 3))
    with path.open("wb") as handle:
        handle.write(_HEADER.ljust(80, b"\0"))
        handle.write(np.uint32(faces.shape[0]).astype("<u4").tobytes())
        handle.write(records.tobytes())


def read_stl(path: Path) -> Mesh:
    """Read an STL written by :func:`write_stl` (or any binary/ASCII STL).

    Vertices are not merged; every facet contributes three.
    """

    data = Path(path).read_bytes()
    if data.lstrip().startswith(b"solid") and b"facet" in data[:1024]:
        coords = np.array([[float(v) for v in match] for match in _VERTEX.findall(data)], dtype=float)
    else:
        if len(data) < 84:
            raise ValueError(f"{path} is too short to be a binary STL.")
        count = int(np.frombuffer(data, dtype="<u4", count=1, offset=80)[0])
        expected = 84 + count * _RECORD.itemsize
        if len(data) < expected:
            raise ValueError(f"{path} is truncated: {count} facets need {expected} bytes.")
        records = np.frombuffer(data, dtype=_RECORD, count=count, offset=84)
        coords = np.stack([records["v0"], records["v1"], records["v2"]], axis=1).reshape(-1, 3).astype(float)
    coords = coords.reshape(-1, 3)
    faces = np.arange(coords.shape[0], dtype=int).reshape(-1, 3)
    return Mesh(coords, faces)


def write_part_set(
    parts: Mapping[str, Mesh],
    directory: Path,
    ascii: bool = False,
    scale: float = 1.0,
    overwrite: bool = False,
) -> list[Path]:
    """Write one ``<name>.stl`` per mesh; existing files get a ``name (n).stl`` sibling."""

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    written = []
    for name, mesh in parts.items():
        target = directory / f"{name}.stl"
        if not overwrite:
            target = next_available_path(target)
        write_stl(mesh, target, ascii=ascii, scale=scale, name=name)
        written.append(target)
    return written


def next_available_path(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        return path
    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


__all__ = ["next_available_path", "read_stl", "write_part_set", "write_stl"]
