"""Mesh file output."""

from __future__ import annotations

from .stl import read_stl, write_part_set, write_stl

__all__ = ["read_stl", "write_part_set", "write_stl"]
