from __future__ import annotations

import math
from pathlib import Path
from typing import Mapping

from rich.console import Console

from printuke._config import UnitSettings, get_unit_settings
from printuke.mesh import Mesh, mesh_to_pyvista

_COLOR_CYCLE = ["#e0b57a", "#8c5a3c", "#6ab0ff", "#f58f7c", "#9ae6b4", "#d4b5ff"]


class PreviewBackendError(RuntimeError):
    """Raised when a preview backend cannot run."""


class PartPreviewer:
    """Render a set of part meshes with PyVista."""

    def __init__(self, console: Console, unit_settings: UnitSettings | None = None):
        self.console = console
        self._pv = None
        self._unit_settings = unit_settings or get_unit_settings()

    def _ensure_backend(self):
        if self._pv is None:
            import pyvista as pv

            pv.set_plot_theme("document")
            self._pv = pv
        return self._pv

    @property
    def unit_name(self) -> str:
        return self._unit_settings.name

    @property
    def unit_label(self) -> str:
        return self._unit_settings.label

    @property
    def unit_scale_to_mm(self) -> float:
        return self._unit_settings.scale_to_mm

    def datasets(self, parts: Mapping[str, Mesh]) -> dict:
        if not parts:
            raise PreviewBackendError("Nothing to preview: the part set is empty.")
        scale = 1.0 / self.unit_scale_to_mm
        datasets = {}
        for name, mesh in parts.items():
            poly = mesh_to_pyvista(mesh)
            if scale != 1.0:
                poly = poly.scale(scale, inplace=False)
            datasets[name] = poly
        self.console.print(f"[cyan]Previewing {len(datasets)} mesh(es) in {self.unit_name}.[/cyan]")
        return datasets

    def show(
        self,
        parts: Mapping[str, Mesh],
        screenshot_path: Path | None = None,
        show_edges: bool = False,
        title: str = "printuke preview",
    ) -> None:
        pv = self._ensure_backend()
        datasets = self.datasets(parts)
        off_screen = screenshot_path is not None
        plotter = pv.Plotter(window_size=(1280, 800), off_screen=off_screen)
        plotter.set_background("#090c10", top="#1b2333")
        plotter.add_axes(interactive=not off_screen)
        self._show_bounds_with_units(plotter)

        for index, (name, poly) in enumerate(datasets.items()):
            plotter.add_mesh(
                poly,
                name=name,
                show_edges=show_edges,
                color=_COLOR_CYCLE[index % len(_COLOR_CYCLE)],
                smooth_shading=True,
                specular=0.2,
            )
        self._reset_camera(plotter, datasets.values())

        if screenshot_path is not None:
            screenshot_path.parent.mkdir(parents=True, exist_ok=True)
            plotter.show(title=title, auto_close=True, screenshot=str(screenshot_path))
        else:
            plotter.show(title=title)
        plotter.close()

    def _reset_camera(self, plotter, datasets) -> None:
        bounds = None
        for poly in datasets:
            b = poly.bounds
            if bounds is None:
                bounds = list(b)
                continue
            for i in (0, 2, 4):
                bounds[i] = min(bounds[i], b[i])
                bounds[i + 1] = max(bounds[i + 1], b[i + 1])
        if bounds is None:
            return

        center = ((bounds[0] + bounds[1]) / 2.0, (bounds[2] + bounds[3]) / 2.0, (bounds[4] + bounds[5]) / 2.0)
        diag = math.sqrt(
            (bounds[1] - bounds[0]) ** 2 + (bounds[3] - bounds[2]) ** 2 + (bounds[5] - bounds[4]) ** 2
        )
        distance = max(diag, 1.0) * 1.2
        # Look down on the top from the treble side.
        camera = (center[0], center[1] + distance * 0.6, center[2] + distance)
        plotter.camera_position = [camera, center, (0.0, 0.0, 1.0)]

    def _show_bounds_with_units(self, plotter) -> None:
        label = self._unit_settings.label
        plotter.show_bounds(
            grid="front",
            color="#5a677d",
            xlabel=f"X ({label})",
            ylabel=f"Y ({label})",
            zlabel=f"Z ({label})",
        )
