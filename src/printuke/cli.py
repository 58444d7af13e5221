from __future__ import annotations

import pathlib
import warnings
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from printuke._config import UnitSettings, get_user_settings
from printuke.assembly import Part, PartSet, build_part, design_checks, parse_part
from printuke.frets import fret_distance, fret_offset, fret_position, marker_frets
from printuke.io.stl import write_part_set
from printuke.mesh import analyze_mesh
from printuke.mesh_quality import PREVIEW, MeshQuality
from printuke.modeling import KernelError
from printuke.params import InstrumentParams
from printuke.preview import PartPreviewer, PreviewBackendError
from printuke.validation import ValidationError

console = Console()
app = typer.Typer(help="Build and export the printable parts of a parametric four-string guitar.")

PART_HELP = {
    Part.ASSEMBLY: "Every part in place (one solid with --fused).",
    Part.NECK_HEAD: "Headstock half of the neck, with peg sockets.",
    Part.NECK_HEEL: "Heel half of the neck, with alignment pegs.",
    Part.BODY_NECK: "Neck side of the body.",
    Part.BODY_TAIL: "Tail side of the body with the tailpiece.",
    Part.FINGERBOARD_NUT: "Nut end of the fingerboard.",
    Part.FINGERBOARD_BODY: "Body end of the fingerboard.",
    Part.BRIDGE: "Bridge blade.",
    Part.NUT: "Nut.",
    Part.ACCESSORIES: "Plate with both bridge and both nut variants.",
}


def _log_active_units(units: UnitSettings) -> None:
    if abs(units.scale_to_mm - 1.0) < 1e-9:
        console.print(f"[magenta]Units: {units.name} ({units.label}).[/magenta]")
    else:
        console.print(
            f"[magenta]Units: {units.name} ({units.label}); 1 {units.label} = {units.scale_to_mm:.4g} mm.[/magenta]"
        )


def _load_params(path: Optional[pathlib.Path], fused: bool = False) -> InstrumentParams:
    # The params file may still override the printer's nozzle.
    defaults = {"nozzle_diameter": get_user_settings().nozzle_diameter}
    try:
        if path is not None:
            params = InstrumentParams.from_file(path, defaults)
        else:
            params = InstrumentParams.from_mapping({}, defaults)
        if fused and not params.fused:
            params = params.replace(fused=True)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return params


def _resolve_quality(name: Optional[str], default: MeshQuality) -> MeshQuality:
    if name is None:
        return default
    key = name.strip().lower()
    if key not in ("preview", "final"):
        raise typer.BadParameter("quality must be 'preview' or 'final'.")
    return MeshQuality(lod=key)


def _parse_part(value: str) -> Part:
    try:
        return parse_part(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build(part: Part, params: InstrumentParams, quality: MeshQuality) -> PartSet:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", RuntimeWarning)
        try:
            parts = build_part(part, params, quality)
        except (ValidationError, KernelError) as exc:
            raise typer.BadParameter(f"Cannot build {part.value}: {exc}") from exc
    for warning in caught:
        console.print(f"[yellow]Warning: {warning.message}[/yellow]")
    return parts


def _report_mesh_issues(parts: PartSet) -> None:
    for name, mesh in parts.items():
        analysis = analyze_mesh(mesh)
        for issue in analysis.issues():
            console.print(f"[yellow]Warning: {name} has {issue}.[/yellow]")


@app.command()
def parts() -> None:
    """List the selectable parts."""

    table = Table(title="Parts")
    table.add_column("Part", style="green")
    table.add_column("Description")
    for part in Part:
        table.add_row(part.value, PART_HELP[part])
    console.print(table)


@app.command()
def frets(
    params_file: Optional[pathlib.Path] = typer.Option(None, "--params", help="JSON file of instrument parameters."),
) -> None:
    """Print the fret table for the configured scale length."""

    params = _load_params(params_file)
    markers = dict(marker_frets(params.num_frets))
    table = Table(title=f"Frets for a {params.scale_length:.1f} mm scale")
    table.add_column("Fret", justify="right")
    table.add_column("From nut (mm)", justify="right")
    table.add_column("To saddle (mm)", justify="right")
    table.add_column("Spacing (mm)", justify="right")
    table.add_column("Marker", justify="center")
    for n in range(1, params.num_frets + 1):
        table.add_row(
            str(n),
            f"{fret_offset(params.scale_length, n):.2f}",
            f"{fret_position(params.scale_length, n):.2f}",
            f"{fret_distance(params.scale_length, n):.2f}",
            "●" * markers.get(n, 0),
        )
    console.print(table)


@app.command()
def check(
    params_file: Optional[pathlib.Path] = typer.Option(None, "--params", help="JSON file of instrument parameters."),
) -> None:
    """Run the dimensional checks without building any part."""

    params = _load_params(params_file)
    console.rule("printuke check")
    results = design_checks(params, PREVIEW)
    table = Table()
    table.add_column("Check")
    table.add_column("Result")
    table.add_column("Detail")
    for result in results:
        status = "[green]pass[/green]" if result.passed else "[red]fail[/red]"
        table.add_row(result.name, status, result.detail)
    console.print(table)
    if not all(result.passed for result in results):
        console.print(Panel.fit("Dimensional checks failed.", title="Check failed", style="red"))
        raise typer.Exit(code=1)
    console.print(Panel.fit("All dimensional checks passed.", title="Check complete", border_style="green"))


@app.command()
def export(
    part: str = typer.Option(Part.ASSEMBLY.value, "--part", "-p", help="Part to export (see `printuke parts`)."),
    params_file: Optional[pathlib.Path] = typer.Option(None, "--params", help="JSON file of instrument parameters."),
    output_dir: pathlib.Path = typer.Option(
        pathlib.Path("."),
        "--output-dir",
        "-o",
        help="Directory that receives one STL per mesh.",
    ),
    fused: bool = typer.Option(False, "--fused", help="Build the neck joint solid and fuse the assembly."),
    ascii: bool = typer.Option(False, "--ascii", help="Write ASCII STL instead of binary."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing existing STL files."),
    quality: Optional[str] = typer.Option(None, "--quality", help="preview or final (default from printuke.cfg)."),
) -> None:
    """
    Build a part and save each of its meshes as an STL file.
    """

    selected = _parse_part(part)
    params = _load_params(params_file, fused=fused)
    settings = get_user_settings()
    mesh_quality = _resolve_quality(quality, settings.quality)

    console.rule("printuke export")
    _log_active_units(settings.units)
    parts = _build(selected, params, mesh_quality)
    _report_mesh_issues(parts)
    try:
        written = write_part_set(
            parts,
            output_dir,
            ascii=ascii,
            scale=settings.units.scale_to_mm,
            overwrite=overwrite,
        )
    except OSError as exc:
        raise typer.BadParameter(f"Failed to export STL: {exc}") from exc

    mode = "ASCII" if ascii else "binary"
    lines = "\n".join(f"[green]{path}[/green]" for path in written)
    console.print(Panel(f"Wrote {mode} STL:\n{lines}", title="Export complete", border_style="green"))


@app.command()
def preview(
    part: str = typer.Option(Part.ASSEMBLY.value, "--part", "-p", help="Part to preview."),
    params_file: Optional[pathlib.Path] = typer.Option(None, "--params", help="JSON file of instrument parameters."),
    screenshot: Optional[pathlib.Path] = typer.Option(
        None, "--screenshot", help="Save a screenshot instead of opening a window."
    ),
    show_edges: bool = typer.Option(False, "--show-edges/--hide-edges", help="Toggle triangle edge rendering."),
) -> None:
    """
    Build a part at preview quality and open it in a PyVista window.
    """

    selected = _parse_part(part)
    params = _load_params(params_file)
    settings = get_user_settings()
    console.rule("printuke preview")
    _log_active_units(settings.units)
    parts = _build(selected, params, PREVIEW)
    previewer = PartPreviewer(console=console, unit_settings=settings.units)
    try:
        previewer.show(parts, screenshot_path=screenshot, show_edges=show_edges)
    except PreviewBackendError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if screenshot is not None:
        console.print(f"Saved screenshot to [green]{screenshot}[/green]")


if __name__ == "__main__":
    app()
