"""Inspect command: list the shapes stored in a GeoJSON file."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from geodraw.controller import DrawingController
from geodraw.io.geojson import read_geojson
from geodraw.model import is_closed

console = Console()


def inspect(
    input_file: Path = typer.Argument(..., help="GeoJSON FeatureCollection"),
    show_skipped: bool = typer.Option(False, "--show-skipped", help="List features that were not imported"),
) -> None:
    """Import a GeoJSON file into an empty session and summarize it."""
    try:
        doc = read_geojson(input_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]❌ Error:[/] {e}")
        raise typer.Exit(1)

    controller = DrawingController()
    summary = controller.load_geojson(doc)

    console.print(f"\n[bold]{input_file.name}[/]: [cyan]{summary.total}[/] shape(s), "
                  f"[yellow]{len(summary.skipped)}[/] skipped")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Kind")
    table.add_column("Id", style="dim")
    table.add_column("Geometry")
    table.add_column("Stroke")

    for polygon in controller.polygon.polygons:
        closed = "closed" if is_closed(polygon.points) else "open"
        table.add_row("polygon", polygon.id, f"{len(polygon.points)} pts ({closed})", polygon.stroke_color.to_hex())
    for polygon in controller.freehand.polygons:
        table.add_row("freehand", polygon.id, f"{len(polygon.points)} pts", polygon.stroke_color.to_hex())
    for rect in controller.rectangle.rectangles:
        sw, ne = rect.bounds.southwest, rect.bounds.northeast
        table.add_row(
            "rectangle",
            rect.id,
            f"sw=({sw.latitude:.5f}, {sw.longitude:.5f}) ne=({ne.latitude:.5f}, {ne.longitude:.5f})",
            rect.stroke_color.to_hex(),
        )
    for circle in controller.circle.circles:
        c = circle.center
        table.add_row(
            "circle",
            circle.id,
            f"center=({c.latitude:.5f}, {c.longitude:.5f}) r={circle.radius:.1f} m",
            circle.stroke_color.to_hex(),
        )
    console.print(table)

    if show_skipped and summary.skipped:
        console.print("\n[bold yellow]Skipped:[/]")
        for reason in summary.skipped:
            console.print(f"  • {reason}")
