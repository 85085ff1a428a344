"""Replay command: run a gesture script and export the resulting shapes."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from geodraw.controller import DrawingController
from geodraw.core.config import load_config
from geodraw.core.trace import TraceWriter
from geodraw.io.geojson import write_geojson
from geodraw.replay import load_script, run_script, summarize_steps

console = Console()


def replay(
    script: Path = typer.Argument(..., help="Gesture script (.yaml/.yml/.json)"),
    output: Path = typer.Option(
        Path("shapes.geojson"), "--output", "-o", help="GeoJSON file to write"
    ),
    trace: Optional[Path] = typer.Option(
        None, "--trace", help="Write every domain event to this JSON Lines file"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Drawing config YAML (default: ./geodraw_config.yaml)"
    ),
) -> None:
    """Replay a gesture script against a fresh drawing session."""
    try:
        cfg = load_config(config)
        steps = load_script(script)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]❌ Error:[/] {e}")
        raise typer.Exit(1)

    tw = TraceWriter(trace) if trace is not None else None
    try:
        controller = DrawingController(cfg, trace=tw)
        try:
            result = run_script(controller, steps)
        except ValueError as e:
            console.print(f"[bold red]❌ Error while replaying:[/] {e}")
            raise typer.Exit(1)
        out = write_geojson(controller, output, trace=tw)
    finally:
        if tw is not None:
            tw.close()

    console.print(f"\n[bold]Replayed[/] [cyan]{result.steps_run}[/] step(s), "
                  f"[cyan]{result.notifications}[/] change notification(s)")

    actions = Table(show_header=True, header_style="bold cyan", title="Actions")
    actions.add_column("Action")
    actions.add_column("Count", justify="right")
    for action, count in summarize_steps(steps).items():
        actions.add_row(action, str(count))
    console.print(actions)

    shapes = Table(show_header=True, header_style="bold cyan", title="Shapes")
    shapes.add_column("Kind")
    shapes.add_column("Count", justify="right")
    for kind, count in controller.shape_counts().items():
        shapes.add_row(kind, str(count))
    console.print(shapes)

    console.print(f"[bold green]✔[/] GeoJSON written to [underline]{out}[/]")
    if tw is not None:
        console.print(f"[dim]Trace: {tw.path} ({tw.count} event(s))[/]")
