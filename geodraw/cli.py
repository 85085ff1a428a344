#!/usr/bin/env python3
"""
geodraw - map shape authoring
Main CLI entry point
"""

from __future__ import annotations

import typer

from geodraw.commands import config_cmd, inspect_cmd, replay_cmd

app = typer.Typer(
    name="geodraw",
    help="Author map shapes from gesture scripts and inspect GeoJSON shape files",
    no_args_is_help=True,
    add_completion=True,
)

app.command(name="replay", help="Replay a gesture script and export the shapes as GeoJSON")(replay_cmd.replay)
app.command(name="inspect", help="Summarize the shapes in a GeoJSON file")(inspect_cmd.inspect)

app.add_typer(config_cmd.app, name="config", help="Manage drawing configuration")


@app.callback()
def callback() -> None:
    """
    geodraw - map shape authoring

    Workflow:
      replay   - Run a recorded gesture script (taps/drags/mode changes) and write GeoJSON
      inspect  - Load a GeoJSON FeatureCollection and list the shapes it holds

    Utilities:
      config   - Show or export drawing configuration
    """
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
