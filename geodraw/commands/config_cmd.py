"""Config command for geodraw CLI."""

from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console

from geodraw.core.color import Color
from geodraw.core.config import CONFIG_FILENAMES, MarkerIcons, load_config

app = typer.Typer()
console = Console()


@app.command("show")
def show(config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file to read")):
    """Show current configuration."""
    try:
        cfg = load_config(config_file)
    except ValueError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)

    console.print("\n[bold]Current Configuration:[/]")
    console.print(f"  Drawing color: [cyan]{cfg.drawing_color.to_hex()}[/]")
    console.print(f"  Fill alpha: [cyan]{cfg.fill_alpha}[/]")
    console.print(f"  Close threshold: [cyan]{cfg.close_threshold_m} m[/]")
    console.print(f"  Stroke width: [cyan]{cfg.stroke_width}[/] (selected: {cfg.selected_stroke_width})")

    console.print("\n[bold]Marker icons:[/]")
    for name in MarkerIcons.names():
        console.print(f"  {name}: [cyan]{getattr(cfg.icons, name)}[/]")
    console.print()


@app.command("export")
def export(output_path: Path = typer.Argument(Path(CONFIG_FILENAMES[0]), help="Where to write the template")):
    """Export configuration template."""
    cfg = load_config()
    cfg.export_template(output_path)
    console.print(f"[bold green]✔[/] Configuration template exported to [underline]{output_path}[/]")


@app.command("validate")
def validate(config_file: Path = typer.Argument(..., help="Config file to validate")):
    """Validate a configuration file."""
    if not config_file.exists():
        console.print(f"[bold red]❌ File not found:[/] {config_file}")
        raise typer.Exit(1)
    try:
        cfg = load_config(config_file)
    except ValueError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✔[/] Configuration file is valid: [underline]{config_file}[/]")
    console.print(f"  Drawing color: {cfg.drawing_color.to_hex()}")


@app.command("set-color")
def set_color(color: str = typer.Argument(..., help="Color as #RRGGBB, RRGGBB or rgb(a)(...)")):
    """Set the default drawing color."""
    try:
        parsed = Color.parse(color)
    except ValueError:
        console.print("[bold red]❌ Error:[/] Invalid color format")
        console.print("[dim]Expected #RRGGBB, RRGGBB or rgba(r,g,b,a)[/]")
        raise typer.Exit(1)

    config_path = Path(CONFIG_FILENAMES[0])
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    data["drawing_color"] = parsed.to_hex()
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    console.print(f"[bold green]✔[/] Drawing color set to: [cyan]{parsed.to_hex()}[/] (saved to {config_path})")
