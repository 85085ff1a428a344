"""
Configuration for geodraw drawing sessions.

Defaults live in code; a user YAML file may override them. Format:

    drawing_color: "#FF0000"
    fill_alpha: 0.2
    close_threshold_m: 10
    stroke_width: 2
    selected_stroke_width: 4
    icons:
      first_vertex: marker:green
      vertex: marker:blue
      midpoint: marker:yellow
      circle_center: marker:red
      circle_radius_handle: marker:orange
      rectangle_start: marker:azure
      rectangle_handle: marker:blue

Icon values are opaque handles: geodraw stores and forwards them and never
decodes them. Hosts usually replace them programmatically.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from geodraw.core.color import FILL_ALPHA, RED, Color


CONFIG_FILENAMES = ("geodraw_config.yaml", "geodraw_config.yml")


@dataclass(frozen=True)
class MarkerIcons:
    """Icon handles per marker role. Defaults mirror the classic hue-per-role markers."""

    first_vertex: Any = "marker:green"
    vertex: Any = "marker:blue"
    midpoint: Any = "marker:yellow"
    circle_center: Any = "marker:red"
    circle_radius_handle: Any = "marker:orange"
    rectangle_start: Any = "marker:azure"
    rectangle_handle: Any = "marker:blue"

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_icon(self, name: str, icon: Any) -> "MarkerIcons":
        if name not in self.names():
            raise ValueError(f"Unknown marker icon '{name}' (expected one of: {', '.join(self.names())})")
        return replace(self, **{name: icon})


@dataclass
class DrawingConfig:
    drawing_color: Color = RED
    fill_alpha: float = FILL_ALPHA
    # Fixed (zoom independent) distance for the ring-closing tap on the first vertex.
    close_threshold_m: float = 10.0
    stroke_width: int = 2
    selected_stroke_width: int = 4
    icons: MarkerIcons = field(default_factory=MarkerIcons)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "drawing_color": self.drawing_color.to_hex(),
            "fill_alpha": float(self.fill_alpha),
            "close_threshold_m": float(self.close_threshold_m),
            "stroke_width": int(self.stroke_width),
            "selected_stroke_width": int(self.selected_stroke_width),
            "icons": {name: getattr(self.icons, name) for name in MarkerIcons.names()},
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "DrawingConfig":
        cfg = DrawingConfig()
        if d.get("drawing_color"):
            cfg.drawing_color = Color.parse(str(d["drawing_color"]))
        if "fill_alpha" in d:
            alpha = float(d["fill_alpha"])
            if not 0.0 <= alpha <= 1.0:
                raise ValueError(f"fill_alpha must be within 0-1, got {alpha}")
            cfg.fill_alpha = alpha
        if "close_threshold_m" in d:
            threshold = float(d["close_threshold_m"])
            if threshold <= 0:
                raise ValueError(f"close_threshold_m must be positive, got {threshold}")
            cfg.close_threshold_m = threshold
        if "stroke_width" in d:
            cfg.stroke_width = int(d["stroke_width"])
        if "selected_stroke_width" in d:
            cfg.selected_stroke_width = int(d["selected_stroke_width"])
        icons = d.get("icons") or {}
        if not isinstance(icons, dict):
            raise ValueError("`icons` must be a mapping of marker role -> icon")
        for name, icon in icons.items():
            cfg.icons = cfg.icons.with_icon(str(name), icon)
        return cfg

    def export_template(self, output_path: Path) -> None:
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def find_config_file(directory: Optional[Path] = None) -> Optional[Path]:
    base = Path(directory) if directory is not None else Path(".")
    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.exists():
            return candidate
    return None


def load_config(config_file: Optional[Path] = None) -> DrawingConfig:
    """
    Load drawing configuration.

    Args:
        config_file: Optional YAML file. If None, looks for geodraw_config.yaml
                     (or .yml) in the current directory.

    Returns:
        DrawingConfig (defaults when no file is found)

    Raises:
        ValueError: if the file is not valid YAML or holds invalid values
    """
    if config_file is None:
        config_file = find_config_file()
    if config_file is None or not Path(config_file).exists():
        return DrawingConfig()

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")
    try:
        return DrawingConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error loading config file: {e}")
