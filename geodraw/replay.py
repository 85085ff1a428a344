"""
Gesture scripts: replay a recorded sequence of host events against a
DrawingController.

A script is YAML (or JSON, which YAML also reads) holding either a list of
steps or a mapping with a `steps` list:

    zoom: 15            # default zoom for steps that don't set one
    steps:
      - {action: mode, mode: polygon}
      - {action: tap, at: [46.0, -114.0]}
      - {action: drag_start, at: [46.0, -114.0], zoom: 17}
      - {action: color, color: "#00AA00"}
      - {action: finish}
      - {action: delete}

`at` is [latitude, longitude].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from geodraw.controller import DrawingController
from geodraw.model import DrawMode, LatLng


ACTIONS = ("mode", "tap", "drag_start", "drag_move", "drag_end", "color", "finish", "delete")
_POINT_ACTIONS = ("tap", "drag_start", "drag_move", "drag_end")
DEFAULT_ZOOM = 15.0


@dataclass
class ScriptStep:
    action: str
    at: Optional[LatLng] = None
    zoom: float = DEFAULT_ZOOM
    mode: Optional[DrawMode] = None
    color: Optional[str] = None


@dataclass
class ReplayResult:
    steps_run: int = 0
    notifications: int = 0
    actions: List[str] = field(default_factory=list)


def _parse_step(raw: Any, index: int, default_zoom: float) -> ScriptStep:
    if not isinstance(raw, dict):
        raise ValueError(f"step {index}: expected a mapping, got {type(raw).__name__}")
    action = str(raw.get("action") or "").strip().lower()
    if action not in ACTIONS:
        raise ValueError(f"step {index}: unknown action '{action}' (expected one of: {', '.join(ACTIONS)})")

    step = ScriptStep(action=action, zoom=float(raw.get("zoom", default_zoom)))
    if action in _POINT_ACTIONS:
        at = raw.get("at")
        if not isinstance(at, (list, tuple)) or len(at) != 2:
            raise ValueError(f"step {index}: '{action}' needs at: [lat, lng]")
        step.at = LatLng(float(at[0]), float(at[1]))
    elif action == "mode":
        try:
            step.mode = DrawMode(str(raw.get("mode") or "").strip().lower())
        except ValueError:
            raise ValueError(f"step {index}: unknown mode {raw.get('mode')!r}")
    elif action == "color":
        if not raw.get("color"):
            raise ValueError(f"step {index}: 'color' needs a color value")
        step.color = str(raw["color"])
    return step


def parse_script(data: Any) -> List[ScriptStep]:
    default_zoom = DEFAULT_ZOOM
    if isinstance(data, dict):
        default_zoom = float(data.get("zoom", DEFAULT_ZOOM))
        data = data.get("steps")
    if not isinstance(data, list):
        raise ValueError("script must be a list of steps or a mapping with a 'steps' list")
    return [_parse_step(raw, i, default_zoom) for i, raw in enumerate(data)]


def load_script(path: Path) -> List[ScriptStep]:
    """
    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: On invalid YAML or malformed steps
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in script: {e}")
    return parse_script(data)


def run_script(controller: DrawingController, steps: List[ScriptStep]) -> ReplayResult:
    result = ReplayResult()

    def _count() -> None:
        result.notifications += 1

    controller.add_listener(_count)
    try:
        for step in steps:
            _run_step(controller, step)
            result.steps_run += 1
            result.actions.append(step.action)
    finally:
        controller.remove_listener(_count)
    return result


def _run_step(controller: DrawingController, step: ScriptStep) -> None:
    if step.action == "mode" and step.mode is not None:
        controller.set_mode(step.mode)
    elif step.action == "tap" and step.at is not None:
        controller.handle_tap(step.at, step.zoom)
    elif step.action == "drag_start" and step.at is not None:
        controller.handle_drag_start(step.at, step.zoom)
    elif step.action == "drag_move" and step.at is not None:
        controller.handle_drag_move(step.at, step.zoom)
    elif step.action == "drag_end" and step.at is not None:
        controller.handle_drag_end(step.at, step.zoom)
    elif step.action == "color" and step.color is not None:
        controller.set_drawing_color(step.color)
    elif step.action == "finish":
        controller.finish_current()
    elif step.action == "delete":
        controller.delete_selected()


def summarize_steps(steps: List[ScriptStep]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for step in steps:
        counts[step.action] = counts.get(step.action, 0) + 1
    return counts
