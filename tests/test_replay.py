from pathlib import Path

import pytest

from geodraw.controller import DrawingController
from geodraw.model import DrawMode, LatLng
from geodraw.replay import DEFAULT_ZOOM, load_script, parse_script, run_script, summarize_steps


POLYGON_SCRIPT = """
zoom: 15
steps:
  - {action: mode, mode: polygon}
  - {action: tap, at: [0, 0]}
  - {action: tap, at: [0, 1]}
  - {action: tap, at: [1, 1]}
  - {action: tap, at: [0, 0]}
  - {action: mode, mode: circle}
  - {action: color, color: "#0000FF"}
  - {action: tap, at: [10, 10], zoom: 12}
"""


def test_parse_script_mapping_and_defaults():
    steps = parse_script({"zoom": 17, "steps": [{"action": "tap", "at": [1, 2]}, {"action": "finish"}]})
    assert steps[0].at == LatLng(1.0, 2.0)
    assert steps[0].zoom == 17.0
    assert steps[1].action == "finish"


def test_parse_script_list_uses_default_zoom():
    steps = parse_script([{"action": "mode", "mode": "Rectangle"}])
    assert steps[0].mode == DrawMode.RECTANGLE
    assert steps[0].zoom == DEFAULT_ZOOM


@pytest.mark.parametrize(
    "data, message",
    [
        ("not a script", "list of steps"),
        ([42], "expected a mapping"),
        ([{"action": "jump"}], "unknown action"),
        ([{"action": "tap"}], "needs at"),
        ([{"action": "tap", "at": [1]}], "needs at"),
        ([{"action": "mode", "mode": "hexagon"}], "unknown mode"),
        ([{"action": "color"}], "needs a color"),
    ],
)
def test_parse_script_errors(data, message):
    with pytest.raises(ValueError, match=message):
        parse_script(data)


def test_load_script_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_script(tmp_path / "missing.yaml")
    bad = tmp_path / "bad.yaml"
    bad.write_text(":\n- [\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_script(bad)


def test_run_script_drives_controller(tmp_path: Path):
    script = tmp_path / "script.yaml"
    script.write_text(POLYGON_SCRIPT, encoding="utf-8")
    steps = load_script(script)

    controller = DrawingController()
    result = run_script(controller, steps)

    assert result.steps_run == 8
    assert result.actions[0] == "mode"
    assert result.notifications > 0
    assert controller.shape_counts() == {"polygon": 1, "freehand": 0, "rectangle": 0, "circle": 1}
    circle = controller.circles[0]
    assert circle.radius == 1000.0
    assert circle.stroke_color.to_hex() == "#0000FF"
    # The counting listener is removed afterwards.
    assert controller.context.notifier.listener_count == 0


def test_run_script_drag_and_delete():
    steps = parse_script(
        [
            {"action": "mode", "mode": "rectangle"},
            {"action": "drag_start", "at": [0, 0]},
            {"action": "drag_move", "at": [0.5, 0.5]},
            {"action": "drag_end", "at": [1, 1]},
            {"action": "tap", "at": [0.5, 0.5]},
            {"action": "delete"},
        ]
    )
    controller = DrawingController()
    run_script(controller, steps)
    assert controller.rectangles == ()


def test_summarize_steps():
    steps = parse_script([{"action": "finish"}, {"action": "finish"}, {"action": "delete"}])
    assert summarize_steps(steps) == {"finish": 2, "delete": 1}
