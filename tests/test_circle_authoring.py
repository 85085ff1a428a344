import pytest

from geodraw.controller import DrawingController
from geodraw.core.color import RED, Color
from geodraw.core.events import DrawingEvent, EventType
from geodraw.core.geometry import radius_handle_position
from geodraw.model import DrawMode, LatLng


CENTER = LatLng(10.0, 10.0)


def _circle_controller():
    controller = DrawingController()
    events = []
    for event_type in EventType:
        controller.on(event_type, events.append)
    controller.set_mode(DrawMode.CIRCLE)
    return controller, events


def test_tap_adds_circle_sized_for_zoom():
    controller, events = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)

    assert len(controller.circles) == 1
    circle = controller.circles[0]
    assert circle.center == CENTER
    assert circle.radius == 250.0
    assert circle.stroke_color == RED
    assert circle.fill_color == RED.with_alpha(0.2)
    assert controller.circle.selected_id == circle.id
    assert [e.type for e in events] == [EventType.CIRCLE_SELECTED, EventType.CIRCLE_DRAWN]
    assert events[-1].payload == (circle,)


def test_add_notifies_once():
    controller, _ = _circle_controller()
    calls = []
    controller.add_listener(lambda: calls.append(1))
    controller.circle.add(CENTER, zoom=12)
    assert calls == [1]
    assert controller.circles[0].radius == 1000.0


def test_tap_inside_existing_circle_selects_it():
    controller, _ = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    circle_id = controller.circles[0].id
    controller.circle.deselect()

    controller.handle_tap(LatLng(10.0005, 10.0), zoom=15)  # ~55 m from center
    assert len(controller.circles) == 1
    assert controller.circle.selected_id == circle_id

    # Tapping the selected circle again keeps it selected.
    controller.handle_tap(CENTER, zoom=15)
    assert controller.circle.selected_id == circle_id


def test_tap_outside_every_circle_adds_another():
    controller, _ = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    controller.handle_tap(LatLng(11.0, 11.0), zoom=15)
    assert len(controller.circles) == 2
    assert controller.circle.selected_id == controller.circles[1].id


def test_update_radius_from_handle_position():
    controller, events = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    circle_id = controller.circles[0].id

    controller.circle.update_radius(circle_id, radius_handle_position(CENTER, 500.0))
    circle = controller.circle.store.get(circle_id)
    assert circle.radius == pytest.approx(500.0, rel=1e-4)
    assert events[-1] == DrawingEvent(EventType.CIRCLE_UPDATED, circle)


def test_update_radius_to_zero_is_ignored():
    controller, _ = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    circle_id = controller.circles[0].id
    controller.circle.update_radius(circle_id, CENTER)
    assert controller.circle.store.get(circle_id).radius == 250.0


def test_update_center_keeps_radius():
    controller, _ = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    circle_id = controller.circles[0].id
    new_center = LatLng(10.5, 10.5)
    controller.circle.update_center(circle_id, new_center)

    circle = controller.circle.store.get(circle_id)
    assert circle.center == new_center
    assert circle.radius == 250.0
    assert controller.circle.radius_handle_for(circle_id) == radius_handle_position(new_center, 250.0)


def test_unknown_circle_ids_are_ignored():
    controller, events = _circle_controller()
    controller.circle.update_center("circle_missing", CENTER)
    controller.circle.update_radius("circle_missing", CENTER)
    controller.circle.set_color("circle_missing", RED)
    assert controller.circle.radius_handle_for("circle_missing") is None
    assert events == []


def test_select_toggles():
    controller, _ = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    circle_id = controller.circles[0].id
    controller.circle.select(circle_id)
    assert controller.circle.selected_id is None
    controller.circle.select(circle_id)
    assert controller.circle.selected_id == circle_id


def test_update_color():
    controller, events = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    circle_id = controller.circles[0].id
    controller.update_color(circle_id, "rgb(0, 0, 255)")

    circle = controller.circle.store.get(circle_id)
    assert circle.stroke_color == Color(0, 0, 255)
    assert circle.fill_color == Color(0, 0, 255, 0.2)
    assert events[-1].type == EventType.CIRCLE_UPDATED


def test_delete_reports_id_and_clears_selection():
    controller, events = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    circle_id = controller.circles[0].id
    controller.delete_selected()

    assert controller.circles == ()
    assert controller.circle.selected_id is None
    assert events[-1] == DrawingEvent(EventType.CIRCLE_DELETED, circle_id)


def test_delete_without_selection_is_noop():
    controller, events = _circle_controller()
    controller.handle_tap(CENTER, zoom=15)
    controller.circle.deselect()
    count = len(events)
    controller.delete_selected()
    assert len(controller.circles) == 1
    assert len(events) == count
