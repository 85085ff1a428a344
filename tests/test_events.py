from pathlib import Path

from geodraw.core.events import ChangeNotifier, DrawingEvent, EventBus, EventType
from geodraw.core.trace import TraceReader, TraceWriter
from geodraw.model import DrawableCircle, LatLng


def test_notifier_fans_out_to_every_listener():
    notifier = ChangeNotifier()
    calls = []
    notifier.add_listener(lambda: calls.append("a"))
    notifier.add_listener(lambda: calls.append("b"))
    notifier.notify_listeners()
    assert calls == ["a", "b"]


def test_removed_listener_is_not_called():
    notifier = ChangeNotifier()
    calls = []

    def listener():
        calls.append(1)

    notifier.add_listener(listener)
    notifier.remove_listener(listener)
    notifier.remove_listener(listener)  # second removal is a no-op
    notifier.notify_listeners()
    assert calls == []
    assert notifier.listener_count == 0


def test_batched_collapses_nested_notifications():
    notifier = ChangeNotifier()
    calls = []
    notifier.add_listener(lambda: calls.append(1))
    with notifier.batched():
        notifier.notify_listeners()
        with notifier.batched():
            notifier.notify_listeners()
            notifier.notify_listeners()
        assert calls == []
    assert calls == [1]


def test_batched_without_notifications_is_silent():
    notifier = ChangeNotifier()
    calls = []
    notifier.add_listener(lambda: calls.append(1))
    with notifier.batched():
        pass
    assert calls == []


def test_event_types_cover_every_kind_and_action():
    values = {e.value for e in EventType}
    for kind in ("polygon", "circle", "rectangle", "freehand"):
        for action in ("drawn", "selected", "updated", "deleted"):
            assert f"{kind}.{action}" in values
    assert len(values) == 16


def test_bus_delivers_to_single_handler():
    bus = EventBus()
    seen = []
    bus.on(EventType.CIRCLE_DELETED, lambda e: seen.append(("first", e)))
    bus.on(EventType.CIRCLE_DELETED, lambda e: seen.append(("second", e)))

    event = bus.emit(EventType.CIRCLE_DELETED, "circle_1")
    assert event == DrawingEvent(EventType.CIRCLE_DELETED, "circle_1")
    assert seen == [("second", event)]


def test_bus_handler_can_be_cleared():
    bus = EventBus()
    seen = []
    bus.on(EventType.POLYGON_DRAWN, seen.append)
    bus.on(EventType.POLYGON_DRAWN, None)
    assert bus.handler_for(EventType.POLYGON_DRAWN) is None
    bus.emit(EventType.POLYGON_DRAWN, ())
    assert seen == []


def test_bus_without_handler_is_fine():
    bus = EventBus()
    event = bus.emit(EventType.RECTANGLE_UPDATED, None)
    assert event.type == EventType.RECTANGLE_UPDATED


def test_bus_writes_trace_records(tmp_path: Path):
    trace_path = tmp_path / "trace.jsonl"
    circle = DrawableCircle(id="circle_1", center=LatLng(1.0, 2.0), radius=250.0)
    with TraceWriter(trace_path) as tw:
        bus = EventBus(trace=tw)
        bus.emit(EventType.CIRCLE_DRAWN, (circle,))
        bus.emit(EventType.CIRCLE_DELETED, "circle_1")

    events = TraceReader(trace_path).events()
    assert [e["event"] for e in events] == ["circle.drawn", "circle.deleted"]
    assert events[0]["count"] == 1
    assert events[0]["payload"][0]["center"] == {"latitude": 1.0, "longitude": 2.0}
    assert events[1]["payload"] == "circle_1"
    assert "count" not in events[1]
