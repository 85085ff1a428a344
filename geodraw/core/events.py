"""
Change notification and domain events.

Two channels reach the host after every mutation:

- a payload-free change notification, fanned out synchronously to every
  listener (the renderer re-reads state through the controller accessors);
- a typed domain event (drawn/selected/updated/deleted per shape kind),
  delivered to at most one handler per event type.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from geodraw.core.trace import TraceWriter


Listener = Callable[[], None]


class ChangeNotifier:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self._batch_depth = 0
        self._pending = False

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def notify_listeners(self) -> None:
        if self._batch_depth > 0:
            self._pending = True
            return
        for listener in list(self._listeners):
            listener()

    @contextmanager
    def batched(self) -> Iterator[None]:
        """Collapse every notification raised inside the block into one."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending:
                self._pending = False
                self.notify_listeners()


class EventType(str, Enum):
    POLYGON_DRAWN = "polygon.drawn"
    POLYGON_SELECTED = "polygon.selected"
    POLYGON_UPDATED = "polygon.updated"
    POLYGON_DELETED = "polygon.deleted"

    CIRCLE_DRAWN = "circle.drawn"
    CIRCLE_SELECTED = "circle.selected"
    CIRCLE_UPDATED = "circle.updated"
    CIRCLE_DELETED = "circle.deleted"

    RECTANGLE_DRAWN = "rectangle.drawn"
    RECTANGLE_SELECTED = "rectangle.selected"
    RECTANGLE_UPDATED = "rectangle.updated"
    RECTANGLE_DELETED = "rectangle.deleted"

    FREEHAND_DRAWN = "freehand.drawn"
    FREEHAND_SELECTED = "freehand.selected"
    FREEHAND_UPDATED = "freehand.updated"
    FREEHAND_DELETED = "freehand.deleted"


@dataclass(frozen=True)
class DrawingEvent:
    """
    payload by action:
      drawn    -> tuple of every shape in the kind's store
      selected -> the shape
      updated  -> the shape
      deleted  -> the deleted id (str)
    """

    type: EventType
    payload: Any


EventHandler = Callable[[DrawingEvent], None]


class EventBus:
    def __init__(self, *, trace: Optional[TraceWriter] = None) -> None:
        self._handlers: Dict[EventType, EventHandler] = {}
        self.trace = trace

    def on(self, event_type: EventType, handler: Optional[EventHandler]) -> None:
        """Register the handler for `event_type`, replacing any previous one."""
        if handler is None:
            self._handlers.pop(event_type, None)
        else:
            self._handlers[event_type] = handler

    def handler_for(self, event_type: EventType) -> Optional[EventHandler]:
        return self._handlers.get(event_type)

    def emit(self, event_type: EventType, payload: Any) -> DrawingEvent:
        event = DrawingEvent(event_type, payload)
        if self.trace is not None:
            record: Dict[str, Any] = {"event": event_type.value, "payload": payload}
            if isinstance(payload, tuple):
                record["count"] = len(payload)
            self.trace.emit(record)
        handler = self._handlers.get(event_type)
        if handler is not None:
            handler(event)
        return event
