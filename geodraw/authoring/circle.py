"""
Circle authoring.

A tap drops a circle whose initial radius depends on how far the map is
zoomed in (see `initial_radius_for_zoom`). The circle is edited through two
handles: its center, and a radius handle placed due east of the center.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from geodraw.authoring.base import AuthoringContext
from geodraw.core.color import Color
from geodraw.core.events import EventType
from geodraw.core.geometry import distance_meters, initial_radius_for_zoom, radius_handle_position
from geodraw.core.store import ShapeStore
from geodraw.model import DrawableCircle, LatLng, ShapeKind, new_shape_id


class CircleAuthoring:
    def __init__(self, ctx: AuthoringContext) -> None:
        self._ctx = ctx
        self._circles: ShapeStore[DrawableCircle] = ShapeStore()
        self._selected_id: Optional[str] = None

    @property
    def store(self) -> ShapeStore[DrawableCircle]:
        return self._circles

    @property
    def circles(self) -> Tuple[DrawableCircle, ...]:
        return self._circles.values()

    @property
    def selected_circle(self) -> Optional[DrawableCircle]:
        return self._circles.get(self._selected_id)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def add(self, center: LatLng, zoom: float) -> DrawableCircle:
        color = self._ctx.drawing_color
        circle = DrawableCircle(
            id=new_shape_id(ShapeKind.CIRCLE),
            center=center,
            radius=initial_radius_for_zoom(zoom),
            stroke_color=color,
            fill_color=self._ctx.fill_for(color),
            stroke_width=self._ctx.config.stroke_width,
        )
        with self._ctx.notifier.batched():
            self._circles.add(circle)
            self.select(circle.id)
            self._ctx.events.emit(EventType.CIRCLE_DRAWN, self.circles)
            self._ctx.notify()
        return circle

    def update_center(self, circle_id: str, new_center: LatLng) -> None:
        circle = self._circles.get(circle_id)
        if circle is None:
            return
        self._commit(replace(circle, center=new_center))

    def update_radius(self, circle_id: str, handle_position: LatLng) -> None:
        circle = self._circles.get(circle_id)
        if circle is None:
            return
        radius = distance_meters(circle.center, handle_position)
        # A handle dropped on the center would collapse the circle.
        if radius <= 0:
            return
        self._commit(replace(circle, radius=radius))

    def set_color(self, circle_id: str, color: Color) -> None:
        circle = self._circles.get(circle_id)
        if circle is None:
            return
        self._commit(replace(circle, stroke_color=color, fill_color=self._ctx.fill_for(color)))

    def _commit(self, updated: DrawableCircle) -> None:
        self._circles.replace(updated)
        self._ctx.notify()
        self._ctx.events.emit(EventType.CIRCLE_UPDATED, updated)

    @staticmethod
    def radius_handle_position(center: LatLng, radius_m: float) -> LatLng:
        return radius_handle_position(center, radius_m)

    def radius_handle_for(self, circle_id: str) -> Optional[LatLng]:
        circle = self._circles.get(circle_id)
        if circle is None:
            return None
        return radius_handle_position(circle.center, circle.radius)

    def select_at(self, point: LatLng) -> bool:
        for circle in self._circles:
            if distance_meters(circle.center, point) <= circle.radius:
                if self._selected_id != circle.id:
                    self.select(circle.id)
                return True
        return False

    def select(self, circle_id: str) -> None:
        if self._selected_id == circle_id:
            self._selected_id = None
            self._ctx.notify()
            return
        circle = self._circles.get(circle_id)
        if circle is None:
            return
        self._selected_id = circle.id
        self._ctx.notify()
        self._ctx.events.emit(EventType.CIRCLE_SELECTED, circle)

    def deselect(self) -> None:
        self._selected_id = None
        self._ctx.notify()

    def delete(self) -> None:
        deleted_id = self._selected_id
        if deleted_id is None or deleted_id not in self._circles:
            return
        self._circles.remove(deleted_id)
        self._selected_id = None
        self._ctx.notify()
        self._ctx.events.emit(EventType.CIRCLE_DELETED, deleted_id)
