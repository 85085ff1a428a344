"""
Freehand authoring: a continuous trace that follows raw gesture samples.

Points are appended as they arrive (no snapping, no dedup). Finishing a
trace with more than two points promotes it to a freehand polygon; shorter
traces are dropped.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Tuple

from geodraw.authoring.base import AuthoringContext
from geodraw.core.color import Color
from geodraw.core.events import EventType
from geodraw.core.geometry import point_in_polygon
from geodraw.core.store import ShapeStore
from geodraw.model import DrawablePolygon, DrawMode, LatLng, ShapeKind, new_shape_id


class FreehandAuthoring:
    def __init__(self, ctx: AuthoringContext) -> None:
        self._ctx = ctx
        self._polygons: ShapeStore[DrawablePolygon] = ShapeStore()
        self._trace: List[LatLng] = []
        self._in_progress = False
        self._selected_id: Optional[str] = None

    @property
    def store(self) -> ShapeStore[DrawablePolygon]:
        return self._polygons

    @property
    def polygons(self) -> Tuple[DrawablePolygon, ...]:
        return self._polygons.values()

    @property
    def trace(self) -> Tuple[LatLng, ...]:
        return tuple(self._trace)

    @property
    def is_drawing(self) -> bool:
        return self._in_progress

    @property
    def selected_polygon(self) -> Optional[DrawablePolygon]:
        return self._polygons.get(self._selected_id)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def start(self) -> None:
        self._trace.clear()
        self._in_progress = True
        self._ctx.notify()

    def add_point(self, point: LatLng) -> None:
        if not self._in_progress:
            return
        self._trace.append(point)
        self._ctx.notify()

    def finish(self) -> None:
        if self._in_progress and len(self._trace) > 2:
            color = self._ctx.drawing_color
            self._polygons.add(
                DrawablePolygon(
                    id=new_shape_id(ShapeKind.FREEHAND),
                    points=tuple(self._trace),
                    stroke_color=color,
                    fill_color=self._ctx.fill_for(color),
                    stroke_width=self._ctx.config.stroke_width,
                )
            )
        self._in_progress = False
        self._trace.clear()
        self.clear_selection()
        self._ctx.notify()
        self._ctx.events.emit(EventType.FREEHAND_DRAWN, self.polygons)

    def select_at(self, point: LatLng) -> bool:
        if self._ctx.mode != DrawMode.FREEHAND:
            return False
        for polygon in self._polygons:
            if point_in_polygon(point, polygon.points):
                self.select(polygon.id)
                return True
        self.deselect()
        return False

    def select(self, polygon_id: str) -> None:
        if self._ctx.mode != DrawMode.FREEHAND:
            return
        polygon = self._polygons.get(polygon_id)
        if polygon is None:
            return
        self._selected_id = polygon.id
        self._ctx.notify()
        self._ctx.events.emit(EventType.FREEHAND_SELECTED, polygon)

    def deselect(self) -> None:
        if self._ctx.mode != DrawMode.FREEHAND:
            return
        self.clear_selection()

    def clear_selection(self) -> None:
        """Drop the selection and restore the de-highlighted stroke width."""
        selected = self._polygons.get(self._selected_id)
        if selected is not None:
            self._polygons.replace(replace(selected, stroke_width=self._ctx.config.stroke_width))
        self._selected_id = None
        self._ctx.notify()

    def delete(self) -> None:
        deleted_id = self._selected_id
        if deleted_id is None or deleted_id not in self._polygons:
            return
        self._polygons.remove(deleted_id)
        self._ctx.events.emit(EventType.FREEHAND_DELETED, deleted_id)
        self._selected_id = None
        self._ctx.notify()

    def set_color(self, polygon_id: str, color: Color) -> None:
        polygon = self._polygons.get(polygon_id)
        if polygon is None:
            return
        updated = replace(polygon, stroke_color=color, fill_color=self._ctx.fill_for(color))
        self._polygons.replace(updated)
        self._ctx.events.emit(EventType.FREEHAND_UPDATED, updated)
        self._ctx.notify()
