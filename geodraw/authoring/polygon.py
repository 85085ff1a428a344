"""
Polygon authoring: precise, vertex-by-vertex construction.

Construction protocol (polygon mode only):

1. The first tap creates the polygon with a single point and a shadow
   polyline sharing its id. Both are stored immediately; the polygon is
   "active" (unfinished) until it is closed.
2. Later taps append to both. A tap within the fixed close threshold of the
   first vertex, once the polygon has more than two points, appends the first
   point again and finalizes the ring.
3. Finalizing recolors the polygon with the drawing color, drops the shadow
   polyline and selects the polygon.

Because the active polygon lives in the store, readers that only want
committed shapes should use `finalized_polygons`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Tuple

from geodraw.authoring.base import AuthoringContext
from geodraw.core.color import TRANSPARENT, Color
from geodraw.core.events import EventType
from geodraw.core.geometry import is_within, midpoint, point_in_polygon
from geodraw.core.store import ShapeStore
from geodraw.model import (
    DrawablePolygon,
    DrawablePolyline,
    DrawMode,
    LatLng,
    ShapeKind,
    is_closed,
    new_shape_id,
)


class PolygonAuthoring:
    def __init__(self, ctx: AuthoringContext) -> None:
        self._ctx = ctx
        self._polygons: ShapeStore[DrawablePolygon] = ShapeStore()
        self._polylines: ShapeStore[DrawablePolyline] = ShapeStore()
        self._active_id: Optional[str] = None
        self._selected_id: Optional[str] = None

    # -- read access ---------------------------------------------------------

    @property
    def store(self) -> ShapeStore[DrawablePolygon]:
        return self._polygons

    @property
    def polygons(self) -> Tuple[DrawablePolygon, ...]:
        """Every stored polygon, including an unfinished active one."""
        return self._polygons.values()

    @property
    def finalized_polygons(self) -> Tuple[DrawablePolygon, ...]:
        return tuple(p for p in self._polygons if p.id != self._active_id)

    @property
    def polylines(self) -> Tuple[DrawablePolyline, ...]:
        return self._polylines.values()

    @property
    def active_polygon(self) -> Optional[DrawablePolygon]:
        return self._polygons.get(self._active_id)

    @property
    def active_polygon_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_polyline(self) -> Optional[DrawablePolyline]:
        return self._polylines.get(self._active_id)

    @property
    def selected_polygon(self) -> Optional[DrawablePolygon]:
        return self._polygons.get(self._selected_id)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    # -- construction --------------------------------------------------------

    def add_point(self, point: LatLng) -> None:
        if self._ctx.mode != DrawMode.POLYGON:
            return

        active = self.active_polygon
        if active is None:
            polygon_id = new_shape_id(ShapeKind.POLYGON)
            self._polygons.add(
                DrawablePolygon(
                    id=polygon_id,
                    points=(point,),
                    stroke_color=TRANSPARENT,
                    fill_color=TRANSPARENT,
                    stroke_width=self._ctx.config.stroke_width,
                )
            )
            self._polylines.add(
                DrawablePolyline(
                    id=polygon_id,
                    points=(point,),
                    color=self._ctx.drawing_color,
                    width=self._ctx.config.stroke_width,
                )
            )
            self._active_id = polygon_id
            self._selected_id = polygon_id
            self._ctx.notify()
            return

        first = active.points[0]
        if is_within(point, first, self._ctx.config.close_threshold_m) and len(active.points) > 2:
            self._polygons.replace(replace(active, points=active.points + (first,)))
            self.finish()
            return

        points = active.points + (point,)
        self._polygons.replace(replace(active, points=points))
        polyline = self._polylines.get(active.id)
        if polyline is not None:
            self._polylines.replace(replace(polyline, points=points))
        self._selected_id = active.id
        self._ctx.notify()

    def handle_first_marker_tap(self) -> None:
        active = self.active_polygon
        if self._ctx.mode == DrawMode.POLYGON and active is not None and len(active.points) > 2:
            self.finish()

    def finish(self) -> None:
        """
        Finalize the active polygon if it has at least 3 points.

        The drawn event and the change notification fire even when nothing was
        finalized.
        """
        active = self.active_polygon
        if active is not None and len(active.points) >= 3:
            color = self._ctx.drawing_color
            finalized = replace(active, stroke_color=color, fill_color=self._ctx.fill_for(color))
            self._polygons.replace(finalized)
            self._polylines.remove(active.id)
            self._active_id = None
            self._selected_id = finalized.id

        self._ctx.events.emit(EventType.POLYGON_DRAWN, self.finalized_polygons)
        self._ctx.notify()

    def discard_active(self) -> None:
        """Drop the active polygon and its shadow polyline without finalizing."""
        if self._active_id is None:
            return
        self._polygons.remove(self._active_id)
        self._polylines.remove(self._active_id)
        if self._selected_id == self._active_id:
            self._selected_id = None
        self._active_id = None
        self._ctx.notify()

    def force_finish(self) -> None:
        """Mode-switch cleanup: finalize a closable active polygon, discard anything shorter."""
        active = self.active_polygon
        if active is None:
            return
        if len(active.points) >= 3:
            self.finish()
        else:
            self.discard_active()

    def reset_slots(self) -> None:
        self._active_id = None
        self._selected_id = None

    # -- editing -------------------------------------------------------------

    def update_point(self, polygon_id: str, index: int, new_point: LatLng) -> None:
        polygon = self._polygons.get(polygon_id)
        if polygon is None:
            return
        points = list(polygon.points)
        if index < 0 or index >= len(points):
            return

        closed = is_closed(polygon.points)
        points[index] = new_point
        # Keep a closed ring closed when either end moves.
        if closed and index == 0:
            points[-1] = new_point
        elif closed and index == len(points) - 1:
            points[0] = new_point

        self._update_polygon(polygon, points)

    def insert_midpoint_as_vertex(self, polygon_id: str, index: int, point: LatLng) -> None:
        polygon = self._polygons.get(polygon_id)
        if polygon is None:
            return
        points = list(polygon.points)
        if index < 0 or index > len(points):
            return
        if is_closed(polygon.points) and index in (0, len(points)):
            index = len(points) - 1
        points.insert(index, point)
        self._update_polygon(polygon, points)

    def update_midpoint_position(self, polygon_id: str, edge_index: int, new_position: LatLng) -> None:
        """
        Soft edge drag: move the vertices on either side of `edge_index` by half
        the offset between `new_position` and their current midpoint. The
        vertex at `edge_index` itself is not touched and no vertex is added.
        """
        polygon = self._polygons.get(polygon_id)
        if polygon is None:
            return
        if edge_index < 0 or edge_index >= len(polygon.points):
            return

        closed = is_closed(polygon.points)
        ring: List[LatLng] = list(polygon.points[:-1] if closed else polygon.points)
        n = len(ring)
        if n < 2:
            return

        i = edge_index % n
        prev_index = (i - 1) % n
        next_index = (i + 1) % n

        current_mid = midpoint(ring[prev_index], ring[next_index])
        lat_delta = new_position.latitude - current_mid.latitude
        lng_delta = new_position.longitude - current_mid.longitude

        for j in {prev_index, next_index}:
            ring[j] = LatLng(ring[j].latitude + lat_delta / 2, ring[j].longitude + lng_delta / 2)

        if closed:
            ring.append(ring[0])
        self._update_polygon(polygon, ring)

    def _update_polygon(self, polygon: DrawablePolygon, points: List[LatLng]) -> None:
        updated = replace(polygon, points=tuple(points))
        self._polygons.replace(updated)
        polyline = self._polylines.get(polygon.id)
        if polyline is not None:
            self._polylines.replace(replace(polyline, points=updated.points))
        self._ctx.notify()
        self._ctx.events.emit(EventType.POLYGON_UPDATED, updated)

    def set_color(self, polygon_id: str, color: Color) -> None:
        polygon = self._polygons.get(polygon_id)
        if polygon is None:
            return
        updated = replace(polygon, stroke_color=color, fill_color=self._ctx.fill_for(color))
        self._polygons.replace(updated)
        self._ctx.events.emit(EventType.POLYGON_UPDATED, updated)
        self._ctx.notify()

    # -- selection -----------------------------------------------------------

    def select_at(self, point: LatLng) -> bool:
        """
        Select the first finalized polygon containing `point` (store order).
        A hit on the polygon that is already selected keeps it selected.
        """
        for polygon in self.finalized_polygons:
            if point_in_polygon(point, polygon.points):
                if self._selected_id != polygon.id:
                    self.select(polygon.id)
                return True
        self.deselect()
        return False

    def select(self, polygon_id: str) -> None:
        """Select `polygon_id`; selecting the already-selected polygon deselects it."""
        if self._selected_id == polygon_id:
            self._selected_id = None
            self._ctx.notify()
            return
        polygon = self._polygons.get(polygon_id)
        if polygon is None:
            return
        self._selected_id = polygon.id
        self._ctx.events.emit(EventType.POLYGON_SELECTED, polygon)
        self._ctx.notify()

    def deselect(self) -> None:
        self._selected_id = None
        self._ctx.notify()

    def delete(self) -> None:
        deleted_id = self._selected_id
        if deleted_id is None or deleted_id not in self._polygons:
            return
        self._polygons.remove(deleted_id)
        self._polylines.remove(deleted_id)
        if self._active_id == deleted_id:
            self._active_id = None
        self._selected_id = None
        self._ctx.notify()
        self._ctx.events.emit(EventType.POLYGON_DELETED, deleted_id)

    def clear_all(self) -> None:
        self._polygons.clear()
        self._polylines.clear()
        self._active_id = None
        self._selected_id = None
        self._ctx.notify()
