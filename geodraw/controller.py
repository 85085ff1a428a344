"""
DrawingController: the authoring mode state machine.

Owns the current DrawMode and one authoring controller per shape kind, and
routes host gestures (tap, drag start/move/end) to whichever controller the
mode selects. Mode switches are always legal; before the mode changes every
in-progress shape is finalized or discarded and all selections are cleared,
so nothing half-built survives a switch.

Typical host wiring:

    controller = DrawingController()
    controller.add_listener(redraw)                      # after every mutation
    controller.on(EventType.POLYGON_DRAWN, save_shapes)  # optional domain events
    controller.set_mode(DrawMode.POLYGON)
    controller.handle_tap(LatLng(46.0, -114.0), zoom=15)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from geodraw.authoring.base import AuthoringContext
from geodraw.authoring.circle import CircleAuthoring
from geodraw.authoring.freehand import FreehandAuthoring
from geodraw.authoring.polygon import PolygonAuthoring
from geodraw.authoring.rectangle import RectangleAuthoring
from geodraw.core.color import Color, ColorLike
from geodraw.core.config import DrawingConfig
from geodraw.core.events import ChangeNotifier, EventBus, EventHandler, EventType, Listener
from geodraw.core.geometry import is_near_point, radius_handle_position
from geodraw.core.trace import TraceWriter
from geodraw.io.geojson import ImportSummary, export_geojson, import_geojson
from geodraw.model import (
    DrawableCircle,
    DrawablePolygon,
    DrawableRectangle,
    DrawMode,
    LatLng,
)
from geodraw import render
from geodraw.render import MapCircle, MapMarker, MapPolygon, MapPolyline


@dataclass(frozen=True)
class _DragTarget:
    """What a drag that is in flight is moving."""

    role: str  # vertex|midpoint|circle_center|circle_radius|rectangle_corner|rectangle_new|freehand
    shape_id: Optional[str] = None
    index: int = -1
    corner: str = ""


class DrawingController:
    def __init__(self, config: Optional[DrawingConfig] = None, *, trace: Optional[TraceWriter] = None) -> None:
        self._ctx = AuthoringContext(
            config=config,
            notifier=ChangeNotifier(),
            events=EventBus(trace=trace),
        )
        self.polygon = PolygonAuthoring(self._ctx)
        self.circle = CircleAuthoring(self._ctx)
        self.rectangle = RectangleAuthoring(self._ctx)
        self.freehand = FreehandAuthoring(self._ctx)
        self._drag: Optional[_DragTarget] = None

    # -- wiring ----------------------------------------------------------------

    @property
    def context(self) -> AuthoringContext:
        return self._ctx

    @property
    def config(self) -> DrawingConfig:
        return self._ctx.config

    def add_listener(self, listener: Listener) -> None:
        self._ctx.notifier.add_listener(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._ctx.notifier.remove_listener(listener)

    def on(self, event_type: EventType, handler: Optional[EventHandler]) -> None:
        self._ctx.events.on(event_type, handler)

    def set_marker_icon(self, name: str, icon: Any) -> None:
        """Override one marker role's icon handle (e.g. 'first_vertex')."""
        self._ctx.config.icons = self._ctx.config.icons.with_icon(name, icon)
        self._ctx.notify()

    # -- mode state machine ----------------------------------------------------

    @property
    def mode(self) -> DrawMode:
        return self._ctx.mode

    def set_mode(self, mode: DrawMode) -> None:
        mode = DrawMode(mode)
        with self._ctx.notifier.batched():
            self.polygon.force_finish()
            self.rectangle.finish()
            if self.freehand.is_drawing:
                self.freehand.finish()

            self.circle.deselect()
            self.polygon.deselect()
            self.rectangle.clear_selection()
            self.freehand.clear_selection()

            self._ctx.mode = mode
            self.polygon.reset_slots()
            self._drag = None
            self._ctx.notify()

    # -- color -----------------------------------------------------------------

    @property
    def drawing_color(self) -> Color:
        return self._ctx.drawing_color

    def set_drawing_color(self, color: ColorLike) -> None:
        """Color used for shapes authored from now on."""
        self._ctx.drawing_color = Color.parse(color)
        self._ctx.notify()

    def update_color(self, shape_id: str, color: ColorLike) -> None:
        """Recolor a committed shape of the kind the current mode edits."""
        c = Color.parse(color)
        mode = self._ctx.mode
        if mode == DrawMode.POLYGON:
            self.polygon.set_color(shape_id, c)
        elif mode == DrawMode.CIRCLE:
            self.circle.set_color(shape_id, c)
        elif mode == DrawMode.RECTANGLE:
            self.rectangle.set_color(shape_id, c)
        elif mode == DrawMode.FREEHAND:
            self.freehand.set_color(shape_id, c)

    # -- state accessors -------------------------------------------------------

    @property
    def polygons(self) -> Tuple[DrawablePolygon, ...]:
        return self.polygon.polygons

    @property
    def circles(self) -> Tuple[DrawableCircle, ...]:
        return self.circle.circles

    @property
    def rectangles(self) -> Tuple[DrawableRectangle, ...]:
        return self.rectangle.rectangles

    @property
    def freehand_polygons(self) -> Tuple[DrawablePolygon, ...]:
        return self.freehand.polygons

    def shape_counts(self) -> Dict[str, int]:
        return {
            "polygon": len(self.polygon.finalized_polygons),
            "freehand": len(self.freehand.polygons),
            "rectangle": len(self.rectangle.rectangles),
            "circle": len(self.circle.circles),
        }

    # -- mode-dispatched conveniences -------------------------------------------

    def finish_current(self) -> None:
        mode = self._ctx.mode
        if mode == DrawMode.POLYGON:
            self.polygon.finish()
        elif mode == DrawMode.RECTANGLE:
            self.rectangle.finish()
        elif mode == DrawMode.FREEHAND:
            self.freehand.finish()

    def delete_selected(self) -> None:
        mode = self._ctx.mode
        if mode in (DrawMode.NONE, DrawMode.POLYGON):
            self.polygon.delete()
        elif mode == DrawMode.CIRCLE:
            self.circle.delete()
        elif mode == DrawMode.RECTANGLE:
            self.rectangle.delete()
        elif mode == DrawMode.FREEHAND:
            self.freehand.delete()

    # -- gestures ----------------------------------------------------------------

    def handle_tap(self, point: LatLng, zoom: float) -> None:
        mode = self._ctx.mode
        if mode == DrawMode.NONE:
            self.polygon.select_at(point)
        elif mode == DrawMode.POLYGON:
            self.polygon.add_point(point)
        elif mode == DrawMode.CIRCLE:
            if not self.circle.select_at(point):
                self.circle.add(point, zoom)
        elif mode == DrawMode.RECTANGLE:
            self.rectangle.select_at(point)
        elif mode == DrawMode.FREEHAND:
            self.freehand.select_at(point)

    def handle_drag_start(self, point: LatLng, zoom: float) -> None:
        self._drag = self._pick_drag_target(point, zoom)
        target = self._drag
        if target is None:
            return
        if target.role == "rectangle_corner":
            self.rectangle.start_corner_drag(target.corner)
        elif target.role == "rectangle_new":
            self.rectangle.start(point)
        elif target.role == "freehand":
            self.freehand.start()
            self.freehand.add_point(point)

    def handle_drag_move(self, point: LatLng, zoom: float) -> None:
        target = self._drag
        if target is None:
            return
        self._apply_drag(target, point, final=False)

    def handle_drag_end(self, point: LatLng, zoom: float) -> None:
        target = self._drag
        self._drag = None
        if target is None:
            return
        self._apply_drag(target, point, final=True)

    def _apply_drag(self, target: _DragTarget, point: LatLng, *, final: bool) -> None:
        role = target.role
        if role == "vertex" and target.shape_id is not None:
            self.polygon.update_point(target.shape_id, target.index, point)
        elif role == "midpoint" and target.shape_id is not None:
            if final:
                self.polygon.insert_midpoint_as_vertex(target.shape_id, target.index + 1, point)
        elif role == "circle_center" and target.shape_id is not None:
            self.circle.update_center(target.shape_id, point)
        elif role == "circle_radius" and target.shape_id is not None:
            self.circle.update_radius(target.shape_id, point)
        elif role == "rectangle_corner":
            if final:
                self.rectangle.end_corner_drag(target.corner, point)
            else:
                self.rectangle.drag_corner(target.corner, point)
        elif role == "rectangle_new":
            self.rectangle.update(point)
            if final:
                self.rectangle.finish()
        elif role == "freehand":
            self.freehand.add_point(point)
            if final:
                self.freehand.finish()

    def _pick_drag_target(self, point: LatLng, zoom: float) -> Optional[_DragTarget]:
        """Pick the handle under the pointer using the zoom-adaptive snap threshold."""
        mode = self._ctx.mode

        if mode == DrawMode.POLYGON:
            polygon = self.polygon.active_polygon or self.polygon.selected_polygon
            if polygon is None:
                return None
            ring = render.open_ring(polygon.points)
            for i, vertex in enumerate(ring):
                if is_near_point(point, vertex, zoom):
                    return _DragTarget("vertex", polygon.id, index=i)
            if polygon.id != self.polygon.active_polygon_id:
                for i, mid in enumerate(render.edge_midpoints(ring)):
                    if is_near_point(point, mid, zoom):
                        return _DragTarget("midpoint", polygon.id, index=i)
            return None

        if mode == DrawMode.CIRCLE:
            circle = self.circle.selected_circle
            if circle is None:
                return None
            if is_near_point(point, radius_handle_position(circle.center, circle.radius), zoom):
                return _DragTarget("circle_radius", circle.id)
            if is_near_point(point, circle.center, zoom):
                return _DragTarget("circle_center", circle.id)
            return None

        if mode == DrawMode.RECTANGLE:
            for handle in self.rectangle.edit_handles():
                if is_near_point(point, handle.position, zoom):
                    return _DragTarget("rectangle_corner", self.rectangle.selected_id, corner=handle.corner)
            return _DragTarget("rectangle_new")

        if mode == DrawMode.FREEHAND:
            return _DragTarget("freehand")

        return None

    # -- render projections ----------------------------------------------------

    @property
    def map_polygons(self) -> Tuple[MapPolygon, ...]:
        return render.polygon_layer(self.polygon, self.rectangle, self.config)

    @property
    def map_polylines(self) -> Tuple[MapPolyline, ...]:
        return render.polyline_layer(self.polygon)

    @property
    def map_circles(self) -> Tuple[MapCircle, ...]:
        return render.circle_layer(self.circle)

    @property
    def map_freehand_polygons(self) -> Tuple[MapPolygon, ...]:
        return render.freehand_layer(self.freehand, self.config)

    @property
    def drawing_freehand_polygon(self) -> Optional[MapPolygon]:
        return render.freehand_trace(self.freehand, self.config)

    @property
    def polygon_markers(self) -> Tuple[MapMarker, ...]:
        return render.polygon_markers(self.polygon, self.config)

    @property
    def circle_markers(self) -> Tuple[MapMarker, ...]:
        return render.circle_markers(self.circle, self.config)

    @property
    def rectangle_markers(self) -> Tuple[MapMarker, ...]:
        return render.rectangle_markers(self.rectangle, self.config)

    # -- interchange -------------------------------------------------------------

    def to_geojson(self) -> Dict[str, Any]:
        return export_geojson(self)

    def load_geojson(self, doc: Dict[str, Any]) -> ImportSummary:
        return import_geojson(self, doc)
