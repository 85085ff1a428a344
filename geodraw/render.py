"""
Render projections.

Read-only snapshots a map layer can draw directly. Nothing here mutates
authoring state; a renderer re-reads these after every change notification.
Selection is expressed purely through styling and through which handle
markers are present.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from geodraw.authoring.circle import CircleAuthoring
from geodraw.authoring.freehand import FreehandAuthoring
from geodraw.authoring.polygon import PolygonAuthoring
from geodraw.authoring.rectangle import RectangleAuthoring
from geodraw.core.color import BLUE, PURPLE, Color
from geodraw.core.config import DrawingConfig
from geodraw.core.geometry import midpoint, radius_handle_position
from geodraw.model import LatLng, is_closed


FREEHAND_TRACE_ID = "freehand_drawing"
FREEHAND_TRACE_WIDTH = 3


@dataclass(frozen=True)
class MapPolygon:
    id: str
    points: Tuple[LatLng, ...]
    stroke_color: Color
    fill_color: Color
    stroke_width: int
    consume_taps: bool = True


@dataclass(frozen=True)
class MapPolyline:
    id: str
    points: Tuple[LatLng, ...]
    color: Color
    width: int


@dataclass(frozen=True)
class MapCircle:
    id: str
    center: LatLng
    radius: float
    stroke_color: Color
    fill_color: Color
    stroke_width: int


@dataclass(frozen=True)
class MapMarker:
    id: str
    position: LatLng
    icon: Any
    role: str
    draggable: bool = False


def open_ring(points: Tuple[LatLng, ...]) -> Tuple[LatLng, ...]:
    """Ring without its closing duplicate."""
    return points[:-1] if is_closed(points) else points


def polygon_layer(polygons: PolygonAuthoring, rectangles: RectangleAuthoring, config: DrawingConfig) -> Tuple[MapPolygon, ...]:
    """Polygons, committed rectangles and the rectangle being drawn."""
    out: List[MapPolygon] = [
        MapPolygon(
            id=p.id,
            points=p.points,
            stroke_color=p.stroke_color,
            fill_color=p.fill_color,
            stroke_width=p.stroke_width,
        )
        for p in polygons.polygons
    ]
    drawing = rectangles.drawing_rectangle
    for rect in rectangles.rectangles + ((drawing,) if drawing is not None else ()):
        out.append(
            MapPolygon(
                id=rect.id,
                points=rect.bounds.ring(),
                stroke_color=rect.stroke_color,
                fill_color=rect.fill_color,
                stroke_width=rect.stroke_width,
            )
        )
    return tuple(out)


def polyline_layer(polygons: PolygonAuthoring) -> Tuple[MapPolyline, ...]:
    return tuple(MapPolyline(id=p.id, points=p.points, color=p.color, width=p.width) for p in polygons.polylines)


def circle_layer(circles: CircleAuthoring) -> Tuple[MapCircle, ...]:
    return tuple(
        MapCircle(
            id=c.id,
            center=c.center,
            radius=c.radius,
            stroke_color=c.stroke_color,
            fill_color=c.fill_color,
            stroke_width=c.stroke_width,
        )
        for c in circles.circles
    )


def freehand_layer(freehand: FreehandAuthoring, config: DrawingConfig) -> Tuple[MapPolygon, ...]:
    selected_id = freehand.selected_id
    out: List[MapPolygon] = []
    for poly in freehand.polygons:
        if poly.id == selected_id:
            out.append(
                MapPolygon(
                    id=poly.id,
                    points=poly.points,
                    stroke_color=BLUE,
                    fill_color=BLUE.with_alpha(config.fill_alpha),
                    stroke_width=config.selected_stroke_width,
                )
            )
        else:
            out.append(
                MapPolygon(
                    id=poly.id,
                    points=poly.points,
                    stroke_color=poly.stroke_color,
                    fill_color=poly.fill_color,
                    stroke_width=config.stroke_width,
                )
            )
    return tuple(out)


def freehand_trace(freehand: FreehandAuthoring, config: DrawingConfig) -> Optional[MapPolygon]:
    """The live trace, once it has at least two points."""
    trace = freehand.trace
    if not freehand.is_drawing or len(trace) < 2:
        return None
    return MapPolygon(
        id=FREEHAND_TRACE_ID,
        points=trace,
        stroke_color=PURPLE,
        fill_color=PURPLE.with_alpha(config.fill_alpha),
        stroke_width=FREEHAND_TRACE_WIDTH,
        consume_taps=False,
    )


def polygon_markers(polygons: PolygonAuthoring, config: DrawingConfig) -> Tuple[MapMarker, ...]:
    """
    Vertex markers for the active polygon (first vertex gets its own icon and
    closes the ring when tapped), plus vertex and midpoint markers for a
    selected finalized polygon.
    """
    icons = config.icons
    markers: List[MapMarker] = []

    active = polygons.active_polygon
    if active is not None:
        for i, pt in enumerate(active.points):
            markers.append(
                MapMarker(
                    id=f"{active.id}_vertex_{i}",
                    position=pt,
                    icon=icons.first_vertex if i == 0 else icons.vertex,
                    role="first_vertex" if i == 0 else "vertex",
                    draggable=True,
                )
            )

    selected = polygons.selected_polygon
    if selected is not None and selected.id != polygons.active_polygon_id:
        ring = open_ring(selected.points)
        for i, pt in enumerate(ring):
            markers.append(
                MapMarker(
                    id=f"{selected.id}_vertex_{i}",
                    position=pt,
                    icon=icons.vertex,
                    role="vertex",
                    draggable=True,
                )
            )
        for i, mid in enumerate(edge_midpoints(ring)):
            markers.append(
                MapMarker(
                    id=f"{selected.id}_midpoint_{i}",
                    position=mid,
                    icon=icons.midpoint,
                    role="midpoint",
                    draggable=True,
                )
            )
    return tuple(markers)


def edge_midpoints(ring: Tuple[LatLng, ...]) -> Tuple[LatLng, ...]:
    """Midpoint i sits between ring[i] and ring[i + 1], wrapping to ring[0]."""
    n = len(ring)
    if n < 2:
        return ()
    return tuple(midpoint(ring[i], ring[(i + 1) % n]) for i in range(n))


def circle_markers(circles: CircleAuthoring, config: DrawingConfig) -> Tuple[MapMarker, ...]:
    circle = circles.selected_circle
    if circle is None:
        return ()
    return (
        MapMarker(
            id=f"{circle.id}_center",
            position=circle.center,
            icon=config.icons.circle_center,
            role="circle_center",
            draggable=True,
        ),
        MapMarker(
            id=f"{circle.id}_radius_handle",
            position=radius_handle_position(circle.center, circle.radius),
            icon=config.icons.circle_radius_handle,
            role="circle_radius_handle",
            draggable=True,
        ),
    )


def rectangle_markers(rectangles: RectangleAuthoring, config: DrawingConfig) -> Tuple[MapMarker, ...]:
    markers: List[MapMarker] = []
    drawing = rectangles.drawing_rectangle
    if drawing is not None:
        markers.append(
            MapMarker(
                id=f"rectangle_start_{drawing.id}",
                position=drawing.anchor,
                icon=config.icons.rectangle_start,
                role="rectangle_start",
            )
        )
    for handle in rectangles.edit_handles():
        markers.append(
            MapMarker(
                id=f"handle_{handle.corner}",
                position=handle.position,
                icon=config.icons.rectangle_handle,
                role="rectangle_handle",
                draggable=True,
            )
        )
    return tuple(markers)
