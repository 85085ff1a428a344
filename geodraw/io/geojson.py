"""
GeoJSON adapter.

Exports the session's finalized shapes as a FeatureCollection and imports one
back into the shape stores.

Mapping:
- Polygon / freehand polygon -> geometry.type="Polygon" (ring always closed)
- Rectangle -> geometry.type="Polygon" ring sw, se, ne, nw, sw; the drawing
  anchor is kept in properties so it survives a round trip
- Circle -> geometry.type="Point" with properties.radius in meters, since
  GeoJSON has no circle primitive

Every feature carries `properties.shapeKind` so rectangles, circles and
freehand shapes come back as the kind they were drawn as. Styling uses the
simplestyle keys (`stroke`, `stroke-width`, `fill`, `fill-opacity`).
Positions are [lng, lat].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple
import json
import math

from geodraw.core.color import Color
from geodraw.core.store import ShapeStore
from geodraw.model import (
    DrawableCircle,
    DrawablePolygon,
    DrawableRectangle,
    LatLng,
    LatLngBounds,
    ShapeKind,
    is_closed,
    new_shape_id,
)

if TYPE_CHECKING:
    from geodraw.controller import DrawingController


SHAPE_KIND_KEY = "shapeKind"


def _ring_coords(points: Sequence[LatLng]) -> List[List[float]]:
    ring = [list(p.to_lnglat()) for p in points]
    if ring and ring[0] != ring[-1]:
        ring.append(list(ring[0]))
    return ring


def _style_props(stroke: Color, fill: Color, stroke_width: int) -> Dict[str, Any]:
    return {
        "stroke": stroke.to_hex(),
        "stroke-opacity": float(stroke.a),
        "stroke-width": int(stroke_width),
        "fill": fill.to_hex(),
        "fill-opacity": float(fill.a),
    }


def _polygon_feature(polygon: DrawablePolygon, kind: ShapeKind) -> Dict[str, Any]:
    # GeoJSON rings are always closed; remember whether ours was.
    props: Dict[str, Any] = {
        SHAPE_KIND_KEY: kind.value,
        "id": polygon.id,
        "closed": is_closed(polygon.points),
    }
    props.update(_style_props(polygon.stroke_color, polygon.fill_color, polygon.stroke_width))
    return {
        "type": "Feature",
        "id": polygon.id,
        "geometry": {"type": "Polygon", "coordinates": [_ring_coords(polygon.points)]},
        "properties": props,
    }


def _rectangle_feature(rect: DrawableRectangle) -> Dict[str, Any]:
    props: Dict[str, Any] = {
        SHAPE_KIND_KEY: ShapeKind.RECTANGLE.value,
        "id": rect.id,
        "anchor": list(rect.anchor.to_lnglat()),
    }
    props.update(_style_props(rect.stroke_color, rect.fill_color, rect.stroke_width))
    return {
        "type": "Feature",
        "id": rect.id,
        "geometry": {"type": "Polygon", "coordinates": [_ring_coords(rect.bounds.ring())]},
        "properties": props,
    }


def _circle_feature(circle: DrawableCircle) -> Dict[str, Any]:
    props: Dict[str, Any] = {
        SHAPE_KIND_KEY: ShapeKind.CIRCLE.value,
        "id": circle.id,
        "radius": float(circle.radius),
    }
    props.update(_style_props(circle.stroke_color, circle.fill_color, circle.stroke_width))
    return {
        "type": "Feature",
        "id": circle.id,
        "geometry": {"type": "Point", "coordinates": list(circle.center.to_lnglat())},
        "properties": props,
    }


def export_geojson(controller: "DrawingController") -> Dict[str, Any]:
    """
    Build a FeatureCollection of every finalized shape.

    The polygon still being authored (if any) is not exported.
    """
    features: List[Dict[str, Any]] = []
    for polygon in controller.polygon.finalized_polygons:
        features.append(_polygon_feature(polygon, ShapeKind.POLYGON))
    for polygon in controller.freehand.polygons:
        features.append(_polygon_feature(polygon, ShapeKind.FREEHAND))
    for rect in controller.rectangle.rectangles:
        features.append(_rectangle_feature(rect))
    for circle in controller.circle.circles:
        features.append(_circle_feature(circle))
    return {"type": "FeatureCollection", "features": features}


@dataclass
class ImportSummary:
    polygons: int = 0
    freehand: int = 0
    rectangles: int = 0
    circles: int = 0
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.polygons + self.freehand + self.rectangles + self.circles


def _parse_position(pos: Any) -> Optional[LatLng]:
    if not isinstance(pos, (list, tuple)) or len(pos) < 2:
        return None
    try:
        p = LatLng.from_lnglat(pos)
    except (TypeError, ValueError):
        return None
    # NaN and inf parse as floats but are not valid JSON on export.
    if not (math.isfinite(p.latitude) and math.isfinite(p.longitude)):
        return None
    return p


def _parse_ring(coords: Any) -> Optional[Tuple[LatLng, ...]]:
    """Outer ring of a Polygon geometry. Holes are ignored."""
    if not isinstance(coords, list) or not coords or not isinstance(coords[0], list):
        return None
    points = []
    for pos in coords[0]:
        p = _parse_position(pos)
        if p is None:
            return None
        points.append(p)
    return tuple(points)


def _parse_color(value: Any, opacity: Any, fallback: Color) -> Color:
    if not value:
        color = fallback
    else:
        try:
            color = Color.parse(str(value))
        except ValueError:
            color = fallback
    if opacity is None:
        return color
    try:
        return color.with_alpha(min(max(float(opacity), 0.0), 1.0))
    except (TypeError, ValueError):
        return color


def _unique_id(store: ShapeStore, candidate: Any, kind: ShapeKind) -> str:
    """Keep the incoming id unless the store already holds it."""
    cid = str(candidate).strip() if candidate not in (None, "") else ""
    if cid and cid not in store:
        return cid
    return new_shape_id(kind)


def _resolve_kind(geometry_type: Optional[str], props: Dict[str, Any]) -> Optional[ShapeKind]:
    raw = str(props.get(SHAPE_KIND_KEY) or "").strip().lower()
    if geometry_type == "Polygon":
        if raw in (ShapeKind.RECTANGLE.value, ShapeKind.FREEHAND.value):
            return ShapeKind(raw)
        return ShapeKind.POLYGON
    if geometry_type == "Point":
        if raw == ShapeKind.CIRCLE.value or "radius" in props:
            return ShapeKind.CIRCLE
    return None


def import_geojson(controller: "DrawingController", doc: Dict[str, Any]) -> ImportSummary:
    """
    Append the shapes described by `doc` to the controller's stores.

    Nothing is deduplicated: importing the same document twice yields two
    copies of every shape (colliding ids are re-minted).

    Raises:
        ValueError: if doc is not a GeoJSON FeatureCollection
    """
    if not isinstance(doc, dict) or doc.get("type") != "FeatureCollection":
        raise ValueError("Expected a GeoJSON FeatureCollection")
    features = doc.get("features") or []
    if not isinstance(features, list):
        raise ValueError("FeatureCollection.features must be a list")

    summary = ImportSummary()
    ctx = controller.context
    default_stroke = ctx.drawing_color

    with ctx.notifier.batched():
        for index, feature in enumerate(features):
            label = f"feature[{index}]"
            if not isinstance(feature, dict):
                summary.skipped.append(f"{label}: not an object")
                continue
            geometry = feature.get("geometry") or {}
            props = feature.get("properties") or {}
            if not isinstance(geometry, dict) or not isinstance(props, dict):
                summary.skipped.append(f"{label}: malformed geometry/properties")
                continue
            gtype = geometry.get("type")
            kind = _resolve_kind(gtype, props)
            if kind is None:
                summary.skipped.append(f"{label}: unsupported geometry {gtype!r}")
                continue

            stroke = _parse_color(props.get("stroke"), props.get("stroke-opacity"), default_stroke)
            fill = _parse_color(
                props.get("fill") or props.get("stroke"),
                props.get("fill-opacity", ctx.config.fill_alpha),
                ctx.fill_for(stroke),
            )
            try:
                width = int(props.get("stroke-width", ctx.config.stroke_width))
            except (TypeError, ValueError):
                width = ctx.config.stroke_width
            raw_id = feature.get("id") or props.get("id")

            if kind == ShapeKind.CIRCLE:
                center = _parse_position(geometry.get("coordinates"))
                try:
                    radius = float(props.get("radius"))
                except (TypeError, ValueError):
                    radius = 0.0
                if center is None or not math.isfinite(radius) or radius <= 0:
                    summary.skipped.append(f"{label}: circle without center or positive radius")
                    continue
                store = controller.circle.store
                store.add(
                    DrawableCircle(
                        id=_unique_id(store, raw_id, kind),
                        center=center,
                        radius=radius,
                        stroke_color=stroke,
                        fill_color=fill,
                        stroke_width=width,
                    )
                )
                summary.circles += 1
                continue

            ring = _parse_ring(geometry.get("coordinates"))
            if ring is None or len(ring) < 3:
                summary.skipped.append(f"{label}: polygon ring has fewer than 3 valid positions")
                continue

            if kind == ShapeKind.RECTANGLE:
                lats = [p.latitude for p in ring]
                lngs = [p.longitude for p in ring]
                bounds = LatLngBounds(
                    southwest=LatLng(min(lats), min(lngs)),
                    northeast=LatLng(max(lats), max(lngs)),
                )
                anchor = _parse_position(props.get("anchor")) or bounds.southwest
                store = controller.rectangle.store
                store.add(
                    DrawableRectangle(
                        id=_unique_id(store, raw_id, kind),
                        bounds=bounds,
                        anchor=anchor,
                        stroke_color=stroke,
                        fill_color=fill,
                        stroke_width=width,
                    )
                )
                summary.rectangles += 1
                continue

            if props.get("closed") is False and is_closed(ring):
                ring = ring[:-1]
            store = controller.freehand.store if kind == ShapeKind.FREEHAND else controller.polygon.store
            store.add(
                DrawablePolygon(
                    id=_unique_id(store, raw_id, kind),
                    points=ring,
                    stroke_color=stroke,
                    fill_color=fill,
                    stroke_width=width,
                )
            )
            if kind == ShapeKind.FREEHAND:
                summary.freehand += 1
            else:
                summary.polygons += 1

        ctx.notify()
    return summary


def write_geojson(controller: "DrawingController", output_path: str | Path, *, trace: Any = None) -> Path:
    out = Path(output_path)
    doc = export_geojson(controller)
    if trace is not None:
        trace.emit({"event": "output.geojson", "path": str(out), "features": len(doc["features"])})
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(doc, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return out


def read_geojson(filepath: str | Path) -> Dict[str, Any]:
    """
    Load a GeoJSON document from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file isn't valid JSON or isn't a FeatureCollection
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path.name}: {e}")
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise ValueError(f"{path.name} is not a GeoJSON FeatureCollection")
    return data
