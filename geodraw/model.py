"""
Canonical in-memory shape model for geodraw.

Every shape is an immutable value. Editing produces a new value (via
`dataclasses.replace`) which is swapped into its store by id, so a shape that
is simultaneously "active" and "in the store" can never drift out of sync
through aliasing.

Coordinates are plain WGS84-ish degrees on a sphere; no ellipsoid correction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union
import uuid

from geodraw.core.color import RED, TRANSPARENT, Color, fill_for


class DrawMode(str, Enum):
    NONE = "none"
    POLYGON = "polygon"
    POLYLINE = "polyline"
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    FREEHAND = "freehand"


class ShapeKind(str, Enum):
    """Store a shape lives in. Also the `shapeKind` tag used in GeoJSON."""

    POLYGON = "polygon"
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    FREEHAND = "freehand"


def new_shape_id(kind: Union[ShapeKind, str]) -> str:
    prefix = kind.value if isinstance(kind, ShapeKind) else str(kind)
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class LatLng:
    latitude: float
    longitude: float

    def to_lnglat(self) -> Tuple[float, float]:
        """GeoJSON position order."""
        return (float(self.longitude), float(self.latitude))

    @staticmethod
    def from_lnglat(pos) -> "LatLng":
        return LatLng(latitude=float(pos[1]), longitude=float(pos[0]))


@dataclass(frozen=True)
class LatLngBounds:
    """
    Axis-aligned box with southwest.lat <= northeast.lat and
    southwest.lng <= northeast.lng.
    """

    southwest: LatLng
    northeast: LatLng

    def __post_init__(self) -> None:
        if not LatLngBounds.is_ordered(self.southwest, self.northeast):
            raise ValueError(
                f"southwest {self.southwest} must not exceed northeast {self.northeast}"
            )

    @staticmethod
    def is_ordered(southwest: LatLng, northeast: LatLng) -> bool:
        return (
            southwest.latitude <= northeast.latitude
            and southwest.longitude <= northeast.longitude
        )

    @staticmethod
    def validate(southwest: LatLng, northeast: LatLng) -> Optional["LatLngBounds"]:
        """Build bounds, or return None if the corners are inverted."""
        if not LatLngBounds.is_ordered(southwest, northeast):
            return None
        return LatLngBounds(southwest=southwest, northeast=northeast)

    @staticmethod
    def spanning(a: LatLng, b: LatLng) -> "LatLngBounds":
        """Smallest bounds containing both points, whichever quadrant b is in."""
        return LatLngBounds(
            southwest=LatLng(min(a.latitude, b.latitude), min(a.longitude, b.longitude)),
            northeast=LatLng(max(a.latitude, b.latitude), max(a.longitude, b.longitude)),
        )

    @property
    def northwest(self) -> LatLng:
        return LatLng(self.northeast.latitude, self.southwest.longitude)

    @property
    def southeast(self) -> LatLng:
        return LatLng(self.southwest.latitude, self.northeast.longitude)

    def contains(self, point: LatLng) -> bool:
        return (
            self.southwest.latitude <= point.latitude <= self.northeast.latitude
            and self.southwest.longitude <= point.longitude <= self.northeast.longitude
        )

    def ring(self) -> Tuple[LatLng, ...]:
        """Closed ring sw -> se -> ne -> nw -> sw."""
        return (self.southwest, self.southeast, self.northeast, self.northwest, self.southwest)


Ring = Tuple[LatLng, ...]


def is_closed(points: Ring) -> bool:
    return len(points) >= 2 and points[0] == points[-1]


@dataclass(frozen=True)
class DrawablePolygon:
    id: str
    points: Ring = ()
    stroke_color: Color = TRANSPARENT
    fill_color: Color = TRANSPARENT
    stroke_width: int = 2

    def __post_init__(self) -> None:
        # Accept any sequence from callers; store a tuple.
        object.__setattr__(self, "points", tuple(self.points))


@dataclass(frozen=True)
class DrawablePolyline:
    """Construction-time shadow of an in-progress polygon (same id)."""

    id: str
    points: Ring = ()
    color: Color = RED
    width: int = 2

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))


@dataclass(frozen=True)
class DrawableCircle:
    id: str
    center: LatLng
    radius: float
    stroke_color: Color = RED
    fill_color: Color = field(default_factory=lambda: fill_for(RED))
    stroke_width: int = 2


@dataclass(frozen=True)
class DrawableRectangle:
    id: str
    bounds: LatLngBounds
    anchor: LatLng
    stroke_color: Color = RED
    fill_color: Color = field(default_factory=lambda: fill_for(RED))
    stroke_width: int = 2


Shape = Union[DrawablePolygon, DrawableCircle, DrawableRectangle]
