"""Per-kind authoring controllers."""

from geodraw.authoring.base import AuthoringContext
from geodraw.authoring.circle import CircleAuthoring
from geodraw.authoring.freehand import FreehandAuthoring
from geodraw.authoring.polygon import PolygonAuthoring
from geodraw.authoring.rectangle import CORNERS, CornerHandle, RectangleAuthoring

__all__ = [
    "AuthoringContext",
    "CircleAuthoring",
    "CORNERS",
    "CornerHandle",
    "FreehandAuthoring",
    "PolygonAuthoring",
    "RectangleAuthoring",
]
