"""geodraw - interactive shape authoring for map overlays."""

__version__ = "1.0.0"
__description__ = "Draw, edit and exchange map shapes (polygons, circles, rectangles, freehand)"

from geodraw.controller import DrawingController
from geodraw.core.events import DrawingEvent, EventType
from geodraw.model import DrawMode, LatLng, LatLngBounds

__all__ = [
    "DrawingController",
    "DrawingEvent",
    "DrawMode",
    "EventType",
    "LatLng",
    "LatLngBounds",
    "__version__",
]
