"""
Geometry kernel.

Pure functions on spherical-earth coordinates - no state, no side effects:

- great-circle (haversine) distance
- even-odd ray casting for point-in-polygon
- zoom-dependent snap threshold and initial circle radius
- midpoint and radius-handle placement
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from geodraw.model import LatLng


EARTH_RADIUS_M = 6371000.0

# At zoom 0 the snap threshold is ~300 m; it halves with every zoom level.
SNAP_BASE_THRESHOLD_M = 300.0
SNAP_MIN_THRESHOLD_M = 1.0
SNAP_MAX_THRESHOLD_M = 300.0
# Beyond this the threshold is pinned to the minimum anyway.
SNAP_MAX_ZOOM = 64.0

# Offset applied to a test point whose latitude equals an edge endpoint's.
RAY_EPSILON = 1e-8

# Zoom breakpoint -> initial circle radius in meters.
ZOOM_TO_RADIUS_M: Tuple[Tuple[int, float], ...] = (
    (10, 2000.0),
    (11, 1500.0),
    (12, 1000.0),
    (13, 750.0),
    (14, 500.0),
    (15, 250.0),
    (16, 150.0),
    (17, 100.0),
    (18, 75.0),
    (19, 50.0),
    (20, 25.0),
)
DEFAULT_CIRCLE_RADIUS_M = 2000.0


def distance_meters(p1: LatLng, p2: LatLng) -> float:
    """
    Great-circle distance between two coordinates (haversine formula).

    Example:
        >>> distance_meters(LatLng(0, 0), LatLng(0, 0))
        0.0
    """
    lat1 = math.radians(p1.latitude)
    lat2 = math.radians(p2.latitude)
    d_lat = math.radians(p2.latitude - p1.latitude)
    d_lng = math.radians(p2.longitude - p1.longitude)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def snap_threshold_for_zoom(zoom: float) -> float:
    """
    Zoom-adaptive "same point" tolerance in meters.

    300 / 2**zoom clamped to [1, 300]: coarse at low zoom, fine at high zoom.
    """
    zoom = max(0.0, min(float(zoom), SNAP_MAX_ZOOM))
    threshold = SNAP_BASE_THRESHOLD_M / math.pow(2, zoom)
    return min(max(threshold, SNAP_MIN_THRESHOLD_M), SNAP_MAX_THRESHOLD_M)


def is_near_point(p1: LatLng, p2: LatLng, zoom: float) -> bool:
    return distance_meters(p1, p2) < snap_threshold_for_zoom(zoom)


def is_within(p1: LatLng, p2: LatLng, threshold_m: float) -> bool:
    """Fixed-distance proximity test (strictly closer than threshold_m)."""
    return distance_meters(p1, p2) < threshold_m


def ray_cast_intersect(point: LatLng, a: LatLng, b: LatLng) -> bool:
    """
    True if an eastward horizontal ray from `point` crosses edge a-b.

    x is longitude, y is latitude.
    """
    px, py = point.longitude, point.latitude
    ax, ay = a.longitude, a.latitude
    bx, by = b.longitude, b.latitude

    # Orient the edge so that a is the lower endpoint.
    if ay > by:
        ax, ay, bx, by = bx, by, ax, ay

    if py == ay or py == by:
        py += RAY_EPSILON

    if py > by or py < ay or px > max(ax, bx):
        return False
    if px < min(ax, bx):
        return True

    red = (by - ay) / (bx - ax) if ax != bx else math.inf
    blue = (py - ay) / (px - ax) if ax != px else math.inf
    return blue >= red


def point_in_polygon(point: LatLng, ring: Sequence[LatLng]) -> bool:
    """
    Even-odd rule. The ring may be open or closed; an open ring is treated as
    if its last point connected back to the first.
    """
    pts = list(ring)
    if len(pts) < 3:
        return False
    if pts[0] != pts[-1]:
        pts.append(pts[0])

    crossings = 0
    for j in range(len(pts) - 1):
        if ray_cast_intersect(point, pts[j], pts[j + 1]):
            crossings += 1
    return crossings % 2 == 1


def midpoint(p1: LatLng, p2: LatLng) -> LatLng:
    """Planar midpoint in degree space (good enough for handle placement)."""
    return LatLng(
        (p1.latitude + p2.latitude) / 2,
        (p1.longitude + p2.longitude) / 2,
    )


def initial_radius_for_zoom(zoom: float) -> float:
    """
    Stepwise zoom -> radius lookup: the radius of the highest breakpoint <= zoom.
    """
    for level, radius in reversed(ZOOM_TO_RADIUS_M):
        if zoom >= level:
            return radius
    return DEFAULT_CIRCLE_RADIUS_M


def radius_handle_position(center: LatLng, radius_m: float) -> LatLng:
    """
    Point due east of `center` at `radius_m`.

    Uses a flat-earth longitude correction, so it degrades near the poles
    where cos(latitude) approaches zero.
    """
    d_lng = (radius_m / EARTH_RADIUS_M) * (180 / math.pi) / math.cos(math.radians(center.latitude))
    return LatLng(center.latitude, center.longitude + d_lng)
