import math

import pytest

from geodraw.core.geometry import (
    EARTH_RADIUS_M,
    distance_meters,
    initial_radius_for_zoom,
    is_near_point,
    midpoint,
    point_in_polygon,
    radius_handle_position,
    snap_threshold_for_zoom,
)
from geodraw.model import LatLng


SQUARE = (
    LatLng(0.0, 0.0),
    LatLng(0.0, 1.0),
    LatLng(1.0, 1.0),
    LatLng(1.0, 0.0),
    LatLng(0.0, 0.0),
)


def test_distance_is_zero_for_same_point():
    p = LatLng(46.5, -114.2)
    assert distance_meters(p, p) == 0.0


def test_distance_is_symmetric():
    a = LatLng(46.5, -114.2)
    b = LatLng(47.1, -113.9)
    assert distance_meters(a, b) == pytest.approx(distance_meters(b, a))


def test_one_degree_of_latitude():
    d = distance_meters(LatLng(0.0, 0.0), LatLng(1.0, 0.0))
    assert d == pytest.approx(EARTH_RADIUS_M * math.pi / 180, rel=1e-9)


def test_snap_threshold_bounds():
    assert snap_threshold_for_zoom(0) == 300.0
    assert snap_threshold_for_zoom(21) == pytest.approx(1.0)
    assert snap_threshold_for_zoom(8) == pytest.approx(300.0 / 256)


def test_snap_threshold_monotonic_and_clamped():
    zooms = [z / 2 for z in range(0, 51)]
    values = [snap_threshold_for_zoom(z) for z in zooms]
    for v in values:
        assert 1.0 <= v <= 300.0
    for earlier, later in zip(values, values[1:]):
        assert later <= earlier


def test_snap_threshold_clamps_negative_zoom():
    assert snap_threshold_for_zoom(-3) == 300.0


@pytest.mark.parametrize("zoom, expected", [(1100, 1.0), (1e308, 1.0), (-1100, 300.0), (-1e308, 300.0)])
def test_snap_threshold_extreme_zoom_stays_clamped(zoom, expected):
    assert snap_threshold_for_zoom(zoom) == expected


def test_is_near_point_uses_zoom():
    a = LatLng(0.0, 0.0)
    b = LatLng(0.0, 0.0005)  # ~55 m east
    assert is_near_point(a, b, zoom=0)
    assert not is_near_point(a, b, zoom=18)


def test_point_strictly_inside_square():
    assert point_in_polygon(LatLng(0.5, 0.5), SQUARE) is True


def test_point_strictly_outside_square():
    assert point_in_polygon(LatLng(1.5, 0.5), SQUARE) is False
    assert point_in_polygon(LatLng(0.5, -0.5), SQUARE) is False
    assert point_in_polygon(LatLng(0.5, 2.0), SQUARE) is False


def test_point_on_vertex_latitude_does_not_fail():
    result = point_in_polygon(LatLng(0.0, 0.5), SQUARE)
    assert isinstance(result, bool)
    result = point_in_polygon(LatLng(1.0, -0.5), SQUARE)
    assert result is False


def test_open_ring_is_treated_as_closed():
    assert point_in_polygon(LatLng(0.5, 0.5), SQUARE[:-1]) is True


def test_degenerate_ring_contains_nothing():
    assert point_in_polygon(LatLng(0.0, 0.0), SQUARE[:2]) is False


def test_concave_polygon():
    # "U" shape open at the top; the notch is outside.
    u_shape = (
        LatLng(0, 0),
        LatLng(0, 3),
        LatLng(3, 3),
        LatLng(3, 2),
        LatLng(1, 2),
        LatLng(1, 1),
        LatLng(3, 1),
        LatLng(3, 0),
    )
    assert point_in_polygon(LatLng(2, 0.5), u_shape) is True
    assert point_in_polygon(LatLng(2, 1.5), u_shape) is False


@pytest.mark.parametrize(
    "zoom, radius",
    [
        (0, 2000.0),
        (9.9, 2000.0),
        (10, 2000.0),
        (12, 1000.0),
        (14.5, 500.0),
        (15, 250.0),
        (18, 75.0),
        (20, 25.0),
        (22, 25.0),
    ],
)
def test_initial_radius_for_zoom(zoom, radius):
    assert initial_radius_for_zoom(zoom) == radius


def test_midpoint():
    assert midpoint(LatLng(0, 0), LatLng(2, 4)) == LatLng(1, 2)


def test_radius_handle_is_due_east_at_radius():
    center = LatLng(0.0, 0.0)
    handle = radius_handle_position(center, 1000.0)
    assert handle.latitude == center.latitude
    assert handle.longitude > center.longitude
    assert distance_meters(center, handle) == pytest.approx(1000.0, rel=1e-6)


def test_radius_handle_widens_in_longitude_away_from_equator():
    equator = radius_handle_position(LatLng(0.0, 0.0), 1000.0)
    north = radius_handle_position(LatLng(60.0, 0.0), 1000.0)
    assert north.longitude == pytest.approx(equator.longitude * 2, rel=1e-9)
