from geodraw.controller import DrawingController
from geodraw.core.color import BLUE, PURPLE, RED, TRANSPARENT
from geodraw.core.geometry import radius_handle_position
from geodraw.model import DrawMode, LatLng
from geodraw.render import FREEHAND_TRACE_ID, edge_midpoints, open_ring


A = LatLng(0.0, 0.0)
B = LatLng(0.0, 1.0)
C = LatLng(1.0, 1.0)


def test_open_ring_and_edge_midpoints():
    assert open_ring((A, B, C, A)) == (A, B, C)
    assert open_ring((A, B, C)) == (A, B, C)
    assert edge_midpoints((A, B, C)) == (
        LatLng(0.0, 0.5),
        LatLng(0.5, 1.0),
        LatLng(0.5, 0.5),
    )
    assert edge_midpoints((A,)) == ()


def test_active_polygon_renders_shadow_polyline_and_vertex_markers():
    controller = DrawingController()
    controller.set_mode(DrawMode.POLYGON)
    controller.handle_tap(A, zoom=15)
    controller.handle_tap(B, zoom=15)
    active_id = controller.polygon.active_polygon_id

    polygons = controller.map_polygons
    assert len(polygons) == 1
    assert polygons[0].stroke_color == TRANSPARENT
    assert polygons[0].fill_color == TRANSPARENT

    polylines = controller.map_polylines
    assert len(polylines) == 1
    assert polylines[0].points == (A, B)
    assert polylines[0].color == RED

    markers = controller.polygon_markers
    assert [m.id for m in markers] == [f"{active_id}_vertex_0", f"{active_id}_vertex_1"]
    assert markers[0].role == "first_vertex"
    assert markers[0].icon == "marker:green"
    assert markers[1].role == "vertex"
    assert markers[1].icon == "marker:blue"


def test_selected_polygon_shows_vertex_and_midpoint_markers():
    controller = DrawingController()
    controller.set_mode(DrawMode.POLYGON)
    for p in (A, B, C, A):
        controller.handle_tap(p, zoom=15)
    polygon_id = controller.polygon.selected_id

    markers = controller.polygon_markers
    vertices = [m for m in markers if m.role == "vertex"]
    midpoints = [m for m in markers if m.role == "midpoint"]
    assert [m.position for m in vertices] == [A, B, C]
    assert [m.id for m in midpoints] == [f"{polygon_id}_midpoint_{i}" for i in range(3)]
    assert all(m.icon == "marker:yellow" for m in midpoints)
    assert controller.map_polylines == ()

    controller.polygon.deselect()
    assert controller.polygon_markers == ()


def test_custom_marker_icon_is_used():
    controller = DrawingController()
    controller.set_marker_icon("first_vertex", {"asset": "flag.png"})
    controller.set_mode(DrawMode.POLYGON)
    controller.handle_tap(A, zoom=15)
    assert controller.polygon_markers[0].icon == {"asset": "flag.png"}


def test_circle_layer_and_markers():
    controller = DrawingController()
    controller.set_mode(DrawMode.CIRCLE)
    center = LatLng(10.0, 10.0)
    controller.handle_tap(center, zoom=15)
    circle_id = controller.circles[0].id

    circles = controller.map_circles
    assert len(circles) == 1
    assert circles[0].radius == 250.0

    markers = {m.role: m for m in controller.circle_markers}
    assert markers["circle_center"].id == f"{circle_id}_center"
    assert markers["circle_center"].position == center
    assert markers["circle_radius_handle"].id == f"{circle_id}_radius_handle"
    assert markers["circle_radius_handle"].position == radius_handle_position(center, 250.0)

    controller.circle.deselect()
    assert controller.circle_markers == ()


def test_rectangle_markers_while_drawing_and_when_selected():
    controller = DrawingController()
    controller.set_mode(DrawMode.RECTANGLE)
    controller.rectangle.start(A)
    controller.rectangle.update(C)
    drawing_id = controller.rectangle.drawing_rectangle.id

    markers = controller.rectangle_markers
    assert [m.id for m in markers] == [f"rectangle_start_{drawing_id}"]
    assert markers[0].position == A
    # The rectangle being drawn is part of the polygon layer.
    assert [p.id for p in controller.map_polygons] == [drawing_id]
    assert controller.map_polygons[0].points == (A, B, C, LatLng(1.0, 0.0), A)

    controller.rectangle.finish()
    controller.rectangle.select(drawing_id)
    ids = [m.id for m in controller.rectangle_markers]
    assert ids == ["handle_sw", "handle_se", "handle_ne", "handle_nw"]


def test_freehand_layer_highlights_selection():
    controller = DrawingController()
    controller.set_mode(DrawMode.FREEHAND)
    controller.freehand.start()
    for p in (A, B, C):
        controller.freehand.add_point(p)
    controller.freehand.finish()
    polygon_id = controller.freehand_polygons[0].id

    layer = controller.map_freehand_polygons
    assert layer[0].stroke_color == RED
    assert layer[0].stroke_width == controller.config.stroke_width

    controller.freehand.select(polygon_id)
    layer = controller.map_freehand_polygons
    assert layer[0].stroke_color == BLUE
    assert layer[0].stroke_width == controller.config.selected_stroke_width


def test_freehand_trace_projection():
    controller = DrawingController()
    controller.set_mode(DrawMode.FREEHAND)
    controller.freehand.start()
    controller.freehand.add_point(A)
    assert controller.drawing_freehand_polygon is None

    controller.freehand.add_point(B)
    trace = controller.drawing_freehand_polygon
    assert trace.id == FREEHAND_TRACE_ID
    assert trace.stroke_color == PURPLE
    assert trace.stroke_width == 3
    assert trace.consume_taps is False
