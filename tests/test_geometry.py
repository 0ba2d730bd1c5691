from flowbuilder.edit.geometry import (
    Point,
    Viewport,
    curve_control_points,
    curve_path,
    edge_path,
    input_anchor,
    output_anchor,
)
from flowbuilder.flow import FlowNode, Position, TextNodeData, TEXT_NODE


def make_node(node_id, x, y):
    return FlowNode(id=node_id, type=TEXT_NODE, position=Position(x, y), data=TextNodeData(text=node_id))


def test_viewport_to_local():
    viewport = Viewport()
    assert viewport.to_local(Point(10, 10)) is None
    assert not viewport.is_resolved

    viewport.set_origin(100, 50)
    assert viewport.to_local(Point(150, 150)) == Point(50, 100)
    assert viewport.to_local(Point(0, 0)) == Point(-100, -50)


def test_anchors():
    node = make_node("n", 100, 100)
    assert output_anchor(node) == Point(300, 140)
    assert input_anchor(node) == Point(100, 140)


def test_control_points_ignore_vertical_distance():
    c1, c2 = curve_control_points(Point(0, 0), Point(100, 500))
    assert c1 == Point(50, 0)
    assert c2 == Point(50, 500)


def test_control_points_for_backward_edge():
    # target left of source: offset uses the absolute horizontal distance
    c1, c2 = curve_control_points(Point(300, 0), Point(100, 0))
    assert c1 == Point(400, 0)
    assert c2 == Point(0, 0)


def test_curve_path_format():
    assert curve_path(Point(0, 0), Point(101, 20)) == "M 0 0 C 50.5 0 50.5 20 101 20"


def test_edge_path_uses_node_anchors():
    source = make_node("1", 100, 100)
    target = make_node("2", 400, 100)
    assert edge_path(source, target) == "M 300 140 C 350 140 350 140 400 140"


def test_edge_path_with_missing_endpoint():
    assert edge_path(make_node("1", 0, 0), None) == ""
    assert edge_path(None, make_node("1", 0, 0)) == ""
