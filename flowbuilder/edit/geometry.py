"""
Canvas geometry: screen-to-canvas translation, handle anchors and the
curve used for both committed edges and the connection preview.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from flowbuilder.flow import FlowNode, Position
from flowbuilder.edit.constants import CURVE_CONTROL_RATIO, HANDLE_OFFSET_Y, NODE_WIDTH


Point = Position


@dataclass
class Viewport:
    """
    Screen placement of the canvas.

    `origin` is the canvas's top-left corner in screen coordinates, or None
    while the canvas has not reported its bounding box yet.
    """
    origin: Optional[Point] = None

    @property
    def is_resolved(self) -> bool:
        return self.origin is not None

    def set_origin(self, left: float, top: float) -> None:
        self.origin = Point(left, top)

    def to_local(self, screen_point: Point) -> Optional[Point]:
        """Translate a screen point into canvas-local coordinates."""
        if self.origin is None:
            return None
        return Point(screen_point.x - self.origin.x, screen_point.y - self.origin.y)


def output_anchor(node: FlowNode) -> Point:
    """Right-center of a node: where its outgoing edge starts."""
    return Point(node.position.x + NODE_WIDTH, node.position.y + HANDLE_OFFSET_Y)


def input_anchor(node: FlowNode) -> Point:
    """Left-center of a node: where incoming edges end."""
    return Point(node.position.x, node.position.y + HANDLE_OFFSET_Y)


def curve_control_points(start: Point, end: Point) -> Tuple[Point, Point]:
    """
    Control points of the cubic Bezier between two anchors.

    Both control points are offset horizontally by half the horizontal
    distance, giving an S-curve whatever the vertical distance.
    """
    offset = abs(end.x - start.x) * CURVE_CONTROL_RATIO
    return Point(start.x + offset, start.y), Point(end.x - offset, end.y)


def curve_path(start: Point, end: Point) -> str:
    """SVG path data for the curve from `start` to `end`."""
    c1, c2 = curve_control_points(start, end)
    return (f"M {_fmt(start.x)} {_fmt(start.y)} "
            f"C {_fmt(c1.x)} {_fmt(c1.y)} {_fmt(c2.x)} {_fmt(c2.y)} {_fmt(end.x)} {_fmt(end.y)}")


def edge_path(source: Optional[FlowNode], target: Optional[FlowNode]) -> str:
    """Path for a committed edge; empty when either endpoint is missing."""
    if source is None or target is None:
        return ""
    return curve_path(output_anchor(source), input_anchor(target))


def _fmt(value: float) -> str:
    # 150.0 -> "150", 12.5 -> "12.5"
    return f"{value:g}"
