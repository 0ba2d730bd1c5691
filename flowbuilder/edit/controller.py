"""
Edit Controller - Single source of truth for canvas editing state.

FlowEditController owns the graph, the selection, the document-level
pointer listeners, the viewport and the gesture controllers, and
coordinates between:
- Pointer events forwarded from the canvas page
- Graph mutations (with selection kept in sync in the same step)
- Re-rendering via the state-change callback

At most one gesture runs at a time; its state is reported as a tagged
value: Idle, Dragging or Connecting.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from flowbuilder.flow import FlowEdge, FlowNode, Position
from flowbuilder.graph_model import FlowGraph
from flowbuilder.selection import Selection
from flowbuilder.edit.connection import ConnectionController, Connecting
from flowbuilder.edit.drag import Dragging, NodeDragController
from flowbuilder.edit.drop import DropController
from flowbuilder.edit.events import PointerListeners
from flowbuilder.edit.geometry import Point, Viewport, output_anchor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    """No gesture in progress."""


GestureState = Union[Idle, Dragging, Connecting]


class FlowEditController:
    """Edit session for one canvas."""

    def __init__(self, graph: Optional[FlowGraph] = None, viewport: Optional[Viewport] = None):
        self.graph = graph if graph is not None else FlowGraph()
        self.viewport = viewport if viewport is not None else Viewport()
        self.selection = Selection(self.graph.get_node)
        self.listeners = PointerListeners()
        self.connection = ConnectionController(self.viewport, self.graph.connect, self.listeners)
        self.drop = DropController(self.viewport, self.graph.add_node)
        self._drags: Dict[str, NodeDragController] = {}
        self._on_state_change: Optional[Callable[["FlowEditController"], None]] = None

    # --- State ---

    @property
    def state(self) -> GestureState:
        for drag in self._drags.values():
            if drag.state is not None:
                return drag.state
        if self.connection.state is not None:
            return self.connection.state
        return Idle()

    @property
    def selected(self) -> Optional[FlowNode]:
        return self.selection.selected

    def set_on_state_change(self, callback: Callable[["FlowEditController"], None]):
        self._on_state_change = callback

    def drag_controller(self, node_id: str) -> NodeDragController:
        drag = self._drags.get(node_id)
        if drag is None:
            drag = NodeDragController(
                node_id,
                get_node=self.graph.get_node,
                move_node=self.move_node,
                select_node=self.select_node,
                listeners=self.listeners,
            )
            self._drags[node_id] = drag
        return drag

    # --- Graph operations (selection kept in sync) ---

    def move_node(self, node_id: str, position: Position) -> None:
        moved = self.graph.move_node(node_id, position)
        self.selection.refresh(moved)

    def update_node_data(self, node_id: str, partial_data: Dict[str, Any]) -> None:
        updated = self.graph.update_node_data(node_id, partial_data)
        self.selection.refresh(updated)
        self._notify_change()

    def select_node(self, node_id: str) -> None:
        node = self.graph.get_node(node_id)
        if node is not None:
            self.selection.select(node)

    def deselect(self) -> None:
        self.selection.deselect()
        self._notify_change()

    # --- Node drag ---

    def press_node(self, node_id: str, screen_point: Point, on_handle: bool = False) -> bool:
        """Pointer pressed on a node. Presses on handles do not start a drag."""
        if on_handle:
            return False
        self.cancel_gestures()
        started = self.drag_controller(node_id).press(screen_point)
        self._notify_change()
        return started

    def click_node(self, node_id: str) -> None:
        self.drag_controller(node_id).click()
        self._notify_change()

    # --- Connection ---

    def press_output_handle(self, node_id: str) -> bool:
        node = self.graph.get_node(node_id)
        if node is None:
            return False
        self.cancel_gestures()
        self.connection.start(node_id, output_anchor(node))
        self._notify_change()
        return True

    def enter_input_handle(self, node_id: str) -> bool:
        lit = self.connection.enter_input(node_id)
        if lit:
            self._notify_change()
        return lit

    def leave_input_handle(self, node_id: str) -> None:
        was_lit = self.connection.is_highlighted(node_id)
        self.connection.leave_input(node_id)
        if was_lit:
            self._notify_change()

    def click_canvas(self) -> None:
        """Empty-canvas click: cancels a connection, otherwise deselects."""
        if self.connection.is_connecting:
            self.connection.cancel()
            self._notify_change()
        else:
            self.deselect()

    # --- Document pointer events ---

    def pointer_move(self, screen_point: Point) -> None:
        if not self.listeners.listener_count():
            return
        self.listeners.dispatch_move(screen_point)
        self._notify_change()

    def pointer_up(self, screen_point: Optional[Point], input_node_id: Optional[str] = None) -> Optional[FlowEdge]:
        """
        Pointer released anywhere. `input_node_id` names the node whose input
        handle is under the pointer, if any. `screen_point` is None when the
        browser sent no coordinates; the gesture still ends.
        """
        edge = None
        if input_node_id is not None and self.connection.is_connecting:
            edge = self.connection.release_on_input(input_node_id)
            if edge is not None:
                logger.info(f"Connected {edge.source} -> {edge.target}")
        had_listeners = self.listeners.listener_count() > 0
        self.listeners.dispatch_up(screen_point)
        if had_listeners or edge is not None:
            self._notify_change()
        return edge

    def cancel_gestures(self) -> None:
        """End whatever gesture is running and release its listeners."""
        for drag in self._drags.values():
            if drag.is_dragging:
                drag.end()
        if self.connection.is_connecting:
            self.connection.cancel()

    # --- Palette drop ---

    def begin_drop(self, node_type: str) -> None:
        self.drop.begin(node_type)

    def cancel_drop(self) -> None:
        """Palette drag ended without landing on the canvas."""
        self.drop.cancel()

    def drop_at(self, screen_point: Point) -> Optional[FlowNode]:
        node = self.drop.drop(screen_point)
        if node is not None:
            self._notify_change()
        return node

    # --- Internals ---

    def _notify_change(self):
        if self._on_state_change:
            self._on_state_change(self)
