"""
Node drag gesture.

One NodeDragController exists per node. A press on the node body starts a
drag; every document-level pointer move repositions the node relative to
where the drag started; any pointer release ends it, wherever it happens.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from flowbuilder.flow import FlowNode, Position
from flowbuilder.edit.events import PointerCapture, PointerListeners
from flowbuilder.edit.geometry import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dragging:
    """A node drag in progress."""
    node_id: str
    origin: Point          # pointer position at press, screen coordinates
    node_origin: Position  # node position at press, canvas coordinates


class NodeDragController:
    """idle -> dragging -> idle for a single node."""

    def __init__(self, node_id: str,
                 get_node: Callable[[str], Optional[FlowNode]],
                 move_node: Callable[[str, Position], None],
                 select_node: Callable[[str], None],
                 listeners: PointerListeners):
        self.node_id = node_id
        self._get_node = get_node
        self._move_node = move_node
        self._select_node = select_node
        self._state: Optional[Dragging] = None
        self._capture = PointerCapture(listeners, self._on_pointer_move, self._on_pointer_up)

    @property
    def state(self) -> Optional[Dragging]:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state is not None

    def press(self, screen_point: Point, on_handle: bool = False) -> bool:
        """
        Start dragging. Presses on a connection handle belong to the
        connection gesture and are ignored.

        Returns True if a drag started.
        """
        if on_handle:
            return False
        node = self._get_node(self.node_id)
        if node is None:
            return False

        self._state = Dragging(node_id=self.node_id, origin=screen_point, node_origin=node.position)
        self._select_node(self.node_id)
        self._capture.acquire()
        logger.debug(f"Drag started on {self.node_id} at {screen_point}")
        return True

    def click(self) -> None:
        """A click selects the node unless a drag is still running."""
        if not self.is_dragging:
            self._select_node(self.node_id)

    def end(self) -> None:
        if self._state is not None:
            logger.debug(f"Drag ended on {self.node_id}")
        self._state = None
        self._capture.release()

    def _on_pointer_move(self, screen_point: Point) -> None:
        state = self._state
        if state is None:
            return
        dx = screen_point.x - state.origin.x
        dy = screen_point.y - state.origin.y
        position = Position(state.node_origin.x + dx, state.node_origin.y + dy).clamped()
        self._move_node(self.node_id, position)

    def _on_pointer_up(self, screen_point: Optional[Point]) -> None:
        # the release point is the last position; throttled moves may arrive after it
        if screen_point is not None:
            self._on_pointer_move(screen_point)
        self.end()
