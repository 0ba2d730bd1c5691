"""
Palette drop.

The nodes panel hands over a node-type token when a palette drag starts;
dropping on the canvas creates a node of that type centered under the
cursor.
"""

import logging
from typing import Any, Callable, Dict, Optional

from flowbuilder.flow import FlowNode, Position, default_data_for, is_known_node_type
from flowbuilder.edit.constants import DROP_OFFSET_X, DROP_OFFSET_Y
from flowbuilder.edit.geometry import Point, Viewport

logger = logging.getLogger(__name__)


class DropController:
    def __init__(self, viewport: Viewport,
                 add_node: Callable[[str, Position, Dict[str, Any]], FlowNode]):
        self._viewport = viewport
        self._add_node = add_node
        self._pending_type: Optional[str] = None

    @property
    def pending_type(self) -> Optional[str]:
        return self._pending_type

    def begin(self, node_type: str) -> None:
        """A palette drag started; only the latest token is kept."""
        self._pending_type = node_type

    def cancel(self) -> None:
        self._pending_type = None

    def drop(self, screen_point: Point) -> Optional[FlowNode]:
        """
        Create the pending node at `screen_point`.

        No-op without a pending token or while the canvas origin is unknown.
        """
        node_type = self._pending_type
        if node_type is None:
            return None
        local = self._viewport.to_local(screen_point)
        if local is None:
            logger.debug("Drop ignored: canvas origin unknown")
            return None
        if not is_known_node_type(node_type):
            logger.warning(f"Drop ignored: unknown node type {node_type!r}")
            self._pending_type = None
            return None

        position = Position(local.x - DROP_OFFSET_X, local.y - DROP_OFFSET_Y).clamped()
        node = self._add_node(node_type, position, default_data_for(node_type))
        self._pending_type = None
        return node
