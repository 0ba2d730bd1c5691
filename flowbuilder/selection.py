"""
Single-node selection.

The selection remembers which node is selected and a copy of it. When a
resolver is supplied (normally FlowGraph.get_node) reads go through the
live graph; the edit session also refreshes the copy in the same step as
every move or data update of the selected node, so the settings panel
never shows a stale position or text.
"""

from typing import Callable, Optional

from flowbuilder.flow import FlowNode


class Selection:
    def __init__(self, resolve: Optional[Callable[[str], Optional[FlowNode]]] = None):
        self._resolve = resolve
        self._node: Optional[FlowNode] = None

    @property
    def selected_id(self) -> Optional[str]:
        return self._node.id if self._node is not None else None

    @property
    def selected(self) -> Optional[FlowNode]:
        if self._node is None:
            return None
        if self._resolve is None:
            return self._node
        live = self._resolve(self._node.id)
        if live is None:
            # selected node no longer exists
            self._node = None
        return live

    def select(self, node: FlowNode) -> None:
        self._node = node

    def deselect(self) -> None:
        self._node = None

    def is_selected(self, node_id: str) -> bool:
        return self._node is not None and self._node.id == node_id

    def refresh(self, node: Optional[FlowNode]) -> None:
        """Re-point the selection at the post-mutation value of the selected node."""
        if node is not None and self.is_selected(node.id):
            self._node = node
