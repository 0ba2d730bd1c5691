"""
Graph model for the flow builder.

FlowGraph is the single source of truth for nodes and edges. Every
mutation is applied completely before it returns, so event handlers never
observe a half-applied change.

Edges are stored keyed by their source node: a node has a single output,
so connecting a source that already has an edge replaces that edge.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional

from flowbuilder.flow import (
    FlowEdge,
    FlowNode,
    Position,
    TEXT_NODE,
    UnknownNodeTypeError,
    is_known_node_type,
    make_node_data,
    make_node_id,
)

logger = logging.getLogger(__name__)


class FlowGraph:
    """Nodes and single-output edges of a flow."""

    def __init__(self):
        self._nodes: Dict[str, FlowNode] = {}
        self._edges_by_source: Dict[str, FlowEdge] = {}

    # --- Reads ---

    @property
    def nodes(self) -> List[FlowNode]:
        """Nodes in insertion order."""
        return list(self._nodes.values())

    @property
    def edges(self) -> List[FlowEdge]:
        """Edges in insertion order; a replaced edge moves to the end."""
        return list(self._edges_by_source.values())

    def get_node(self, node_id: Optional[str]) -> Optional[FlowNode]:
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def outgoing(self, source_id: str) -> Optional[FlowEdge]:
        """The single edge leaving `source_id`, if any."""
        return self._edges_by_source.get(source_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[FlowNode]:
        return iter(self.nodes)

    # --- Mutations ---

    def add_node(self, node_type: str, position: Position,
                 initial_data: Optional[Dict[str, Any]] = None,
                 node_id: Optional[str] = None) -> Optional[FlowNode]:
        """
        Create a node with a fresh unique id.

        Position is stored as given; callers clamp coordinates before
        calling. Unregistered node types are ignored and return None.
        """
        if not is_known_node_type(node_type):
            logger.warning(f"add_node ignored for unknown node type {node_type!r}")
            return None
        if node_id is None:
            node_id = make_node_id()
            while node_id in self._nodes:
                node_id = make_node_id()
        node = FlowNode(
            id=node_id,
            type=node_type,
            position=position,
            data=make_node_data(node_type, initial_data),
        )
        self._nodes[node_id] = node
        logger.info(f"Added {node_type} node {node_id} at ({position.x}, {position.y})")
        return node

    def move_node(self, node_id: str, position: Position) -> Optional[FlowNode]:
        """Replace a node's position. Unknown ids are ignored."""
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug(f"move_node ignored for unknown node {node_id}")
            return None
        moved = replace(node, position=position)
        self._nodes[node_id] = moved
        return moved

    def update_node_data(self, node_id: str, partial_data: Dict[str, Any]) -> Optional[FlowNode]:
        """Shallow-merge `partial_data` into a node's data. Unknown ids are ignored."""
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug(f"update_node_data ignored for unknown node {node_id}")
            return None
        updated = replace(node, data=node.data.merged(partial_data))
        self._nodes[node_id] = updated
        return updated

    def connect(self, source_id: str, target_id: str) -> FlowEdge:
        """
        Connect `source_id` to `target_id`, replacing any edge already
        leaving `source_id`.

        Node existence and self-loops are not checked here; the connection
        gesture guards against both.
        """
        previous = self._edges_by_source.pop(source_id, None)
        edge = FlowEdge.between(source_id, target_id)
        self._edges_by_source[source_id] = edge
        if previous is not None:
            logger.debug(f"Replaced edge {previous.id} with {edge.id}")
        else:
            logger.debug(f"Added edge {edge.id}")
        return edge

    # --- Serialization ---

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges_by_source.values()],
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "FlowGraph":
        """
        Load a graph from its dict form. If several edges share a source,
        the last one wins. Nodes of unregistered types are skipped.
        """
        graph = cls()
        for raw_node in raw.get("nodes", []):
            try:
                node = FlowNode.from_dict(raw_node)
            except UnknownNodeTypeError as e:
                logger.warning(f"Skipped node {raw_node.get('id')} of unknown type {e}")
                continue
            graph._nodes[node.id] = node
        for raw_edge in raw.get("edges", []):
            edge = FlowEdge.from_dict(raw_edge)
            graph._edges_by_source.pop(edge.source, None)
            graph._edges_by_source[edge.source] = edge
        return graph


def build_demo_graph() -> FlowGraph:
    """
    Build the starter flow shown when the editor opens: two messages
    connected 1 -> 2.
    """
    graph = FlowGraph()
    graph.add_node(TEXT_NODE, Position(100, 100), {"text": "test message 1"}, node_id="1")
    graph.add_node(TEXT_NODE, Position(400, 100), {"text": "test message 2"}, node_id="2")
    graph.connect("1", "2")
    return graph
