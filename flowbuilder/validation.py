"""
Pre-save structural validation.

A flow with more than one node may have only one entry point: exactly
one node without incoming edges. Cycles and fan-in are allowed; only the
number of entry points matters.

Uses NetworkX to hold the graph so in-degrees come straight from the
DiGraph.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import networkx as nx

from flowbuilder.flow import FlowEdge, FlowNode

logger = logging.getLogger(__name__)

SAVE_REJECTED_MESSAGE = "Cannot save Flow"


class FlowValidationError(Exception):
    """Raised by callers that want a failed save as an exception."""

    def __init__(self, message: str = SAVE_REJECTED_MESSAGE, entry_nodes: Optional[List[str]] = None):
        super().__init__(message)
        self.entry_nodes = entry_nodes or []


def build_digraph(nodes: Iterable[FlowNode], edges: Iterable[FlowEdge]) -> nx.DiGraph:
    """
    Build a DiGraph of the flow. Edges whose endpoints are not both nodes
    of the flow are left out.
    """
    G = nx.DiGraph()
    for node in nodes:
        G.add_node(node.id)
    for edge in edges:
        if edge.source in G and edge.target in G:
            G.add_edge(edge.source, edge.target)
    return G


def find_entry_nodes(nodes: Iterable[FlowNode], edges: Iterable[FlowEdge]) -> List[str]:
    """Return ids of nodes with no incoming edge, in node order."""
    G = build_digraph(nodes, edges)
    return [node_id for node_id, degree in G.in_degree() if degree == 0]


def validate_flow(nodes: Iterable[FlowNode], edges: Iterable[FlowEdge]) -> Tuple[bool, str]:
    """
    Decide whether a flow can be saved.

    Returns:
        (is_valid, message) tuple; message is empty when valid
    """
    nodes = list(nodes)
    if len(nodes) <= 1:
        return True, ""

    entries = find_entry_nodes(nodes, edges)
    if len(entries) > 1:
        logger.warning(f"Flow has {len(entries)} entry nodes: {entries}")
        return False, SAVE_REJECTED_MESSAGE
    return True, ""
