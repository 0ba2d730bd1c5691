import pytest

from flowbuilder.flow import FlowEdge, Position, TEXT_NODE
from flowbuilder.graph_model import FlowGraph
from flowbuilder.validation import (
    SAVE_REJECTED_MESSAGE,
    FlowValidationError,
    find_entry_nodes,
    validate_flow,
)


def make_graph(node_ids, edges):
    g = FlowGraph()
    for i, node_id in enumerate(node_ids):
        g.add_node(TEXT_NODE, Position(i * 250, 0), {"text": node_id}, node_id=node_id)
    for source, target in edges:
        g.connect(source, target)
    return g


def check(g):
    return validate_flow(g.nodes, g.edges)


def test_empty_flow_is_valid():
    assert check(FlowGraph()) == (True, "")


def test_single_node_is_valid():
    assert check(make_graph(["A"], [])) == (True, "")


def test_linear_chain_is_valid():
    g = make_graph(["A", "B", "C"], [("A", "B"), ("B", "C")])
    assert check(g) == (True, "")
    assert find_entry_nodes(g.nodes, g.edges) == ["A"]


def test_two_roots_is_invalid():
    g = make_graph(["A", "B", "C"], [("A", "C")])
    is_valid, message = check(g)
    assert is_valid is False
    assert message == SAVE_REJECTED_MESSAGE
    assert find_entry_nodes(g.nodes, g.edges) == ["A", "B"]


def test_two_unconnected_nodes_are_invalid():
    assert check(make_graph(["A", "B"], []))[0] is False


def test_cycles_and_fan_in_are_tolerated():
    # A -> B -> C -> B, and D -> C
    g = make_graph(["A", "B", "C", "D"], [("A", "B"), ("B", "C"), ("C", "B"), ("D", "C")])
    # A and D have no incoming edges
    assert check(g)[0] is False

    g = make_graph(["A", "B", "C"], [("A", "B"), ("B", "C"), ("C", "B")])
    assert check(g) == (True, "")


def test_full_cycle_has_no_entry_and_is_valid():
    g = make_graph(["A", "B"], [("A", "B"), ("B", "A")])
    assert find_entry_nodes(g.nodes, g.edges) == []
    assert check(g) == (True, "")


@pytest.mark.parametrize("dangling", [FlowEdge.between("ghost", "B"), FlowEdge.between("A", "ghost")])
def test_dangling_edges_are_ignored(dangling):
    g = make_graph(["A", "B"], [])
    assert validate_flow(g.nodes, [dangling])[0] is False


def test_validation_error_defaults():
    err = FlowValidationError()
    assert str(err) == SAVE_REJECTED_MESSAGE
    assert err.entry_nodes == []
