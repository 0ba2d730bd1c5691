"""
Tests for FlowActions: saving and settings-panel edits.
"""

import logging

import pytest

from flowbuilder.edit import FlowActions, FlowEditController
from flowbuilder.flow import Position, TEXT_NODE
from flowbuilder.graph_model import FlowGraph, build_demo_graph
from flowbuilder.validation import FlowValidationError, SAVE_REJECTED_MESSAGE


@pytest.fixture
def emitted():
    return []


@pytest.fixture
def two_roots():
    g = FlowGraph()
    for node_id in ("A", "B", "C"):
        g.add_node(TEXT_NODE, Position(0, 0), {"text": node_id}, node_id=node_id)
    g.connect("A", "C")
    return g


class TestSave:

    def test_valid_flow_is_emitted(self, emitted):
        controller = FlowEditController(build_demo_graph())
        actions = FlowActions(controller, emit=emitted.append)

        result = actions.save()

        assert result.ok is True
        assert result.message == "Flow saved successfully!"
        assert result.flow == controller.graph.to_dict()
        assert emitted == [result.flow]
        assert actions.error is None

    def test_valid_save_is_logged(self, caplog):
        actions = FlowActions(FlowEditController(build_demo_graph()))
        with caplog.at_level(logging.INFO, logger="flowbuilder.edit.actions"):
            actions.save()
        assert "Flow saved successfully!" in caplog.text
        assert '"e1-2"' in caplog.text

    def test_two_roots_are_rejected(self, two_roots, emitted):
        controller = FlowEditController(two_roots)
        actions = FlowActions(controller, emit=emitted.append)
        before = two_roots.to_dict()

        result = actions.save()

        assert result.ok is False
        assert result.message == SAVE_REJECTED_MESSAGE
        assert result.flow is None
        assert actions.error == SAVE_REJECTED_MESSAGE
        assert emitted == []
        assert two_roots.to_dict() == before

    def test_error_clears_on_next_successful_save(self, two_roots):
        controller = FlowEditController(two_roots)
        actions = FlowActions(controller)
        actions.save()
        assert actions.error == SAVE_REJECTED_MESSAGE

        two_roots.connect("C", "B")
        assert actions.save().ok is True
        assert actions.error is None

    def test_dismiss_error(self, two_roots):
        actions = FlowActions(FlowEditController(two_roots))
        actions.save()
        actions.dismiss_error()
        assert actions.error is None

    def test_raise_on_error(self, two_roots):
        actions = FlowActions(FlowEditController(two_roots))
        with pytest.raises(FlowValidationError) as excinfo:
            actions.save(raise_on_error=True)
        assert str(excinfo.value) == SAVE_REJECTED_MESSAGE
        assert excinfo.value.entry_nodes == ["A", "B"]

    def test_single_node_always_saves(self):
        g = FlowGraph()
        g.add_node(TEXT_NODE, Position(0, 0), {"text": "only"})
        assert FlowActions(FlowEditController(g)).save().ok is True


class TestUpdateText:

    def test_update_text_changes_node_and_selection(self):
        controller = FlowEditController(build_demo_graph())
        actions = FlowActions(controller)
        controller.select_node("1")

        actions.update_text("1", "Hello there")

        assert controller.graph.get_node("1").text == "Hello there"
        assert controller.selected.text == "Hello there"

    def test_update_text_for_unknown_node_is_ignored(self):
        controller = FlowEditController(build_demo_graph())
        before = controller.graph.to_dict()
        FlowActions(controller).update_text("ghost", "x")
        assert controller.graph.to_dict() == before
