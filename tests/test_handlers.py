"""
Tests for the canvas event handlers: payload parsing and routing of
browser events into the edit controller.
"""

from types import SimpleNamespace

import pytest

from flowbuilder.edit import Connecting, FlowActions, FlowEditController, Idle, Point
from flowbuilder.edit.handlers import (
    normalize_pointer_payload,
    pointer_from_payload,
    setup_canvas_handlers,
)
from flowbuilder.flow import Position, TEXT_NODE
from flowbuilder.graph_model import build_demo_graph


def event(**args):
    """Mimics NiceGUI's GenericEventArguments."""
    return SimpleNamespace(args=args)


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def controller():
    return FlowEditController(build_demo_graph())


@pytest.fixture
def handlers(controller, notifications):
    actions = FlowActions(controller)

    def notify(message, **kwargs):
        notifications.append((message, kwargs.get('type')))

    return setup_canvas_handlers(controller, actions, notify=notify)


class TestPayloads:

    def test_normalize_dict(self):
        payload = {'clientX': 1, 'clientY': 2}
        assert normalize_pointer_payload(payload) is payload

    def test_normalize_event_arguments(self):
        assert normalize_pointer_payload(event(clientX=3, clientY=4)) == {'clientX': 3, 'clientY': 4}

    def test_normalize_list(self):
        assert normalize_pointer_payload([5, 6, 10, 20]) == {
            'clientX': 5, 'clientY': 6, 'canvasLeft': 10, 'canvasTop': 20,
        }

    def test_normalize_unknown(self):
        assert normalize_pointer_payload(None) == {}
        assert normalize_pointer_payload('x') == {}

    def test_pointer_from_payload(self):
        assert pointer_from_payload({'clientX': 5, 'clientY': '7.5'}) == Point(5, 7.5)
        assert pointer_from_payload({'clientX': 5}) is None
        assert pointer_from_payload({'clientX': 'a', 'clientY': 1}) is None
        assert pointer_from_payload({'clientX': True, 'clientY': 1}) is None


class TestRouting:

    def test_node_drag_round_trip(self, controller, handlers):
        handlers['handle_node_press']('1', event(clientX=150, clientY=150))
        handlers['handle_pointer_move'](event(clientX=170, clientY=160, canvasLeft=0, canvasTop=0))
        handlers['handle_pointer_up'](event(clientX=170, clientY=160, canvasLeft=0, canvasTop=0))

        assert controller.graph.get_node('1').position == Position(120, 110)
        assert isinstance(controller.state, Idle)
        assert controller.listeners.listener_count() == 0

    def test_pointer_events_update_viewport(self, controller, handlers):
        handlers['handle_pointer_move'](event(clientX=1, clientY=1, canvasLeft=12, canvasTop=34))
        assert controller.viewport.origin == Point(12, 34)

    def test_connection_through_input_handle(self, controller, handlers):
        controller.graph.add_node(TEXT_NODE, Position(700, 100), {'text': 'three'}, node_id='3')

        handlers['handle_output_press']('1')
        assert isinstance(controller.state, Connecting)
        handlers['handle_input_enter']('3')
        handlers['handle_pointer_up'](event(clientX=700, clientY=140, canvasLeft=0, canvasTop=0, inputNodeId='3'))
        handlers['handle_input_leave']('3')

        assert [(e.source, e.target) for e in controller.graph.edges] == [('1', '3')]
        assert controller.connection.highlighted == frozenset()

    def test_pointer_up_without_coordinates_still_ends_gesture(self, controller, handlers):
        handlers['handle_output_press']('1')
        handlers['handle_pointer_up'](event())
        assert isinstance(controller.state, Idle)
        assert controller.listeners.listener_count() == 0

    def test_drag_release_without_coordinates_keeps_position(self, controller, handlers):
        handlers['handle_node_press']('1', event(clientX=150, clientY=150))
        handlers['handle_pointer_move'](event(clientX=170, clientY=160, canvasLeft=0, canvasTop=0))
        handlers['handle_pointer_up'](event())

        assert controller.graph.get_node('1').position == Position(120, 110)
        assert isinstance(controller.state, Idle)

    def test_palette_drop(self, controller, handlers):
        handlers['handle_palette_drag_start'](TEXT_NODE)
        handlers['handle_drop'](event(clientX=450, clientY=350, canvasLeft=100, canvasTop=50))

        node = controller.graph.nodes[-1]
        assert node.position == Position(250, 250)
        assert node.text == 'New message'

    def test_palette_drag_end_without_drop(self, controller, handlers):
        handlers['handle_palette_drag_start'](TEXT_NODE)
        handlers['handle_palette_drag_end'](event())
        handlers['handle_drop'](event(clientX=450, clientY=350, canvasLeft=100, canvasTop=50))

        assert controller.drop.pending_type is None
        assert len(controller.graph) == 2

    def test_canvas_click_and_node_click(self, controller, handlers):
        handlers['handle_node_click']('2')
        assert controller.selection.selected_id == '2'
        handlers['handle_canvas_click'](event())
        assert controller.selection.selected_id is None

    def test_text_change(self, controller, handlers):
        handlers['handle_text_change']('2', 'updated')
        assert controller.graph.get_node('2').text == 'updated'


class TestSave:

    def test_save_success_notifies(self, handlers, notifications):
        result = handlers['handle_save']()
        assert result.ok
        assert notifications == [('Flow saved successfully!', 'positive')]

    def test_save_rejection_sets_error_without_toast(self, controller, handlers, notifications):
        controller.graph.add_node(TEXT_NODE, Position(0, 400), {'text': 'orphan'})
        result = handlers['handle_save']()

        assert result.ok is False
        assert notifications == []

        handlers['handle_dismiss_error']()
