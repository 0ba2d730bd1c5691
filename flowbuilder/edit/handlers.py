"""
Canvas Handlers - Event handlers for the flow canvas in app.py

Translates raw NiceGUI event payloads into FlowEditController calls so the
page module only deals with layout.

Browser-level events (document mousemove/mouseup and canvas drop) are
forwarded by the script in canvas_view with this payload shape:

    {"clientX": 120, "clientY": 80,
     "canvasLeft": 0, "canvasTop": 0,
     "inputNodeId": "2"}          # only on mouseup over an input handle
"""

import logging
from typing import Any, Callable, Dict, Optional

from nicegui import ui

from flowbuilder.edit.actions import FlowActions
from flowbuilder.edit.controller import FlowEditController
from flowbuilder.edit.geometry import Point

logger = logging.getLogger(__name__)

POINTER_KEYS = ['clientX', 'clientY', 'canvasLeft', 'canvasTop', 'inputNodeId']


def normalize_pointer_payload(raw_payload: Any) -> Dict[str, Any]:
    """Normalize NiceGUI event payloads into a dictionary for easier parsing."""
    raw_payload = raw_payload.args if hasattr(raw_payload, 'args') else raw_payload
    if isinstance(raw_payload, dict):
        return raw_payload
    if isinstance(raw_payload, (list, tuple)):
        return {
            POINTER_KEYS[i]: raw_payload[i]
            for i in range(min(len(raw_payload), len(POINTER_KEYS)))
        }
    return {}


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def pointer_from_payload(payload: Dict[str, Any]) -> Optional[Point]:
    """Screen point of a normalized payload, or None if it has no usable coordinates."""
    x = _number(payload.get('clientX'))
    y = _number(payload.get('clientY'))
    if x is None or y is None:
        return None
    return Point(x, y)


def update_viewport(controller: FlowEditController, payload: Dict[str, Any]) -> None:
    """Record the canvas's screen origin when the payload carries it."""
    left = _number(payload.get('canvasLeft'))
    top = _number(payload.get('canvasTop'))
    if left is not None and top is not None:
        controller.viewport.set_origin(left, top)


def setup_canvas_handlers(
    controller: FlowEditController,
    actions: FlowActions,
    notify: Optional[Callable[..., Any]] = None,
):
    """
    Set up all canvas event handlers.

    Args:
        controller: FlowEditController for this page
        actions: FlowActions for this page
        notify: Function used to show toast messages (defaults to ui.notify)

    Returns:
        Dict with handler functions for binding to UI events
    """
    notify = notify or ui.notify

    def handle_pointer_move(event):
        """Document mousemove while a gesture holds the pointer."""
        payload = normalize_pointer_payload(event)
        update_viewport(controller, payload)
        point = pointer_from_payload(payload)
        if point is None:
            return
        controller.pointer_move(point)

    def handle_pointer_up(event):
        """Document mouseup: completes or ends the running gesture."""
        payload = normalize_pointer_payload(event)
        update_viewport(controller, payload)
        point = pointer_from_payload(payload)
        input_node_id = payload.get('inputNodeId') or None
        # without coordinates the gesture still ends, just without a final move
        controller.pointer_up(point, input_node_id=input_node_id)

    def handle_drop(event):
        payload = normalize_pointer_payload(event)
        update_viewport(controller, payload)
        point = pointer_from_payload(payload)
        if point is None:
            return
        controller.drop_at(point)

    def handle_palette_drag_start(node_type: str):
        controller.begin_drop(node_type)

    def handle_palette_drag_end(event=None):
        controller.cancel_drop()

    def handle_node_press(node_id: str, event):
        payload = normalize_pointer_payload(event)
        point = pointer_from_payload(payload)
        if point is None:
            return
        controller.press_node(node_id, point)

    def handle_node_click(node_id: str):
        controller.click_node(node_id)

    def handle_output_press(node_id: str):
        controller.press_output_handle(node_id)

    def handle_input_enter(node_id: str):
        controller.enter_input_handle(node_id)

    def handle_input_leave(node_id: str):
        controller.leave_input_handle(node_id)

    def handle_canvas_click(event=None):
        controller.click_canvas()

    def handle_text_change(node_id: str, text: str):
        actions.update_text(node_id, text)

    def handle_save():
        try:
            result = actions.save()
        except Exception as e:
            logger.error(f"Save failed: {e}")
            notify(f'Save failed: {e}', type='negative', position='bottom')
            return None
        if result.ok:
            notify(result.message, type='positive', position='bottom')
        return result

    def handle_dismiss_error():
        actions.dismiss_error()

    return {
        'handle_pointer_move': handle_pointer_move,
        'handle_pointer_up': handle_pointer_up,
        'handle_drop': handle_drop,
        'handle_palette_drag_start': handle_palette_drag_start,
        'handle_palette_drag_end': handle_palette_drag_end,
        'handle_node_press': handle_node_press,
        'handle_node_click': handle_node_click,
        'handle_output_press': handle_output_press,
        'handle_input_enter': handle_input_enter,
        'handle_input_leave': handle_input_leave,
        'handle_canvas_click': handle_canvas_click,
        'handle_text_change': handle_text_change,
        'handle_save': handle_save,
        'handle_dismiss_error': handle_dismiss_error,
    }
