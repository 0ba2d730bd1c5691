"""
Canvas editing system for the flow builder.

This package provides the pointer-driven editing engine:
- FlowEditController: edit session, gesture state and selection sync
- NodeDragController / ConnectionController / DropController: gestures
- FlowActions: save and settings-panel edits
- setup_canvas_handlers: event handlers for app.py integration

Usage:
    from flowbuilder.edit import FlowEditController, FlowActions
    from flowbuilder.edit.handlers import setup_canvas_handlers
"""

from flowbuilder.edit.constants import (
    NODE_WIDTH,
    NODE_HEIGHT,
    HANDLE_OFFSET_Y,
    GRID_SIZE,
)
from flowbuilder.edit.geometry import Point, Viewport, curve_path, edge_path
from flowbuilder.edit.events import PointerListeners, PointerCapture
from flowbuilder.edit.drag import Dragging, NodeDragController
from flowbuilder.edit.connection import Connecting, ConnectionController
from flowbuilder.edit.drop import DropController
from flowbuilder.edit.controller import FlowEditController, GestureState, Idle
from flowbuilder.edit.actions import FlowActions, SaveResult

__all__ = [
    'FlowEditController',
    'GestureState',
    'Idle',
    'Dragging',
    'Connecting',
    'NodeDragController',
    'ConnectionController',
    'DropController',
    'FlowActions',
    'SaveResult',
    'PointerListeners',
    'PointerCapture',
    'Point',
    'Viewport',
    'curve_path',
    'edge_path',
    'NODE_WIDTH',
    'NODE_HEIGHT',
    'HANDLE_OFFSET_Y',
    'GRID_SIZE',
]
