"""
Main NiceGUI application for the flow builder.

Creates one FlowEditController per page visit, renders the canvas with
CanvasView, and shows either the nodes panel or the settings panel of the
selected node on the right. The save button validates the flow and either
logs it or shows "Cannot save Flow".
"""

import logging
import sys

from nicegui import ui

from flowbuilder.config import ensure_env_loaded, get_server_settings
from flowbuilder.canvas_view import CanvasView
from flowbuilder.edit import FlowActions, FlowEditController
from flowbuilder.edit.handlers import setup_canvas_handlers
from flowbuilder.graph_model import FlowGraph, build_demo_graph
from flowbuilder.panels import (
    format_position,
    render_error_toast,
    render_nodes_panel,
    render_settings_panel,
)

ensure_env_loaded()
SETTINGS = get_server_settings()

logging.basicConfig(
    level=getattr(logging, SETTINGS['log_level'], logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


@ui.page('/')
def main_page():
    graph = build_demo_graph() if SETTINGS['seed_demo'] else FlowGraph()
    controller = FlowEditController(graph)
    actions = FlowActions(controller)
    handlers = setup_canvas_handlers(controller, actions)

    # what the side panel currently shows, so typing does not rebuild it
    panel_state = {'node_id': None, 'position_label': None}

    @ui.refreshable
    def side_panel():
        node = controller.selected
        panel_state['node_id'] = node.id if node else None
        panel_state['position_label'] = None
        if node is None:
            render_nodes_panel(
                on_drag_start=handlers['handle_palette_drag_start'],
                on_drag_end=handlers['handle_palette_drag_end'],
            )
            return

        def close():
            controller.deselect()

        panel_state['position_label'] = render_settings_panel(
            node,
            on_text_change=lambda text, nid=node.id: handlers['handle_text_change'](nid, text),
            on_close=close,
        )

    @ui.refreshable
    def error_area():
        if actions.error:
            def dismiss():
                handlers['handle_dismiss_error']()
                error_area.refresh()
            render_error_toast(actions.error, on_close=dismiss)

    def do_save():
        handlers['handle_save']()
        error_area.refresh()

    with ui.row().classes('w-full h-screen no-wrap gap-0'):
        with ui.element('div').classes('relative flex-1 h-full'):
            canvas_view = CanvasView(controller, handlers)
            canvas_view.setup()

            with ui.column().classes('absolute top-4 right-4 items-end gap-2').style('z-index: 10;'):
                ui.button('Save Changes', on_click=do_save).props('unelevated color=primary no-caps')
                error_area()

        with ui.element('div').classes('w-80 h-full border-l border-gray-200 bg-white'):
            side_panel()

    def on_state_change(ctrl: FlowEditController):
        canvas_view.update()
        node = ctrl.selected
        node_id = node.id if node else None
        if node_id != panel_state['node_id']:
            side_panel.refresh()
        elif node is not None and panel_state['position_label'] is not None:
            panel_state['position_label'].set_text(f'Position: {format_position(node.position)}')

    controller.set_on_state_change(on_state_change)
    logger.info(f"Flow editor opened with {len(graph)} nodes")


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='Flow Builder',
        host=SETTINGS['host'],
        port=SETTINGS['port'],
        reload=not getattr(sys, 'frozen', False),
    )
