"""
Canvas View - NiceGUI rendering of a FlowEditController.

Node cards are absolutely positioned divs; edges and the connection
preview are drawn in one SVG layer under the cards. On every state change
the view moves existing cards in place and redraws the SVG; the cards are
only rebuilt when nodes are added.

The page script forwards browser events the canvas cannot get from its
own elements:
- mousemove / mouseup on the document, from a press on a node until the
  next release (the gesture's document listeners)
- drag-over / drop of palette items on the canvas
Each payload carries the canvas's screen origin so the controller's
viewport stays current.
"""

import html
from typing import Callable, Dict, Any

from nicegui import ui

from flowbuilder.flow import FlowNode
from flowbuilder.edit.constants import GRID_SIZE, NODE_WIDTH
from flowbuilder.edit.controller import FlowEditController
from flowbuilder.edit.geometry import edge_path
from flowbuilder.panels import display_text


POINTER_MOVE_EVENT = 'flow_pointer_move'
POINTER_UP_EVENT = 'flow_pointer_up'
DROP_EVENT = 'flow_drop'

CANVAS_SCRIPT = f'''
<script>
(function() {{
    if (window.flowCanvasScript) return;
    window.flowCanvasScript = true;
    window.flowPointerCapture = false;

    function payload(e) {{
        const p = {{clientX: e.clientX, clientY: e.clientY}};
        const canvas = document.querySelector('.flow-canvas');
        if (canvas) {{
            const r = canvas.getBoundingClientRect();
            p.canvasLeft = r.left;
            p.canvasTop = r.top;
        }}
        return p;
    }}
    function closest(e, selector) {{
        return e.target && e.target.closest ? e.target.closest(selector) : null;
    }}

    // capture phase: handles stop propagation of their own mousedown
    document.addEventListener('mousedown', function(e) {{
        if (closest(e, '.flow-node')) window.flowPointerCapture = true;
    }}, true);
    document.addEventListener('mousemove', function(e) {{
        if (!window.flowPointerCapture) return;
        emitEvent('{POINTER_MOVE_EVENT}', payload(e));
    }});
    document.addEventListener('mouseup', function(e) {{
        if (!window.flowPointerCapture) return;
        window.flowPointerCapture = false;
        const p = payload(e);
        const handle = closest(e, '.target-handle');
        if (handle) p.inputNodeId = handle.dataset.nodeId;
        emitEvent('{POINTER_UP_EVENT}', p);
    }});

    document.addEventListener('dragstart', function(e) {{
        const item = closest(e, '.palette-item');
        if (item && e.dataTransfer) {{
            e.dataTransfer.effectAllowed = 'move';
            e.dataTransfer.setData('text/plain', item.dataset.nodeType);
        }}
    }});
    document.addEventListener('dragover', function(e) {{
        if (!closest(e, '.flow-canvas')) return;
        e.preventDefault();
        if (e.dataTransfer) e.dataTransfer.dropEffect = 'move';
    }});
    document.addEventListener('drop', function(e) {{
        if (!closest(e, '.flow-canvas')) return;
        e.preventDefault();
        emitEvent('{DROP_EVENT}', payload(e));
    }});
}})();
</script>
'''

_EDGE_COLOR = '#6b7280'
_PREVIEW_COLOR = '#3b82f6'
_HIGHLIGHT_CLASSES = 'bg-green-500 scale-125'
_IDLE_HANDLE_CLASSES = 'bg-gray-500'


def build_edges_svg(controller: FlowEditController) -> str:
    """SVG markup for all committed edges plus the connection preview."""
    graph = controller.graph
    paths = []
    for edge in graph.edges:
        d = edge_path(graph.get_node(edge.source), graph.get_node(edge.target))
        if not d:
            continue
        paths.append(
            f'<path data-edge-id="{html.escape(edge.id)}" d="{d}" stroke="{_EDGE_COLOR}" '
            f'stroke-width="2" fill="none" marker-end="url(#arrowhead)" />'
        )

    preview = controller.connection.preview_path()
    if preview:
        paths.append(
            f'<path class="connection-preview" d="{preview}" stroke="{_PREVIEW_COLOR}" '
            f'stroke-width="3" fill="none" stroke-dasharray="8,4" opacity="0.8" />'
        )

    return (
        '<svg width="100%" height="100%" style="position:absolute; inset:0; overflow:visible;">'
        '<defs><marker id="arrowhead" markerWidth="10" markerHeight="7" refX="9" refY="3.5" orient="auto">'
        f'<polygon points="0 0, 10 3.5, 0 7" fill="{_EDGE_COLOR}" /></marker></defs>'
        + ''.join(paths) +
        '</svg>'
    )


class CanvasView:
    """Renders the canvas of one edit session."""

    def __init__(self, controller: FlowEditController, handlers: Dict[str, Callable[..., Any]]):
        self.controller = controller
        self.handlers = handlers
        self._cards: Dict[str, Dict[str, Any]] = {}
        self._edges_layer = None
        self._nodes_layer = None

    def setup(self):
        """Create the canvas. Call once inside the page."""
        ui.add_body_html(CANVAS_SCRIPT)
        ui.on(POINTER_MOVE_EVENT, self.handlers['handle_pointer_move'], throttle=0.02)
        ui.on(POINTER_UP_EVENT, self.handlers['handle_pointer_up'])
        ui.on(DROP_EVENT, self.handlers['handle_drop'])

        canvas = ui.element('div').classes(
            'flow-canvas w-full h-full relative overflow-hidden bg-gray-50 select-none')
        canvas.on('click', self.handlers['handle_canvas_click'], [])
        with canvas:
            ui.element('div').classes('grid-background absolute inset-0 opacity-20 pointer-events-none').style(
                'background-image: linear-gradient(rgba(0,0,0,0.1) 1px, transparent 1px), '
                'linear-gradient(90deg, rgba(0,0,0,0.1) 1px, transparent 1px); '
                f'background-size: {GRID_SIZE}px {GRID_SIZE}px;'
            )
            self._edges_layer = ui.html(build_edges_svg(self.controller), sanitize=False).classes(
                'absolute inset-0 pointer-events-none').style('z-index: 1;')
            self._nodes_layer = ui.element('div').classes('absolute inset-0').style(
                'z-index: 2; pointer-events: none;')
        self._build_nodes()
        return canvas

    def update(self):
        """Bring the canvas in line with the controller's current state."""
        graph = self.controller.graph
        if set(self._cards) != {node.id for node in graph.nodes}:
            self._build_nodes()
        else:
            for node in graph.nodes:
                self._update_card(node)
        self._edges_layer.content = build_edges_svg(self.controller)

    # --- Node cards ---

    def _build_nodes(self):
        self._nodes_layer.clear()
        self._cards = {}
        with self._nodes_layer:
            for node in self.controller.graph.nodes:
                self._cards[node.id] = self._render_card(node)
        for node in self.controller.graph.nodes:
            self._update_card(node)

    def _render_card(self, node: FlowNode) -> Dict[str, Any]:
        h = self.handlers
        node_id = node.id

        card = ui.element('div').classes(
            'flow-node absolute rounded-lg p-3 border-2 shadow-sm bg-teal-100 cursor-grab'
        ).style(f'width: {NODE_WIDTH}px; pointer-events: auto;')
        card.on('mousedown', lambda e, nid=node_id: h['handle_node_press'](nid, e), ['clientX', 'clientY'])
        card.on('click.stop', lambda _, nid=node_id: h['handle_node_click'](nid), [])

        with card:
            input_handle = ui.element('div').classes(
                f'target-handle absolute left-0 top-1/2 -translate-x-1/2 -translate-y-1/2 w-4 h-4 '
                f'rounded-full border-2 border-white cursor-pointer transition-all {_IDLE_HANDLE_CLASSES}'
            ).props(f'data-node-id="{node_id}" title="Drop connection here"').style('z-index: 30;')
            input_handle.on('mousedown.stop', lambda _: None, [])
            input_handle.on('mouseenter', lambda _, nid=node_id: h['handle_input_enter'](nid), [])
            input_handle.on('mouseleave', lambda _, nid=node_id: h['handle_input_leave'](nid), [])

            with ui.row().classes('items-center gap-2 mb-2 text-teal-700 pointer-events-none'):
                ui.icon('chat_bubble_outline', size='xs')
                ui.label('Send Message').classes('font-medium text-sm')
            text = ui.label(display_text(node)).classes(
                'bg-white rounded p-2 text-sm text-gray-700 border min-h-[40px] w-full pointer-events-none')

            output_handle = ui.element('div').classes(
                'source-handle absolute right-0 top-1/2 translate-x-1/2 -translate-y-1/2 w-4 h-4 '
                'rounded-full border-2 border-white bg-blue-500 cursor-grab hover:bg-blue-600'
            ).props('title="Drag to connect"').style('z-index: 30;')
            output_handle.on('mousedown.stop', lambda _, nid=node_id: h['handle_output_press'](nid), [])

        return {'card': card, 'text': text, 'input_handle': input_handle}

    def _update_card(self, node: FlowNode):
        parts = self._cards.get(node.id)
        if parts is None:
            return
        controller = self.controller
        card = parts['card']

        card.style(f'left: {node.position.x}px; top: {node.position.y}px;')
        parts['text'].set_text(display_text(node))

        if controller.selection.is_selected(node.id):
            card.classes(add='border-teal-500 shadow-md', remove='border-teal-200')
        else:
            card.classes(add='border-teal-200', remove='border-teal-500 shadow-md')

        if controller.connection.is_connect_target(node.id):
            card.classes(add='ring-2 ring-blue-300')
        else:
            card.classes(remove='ring-2 ring-blue-300')

        if controller.connection.is_highlighted(node.id):
            parts['input_handle'].classes(add=_HIGHLIGHT_CLASSES, remove=_IDLE_HANDLE_CLASSES)
        else:
            parts['input_handle'].classes(add=_IDLE_HANDLE_CLASSES, remove=_HIGHLIGHT_CLASSES)
