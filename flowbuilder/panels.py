from nicegui import ui
from typing import Callable, Optional

from flowbuilder.flow import FlowNode, Position, TEXT_NODE

PALETTE_ITEMS = [
    # (node type, icon, label)
    (TEXT_NODE, 'chat_bubble_outline', 'Message'),
]


def format_position(position: Position) -> str:
    """Position as shown in the settings panel, e.g. "(100, 250)"."""
    return f"({round(position.x)}, {round(position.y)})"


def display_text(node: FlowNode) -> str:
    """Text shown on a node card."""
    return node.text or "Empty message"


def render_nodes_panel(
    on_drag_start: Callable[[str], None],
    on_drag_end: Optional[Callable[[], None]] = None,
):
    """
    Renders the palette of node types that can be dragged onto the canvas.
    Only the Message node exists today; new kinds are added to PALETTE_ITEMS.
    """
    with ui.column().classes('p-4 w-full gap-3'):
        ui.label('Nodes Panel').classes('text-lg font-semibold text-gray-800')

        for node_type, icon, label in PALETTE_ITEMS:
            item = ui.column().classes(
                'palette-item w-full items-center gap-2 p-4 rounded-lg cursor-grab '
                'border-2 border-dashed border-blue-300 bg-blue-50 hover:bg-blue-100 text-blue-600'
            ).props(f'draggable data-node-type={node_type}')
            with item:
                ui.icon(icon, size='md')
                ui.label(label).classes('font-medium')
            item.on('dragstart', lambda _, t=node_type: on_drag_start(t))
            if on_drag_end is not None:
                item.on('dragend', lambda _: on_drag_end())

        ui.label('Drag and drop nodes to the canvas to build your chatbot flow.').classes(
            'text-sm text-gray-600 mt-6')


def render_settings_panel(
    node: FlowNode,
    on_text_change: Callable[[str], None],
    on_close: Callable[[], None],
) -> Optional[ui.label]:
    """
    Renders the settings form of the selected node.

    Returns the position label so the caller can keep it current while the
    node is dragged without rebuilding the form (which would drop focus
    from the textarea).
    """
    with ui.column().classes('p-4 w-full gap-4'):
        with ui.row().classes('items-center gap-3'):
            ui.button(icon='arrow_back', on_click=lambda: on_close()).props('flat dense round')
            ui.label('Message').classes('text-lg font-semibold text-gray-800')

        if node.type != TEXT_NODE:
            return None

        textarea = ui.textarea('Text', value=node.text, placeholder='Enter your message...').props(
            'outlined autogrow').classes('w-full')
        textarea.on_value_change(lambda e: on_text_change(e.value or ''))

        with ui.column().classes('gap-0 text-xs text-gray-500 mt-4'):
            ui.label(f'Node ID: {node.id}')
            position_label = ui.label(f'Position: {format_position(node.position)}')
        return position_label


def render_error_toast(message: str, on_close: Callable[[], None]):
    """Dismissible error shown under the save button."""
    with ui.row().classes(
        'items-center justify-between gap-4 min-w-[200px] px-4 py-3 rounded-lg shadow-lg '
        'bg-red-100 border border-red-400 text-red-700'
    ):
        ui.label(message).classes('font-medium')
        ui.button(icon='close', on_click=lambda: on_close()).props('flat dense round size=sm color=red')
