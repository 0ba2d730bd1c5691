"""
Shared constants for the canvas editing system.

These values are used by both the Python gesture controllers and the
rendered node cards in canvas_view. Keep them in sync!
"""

# Rendered size of a node card in pixels
NODE_WIDTH = 200
NODE_HEIGHT = 100

# Dropped nodes are centered under the cursor
DROP_OFFSET_X = NODE_WIDTH / 2
DROP_OFFSET_Y = NODE_HEIGHT / 2

# Vertical offset of the input/output handles from the card's top edge
HANDLE_OFFSET_Y = 40

# Bezier control points sit this fraction of the horizontal span away from each end
CURVE_CONTROL_RATIO = 0.5

# Canvas grid spacing in pixels
GRID_SIZE = 20
