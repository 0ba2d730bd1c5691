"""
Flow builder: an interactive editor for directed graphs of message nodes.

Packages:
- flowbuilder.flow / graph_model / selection / validation: graph state and rules
- flowbuilder.edit: pointer gesture controllers and the edit session
- flowbuilder.canvas_view / panels: NiceGUI rendering of the session
"""

__version__ = "0.1.0"
