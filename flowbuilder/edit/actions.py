"""
Edit Actions Module for the flow builder

Executes the user commands that are not pointer gestures:
- saving the flow (validate, then emit or reject)
- settings-panel text edits
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from flowbuilder.edit.controller import FlowEditController
from flowbuilder.validation import FlowValidationError, find_entry_nodes, validate_flow

logger = logging.getLogger(__name__)

SAVE_SUCCESS_MESSAGE = "Flow saved successfully!"


@dataclass
class SaveResult:
    ok: bool
    message: str
    flow: Optional[Dict[str, Any]] = None


class FlowActions:
    """
    Handles execution of flow-level actions.

    `emit` receives the flow dict of every accepted save; by default the
    flow only goes to the log.
    """

    def __init__(self, controller: FlowEditController,
                 emit: Optional[Callable[[Dict[str, Any]], None]] = None):
        self.controller = controller
        self._emit = emit
        self.error: Optional[str] = None

    def save(self, raise_on_error: bool = False) -> SaveResult:
        """
        Validate and save the current flow.

        A rejected save leaves the graph untouched and sets `error` to the
        message the UI shows. With raise_on_error, a FlowValidationError is
        raised instead of returning the failed result.
        """
        self.error = None
        graph = self.controller.graph

        is_valid, message = validate_flow(graph.nodes, graph.edges)
        if not is_valid:
            self.error = message
            if raise_on_error:
                raise FlowValidationError(message, find_entry_nodes(graph.nodes, graph.edges))
            return SaveResult(ok=False, message=message)

        flow = graph.to_dict()
        logger.info(f"{SAVE_SUCCESS_MESSAGE} {json.dumps(flow)}")
        if self._emit:
            self._emit(flow)
        return SaveResult(ok=True, message=SAVE_SUCCESS_MESSAGE, flow=flow)

    def dismiss_error(self) -> None:
        self.error = None

    def update_text(self, node_id: str, text: str) -> None:
        """Settings panel edit: called on every keystroke."""
        self.controller.update_node_data(node_id, {"text": text})
