"""
Connection gesture.

Pressing a node's output handle starts a connection anchored at that
handle. While connecting, the preview curve follows the pointer. Releasing
over another node's input handle creates the edge; releasing anywhere else
(or over the source's own input) discards it.

Also owns the hover affordance of input handles: while connecting, an
input handle of any node other than the source lights up on enter and is
always reset on leave.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, FrozenSet, Optional, Set

from flowbuilder.flow import FlowEdge
from flowbuilder.edit.events import PointerCapture, PointerListeners
from flowbuilder.edit.geometry import Point, Viewport, curve_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connecting:
    """A connection drag in progress, in canvas coordinates."""
    source_id: str
    anchor: Point
    pointer: Point


class ConnectionController:
    """idle -> connecting -> idle, scoped to the whole canvas."""

    def __init__(self, viewport: Viewport,
                 connect: Callable[[str, str], FlowEdge],
                 listeners: PointerListeners):
        self._viewport = viewport
        self._connect = connect
        self._state: Optional[Connecting] = None
        self._highlighted: Set[str] = set()
        self._capture = PointerCapture(listeners, self._on_pointer_move, self._on_pointer_up)

    @property
    def state(self) -> Optional[Connecting]:
        return self._state

    @property
    def is_connecting(self) -> bool:
        return self._state is not None

    @property
    def highlighted(self) -> FrozenSet[str]:
        """Node ids whose input handle currently shows the drop affordance."""
        return frozenset(self._highlighted)

    def start(self, source_id: str, anchor: Point) -> None:
        """Begin a connection from `source_id`'s output handle at canvas point `anchor`."""
        self._state = Connecting(source_id=source_id, anchor=anchor, pointer=anchor)
        self._capture.acquire()
        logger.debug(f"Connection started from {source_id} at {anchor}")

    def release_on_input(self, target_id: str) -> Optional[FlowEdge]:
        """
        Pointer released over `target_id`'s input handle.

        Creates the edge unless the target is the source itself; either way
        the gesture ends.
        """
        state = self._state
        if state is None:
            return None
        edge = None
        if target_id != state.source_id:
            edge = self._connect(state.source_id, target_id)
        else:
            logger.debug(f"Discarded self-connection on {target_id}")
        self._finish()
        return edge

    def cancel(self) -> None:
        if self._state is not None:
            logger.debug(f"Connection from {self._state.source_id} cancelled")
        self._finish()

    def is_connect_target(self, node_id: str) -> bool:
        """True for every node other than the source while connecting."""
        return self._state is not None and self._state.source_id != node_id

    def preview_path(self) -> str:
        if self._state is None:
            return ""
        return curve_path(self._state.anchor, self._state.pointer)

    # --- Input handle hover ---

    def enter_input(self, node_id: str) -> bool:
        """Returns True if the handle now shows the affordance."""
        if self.is_connect_target(node_id):
            self._highlighted.add(node_id)
            return True
        return False

    def leave_input(self, node_id: str) -> None:
        self._highlighted.discard(node_id)

    def is_highlighted(self, node_id: str) -> bool:
        return node_id in self._highlighted

    # --- Document listeners ---

    def _on_pointer_move(self, screen_point: Point) -> None:
        if self._state is None:
            return
        local = self._viewport.to_local(screen_point)
        if local is None:
            return
        self._state = replace(self._state, pointer=local)

    def _on_pointer_up(self, screen_point: Optional[Point]) -> None:
        # released away from any input handle
        self._finish()

    def _finish(self) -> None:
        self._state = None
        self._capture.release()
