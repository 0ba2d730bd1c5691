"""
Document-level pointer listeners.

Gestures that follow the pointer outside their own element (node drags
and connection drags) register move/up listeners here when they start and
remove them when they end. The canvas page forwards browser
mousemove/mouseup events to dispatch_move / dispatch_up.
"""

import logging
from typing import Callable, Dict, List, Optional

from flowbuilder.edit.geometry import Point

logger = logging.getLogger(__name__)

PointerCallback = Callable[[Optional[Point]], None]

MOVE = 'move'
UP = 'up'


class PointerListeners:
    """Registry of active document-level pointer listeners."""

    def __init__(self):
        self._listeners: Dict[str, List[PointerCallback]] = {MOVE: [], UP: []}

    def add(self, kind: str, callback: PointerCallback) -> None:
        self._listeners[kind].append(callback)

    def remove(self, kind: str, callback: PointerCallback) -> None:
        try:
            self._listeners[kind].remove(callback)
        except ValueError:
            logger.debug(f"Listener for {kind} already removed")

    def listener_count(self, kind: str = None) -> int:
        if kind is not None:
            return len(self._listeners[kind])
        return sum(len(callbacks) for callbacks in self._listeners.values())

    def dispatch_move(self, screen_point: Point) -> None:
        # copy: a callback may unregister itself
        for callback in list(self._listeners[MOVE]):
            callback(screen_point)

    def dispatch_up(self, screen_point: Optional[Point]) -> None:
        """`screen_point` is None when the release carried no coordinates."""
        for callback in list(self._listeners[UP]):
            callback(screen_point)


class PointerCapture:
    """
    A move/up listener pair owned by one gesture.

    acquire() registers both listeners, release() removes both; release is
    safe to call on every exit path, including twice.
    """

    def __init__(self, listeners: PointerListeners,
                 on_move: PointerCallback, on_up: PointerCallback):
        self._listeners = listeners
        self._on_move = on_move
        self._on_up = on_up
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def acquire(self) -> None:
        if self._active:
            return
        self._listeners.add(MOVE, self._on_move)
        self._listeners.add(UP, self._on_up)
        self._active = True

    def release(self) -> None:
        if not self._active:
            return
        self._listeners.remove(MOVE, self._on_move)
        self._listeners.remove(UP, self._on_up)
        self._active = False
