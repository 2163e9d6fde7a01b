from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from colorcorner.engine.buffer import Snapshot


logger = logging.getLogger(__name__)

BufferListener = Callable[[Snapshot], None]
AvailabilityListener = Callable[[bool, bool], None]


class ChangeNotifier:
    """Fans buffer and undo/redo availability changes out to the host."""

    def __init__(self) -> None:
        self._buffer_listeners: List[BufferListener] = []
        self._availability_listeners: List[AvailabilityListener] = []
        self._last_availability: Optional[Tuple[bool, bool]] = None

    def on_buffer_changed(self, listener: BufferListener) -> Callable[[], None]:
        self._buffer_listeners.append(listener)
        return lambda: self._remove(self._buffer_listeners, listener)

    def on_history_availability(self, listener: AvailabilityListener) -> Callable[[], None]:
        self._availability_listeners.append(listener)
        return lambda: self._remove(self._availability_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def buffer_changed(self, snapshot: Snapshot) -> None:
        for listener in list(self._buffer_listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Buffer listener %r failed", listener)

    def history_availability(self, can_undo: bool, can_redo: bool, *, force: bool = False) -> None:
        state = (can_undo, can_redo)
        if state == self._last_availability and not force:
            return
        self._last_availability = state
        for listener in list(self._availability_listeners):
            try:
                listener(can_undo, can_redo)
            except Exception:
                logger.exception("Availability listener %r failed", listener)
