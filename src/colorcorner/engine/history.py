from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from colorcorner.engine.buffer import PixelBuffer, Snapshot
from colorcorner.engine.notify import ChangeNotifier


logger = logging.getLogger(__name__)

MAX_HISTORY = 50
DEBOUNCE_SECONDS = 0.3

Clock = Callable[[], float]


class Debouncer:
    """Trailing-edge timer polled from the frame loop.

    Every ``schedule`` pushes the deadline back, so the callback runs once
    after ``delay`` seconds without further calls.
    """

    def __init__(self, delay: float, callback: Callable[[], None], clock: Clock = time.monotonic) -> None:
        self.delay = delay
        self.callback = callback
        self._clock = clock
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def schedule(self) -> None:
        self._deadline = self._clock() + self.delay

    def cancel(self) -> None:
        self._deadline = None

    def poll(self, now: Optional[float] = None) -> bool:
        if self._deadline is None:
            return False
        if now is None:
            now = self._clock()
        if now < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self._deadline is None:
            return False
        self._deadline = None
        self.callback()
        return True


class History:
    """Bounded list of buffer snapshots with an undo/redo cursor.

    ``cursor`` points at the snapshot matching the buffer contents, or is -1
    before the first commit. Undo and redo restore the buffer from the list;
    a commit after an undo drops the redo branch.
    """

    def __init__(
        self,
        buffer: PixelBuffer,
        notifier: ChangeNotifier,
        *,
        max_history: int = MAX_HISTORY,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")
        self.buffer = buffer
        self.notifier = notifier
        self.max_history = max_history
        self._states: List[Snapshot] = []
        self._cursor = -1
        self._debouncer = Debouncer(debounce_seconds, self._emit_buffer_changed, clock)

    def __len__(self) -> int:
        return len(self._states)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Optional[Snapshot]:
        if self._cursor < 0:
            return None
        return self._states[self._cursor]

    @property
    def notification_pending(self) -> bool:
        return self._debouncer.pending

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._states) - 1

    def commit(self) -> bool:
        snapshot = self.buffer.snapshot()
        if self._cursor < 0:
            self._states = [snapshot]
            self._cursor = 0
            logger.debug("Seeded history with %dx%d snapshot", snapshot.width, snapshot.height)
            self._announce()
            return True

        if self._states[self._cursor] == snapshot:
            logger.debug("Skipping commit identical to snapshot %d", self._cursor)
            return False

        del self._states[self._cursor + 1:]
        self._states.append(snapshot)
        self._cursor = len(self._states) - 1
        overflow = len(self._states) - self.max_history
        if overflow > 0:
            del self._states[:overflow]
            self._cursor -= overflow
            logger.debug("Evicted %d oldest snapshot(s)", overflow)
        self._announce()
        return True

    def undo(self) -> bool:
        if self._cursor <= 0:
            return False
        self._cursor -= 1
        self.buffer.restore(self._states[self._cursor])
        self._announce(force=True)
        return True

    def redo(self) -> bool:
        if self._cursor >= len(self._states) - 1:
            return False
        self._cursor += 1
        self.buffer.restore(self._states[self._cursor])
        self._announce(force=True)
        return True

    def reset(self) -> None:
        self._states = []
        self._cursor = -1
        self._debouncer.cancel()
        self.notifier.history_availability(False, False, force=True)

    def touch(self) -> None:
        self._debouncer.schedule()

    def poll(self, now: Optional[float] = None) -> bool:
        return self._debouncer.poll(now)

    def flush(self) -> bool:
        return self._debouncer.flush()

    def _announce(self, force: bool = False) -> None:
        self.notifier.history_availability(self.can_undo(), self.can_redo(), force=force)
        self._debouncer.schedule()

    def _emit_buffer_changed(self) -> None:
        snapshot = self.current
        if snapshot is not None:
            self.notifier.buffer_changed(snapshot)
