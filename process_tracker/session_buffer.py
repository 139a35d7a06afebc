"""
Session buffer: in-memory staging queue for observations.

Per-keystroke and per-scroll events are too frequent to persist one by one,
so they accumulate here until a flush commits them in a batch.
"""

from __future__ import annotations

from .types import PendingEvent


class SessionBuffer:
    """Ordered, unbounded queue of pending events.

    All operations are synchronous, so under an event loop a drain can
    never interleave with a stage.
    """

    def __init__(self) -> None:
        self._pending: list[PendingEvent] = []

    def stage(self, action: str, info: str) -> None:
        """Queue an observation. Never blocks and never fails."""
        self._pending.append(PendingEvent(action=str(action), info=info))

    def drain_and_clear(self) -> list[PendingEvent]:
        """Return everything staged so far and reset the queue."""
        drained, self._pending = self._pending, []
        return drained

    def discard(self) -> int:
        """Drop staged events without committing them.

        Returns:
            Number of events discarded
        """
        return len(self.drain_and_clear())

    def __len__(self) -> int:
        return len(self._pending)
