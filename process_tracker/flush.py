"""
Flush coordinator: drains the session buffer into the entry store.

Flushes run on designated triggers, not on every staged event. Only one
drain-then-append cycle is in flight at a time; a flush requested while
another is suspended mid-append waits for it and then drains whatever
was staged in the meantime.
"""

from __future__ import annotations

import asyncio
import logging

from .entry_store import EntryStore
from .exceptions import PersistenceWriteError
from .notifications import LoggingNotifier, Notifier
from .session_buffer import SessionBuffer
from .types import FailedEvent, FlushResult

logger = logging.getLogger(__name__)


class FlushCoordinator:
    """Commits buffered events one by one, tolerating partial failure.

    Each pending event gets its own commit (and timestamp). A failed commit
    is reported and abandoned; the rest of the batch is still attempted.
    """

    def __init__(
        self,
        buffer: SessionBuffer,
        store: EntryStore,
        notifier: Notifier | None = None,
    ) -> None:
        self.buffer = buffer
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        """Lock serializing drain-then-append cycles (shared with reset)."""
        return self._lock

    async def flush(self) -> FlushResult:
        """Drain the buffer and commit its events in staging order.

        Returns:
            FlushResult with committed entries and failed events
        """
        async with self._lock:
            pending = self.buffer.drain_and_clear()
            result = FlushResult()
            if not pending:
                return result

            for event in pending:
                try:
                    committed = await self.store.append([event])
                except PersistenceWriteError as e:
                    logger.error(f"Dropping {event.action!r} event after failed commit: {e}")
                    result.failed.append(FailedEvent(event=event, reason=str(e.cause or e)))
                    continue
                result.committed.extend(committed)

            if result.failed:
                self.notifier.show_error(
                    f"Failed to save {len(result.failed)} of {result.drained} tracked events"
                )
            logger.debug(
                f"Flushed {result.drained} events: "
                f"{result.succeeded} committed, {len(result.failed)} failed"
            )
            return result
