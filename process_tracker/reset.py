"""
Reset operation: wipes the session buffer and the entry store.

The durable store is cleared first and the buffer only afterwards, so a
failed clear leaves both the committed history and any staged events in
place instead of silently dropping the staged ones.
"""

from __future__ import annotations

import asyncio
import logging

from .entry_store import EntryStore
from .exceptions import PersistenceWriteError
from .session_buffer import SessionBuffer

logger = logging.getLogger(__name__)


class ResetOperation:
    """Clears staged and committed data, bypassing flush."""

    def __init__(
        self,
        buffer: SessionBuffer,
        store: EntryStore,
        lock: asyncio.Lock | None = None,
    ) -> None:
        """Initialize the reset operation.

        Args:
            buffer: Session buffer to discard
            store: Entry store to clear
            lock: Flush lock, so a reset never lands between a drain and its appends
        """
        self.buffer = buffer
        self.store = store
        self._lock = lock or asyncio.Lock()

    async def reset(self) -> bool:
        """Clear everything.

        Returns:
            True if the durable clear succeeded, False otherwise
        """
        async with self._lock:
            try:
                await self.store.clear()
            except PersistenceWriteError as e:
                logger.error(f"Reset failed, keeping {len(self.buffer)} staged events: {e}")
                return False
            discarded = self.buffer.discard()
            logger.info(f"Reset complete, discarded {discarded} staged events")
            return True
