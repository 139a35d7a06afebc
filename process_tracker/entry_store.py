"""
Entry store: the durable, append-only record of committed entries.

The store keeps an in-memory cache of the sequence and mirrors every
mutation to one key of a StateBackend. It is the only owner of that key.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from .config import DEFAULT_STATE_KEY
from .exceptions import PersistenceReadError, PersistenceWriteError, TrackerError
from .storage.base import StateBackend
from .types import Entry, PendingEvent

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class EntryStore:
    """Append-only entry sequence backed by a key-value store.

    Appends and clears are all-or-nothing: if the durable write fails the
    in-memory cache is restored and PersistenceWriteError is raised.

    Example:
        >>> store = EntryStore(MemoryStateBackend())
        >>> await store.init()
        >>> await store.append([PendingEvent("openFile", "filename: a.py")])
    """

    def __init__(
        self,
        backend: StateBackend,
        key: str = DEFAULT_STATE_KEY,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the store.

        Args:
            backend: Durable key-value backend
            key: Key holding the serialized entry sequence
            clock: Source of commit timestamps (UTC)
        """
        self.backend = backend
        self.key = key
        self._clock = clock
        self._entries: list[Entry] | None = None
        self._lock = asyncio.Lock()

    async def _load(self) -> list[Entry] | None:
        """Read the persisted sequence; None means the key is absent."""
        try:
            raw = await self.backend.get(self.key)
        except (TrackerError, OSError) as e:
            raise PersistenceReadError(self.key, e) from e
        if raw is None:
            return None
        try:
            return [Entry.from_dict(item) for item in raw]
        except (TypeError, KeyError, ValueError) as e:
            raise PersistenceReadError(self.key, e) from e

    async def _load_or_empty(self) -> list[Entry] | None:
        try:
            return await self._load()
        except PersistenceReadError as e:
            logger.warning(f"Treating unreadable entry store as empty: {e}")
            return []

    async def init(self) -> None:
        """Create an empty persisted sequence if absent, otherwise load it.

        Safe to call repeatedly; existing data is never reset or duplicated.
        """
        async with self._lock:
            entries = await self._load_or_empty()
            if entries is None:
                entries = []
                try:
                    await self.backend.update(self.key, [])
                except (TrackerError, OSError) as e:
                    # Memory still works; the next append retries persistence
                    logger.error(f"Failed to create empty entry store: {e}")
            self._entries = entries
            logger.debug(f"Entry store ready with {len(entries)} entries")

    async def _ensure_loaded(self) -> list[Entry]:
        if self._entries is None:
            self._entries = await self._load_or_empty() or []
        return self._entries

    def _next_time(self, entries: Sequence[Entry]) -> datetime:
        now = self._clock()
        # Persisted times carry millisecond precision
        now = now.replace(microsecond=now.microsecond - now.microsecond % 1000)
        # Keep the sequence non-decreasing if the wall clock steps back
        if entries and now < entries[-1].time:
            return entries[-1].time
        return now

    async def append(self, events: Sequence[PendingEvent]) -> list[Entry]:
        """Commit pending events in order, one timestamp per event.

        Args:
            events: Pending events to commit

        Returns:
            The committed entries

        Raises:
            PersistenceWriteError: If the durable write fails; the cache is
                left exactly as it was before the call
        """
        if not events:
            return []

        async with self._lock:
            current = await self._ensure_loaded()
            updated = list(current)
            committed: list[Entry] = []
            for event in events:
                entry = Entry(action=event.action, info=event.info, time=self._next_time(updated))
                updated.append(entry)
                committed.append(entry)

            try:
                await self.backend.update(self.key, [entry.to_dict() for entry in updated])
            except (TrackerError, OSError) as e:
                logger.error(f"Failed to append {len(events)} entries: {e}")
                raise PersistenceWriteError("append", e) from e

            self._entries = updated
            logger.debug(f"Appended {len(committed)} entries ({len(updated)} total)")
            return committed

    async def get_all(self) -> list[Entry]:
        """Return the full committed sequence in insertion order.

        Loads from durable storage if the cache has not been populated yet.
        """
        async with self._lock:
            return list(await self._ensure_loaded())

    async def clear(self) -> None:
        """Empty both the cache and durable storage.

        Raises:
            PersistenceWriteError: If the durable clear fails; the cache is
                left unmodified
        """
        async with self._lock:
            try:
                await self.backend.update(self.key, [])
            except (TrackerError, OSError) as e:
                logger.error(f"Failed to clear entry store: {e}")
                raise PersistenceWriteError("clear", e) from e
            self._entries = []
            logger.info("Entry store cleared")
