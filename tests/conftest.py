"""
Shared test configuration and fixtures.

Provides in-memory backends that can be told to fail or to block, a
notifier that records messages, and a controllable clock.
"""

import asyncio
import tempfile
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from process_tracker import EntryStore, MemoryStateBackend, ProcessTracker, SessionBuffer
from process_tracker.exceptions import StorageIOError

T0 = datetime(2024, 5, 1, 10, 0, 0, tzinfo=UTC)


class FlakyBackend(MemoryStateBackend):
    """Memory backend whose reads or selected updates fail on demand."""

    def __init__(self, initial: dict[str, Any] | None = None):
        super().__init__(initial)
        self.updates = 0
        self.fail_reads = False
        self._failing: set[int] = set()

    def fail_update(self, offset: int = 1) -> None:
        """Make the update ``offset`` calls from now fail."""
        self._failing.add(self.updates + offset)

    async def get(self, key: str) -> Any | None:
        if self.fail_reads:
            raise StorageIOError("read_json", "memory", OSError("disk unavailable"))
        return await super().get(key)

    async def update(self, key: str, value: Any) -> None:
        self.updates += 1
        if self.updates in self._failing:
            raise StorageIOError("write_json", "memory", OSError("disk full"))
        await super().update(key, value)


class GatedBackend(MemoryStateBackend):
    """Memory backend whose updates block until the gate opens."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()
        self.gate.set()

    async def update(self, key: str, value: Any) -> None:
        await self.gate.wait()
        await super().update(key, value)


class RecordingNotifier:
    """Notifier that keeps every message it is asked to show."""

    def __init__(self):
        self.infos: list[str] = []
        self.errors: list[str] = []

    def show_info(self, message: str) -> None:
        self.infos.append(message)

    def show_error(self, message: str) -> None:
        self.errors.append(message)


class TickingClock:
    """Clock that advances by a fixed step on every call."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(milliseconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def backend() -> FlakyBackend:
    return FlakyBackend()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
async def store(backend: FlakyBackend, clock: TickingClock) -> EntryStore:
    """An initialized, empty entry store."""
    entry_store = EntryStore(backend, clock=clock)
    await entry_store.init()
    return entry_store


@pytest.fixture
def buffer() -> SessionBuffer:
    return SessionBuffer()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def tracker(
    store: EntryStore, buffer: SessionBuffer, notifier: RecordingNotifier, temp_dir: Path
) -> ProcessTracker:
    """A started tracker whose workspace is a temporary directory."""
    instance = ProcessTracker(store, buffer, notifier, workspace_dirs=[temp_dir])
    await instance.start()
    return instance
