"""
Process tracker context.

Wires the session buffer, entry store, flush coordinator, export pipeline
and reset operation together once per host session, and exposes the
host-facing surface: ``notify`` for observations, ``trigger`` for named
signals, and the ``export_data`` / ``clear_data`` commands.

Usage:

    >>> config = TrackerConfig.from_environment()
    >>> if should_activate(workspace_dirs, config):
    ...     tracker = ProcessTracker.from_config(config, workspace_dirs=workspace_dirs)
    ...     await tracker.start(current_file="/work/project/main.py")
    ...     normalizer = EventNormalizer(tracker)
    ...     normalizer.file_opened("/work/project/util.py")
    ...     await normalizer.active_editor_changed("/work/project/util.py")
    ...     await tracker.export_data()
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .config import TrackerConfig
from .entry_store import EntryStore
from .exceptions import NoSinkAvailableError, PersistenceWriteError, SinkWriteError
from .export import ExportPipeline, resolve_sink
from .flush import FlushCoordinator
from .logging_utils import configure_logging
from .notifications import LoggingNotifier, Notifier
from .reset import ResetOperation
from .session_buffer import SessionBuffer
from .storage.local import JsonFileStateBackend
from .types import Action, FlushResult, PendingEvent, Trigger

logger = logging.getLogger(__name__)


def should_activate(workspace_dirs: Sequence[str | os.PathLike[str]], config: TrackerConfig) -> bool:
    """Decide whether tracking runs for the open workspace.

    No workspace means no tracking. If allowed markers are configured, some
    workspace path must contain one; any path containing a blocked marker
    disables tracking. Matching is case-insensitive.
    """
    if not workspace_dirs:
        logger.info("No workspace folder found, tracking disabled")
        return False

    paths = [os.fspath(d).lower() for d in workspace_dirs]
    allowed = [m.lower() for m in config.allowed_workspace_markers]
    blocked = [m.lower() for m in config.blocked_workspace_markers]

    if allowed and not any(marker in path for path in paths for marker in allowed):
        logger.info("Workspace does not match any allowed marker, tracking disabled")
        return False
    if any(marker in path for path in paths for marker in blocked):
        logger.info("Workspace matches a blocked marker, tracking disabled")
        return False
    return True


class ProcessTracker:
    """Explicit per-session context for activity tracking."""

    def __init__(
        self,
        store: EntryStore,
        buffer: SessionBuffer | None = None,
        notifier: Notifier | None = None,
        config: TrackerConfig | None = None,
        workspace_dirs: Sequence[Path] = (),
    ) -> None:
        """Initialize the tracker.

        Args:
            store: Entry store (the only owner of durable state)
            buffer: Session buffer; a fresh one if omitted
            notifier: Host notification mechanism; logs if omitted
            config: Tracker configuration; defaults if omitted
            workspace_dirs: Workspace folders, the first is the default export target
        """
        self.config = config or TrackerConfig()
        self.store = store
        self.buffer = buffer or SessionBuffer()
        self.notifier = notifier or LoggingNotifier()
        self.workspace_dirs = [Path(d) for d in workspace_dirs]

        self.coordinator = FlushCoordinator(self.buffer, self.store, self.notifier)
        self.exporter = ExportPipeline(self.store, shift=self.config.shift)
        self.resetter = ResetOperation(self.buffer, self.store, lock=self.coordinator.lock)

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        notifier: Notifier | None = None,
        workspace_dirs: Sequence[Path] = (),
    ) -> ProcessTracker:
        """Build a tracker persisting to the config's JSON state file."""
        configure_logging(config.log_level, config.log_format)
        backend = JsonFileStateBackend(config.state_path)
        store = EntryStore(backend, key=config.state_key)
        return cls(
            store,
            notifier=notifier,
            config=config,
            workspace_dirs=workspace_dirs,
        )

    async def start(self, current_file: str | os.PathLike[str] | None = None) -> None:
        """Load the entry store and record the file open at startup.

        The startup entry is committed directly rather than staged.
        """
        await self.store.init()
        if current_file is None:
            return
        event = PendingEvent(Action.CURRENT_FILE, os.fspath(current_file))
        try:
            await self.store.append([event])
        except PersistenceWriteError as e:
            logger.error(f"Failed to record current file: {e}")
            self.notifier.show_error("Failed to save tracking entry")

    def notify(self, action: str, info: str) -> None:
        """Stage a normalized observation."""
        self.buffer.stage(action, info)

    async def trigger(self, trigger: Trigger) -> Any:
        """Dispatch a named host signal."""
        logger.debug(f"Trigger received: {trigger.value}")
        if trigger in (Trigger.ACTIVE_EDITOR_CHANGED, Trigger.TERMINAL_COMMAND_STARTED):
            return await self.flush()
        if trigger is Trigger.EXPORT_REQUESTED:
            return await self.export_data()
        if trigger is Trigger.CLEAR_REQUESTED:
            return await self.clear_data()
        raise ValueError(f"Unknown trigger: {trigger}")

    async def flush(self) -> FlushResult:
        return await self.coordinator.flush()

    def default_sink(self) -> Path | None:
        return resolve_sink(self.workspace_dirs, self.config.export_filename)

    async def export_data(self, sink: Path | None = None) -> Path | None:
        """Flush, then export every committed entry.

        Args:
            sink: Target file; defaults to the export file in the first workspace

        Returns:
            The path written, or None if the export failed
        """
        await self.flush()
        target = sink if sink is not None else self.default_sink()
        try:
            written = await self.exporter.export(target)
        except NoSinkAvailableError as e:
            logger.error(str(e))
            self.notifier.show_error(f"Cannot export tracking data: {e.reason}")
            return None
        except SinkWriteError as e:
            logger.error(str(e))
            self.notifier.show_error(f"Failed to export tracking data: {e.message}")
            return None
        self.notifier.show_info(f"Tracking data exported to {written}")
        return written

    async def clear_data(self) -> bool:
        """Discard staged events and erase all committed entries."""
        if await self.resetter.reset():
            self.notifier.show_info("All tracking data has been cleared successfully.")
            return True
        self.notifier.show_error("Failed to clear tracking data")
        return False
