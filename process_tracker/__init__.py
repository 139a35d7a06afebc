"""
Process Tracker

Activity telemetry collector for code editors.

Provides:
- Session buffering of high-frequency editor observations
- Trigger-driven flushes into a durable, append-only entry store
- Export of all entries to a lightly obfuscated text artifact
- Reset of staged and committed data

Usage:

    >>> from process_tracker import EventNormalizer, ProcessTracker, TrackerConfig
    >>> tracker = ProcessTracker.from_config(TrackerConfig(), workspace_dirs=[project_dir])
    >>> await tracker.start()
    >>> events = EventNormalizer(tracker)
    >>> events.file_opened("/home/me/project/src/app.py")
    >>> await events.terminal_command_started("pytest -q")   # flushes
    >>> await tracker.export_data()                         # writes project/process.txt

The export transform rotates letters by a fixed shift. It is obfuscation,
not encryption.
"""

from .config import TrackerConfig
from .entry_store import EntryStore
from .exceptions import (
    NoSinkAvailableError,
    PersistenceReadError,
    PersistenceWriteError,
    SinkWriteError,
    StorageIOError,
    TrackerError,
)
from .export import ExportPipeline, deobfuscate, load_export, obfuscate, serialize_entries
from .flush import FlushCoordinator
from .logging_utils import configure_logging, configure_structured_logging
from .normalize import EventNormalizer, SelectionKind
from .notifications import LoggingNotifier, Notifier
from .reset import ResetOperation
from .session_buffer import SessionBuffer
from .storage import JsonFileStateBackend, MemoryStateBackend, StateBackend
from .tracker import ProcessTracker, should_activate
from .types import Action, Entry, FailedEvent, FlushResult, PendingEvent, Trigger

__all__ = [
    # Context
    "ProcessTracker",
    "TrackerConfig",
    "should_activate",
    # Components
    "SessionBuffer",
    "EntryStore",
    "FlushCoordinator",
    "ExportPipeline",
    "ResetOperation",
    "EventNormalizer",
    "SelectionKind",
    # Storage
    "StateBackend",
    "JsonFileStateBackend",
    "MemoryStateBackend",
    # Types
    "Action",
    "Entry",
    "PendingEvent",
    "FailedEvent",
    "FlushResult",
    "Trigger",
    # Export transform
    "obfuscate",
    "deobfuscate",
    "serialize_entries",
    "load_export",
    # Notifications
    "Notifier",
    "LoggingNotifier",
    # Logging
    "configure_structured_logging",
    "configure_logging",
    # Exceptions
    "TrackerError",
    "StorageIOError",
    "PersistenceWriteError",
    "PersistenceReadError",
    "NoSinkAvailableError",
    "SinkWriteError",
]

__version__ = "0.1.0"
