"""
Core data types for activity tracking.

A PendingEvent is an observation staged in memory; an Entry is the committed,
timestamped record that lives in the entry store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, StrEnum
from typing import Any


class Action(StrEnum):
    """Category tags for tracked editor actions."""

    OPEN_FILE = "openFile"
    CLOSE_FILE = "closeFile"
    SELECTION_CHANGE = "selectionChange"
    CONTENT_CHANGE = "contentChange"
    VISIBLE_RANGE_CHANGE = "visibleRangeChange"
    ACTIVE_EDITOR_CHANGE = "activeEditorChange"
    BREAKPOINT_CHANGE = "breakpointChange"
    DEBUG_SESSION_CHANGE = "activeDebugSessionChange"
    TERMINAL_STATE_CHANGE = "terminalStateChange"
    TERMINAL_COMMAND_STARTED = "terminalCommandStarted"
    GO_TO_DEFINITION = "goToDefinition"
    GO_TO_REFERENCES = "goToReferences"
    CURRENT_FILE = "Current File"


class Trigger(Enum):
    """Named host signals that cause a flush or a reset."""

    ACTIVE_EDITOR_CHANGED = "active_editor_changed"
    TERMINAL_COMMAND_STARTED = "terminal_command_started"
    EXPORT_REQUESTED = "export_requested"
    CLEAR_REQUESTED = "clear_requested"


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds and a Z suffix."""
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse a timestamp written by format_timestamp (naive values are UTC)."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class PendingEvent:
    """A staged observation awaiting flush. Has no timestamp yet."""

    action: str
    info: str


@dataclass(frozen=True)
class Entry:
    """A committed, immutable telemetry record."""

    action: str
    info: str
    time: datetime

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the persisted {action, info, time} layout."""
        return {
            "action": self.action,
            "info": self.info,
            "time": format_timestamp(self.time),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry:
        return cls(
            action=data["action"],
            info=data["info"],
            time=parse_timestamp(data["time"]),
        )


@dataclass
class FailedEvent:
    """A pending event whose commit failed during a flush."""

    event: PendingEvent
    reason: str


@dataclass
class FlushResult:
    """Outcome of a single flush cycle.

    Failed events are not re-staged automatically; callers decide
    whether to stage them again.
    """

    committed: list[Entry] = field(default_factory=list)
    failed: list[FailedEvent] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.committed)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def drained(self) -> int:
        return len(self.committed) + len(self.failed)
