"""
Normalization adapter between host editor events and the tracker.

Host integrations call one method per editor event; each method formats
the action-specific info string and stages it on the sink. The two events
that double as flush triggers also fire the matching trigger.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from enum import IntEnum
from typing import Any, Protocol

from .types import Action, Trigger


class ActivitySink(Protocol):
    """Receiver of normalized observations and trigger signals."""

    def notify(self, action: str, info: str) -> None: ...

    async def trigger(self, trigger: Trigger) -> Any: ...


class SelectionKind(IntEnum):
    """What caused a selection change, numbered as editors report it."""

    KEYBOARD = 1
    MOUSE = 2
    COMMAND = 3


def short_path(path: str | os.PathLike[str], segments: int = 4) -> str:
    """Keep only the trailing path segments, enough to identify a file in a project."""
    return "/".join(os.fspath(path).split("/")[-segments:])


def _js_bool(value: bool) -> str:
    return "true" if value else "false"


class EventNormalizer:
    """Turns host editor events into (action, info) observations."""

    def __init__(self, sink: ActivitySink) -> None:
        self.sink = sink

    def _ignored(self, path: str | os.PathLike[str]) -> bool:
        return os.fspath(path).endswith(".git")

    def file_opened(self, path: str | os.PathLike[str]) -> None:
        if self._ignored(path):
            return
        self.sink.notify(Action.OPEN_FILE, f"filename: {short_path(path)}")

    def file_closed(self, path: str | os.PathLike[str]) -> None:
        if self._ignored(path):
            return
        self.sink.notify(Action.CLOSE_FILE, f"filename: {short_path(path)}")

    def selection_changed(
        self,
        kind: SelectionKind | int,
        start_line: int,
        end_line: int,
        line_text: str,
    ) -> None:
        """Record a selection change. Lines are zero-based as the editor reports them.

        Only command-driven selections (jumps, go-to, search) are recorded;
        plain cursor movement is too noisy.
        """
        if kind != SelectionKind.COMMAND:
            return
        self.sink.notify(
            Action.SELECTION_CHANGE,
            f"kind: command; selection: {start_line + 1} to {end_line + 1}; line: {line_text}",
        )

    def content_changed(self, line: int, text: str) -> None:
        self.sink.notify(Action.CONTENT_CHANGE, f'line: {line}; text: "{text}"')

    def visible_range_changed(self, start_line: int, end_line: int) -> None:
        self.sink.notify(Action.VISIBLE_RANGE_CHANGE, f"lines: {start_line} to {end_line}")

    async def active_editor_changed(self, path: str | os.PathLike[str] | None) -> Any:
        """Record the newly focused editor (if any) and flush."""
        if path is not None:
            self.sink.notify(Action.ACTIVE_EDITOR_CHANGE, f"filename: {short_path(path)}")
        return await self.sink.trigger(Trigger.ACTIVE_EDITOR_CHANGED)

    def breakpoints_changed(
        self,
        added: Sequence[str] = (),
        removed: Sequence[str] = (),
        changed: Sequence[str] = (),
    ) -> None:
        self.sink.notify(
            Action.BREAKPOINT_CHANGE,
            f"added: {','.join(added)}; removed: {','.join(removed)}; changed: {','.join(changed)}",
        )

    def debug_session_changed(self, name: str | None) -> None:
        self.sink.notify(Action.DEBUG_SESSION_CHANGE, name if name is not None else "undefined")

    def terminal_state_changed(self, name: str, is_active: bool) -> None:
        self.sink.notify(
            Action.TERMINAL_STATE_CHANGE, f"name: {name}; isActive: {_js_bool(is_active)}"
        )

    async def terminal_command_started(self, command_line: str) -> Any:
        """Record a shell command and flush."""
        self.sink.notify(Action.TERMINAL_COMMAND_STARTED, f"command: {command_line}")
        return await self.sink.trigger(Trigger.TERMINAL_COMMAND_STARTED)

    def definition_requested(self, symbol: str, line: int, filename: str) -> None:
        self.sink.notify(Action.GO_TO_DEFINITION, f"info: {symbol}:{line + 1}; filename: {filename}")

    def references_requested(self, symbol: str, line: int, filename: str) -> None:
        self.sink.notify(Action.GO_TO_REFERENCES, f"info: {symbol}:{line + 1}; filename: {filename}")
