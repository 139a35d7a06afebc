"""In-memory state backend for embedding hosts and tests."""

from __future__ import annotations

import copy
from typing import Any

from .base import StateBackend


class MemoryStateBackend(StateBackend):
    """Dict-backed state. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def update(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
