"""
JSON file state backend.

All keys live in one JSON object on disk:

    {state_dir}/
      {extension_id}/
        state.json
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from ..exceptions import StorageIOError
from .base import StateBackend
from .file_ops import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class JsonFileStateBackend(StateBackend):
    """State backend persisting every key in a single JSON file.

    Each update rewrites the file atomically, so a crash mid-write leaves
    the previous state intact.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the backend.

        Args:
            path: Location of the state file
        """
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def _read_state(self) -> dict[str, Any]:
        data = await read_json(self.path)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageIOError(
                "parse_json", str(self.path), TypeError("state file must hold a JSON object")
            )
        return data

    async def get(self, key: str) -> Any | None:
        state = await self._read_state()
        return state.get(key)

    async def update(self, key: str, value: Any) -> None:
        async with self._lock:
            state = await self._read_state()
            state[key] = value
            await write_json_atomic(self.path, state)
        logger.debug(f"Persisted key {key!r} to {self.path}")
