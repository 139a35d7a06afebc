"""
Abstract key-value state backend.

Durable state is a small set of keys scoped to one extension identity.
The entry store is the only component that talks to a backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StateBackend(ABC):
    """Key-value persistence that survives process restarts."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None if absent.

        Raises:
            StorageIOError: If the backing store cannot be read
        """

    @abstractmethod
    async def update(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            StorageIOError: If the value could not be persisted
        """
