"""
Durable state backends.

Example:
    >>> from process_tracker.storage import JsonFileStateBackend
    >>> backend = JsonFileStateBackend(Path("~/.process_tracker/processtracker/state.json"))
    >>> await backend.update("processEntries", [])
"""

from .base import StateBackend
from .file_ops import ensure_directory, read_json, write_json_atomic, write_text_atomic
from .local import JsonFileStateBackend
from .memory import MemoryStateBackend

__all__ = [
    "StateBackend",
    "JsonFileStateBackend",
    "MemoryStateBackend",
    # Low-level file operations
    "ensure_directory",
    "read_json",
    "write_json_atomic",
    "write_text_atomic",
]
