"""
Async file operations for durable state and export artifacts.

Provides:
- Atomic writes using temp file + fsync + rename
- JSON reads that treat a missing or empty file as absent
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from ..exceptions import StorageIOError


async def ensure_directory(path: Path) -> None:
    """Ensure directory exists, creating if necessary.

    Args:
        path: Directory path to ensure exists
    """
    try:
        await aiofiles.os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise StorageIOError("create_directory", str(path), e) from e


async def read_json(path: Path) -> Any | None:
    """Read a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON data or None if file doesn't exist or is empty
    """
    try:
        if not await aiofiles.os.path.exists(path):
            return None
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
            return json.loads(content) if content.strip() else None
    except json.JSONDecodeError as e:
        raise StorageIOError("parse_json", str(path), e) from e
    except OSError as e:
        raise StorageIOError("read_json", str(path), e) from e


async def write_text_atomic(path: Path, text: str, suffix: str = ".tmp") -> None:
    """Write a text file atomically using temp file + rename.

    The target is either fully replaced or left as it was.

    Args:
        path: Target path
        text: Content to write
        suffix: Suffix for the temporary file
    """
    temp_path: str | None = None
    try:
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=suffix)
        os.close(fd)
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
            await f.write(text)
            await f.flush()
            os.fsync(f.fileno())

        await aiofiles.os.replace(temp_path, path)
    except Exception as e:
        if temp_path is not None:
            try:
                await aiofiles.os.remove(temp_path)
            except OSError:
                pass
        raise StorageIOError("write_text", str(path), e) from e


async def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON file atomically, creating the parent directory.

    Args:
        path: Target path for JSON file
        data: Data to serialize as JSON
    """
    await ensure_directory(path.parent)
    try:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StorageIOError("serialize_json", str(path), e) from e
    await write_text_atomic(path, payload, suffix=".json")
