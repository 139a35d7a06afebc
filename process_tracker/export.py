"""
Export pipeline: writes all committed entries to a text artifact.

The artifact is the compact JSON array of entries with every ASCII letter
rotated forward by a fixed shift (5 by default). This is a reversible
substitution that only keeps casual readers from skimming the file. It is
obfuscation, NOT encryption, and provides no confidentiality.
"""

from __future__ import annotations

import json
import logging
import string
from collections.abc import Iterable, Sequence
from functools import lru_cache
from pathlib import Path

import aiofiles.os

from .config import DEFAULT_SHIFT
from .entry_store import EntryStore
from .exceptions import NoSinkAvailableError, SinkWriteError, StorageIOError
from .storage.file_ops import write_text_atomic
from .types import Entry

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _rotation_table(shift: int) -> dict[int, int]:
    shift %= 26
    lower, upper = string.ascii_lowercase, string.ascii_uppercase
    return str.maketrans(
        lower + upper,
        lower[shift:] + lower[:shift] + upper[shift:] + upper[:shift],
    )


def obfuscate(text: str, shift: int = DEFAULT_SHIFT) -> str:
    """Rotate ASCII letters forward by shift, wrapping within their case.

    Digits, punctuation and non-ASCII characters pass through unchanged.
    """
    return text.translate(_rotation_table(shift))


def deobfuscate(text: str, shift: int = DEFAULT_SHIFT) -> str:
    """Invert obfuscate() for the same shift."""
    return text.translate(_rotation_table(-shift))


def serialize_entries(entries: Iterable[Entry]) -> str:
    """Serialize entries as a compact, order-preserving JSON array."""
    return json.dumps(
        [entry.to_dict() for entry in entries],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def load_export(text: str, shift: int = DEFAULT_SHIFT) -> list[Entry]:
    """Read entries back from the contents of an export artifact."""
    return [Entry.from_dict(item) for item in json.loads(deobfuscate(text, shift))]


def resolve_sink(target_dirs: Sequence[Path], filename: str) -> Path | None:
    """Default export location: ``filename`` inside the first target directory."""
    if not target_dirs:
        return None
    return Path(target_dirs[0]) / filename


class ExportPipeline:
    """Reads the entry store and writes the transformed blob to a sink.

    Export is read-only with respect to the store.
    """

    def __init__(self, store: EntryStore, shift: int = DEFAULT_SHIFT) -> None:
        self.store = store
        self.shift = shift

    async def render(self) -> str:
        """Return the transformed serialization of all committed entries."""
        entries = await self.store.get_all()
        return obfuscate(serialize_entries(entries), self.shift)

    async def export(self, sink: Path | None) -> Path:
        """Write the transformed entries to sink, overwriting it.

        Args:
            sink: Target file path

        Returns:
            The path written

        Raises:
            NoSinkAvailableError: If sink is missing or its directory does not exist
            SinkWriteError: If the file cannot be written
        """
        if sink is None:
            raise NoSinkAvailableError("no target directory")

        sink = Path(sink)
        if not await aiofiles.os.path.isdir(sink.parent):
            raise NoSinkAvailableError(f"directory does not exist: {sink.parent}")

        blob = await self.render()
        try:
            await write_text_atomic(sink, blob)
        except StorageIOError as e:
            logger.error(f"Failed to write export to {sink}: {e}")
            raise SinkWriteError(str(sink), e.cause or e) from e

        logger.info(f"Exported {len(blob)} characters to {sink}")
        return sink
