"""Tests for the export pipeline and its character transform."""

import json
import string
from datetime import UTC, datetime
from pathlib import Path

import pytest

from process_tracker import EntryStore, ExportPipeline, MemoryStateBackend
from process_tracker.exceptions import NoSinkAvailableError, SinkWriteError
from process_tracker.export import (
    deobfuscate,
    load_export,
    obfuscate,
    resolve_sink,
    serialize_entries,
)
from process_tracker.types import Entry, PendingEvent

T = "2024-05-01T10:00:00.000Z"


class TestObfuscate:
    """Tests for the fixed-shift letter substitution."""

    def test_lowercase_wraps(self):
        """x shifted by 5 wraps around to c."""
        assert obfuscate("x") == "c"
        assert obfuscate("abcvwxyz") == "fghabcde"

    def test_uppercase_wraps(self):
        assert obfuscate("XYZ") == "CDE"
        assert obfuscate("Hello") == "Mjqqt"

    def test_non_letters_unchanged(self):
        """Digits, punctuation, whitespace and non-ASCII letters pass through."""
        text = '0123456789 {}[]":,.-_/\\\n\té'
        assert obfuscate(text) == text

    def test_round_trip(self):
        """Shifting back by the same amount restores the text."""
        text = '[{"action":"openFile","info":"filename: src/App.py","time":"' + T + '"}]'
        assert deobfuscate(obfuscate(text)) == text

    def test_inverse_is_shift_21(self):
        """The inverse of a 5-shift is a forward 21-shift."""
        text = string.ascii_letters
        assert obfuscate(obfuscate(text), 21) == text

    def test_twenty_six_applications_is_identity(self):
        """Applying the 5-shift 26 times cycles back to the original."""
        text = "Process Tracker 2024"
        shifted = text
        for _ in range(26):
            shifted = obfuscate(shifted)
        assert shifted == text

    def test_custom_shift(self):
        assert obfuscate("abc", 1) == "bcd"
        assert deobfuscate("bcd", 1) == "abc"


class TestSerialize:
    """Tests for entry serialization."""

    def test_compact_json_array(self):
        entries = [Entry("x", "y", datetime(2024, 5, 1, 10, tzinfo=UTC))]
        assert serialize_entries(entries) == '[{"action":"x","info":"y","time":"' + T + '"}]'

    def test_empty(self):
        assert serialize_entries([]) == "[]"

    def test_non_ascii_kept_literal(self):
        entries = [Entry("contentChange", "text: \"é\"", datetime(2024, 5, 1, tzinfo=UTC))]
        assert "é" in serialize_entries(entries)


class TestResolveSink:
    """Tests for default export target resolution."""

    def test_first_directory(self, temp_dir: Path):
        assert resolve_sink([temp_dir, Path("/other")], "process.txt") == temp_dir / "process.txt"

    def test_no_directories(self):
        assert resolve_sink([], "process.txt") is None


class TestExportPipeline:
    """Tests for ExportPipeline.export."""

    @pytest.fixture
    async def seeded_store(self) -> EntryStore:
        backend = MemoryStateBackend(
            {"processEntries": [{"action": "x", "info": "y", "time": T}]}
        )
        entry_store = EntryStore(backend)
        await entry_store.init()
        return entry_store

    async def test_writes_transformed_blob(self, seeded_store: EntryStore, temp_dir: Path):
        """The sink holds exactly the 5-shifted JSON serialization."""
        sink = temp_dir / "process.txt"
        written = await ExportPipeline(seeded_store).export(sink)

        assert written == sink
        expected = obfuscate('[{"action":"x","info":"y","time":"' + T + '"}]')
        assert sink.read_text(encoding="utf-8") == expected
        assert '"fhynts":"c"' in expected
        assert "2024-05-01" in expected

    async def test_export_is_reversible(self, seeded_store: EntryStore, temp_dir: Path):
        sink = await ExportPipeline(seeded_store).export(temp_dir / "process.txt")
        entries = load_export(sink.read_text(encoding="utf-8"))
        assert entries == await seeded_store.get_all()
        assert json.loads(deobfuscate(sink.read_text(encoding="utf-8")))[0]["info"] == "y"

    async def test_overwrites_previous_export(self, seeded_store: EntryStore, temp_dir: Path):
        sink = temp_dir / "process.txt"
        sink.write_text("stale content that is much longer than the export")

        await ExportPipeline(seeded_store).export(sink)
        assert "stale" not in sink.read_text(encoding="utf-8")

    async def test_no_sink(self, seeded_store: EntryStore):
        with pytest.raises(NoSinkAvailableError):
            await ExportPipeline(seeded_store).export(None)

    async def test_missing_directory(self, seeded_store: EntryStore, temp_dir: Path):
        """A sink whose directory does not exist is not resolvable."""
        sink = temp_dir / "missing" / "process.txt"
        with pytest.raises(NoSinkAvailableError):
            await ExportPipeline(seeded_store).export(sink)
        assert not sink.parent.exists()

    async def test_write_failure(self, seeded_store: EntryStore, temp_dir: Path):
        """An I/O error writing the sink is raised as SinkWriteError."""
        sink = temp_dir / "process.txt"
        sink.mkdir()

        with pytest.raises(SinkWriteError) as exc_info:
            await ExportPipeline(seeded_store).export(sink)

        assert exc_info.value.path == str(sink)
        assert len(await seeded_store.get_all()) == 1
        assert list(temp_dir.glob(".tmp_*")) == []

    async def test_export_does_not_modify_store(self, temp_dir: Path):
        store = EntryStore(MemoryStateBackend())
        await store.init()
        await store.append([PendingEvent("openFile", "a.py")])
        before = await store.get_all()

        await ExportPipeline(store).export(temp_dir / "process.txt")
        assert await store.get_all() == before

    async def test_configured_shift(self, seeded_store: EntryStore, temp_dir: Path):
        sink = await ExportPipeline(seeded_store, shift=1).export(temp_dir / "process.txt")
        assert load_export(sink.read_text(encoding="utf-8"), shift=1)[0].action == "x"
