"""Tests for the session buffer."""

from process_tracker import SessionBuffer
from process_tracker.types import Action, PendingEvent


class TestSessionBuffer:
    """Tests for staging and draining."""

    def test_stage_preserves_call_order(self, buffer: SessionBuffer):
        """Staged events drain in the order they were staged."""
        buffer.stage("openFile", "a.py")
        buffer.stage("selectionChange", "line 3")
        buffer.stage("openFile", "a.py")

        assert buffer.drain_and_clear() == [
            PendingEvent("openFile", "a.py"),
            PendingEvent("selectionChange", "line 3"),
            PendingEvent("openFile", "a.py"),
        ]

    def test_drain_resets_queue(self, buffer: SessionBuffer):
        """A drain empties the queue."""
        buffer.stage("x", "y")
        buffer.drain_and_clear()
        assert len(buffer) == 0
        assert buffer.drain_and_clear() == []

    def test_drain_empty(self, buffer: SessionBuffer):
        """Draining an empty buffer returns an empty list."""
        assert buffer.drain_and_clear() == []

    def test_events_after_drain_go_to_next_drain(self, buffer: SessionBuffer):
        """Events staged after a drain are only in the following drain."""
        buffer.stage("a", "1")
        first = buffer.drain_and_clear()
        buffer.stage("b", "2")
        second = buffer.drain_and_clear()

        assert [e.action for e in first] == ["a"]
        assert [e.action for e in second] == ["b"]

    def test_drained_list_is_detached(self, buffer: SessionBuffer):
        """Staging after a drain does not mutate the drained list."""
        buffer.stage("a", "1")
        drained = buffer.drain_and_clear()
        buffer.stage("b", "2")
        assert len(drained) == 1

    def test_action_enum_is_stored_as_tag(self, buffer: SessionBuffer):
        """Action members are stored as their string tags."""
        buffer.stage(Action.OPEN_FILE, "a.py")
        (event,) = buffer.drain_and_clear()
        assert event.action == "openFile"
        assert type(event.action) is str

    def test_discard_counts(self, buffer: SessionBuffer):
        """Discard drops staged events and reports how many."""
        buffer.stage("a", "1")
        buffer.stage("b", "2")
        assert buffer.discard() == 2
        assert len(buffer) == 0
