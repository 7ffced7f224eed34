"""Unit tests for the undo/redo history."""

import pytest

from .lib import HistoryManager


def _save_moves(document, history, count):
    for step in range(count):
        document.require("a").position.x = step + 1
        history.save(document.snapshot(), f"op{step + 1}")


class TestUndoRedo:
    """Tests for cursor movement."""

    @pytest.mark.unit
    def test_save_undo_redo_round_trip(self, row_document):
        """Undo restores the previous state; redo the saved one."""
        history = HistoryManager(max_entries=10)
        history.reset(row_document.snapshot())
        before = row_document.snapshot()

        row_document.require("a").position.x = 42
        history.save(row_document.snapshot(), "move")
        after = row_document.snapshot()

        row_document.restore(history.undo())
        assert row_document.components == dict(before.components)

        row_document.restore(history.redo())
        assert row_document.components == dict(after.components)

    @pytest.mark.unit
    def test_exhausted(self, row_document):
        """Undo/redo past the ends return None."""
        history = HistoryManager(max_entries=10)
        history.reset(row_document.snapshot())
        assert history.undo() is None
        assert history.redo() is None
        assert not history.can_undo
        assert not history.can_redo

    @pytest.mark.unit
    def test_save_discards_redo_branch(self, row_document):
        """A new save after undo drops the undone entries."""
        history = HistoryManager(max_entries=10)
        history.reset(row_document.snapshot())
        _save_moves(row_document, history, 3)
        history.undo()
        history.undo()
        history.save(row_document.snapshot(), "branch")
        assert history.labels == ["initial", "op1", "branch"]
        assert not history.can_redo

    @pytest.mark.unit
    def test_snapshots_are_not_shared(self, row_document):
        """Mutating after save does not alter stored entries."""
        history = HistoryManager(max_entries=10)
        history.reset(row_document.snapshot())
        history.save(row_document.snapshot(), "noop")
        row_document.require("a").position.x = 777
        assert history.current.snapshot.components["a"].position.x == 0

    @pytest.mark.unit
    def test_entry_carries_selection(self, row_document):
        """Entries remember the selection."""
        history = HistoryManager(max_entries=10)
        entry = history.save(row_document.snapshot(), "select", selection=("a", "b"))
        assert entry.selection == ("a", "b")


class TestCap:
    """Tests for the retention cap."""

    @pytest.mark.unit
    def test_oldest_evicted(self, row_document):
        """The 51st save evicts the oldest entry."""
        history = HistoryManager(max_entries=50)
        history.reset(row_document.snapshot())
        _save_moves(row_document, history, 51)
        assert len(history) == 51
        assert history.labels[0] == "op1"
        assert history.labels[-1] == "op51"
        assert history.undo_depth == 50
        assert history.can_undo

    @pytest.mark.unit
    def test_full_cap_keeps_initial_state(self, row_document):
        """Fifty saves can all be undone back to the initial state."""
        history = HistoryManager(max_entries=50)
        history.reset(row_document.snapshot())
        _save_moves(row_document, history, 50)
        assert history.undo_depth == 50
        assert history.labels[0] == "initial"

    @pytest.mark.unit
    def test_undo_to_oldest_retained(self, row_document):
        """Undo stops at the oldest retained entry."""
        history = HistoryManager(max_entries=3)
        history.reset(row_document.snapshot())
        _save_moves(row_document, history, 5)
        steps = 0
        while history.undo() is not None:
            steps += 1
        assert steps == 3
        assert history.current.label == "op2"

    @pytest.mark.unit
    def test_default_limit(self):
        """The cap defaults to PAGECRAFT_HISTORY_LIMIT."""
        assert HistoryManager().max_entries == 50

    @pytest.mark.unit
    def test_limit_from_environment(self, monkeypatch):
        """The environment overrides the default cap."""
        monkeypatch.setenv("PAGECRAFT_HISTORY_LIMIT", "7")
        assert HistoryManager().max_entries == 7

    @pytest.mark.unit
    def test_clear(self, row_document):
        """clear() forgets everything."""
        history = HistoryManager()
        history.reset(row_document.snapshot())
        history.clear()
        assert history.current is None
        assert history.undo_depth == 0
