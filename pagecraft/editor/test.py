"""Unit tests for the editor facade."""

import pytest

from pagecraft.collab import RemoteMutation
from pagecraft.model import Breakpoint, Document
from pagecraft.transform import DragState, ErrorKind

from .lib import Editor


@pytest.fixture
def row_editor(row_document):
    """Editor over the row document with snapping off."""
    editor = Editor(row_document)
    editor.toggle_snap(False)
    return editor


@pytest.fixture
def nested_editor(nested_document):
    """Editor over the nested document with snapping off."""
    editor = Editor(nested_document)
    editor.toggle_snap(False)
    return editor


class RecordingPublisher:
    """Collects published mutations."""

    def __init__(self):
        self.sent = []

    def publish(self, mutation):
        self.sent.append(mutation)


class TestHistoryRecording:
    """Tests for one-entry-per-operation recording."""

    @pytest.mark.unit
    def test_initial_entry(self, row_editor):
        assert row_editor.history.labels == ["initial"]
        assert not row_editor.can_undo

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "operation, label",
        [
            (lambda e: e.move(["a"], 5, 5), "move"),
            (lambda e: e.move_to("a", 5, 5), "move"),
            (lambda e: e.resize("a", 80, 80), "resize"),
            (lambda e: e.align("left", ["a", "b"]), "align left"),
            (lambda e: e.distribute("horizontal", ["a", "b", "c"]), "distribute horizontal"),
            (lambda e: e.group(["a", "b"]), "group"),
            (lambda e: e.duplicate(["a"]), "duplicate"),
            (lambda e: e.delete(["a"]), "delete"),
            (lambda e: e.add_component("text"), "add"),
            (lambda e: e.update_component("a", props={"text": "Go"}), "update"),
        ],
    )
    def test_one_entry_per_operation(self, row_editor, operation, label):
        """Each successful operation adds exactly one labelled entry."""
        result = operation(row_editor)
        assert result.ok
        assert row_editor.history.labels == ["initial", label]

    @pytest.mark.unit
    def test_rejected_operation_not_recorded(self, row_editor):
        """Failures leave document and history untouched."""
        before = row_editor.document.to_dict()
        result = row_editor.align("left", ["a"])
        assert result.error.kind is ErrorKind.INVALID_OPERATION
        assert row_editor.history.labels == ["initial"]
        assert row_editor.document.to_dict() == before

    @pytest.mark.unit
    def test_undo_redo_round_trip(self, row_editor):
        """save -> undo -> redo restores deep-equal states."""
        before = row_editor.document.to_dict()
        row_editor.group(["a", "b"])
        after = row_editor.document.to_dict()

        assert row_editor.undo().ok
        assert row_editor.document.to_dict() == before
        assert row_editor.redo().ok
        assert row_editor.document.to_dict() == after

    @pytest.mark.unit
    def test_undo_reports_changed_ids(self, row_editor):
        row_editor.move(["b"], 10, 0)
        assert row_editor.undo().affected == ["b"]

    @pytest.mark.unit
    def test_history_exhausted(self, row_editor):
        """Undo with nothing to undo is a no-op reported as exhausted."""
        result = row_editor.undo()
        assert not result.ok
        assert result.error.kind is ErrorKind.HISTORY_EXHAUSTED
        assert row_editor.redo().error.kind is ErrorKind.HISTORY_EXHAUSTED

    @pytest.mark.unit
    def test_history_cap(self, row_document):
        """The 51st save evicts the oldest entry."""
        editor = Editor(row_document, history_limit=50)
        for _ in range(51):
            editor.move(["a"], 1, 0)
        assert len(editor.history) == 51
        assert editor.history.undo_depth == 50
        assert editor.can_undo

    @pytest.mark.unit
    def test_new_operation_clears_redo(self, row_editor):
        row_editor.move(["a"], 1, 0)
        row_editor.undo()
        assert row_editor.can_redo
        row_editor.move(["b"], 1, 0)
        assert not row_editor.can_redo

    @pytest.mark.unit
    def test_redo_restores_selection(self, row_editor):
        """History entries carry the selection."""
        group_id = row_editor.group(["a", "b"]).selection[0]
        row_editor.undo()
        assert row_editor.selection.ids == []
        row_editor.redo()
        assert row_editor.selection.ids == [group_id]


class TestSelectionOperations:
    """Tests for selection intents."""

    @pytest.mark.unit
    def test_select_unknown(self, row_editor):
        result = row_editor.select(["ghost"])
        assert result.error.kind is ErrorKind.NOT_FOUND

    @pytest.mark.unit
    def test_selection_not_recorded(self, row_editor):
        """Selection changes are not undoable operations."""
        row_editor.select(["a"])
        row_editor.toggle_selection("b")
        row_editor.select_all()
        assert row_editor.selection.ids == ["a", "b", "c"]
        assert row_editor.history.labels == ["initial"]

    @pytest.mark.unit
    def test_operations_default_to_selection(self, row_editor):
        row_editor.select(["a", "b", "c"])
        assert row_editor.align("top").ok
        assert [row_editor.document.require(c).position.y for c in "abc"] == [0, 0, 0]

    @pytest.mark.unit
    def test_marquee(self, row_editor):
        row_editor.marquee_begin(-5, -5)
        row_editor.marquee_update(70, 35)
        assert row_editor.marquee_end().selection == ["a", "b"]

    @pytest.mark.unit
    def test_cycle(self, row_editor):
        row_editor.select("c")
        assert row_editor.cycle_selection().selection == ["a"]

    @pytest.mark.unit
    def test_delete_prunes_selection(self, nested_editor):
        nested_editor.select(["cta", "note"])
        nested_editor.delete(["section"])
        assert nested_editor.selection.ids == []


class TestCreation:
    """Tests for add/insert/update."""

    @pytest.mark.unit
    def test_add_selects_new_component(self, row_editor):
        result = row_editor.add_component("heading", x=5, y=5, props={"text": "Hi"})
        [new_id] = result.affected
        assert row_editor.selection.ids == [new_id]
        assert row_editor.document.require(new_id).props["text"] == "Hi"

    @pytest.mark.unit
    def test_add_into_non_container(self, row_editor):
        """Only droppable parents accept children."""
        result = row_editor.add_component("text", parent_id="a")
        assert result.error.kind is ErrorKind.INVALID_OPERATION
        assert len(row_editor.document) == 3

    @pytest.mark.unit
    def test_add_unknown_parent(self, row_editor):
        result = row_editor.add_component("text", parent_id="ghost")
        assert result.error.kind is ErrorKind.NOT_FOUND

    @pytest.mark.unit
    def test_add_respects_accepts(self, nested_editor):
        nested_editor.document.require("card").accepts = ["text"]
        assert not nested_editor.add_component("video", parent_id="card").ok
        assert nested_editor.add_component("text", parent_id="card").ok

    @pytest.mark.unit
    def test_insert_tree(self, nested_editor):
        """A nested subtree lands in one entry with fresh ids."""
        tree = {
            "type": "card",
            "props": {"title": "Team"},
            "children": [{"type": "button", "props": {"text": "Buy"}}],
        }
        result = nested_editor.insert_tree(tree, parent_id="section")
        assert result.ok
        assert len(result.affected) == 2
        [card_id] = result.selection
        assert nested_editor.document.require("section").children[-1] == card_id
        assert nested_editor.history.labels == ["initial", "insert"]

    @pytest.mark.unit
    def test_insert_tree_invalid_rolls_back(self, nested_editor):
        """A bad node anywhere in the tree leaves the document untouched."""
        before = nested_editor.document.to_dict()
        tree = {"type": "card", "children": [{"props": {}}]}
        result = nested_editor.insert_tree(tree)
        assert result.error.kind is ErrorKind.INVALID_OPERATION
        assert nested_editor.document.to_dict() == before

    @pytest.mark.unit
    def test_update_merges(self, nested_editor):
        nested_editor.update_component(
            "card", props={"title": None, "elevated": False}, style={"color": "red"}
        )
        card = nested_editor.document.require("card")
        assert card.props == {"elevated": False}
        assert card.style == {"color": "red"}

    @pytest.mark.unit
    def test_update_locked_flags(self, nested_editor):
        """Locking is itself an update, and locked components accept prop edits."""
        nested_editor.update_component("note", flags={"locked": True})
        assert nested_editor.update_component("note", props={"text": "x"}).ok
        assert not nested_editor.move(["note"], 5, 5).ok

    @pytest.mark.unit
    def test_update_nothing(self, nested_editor):
        assert not nested_editor.update_component("note").ok


class TestDrag:
    """Tests for drag intents."""

    @pytest.mark.unit
    def test_move_drag_single_entry(self, row_editor):
        """Frames update the document live; only the commit is recorded."""
        assert row_editor.begin_drag("move", (10, 10), ["a"]).ok
        assert row_editor.drag_state is DragState.DRAGGING
        row_editor.pointer_move(20, 10)
        row_editor.frame()
        row_editor.pointer_move(47, 13)
        row_editor.frame()
        a = row_editor.document.require("a")
        assert (a.position.x, a.position.y) == (37, 3)
        assert row_editor.history.labels == ["initial"]

        result = row_editor.end_drag()
        assert result.label == "move"
        assert row_editor.history.labels == ["initial", "move"]
        row_editor.undo()
        a = row_editor.document.require("a")
        assert (a.position.x, a.position.y) == (0, 0)

    @pytest.mark.unit
    def test_pointer_moves_coalesce(self, row_editor):
        """Only the latest pointer before a frame is applied."""
        row_editor.begin_drag("move", (0, 0), ["b"])
        for x in range(1, 100):
            row_editor.pointer_move(x, 0)
        row_editor.frame()
        assert row_editor.document.require("b").position.x == 60 + 99

    @pytest.mark.unit
    def test_cancel_restores(self, row_editor):
        before = row_editor.document.to_dict()
        row_editor.begin_drag("resize", (50, 40), ["a"], handle="se")
        row_editor.pointer_move(90, 90)
        row_editor.frame()
        assert row_editor.cancel_drag().ok
        assert row_editor.document.to_dict() == before
        assert row_editor.history.labels == ["initial"]
        assert row_editor.drag_state is DragState.IDLE

    @pytest.mark.unit
    def test_create_drag_cancelled(self, row_editor):
        """Cancelling a palette drag removes the new component."""
        result = row_editor.begin_drag("create", (100, 100), component_type="button")
        [new_id] = result.affected
        assert new_id in row_editor.document
        row_editor.cancel_drag()
        assert new_id not in row_editor.document
        assert row_editor.selection.ids == []

    @pytest.mark.unit
    def test_create_drag_committed(self, row_editor):
        row_editor.begin_drag("create", (100, 100), component_type="button")
        result = row_editor.end_drag()
        assert result.label == "create"
        assert row_editor.history.labels == ["initial", "create"]

    @pytest.mark.unit
    def test_drop_into_container(self, nested_editor):
        """Dropping over a container reparents, keeping the absolute position."""
        nested_editor.begin_drag("move", (610, 110), ["note"])
        nested_editor.pointer_move(300, 300)
        nested_editor.end_drag()
        note = nested_editor.document.require("note")
        assert note.parent_id == "section"
        assert (note.position.x, note.position.y) == (190, 190)

    @pytest.mark.unit
    def test_second_drag_rejected(self, row_editor):
        row_editor.begin_drag("move", (0, 0), ["a"])
        assert not row_editor.begin_drag("move", (0, 0), ["b"]).ok

    @pytest.mark.unit
    def test_undo_cancels_active_drag(self, row_editor):
        row_editor.move(["c"], 10, 0)
        row_editor.begin_drag("move", (0, 0), ["a"])
        row_editor.pointer_move(30, 30)
        row_editor.frame()
        assert row_editor.undo().ok
        assert row_editor.drag_state is DragState.IDLE
        assert row_editor.document.require("a").position.x == 0
        assert row_editor.document.require("c").position.x == 250

    @pytest.mark.unit
    def test_end_without_drag(self, row_editor):
        assert row_editor.end_drag().error.kind is ErrorKind.INVALID_OPERATION


class TestSettings:
    """Tests for settings setters."""

    @pytest.mark.unit
    def test_clamped(self, row_editor):
        row_editor.set_grid_size(500)
        row_editor.set_zoom(5)
        settings = row_editor.document.settings
        assert settings.grid_size == 100
        assert settings.zoom == 25

    @pytest.mark.unit
    def test_toggle_and_breakpoint(self, row_editor):
        assert row_editor.document.settings.snap_enabled is False
        row_editor.toggle_snap()
        row_editor.set_breakpoint("mobile")
        settings = row_editor.document.settings
        assert settings.snap_enabled is True
        assert settings.active_breakpoint is Breakpoint.MOBILE

    @pytest.mark.unit
    def test_invalid_breakpoint(self, row_editor):
        result = row_editor.set_breakpoint("watch")
        assert result.error.kind is ErrorKind.INVALID_OPERATION

    @pytest.mark.unit
    def test_not_recorded(self, row_editor):
        row_editor.set_grid_size(10)
        assert row_editor.history.labels == ["initial"]


class TestDocumentsAndOutput:
    """Tests for load, collaboration and generation."""

    @pytest.mark.unit
    def test_load_resets(self, row_editor, nested_document):
        row_editor.select(["a"])
        row_editor.move(["a"], 1, 1)
        assert row_editor.load(nested_document.to_dict()).ok
        assert "section" in row_editor.document
        assert row_editor.selection.ids == []
        assert row_editor.history.labels == ["initial"]

    @pytest.mark.unit
    def test_load_corrupt(self, row_editor):
        """Corrupt documents are refused; the current document stays."""
        result = row_editor.load({"id": "bad", "components": {}, "roots": ["ghost"]})
        assert result.error.kind is ErrorKind.CORRUPT_TREE
        assert "a" in row_editor.document

    @pytest.mark.unit
    def test_load_corrupt_document_instance(self, row_editor, component_factory):
        """Document instances are checked like raw data."""
        a = component_factory("a", children=["b"], parent_id="b")
        b = component_factory("b", children=["a"], parent_id="a")
        looped = Document(id="looped", components={"a": a, "b": b}, roots=["a"])
        result = row_editor.load(looped)
        assert result.error.kind is ErrorKind.CORRUPT_TREE
        assert row_editor.document.id == "doc-row"

    @pytest.mark.unit
    def test_load_document_instance(self, row_editor, nested_document):
        assert row_editor.load(nested_document).ok
        assert row_editor.document is nested_document

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "event",
        [
            {"changed_fields": {"props": {"text": "x"}}, "user_id": "u"},
            {"component_id": "a", "changed_fields": {}, "sequence": "seven"},
            {"component_id": "a", "changed_fields": 5},
        ],
    )
    def test_apply_remote_malformed(self, row_editor, event):
        """Malformed feed events come back as failures, not exceptions."""
        result = row_editor.apply_remote(event)
        assert result.error.kind is ErrorKind.INVALID_OPERATION
        assert row_editor.history.labels == ["initial"]

    @pytest.mark.unit
    def test_apply_remote(self, row_editor):
        event = RemoteMutation("a", {"position": {"x": 9, "y": 9}}, user_id="alice")
        assert row_editor.apply_remote(event).ok
        assert row_editor.history.labels == ["initial", "remote:alice update"]
        assert row_editor.document.require("a").position.x == 9

    @pytest.mark.unit
    def test_apply_remote_dict(self, row_editor):
        result = row_editor.apply_remote({"component_id": "ghost", "changed_fields": {}})
        assert result.error.kind is ErrorKind.NOT_FOUND

    @pytest.mark.unit
    def test_publishes_local_changes(self, row_document):
        publisher = RecordingPublisher()
        editor = Editor(row_document, publisher=publisher, user_id="bob")
        editor.move(["a"], 5, 0)
        [mutation] = publisher.sent
        assert mutation.user_id == "bob"
        assert mutation.changed_fields["position"] == {"x": 5, "y": 0}

    @pytest.mark.unit
    def test_remote_changes_not_echoed(self, row_document):
        publisher = RecordingPublisher()
        editor = Editor(row_document, publisher=publisher)
        editor.apply_remote(RemoteMutation("a", {"props": {"text": "x"}}, user_id="alice"))
        assert publisher.sent == []

    @pytest.mark.unit
    def test_generate(self, nested_editor):
        result = nested_editor.generate("html")
        assert result.ok
        assert result.output.paths == ["index.html", "styles.css"]
        assert nested_editor.history.labels == ["initial"]

    @pytest.mark.unit
    def test_generate_unknown_target(self, nested_editor):
        result = nested_editor.generate("svelte")
        assert result.error.kind is ErrorKind.INVALID_OPERATION
        assert "Available" in result.error.message
