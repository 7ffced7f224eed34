"""Unit tests for the drag state machine."""

import pytest

from pagecraft.model import Flags

from .drag import DragKind, DragSession, DragState
from .lib import ErrorKind


def _position(document, component_id):
    position = document.require(component_id).position
    return position.x, position.y


class TestLifecycle:
    """Tests for state transitions."""

    @pytest.mark.unit
    def test_begin_enters_dragging(self, row_document):
        """begin() moves Idle to Dragging."""
        session = DragSession(row_document)
        assert session.state is DragState.IDLE
        result = session.begin(DragKind.MOVE, ["b"], (70, 40))
        assert result.ok
        assert session.state is DragState.DRAGGING
        assert session.operation.component_ids == ["b"]

    @pytest.mark.unit
    def test_second_begin_rejected(self, row_document):
        """Only one drag at a time."""
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["a"], (0, 0))
        result = session.begin(DragKind.MOVE, ["b"], (0, 0))
        assert result.error.kind is ErrorKind.INVALID_OPERATION

    @pytest.mark.unit
    def test_locked_rejected(self, row_document):
        """Locked components cannot be dragged."""
        row_document.require("a").flags.locked = True
        session = DragSession(row_document)
        assert not session.begin(DragKind.MOVE, ["a"], (0, 0)).ok
        assert session.state is DragState.IDLE

    @pytest.mark.unit
    def test_not_draggable_rejected(self, row_document):
        """draggable=False blocks dragging."""
        row_document.require("a").flags = Flags(draggable=False)
        assert not DragSession(row_document).begin("move", ["a"], (0, 0)).ok

    @pytest.mark.unit
    def test_pointer_move_without_drag(self, row_document):
        """Pointer moves outside a drag are ignored."""
        assert DragSession(row_document).pointer_move(10, 10) is False

    @pytest.mark.unit
    def test_commit_without_drag(self, row_document):
        """Commit outside a drag fails."""
        assert not DragSession(row_document).commit().ok


class TestMoveDrag:
    """Tests for move drags."""

    @pytest.mark.unit
    def test_pointer_moves_are_coalesced(self, row_document):
        """Only the latest pointer is applied on flush."""
        row_document.settings.snap_enabled = False
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["b"], (70, 40))
        session.pointer_move(80, 40)
        session.pointer_move(90, 45)
        session.pointer_move(100, 40)
        assert _position(row_document, "b") == (60, 30)
        session.flush()
        assert _position(row_document, "b") == (90, 30)
        assert session.operation.current_pointer == (100, 40)

    @pytest.mark.unit
    def test_grid_snap(self, empty_document, component_factory):
        """Live positions snap to the grid."""
        empty_document.add(component_factory("solo", width=50, height=40))
        session = DragSession(empty_document)
        session.begin(DragKind.MOVE, ["solo"], (0, 0))
        session.pointer_move(33, 47)
        session.flush()
        assert _position(empty_document, "solo") == (40, 40)

    @pytest.mark.unit
    def test_guide_snap(self, row_document):
        """A sibling edge within the threshold overrides the grid."""
        row_document.settings.grid_size = 5
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["a"], (10, 10))
        session.pointer_move(257, 10)
        guides = session.flush()
        assert _position(row_document, "a") == (250, 0)
        [active] = [g for g in guides if g.active]
        assert active.sibling_ids == ("c",)

    @pytest.mark.unit
    def test_multi_move_keeps_offsets(self, row_document):
        """All dragged components move by the primary's snapped delta."""
        row_document.settings.snap_enabled = False
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["a", "b"], (0, 0))
        session.pointer_move(15, 5)
        session.flush()
        assert _position(row_document, "a") == (15, 5)
        assert _position(row_document, "b") == (75, 35)

    @pytest.mark.unit
    def test_commit(self, row_document):
        """Commit returns to Idle and reports changed components."""
        row_document.settings.snap_enabled = False
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["b"], (70, 40))
        session.pointer_move(100, 40)
        result = session.commit()
        assert result.ok
        assert result.label == "move"
        assert result.affected == ["b"]
        assert session.state is DragState.IDLE
        assert _position(row_document, "b") == (90, 30)

    @pytest.mark.unit
    def test_commit_without_change(self, row_document):
        """A click without movement changes nothing."""
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["a"], (5, 5))
        assert session.commit().affected == []

    @pytest.mark.unit
    def test_cancel_restores(self, row_document):
        """Cancel reverts every affected component."""
        row_document.settings.snap_enabled = False
        before = row_document.snapshot()
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["a", "c"], (0, 0))
        session.pointer_move(40, 40)
        session.flush()
        result = session.cancel()
        assert result.ok
        assert session.state is DragState.CANCELLED
        assert row_document.components == dict(before.components)

    @pytest.mark.unit
    def test_begin_after_cancel(self, row_document):
        """A cancelled session can start a new drag."""
        session = DragSession(row_document)
        session.begin(DragKind.MOVE, ["a"], (0, 0))
        session.cancel()
        assert session.begin(DragKind.MOVE, ["a"], (0, 0)).ok


class TestCreateAndDuplicateDrags:
    """Tests for drags that add components."""

    @pytest.mark.unit
    def test_create_commit(self, row_document):
        """Create drags add a component following the pointer."""
        row_document.settings.snap_enabled = False
        session = DragSession(row_document)
        begun = session.begin(DragKind.CREATE, pointer=(100, 100), component_type="button")
        [new_id] = begun.affected
        session.pointer_move(110, 120)
        result = session.commit()
        assert result.label == "create"
        assert result.affected == [new_id]
        assert _position(row_document, new_id) == (110, 120)
        assert row_document.require(new_id).props["text"] == "Button"

    @pytest.mark.unit
    def test_create_cancel_removes(self, row_document):
        """Cancelled create drags leave no component behind."""
        session = DragSession(row_document)
        session.begin(DragKind.CREATE, pointer=(100, 100), component_type="image")
        session.cancel()
        assert len(row_document) == 3
        assert row_document.roots == ["a", "b", "c"]

    @pytest.mark.unit
    def test_create_needs_type(self, row_document):
        """Create drags without a type are rejected."""
        assert not DragSession(row_document).begin(DragKind.CREATE, pointer=(0, 0)).ok

    @pytest.mark.unit
    def test_duplicate_drag(self, row_document):
        """Duplicate drags move a clone and leave the original."""
        row_document.settings.snap_enabled = False
        session = DragSession(row_document)
        begun = session.begin(DragKind.DUPLICATE, ["a"], (0, 0))
        [clone_id] = begun.affected
        session.pointer_move(0, 100)
        session.commit()
        assert _position(row_document, "a") == (0, 0)
        assert _position(row_document, clone_id) == (0, 100)
        assert row_document.roots == ["a", clone_id, "b", "c"]

    @pytest.mark.unit
    def test_duplicate_cancel(self, row_document):
        """Cancelled duplicate drags remove the clones."""
        session = DragSession(row_document)
        session.begin(DragKind.DUPLICATE, ["a", "b"], (0, 0))
        session.cancel()
        assert set(row_document.components) == {"a", "b", "c"}


class TestResizeDrag:
    """Tests for resize drags."""

    @pytest.mark.unit
    def test_resize(self, row_document):
        """Resize drags move the grabbed edges."""
        row_document.settings.snap_enabled = False
        session = DragSession(row_document)
        session.begin(DragKind.RESIZE, ["a"], (50, 40), handle="se")
        session.pointer_move(80, 60)
        session.commit()
        size = row_document.require("a").size
        assert (size.width, size.height) == (80, 60)

    @pytest.mark.unit
    def test_resize_needs_handle(self, row_document):
        """Resize drags require a handle."""
        assert not DragSession(row_document).begin(DragKind.RESIZE, ["a"], (0, 0)).ok


class TestDropZones:
    """Tests for reparenting on drop."""

    @pytest.mark.unit
    def test_drop_into_container(self, nested_document):
        """Dropping over a droppable container reparents."""
        nested_document.settings.snap_enabled = False
        session = DragSession(nested_document)
        session.begin(DragKind.MOVE, ["note"], (610, 110))
        session.pointer_move(310, 310)
        session.flush()
        assert session.operation.drop_zone_id == "section"
        result = session.commit()
        assert "note" in result.affected
        note = nested_document.require("note")
        assert note.parent_id == "section"
        assert (note.position.x, note.position.y) == (200, 200)

    @pytest.mark.unit
    def test_deepest_zone_wins(self, nested_document):
        """Nested drop zones prefer the innermost."""
        nested_document.settings.snap_enabled = False
        session = DragSession(nested_document)
        session.begin(DragKind.MOVE, ["note"], (610, 110))
        session.pointer_move(200, 200)
        session.flush()
        assert session.operation.drop_zone_id == "card"

    @pytest.mark.unit
    def test_accepts_filter(self, nested_document):
        """Containers only accept listed types."""
        nested_document.settings.snap_enabled = False
        nested_document.require("section").accepts = ["button"]
        session = DragSession(nested_document)
        session.begin(DragKind.MOVE, ["note"], (610, 110))
        session.pointer_move(310, 310)
        session.flush()
        assert session.operation.drop_zone_id is None

    @pytest.mark.unit
    def test_same_parent_is_not_a_drop(self, nested_document):
        """Moving within the current parent does not reparent."""
        nested_document.settings.snap_enabled = False
        session = DragSession(nested_document)
        session.begin(DragKind.MOVE, ["cta"], (140, 190))
        session.pointer_move(150, 200)
        session.flush()
        assert session.operation.drop_zone_id is None
