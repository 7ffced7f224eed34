"""Unit tests for bulk transform operations."""

import pytest

from pagecraft.geometry import absolute_bounds
from pagecraft.model import Constraints

from .lib import (
    AlignMode,
    DistributeAxis,
    ErrorKind,
    align,
    delete,
    distribute,
    duplicate,
    group,
    move_by,
    move_to,
    resize,
    ungroup,
)


def _lefts(document, *ids):
    return [absolute_bounds(document, cid).left for cid in ids]


class TestAlign:
    """Tests for align."""

    @pytest.mark.unit
    def test_align_left(self, row_document):
        """Every left edge moves to the minimum left edge."""
        result = align(row_document, ["a", "b", "c"], AlignMode.LEFT)
        assert result.ok
        assert result.label == "align left"
        assert _lefts(row_document, "a", "b", "c") == [0, 0, 0]

    @pytest.mark.unit
    def test_align_center_uses_average(self, row_document):
        """Centers move to the average center of the selection."""
        align(row_document, ["a", "b", "c"], "center")
        expected = (25 + 85 + 275) / 3
        for cid in "abc":
            assert absolute_bounds(row_document, cid).center_x == pytest.approx(expected)

    @pytest.mark.unit
    def test_align_right(self, row_document):
        """Right edges move to the maximum right edge."""
        align(row_document, ["a", "c"], AlignMode.RIGHT)
        assert row_document.require("a").position.x == 250

    @pytest.mark.unit
    def test_align_bottom(self, row_document):
        """Bottom edges move to the maximum bottom edge."""
        align(row_document, ["a", "b", "c"], AlignMode.BOTTOM)
        assert [row_document.require(c).position.y for c in "abc"] == [30, 30, 30]

    @pytest.mark.unit
    def test_align_across_parents(self, nested_document):
        """Alignment works in document space."""
        align(nested_document, ["cta", "note"], AlignMode.LEFT)
        assert _lefts(nested_document, "cta", "note") == [130, 130]
        assert nested_document.require("cta").position.x == 10

    @pytest.mark.unit
    def test_align_needs_two(self, row_document):
        """A single component is an invalid operation."""
        result = align(row_document, ["a"], AlignMode.LEFT)
        assert not result.ok
        assert result.error.kind is ErrorKind.INVALID_OPERATION

    @pytest.mark.unit
    def test_align_locked_rejected(self, row_document):
        """Locked components block the operation without mutation."""
        row_document.require("b").flags.locked = True
        before = row_document.snapshot()
        result = align(row_document, ["a", "b", "c"], AlignMode.LEFT)
        assert result.error.kind is ErrorKind.INVALID_OPERATION
        assert row_document.components == dict(before.components)

    @pytest.mark.unit
    def test_align_unknown_id(self, row_document):
        """Unknown ids are reported as not found."""
        result = align(row_document, ["a", "ghost"], AlignMode.LEFT)
        assert result.error.kind is ErrorKind.NOT_FOUND
        assert "ghost" in result.error.message

    @pytest.mark.unit
    def test_bumps_version(self, row_document):
        """Moved components record a mutation."""
        align(row_document, ["a", "b"], AlignMode.LEFT)
        assert row_document.require("b").metadata.version == 2
        assert row_document.require("a").metadata.version == 1


class TestDistribute:
    """Tests for distribute."""

    @pytest.mark.unit
    def test_distribute_horizontal(self, row_document):
        """Three 50px boxes over 0..300 put the middle one at 125."""
        result = distribute(row_document, ["c", "a", "b"], DistributeAxis.HORIZONTAL)
        assert result.ok
        assert _lefts(row_document, "a", "b", "c") == [0, 125, 250]

    @pytest.mark.unit
    def test_distribute_vertical(self, row_document):
        """Components sort by top edge; outer ones stay fixed."""
        distribute(row_document, ["a", "b", "c"], "vertical")
        assert row_document.require("a").position.y == 0
        assert row_document.require("b").position.y == 30
        assert row_document.require("c").position.y == 15

    @pytest.mark.unit
    def test_distribute_needs_three(self, row_document):
        """Two components are not enough."""
        result = distribute(row_document, ["a", "b"], DistributeAxis.HORIZONTAL)
        assert result.error.kind is ErrorKind.INVALID_OPERATION


class TestGroup:
    """Tests for group and ungroup."""

    @pytest.mark.unit
    def test_group(self, row_document):
        """The group pads the union box and adopts the members."""
        result = group(row_document, ["b", "a"], padding=10)
        assert result.ok
        [group_id] = result.selection
        container = row_document.require(group_id)
        assert container.type == "group"
        assert (container.position.x, container.position.y) == (-10, -10)
        assert (container.size.width, container.size.height) == (130, 90)
        assert container.children == ["a", "b"]
        assert row_document.roots == [group_id, "c"]
        a = row_document.require("a")
        assert (a.position.x, a.position.y) == (10, 10)
        assert a.parent_id == group_id

    @pytest.mark.unit
    def test_group_ungroup_round_trip(self, row_document):
        """Ungrouping restores absolute positions and removes the group."""
        before = {cid: absolute_bounds(row_document, cid) for cid in "abc"}
        result = group(row_document, ["a", "b"], padding=10)
        [group_id] = result.selection
        undone = ungroup(row_document, [group_id])
        assert undone.ok
        assert undone.selection == ["a", "b"]
        assert group_id not in row_document
        assert row_document.roots == ["a", "b", "c"]
        assert {cid: absolute_bounds(row_document, cid) for cid in "abc"} == before

    @pytest.mark.unit
    def test_group_padding_from_environment(self, row_document, monkeypatch):
        """Padding defaults to PAGECRAFT_GROUP_PADDING."""
        monkeypatch.setenv("PAGECRAFT_GROUP_PADDING", "0")
        result = group(row_document, ["a", "b"])
        container = row_document.require(result.selection[0])
        assert (container.position.x, container.position.y) == (0, 0)

    @pytest.mark.unit
    def test_group_needs_common_parent(self, nested_document):
        """Components under different parents cannot be grouped."""
        result = group(nested_document, ["cta", "note"])
        assert result.error.kind is ErrorKind.INVALID_OPERATION

    @pytest.mark.unit
    def test_group_uses_topmost(self, nested_document):
        """A selected descendant is ignored in favour of its ancestor."""
        result = group(nested_document, ["section", "card", "note"])
        assert result.ok
        assert "card" not in result.affected
        assert nested_document.require("card").parent_id == "section"

    @pytest.mark.unit
    def test_group_needs_two(self, row_document):
        """A single component is an invalid operation."""
        assert not group(row_document, ["a"]).ok

    @pytest.mark.unit
    def test_ungroup_childless(self, row_document):
        """Components without children cannot be ungrouped."""
        result = ungroup(row_document, ["a"])
        assert result.error.kind is ErrorKind.INVALID_OPERATION

    @pytest.mark.unit
    def test_ungroup_locked(self, nested_document):
        """Locked containers cannot be ungrouped."""
        nested_document.require("card").flags.locked = True
        assert not ungroup(nested_document, ["card"]).ok
        assert "card" in nested_document

    @pytest.mark.unit
    def test_ungroup_splices_in_place(self, nested_document):
        """Children take the container's slot among its siblings."""
        ungroup(nested_document, ["section"])
        assert nested_document.roots == ["card", "note"]
        card = nested_document.require("card")
        assert (card.position.x, card.position.y) == (120, 120)


class TestDuplicate:
    """Tests for duplicate."""

    @pytest.mark.unit
    def test_duplicate_subtree(self, nested_document):
        """Clones copy the whole subtree with fresh ids after the original."""
        result = duplicate(nested_document, ["card"], offset=20)
        [clone_id] = result.selection
        assert nested_document.require("section").children == ["card", clone_id]
        clone = nested_document.require(clone_id)
        assert (clone.position.x, clone.position.y) == (40, 40)
        assert clone.props == {"title": "Plans"}
        assert len(clone.children) == 2
        assert not set(clone.children) & {"title", "cta"}
        assert len(result.affected) == 3

    @pytest.mark.unit
    def test_duplicate_keeps_relative_offsets(self, row_document):
        """Multiple clones keep their spacing."""
        result = duplicate(row_document, ["a", "c"], offset=20)
        first, second = result.selection
        assert row_document.roots == ["a", first, "b", "c", second]
        assert row_document.require(first).position.x == 20
        assert row_document.require(second).position.x == 270

    @pytest.mark.unit
    def test_duplicate_default_offset(self, row_document):
        """The default offset is 20."""
        result = duplicate(row_document, ["b"])
        clone = row_document.require(result.selection[0])
        assert (clone.position.x, clone.position.y) == (80, 50)


class TestDelete:
    """Tests for delete."""

    @pytest.mark.unit
    def test_delete_group_leaves_no_orphans(self, nested_document):
        """The whole subtree leaves the id index."""
        result = delete(nested_document, ["section"])
        assert sorted(result.affected) == ["card", "cta", "section", "title"]
        assert set(nested_document.components) == {"note"}

    @pytest.mark.unit
    def test_delete_locked(self, row_document):
        """Locked components survive."""
        row_document.require("a").flags.locked = True
        assert not delete(row_document, ["a", "b"]).ok
        assert row_document.roots == ["a", "b", "c"]


class TestMoveResize:
    """Tests for direct move and resize."""

    @pytest.mark.unit
    def test_move_by(self, row_document):
        """All targets shift by the delta."""
        move_by(row_document, ["a", "b"], 5, -5)
        assert (row_document.require("b").position.x, row_document.require("b").position.y) == (
            65,
            25,
        )

    @pytest.mark.unit
    def test_move_to(self, row_document):
        """move_to sets the local position."""
        move_to(row_document, "c", 10, 20)
        c = row_document.require("c")
        assert (c.position.x, c.position.y) == (10, 20)

    @pytest.mark.unit
    def test_move_locked(self, row_document):
        """Locked components do not move."""
        row_document.require("c").flags.locked = True
        assert move_to(row_document, "c", 0, 0).error.kind is ErrorKind.INVALID_OPERATION

    @pytest.mark.unit
    def test_resize_clamped(self, row_document):
        """Constraints clamp the requested size."""
        row_document.require("a").constraints = Constraints(min_width=40, max_height=60)
        resize(row_document, "a", 10, 100)
        size = row_document.require("a").size
        assert (size.width, size.height) == (40, 60)

    @pytest.mark.unit
    def test_resize_from_west(self, row_document):
        """Left-edge handles keep the right edge fixed."""
        resize(row_document, "a", 80, 40, handle="w")
        assert absolute_bounds(row_document, "a").right == 50
        assert row_document.require("a").position.x == -30
