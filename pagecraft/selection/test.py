"""Unit tests for selection state."""

import pytest

from .lib import Marquee, Selection


class TestSelection:
    """Tests for basic membership operations."""

    @pytest.mark.unit
    def test_select_replaces(self):
        """select() replaces any previous selection."""
        sel = Selection(["a", "b"])
        sel.select("c")
        assert sel.ids == ["c"]

    @pytest.mark.unit
    def test_order_and_primary(self):
        """Selection order is kept; the first id is primary."""
        sel = Selection()
        sel.add("b")
        sel.add("a")
        sel.add("b")
        assert sel.ids == ["b", "a"]
        assert sel.primary == "b"

    @pytest.mark.unit
    def test_toggle(self):
        """toggle() flips membership."""
        sel = Selection(["a"])
        assert sel.toggle("b") is True
        assert sel.toggle("a") is False
        assert sel.ids == ["b"]

    @pytest.mark.unit
    def test_remove_and_clear(self):
        """remove() ignores unknown ids; clear() empties."""
        sel = Selection(["a", "b"])
        sel.remove(["a", "zzz"])
        assert "a" not in sel
        assert len(sel) == 1
        sel.clear()
        assert sel.ids == []
        assert sel.primary is None

    @pytest.mark.unit
    def test_select_all(self, nested_document):
        """select_all() picks every root."""
        sel = Selection()
        sel.select_all(nested_document)
        assert sel.ids == ["section", "note"]

    @pytest.mark.unit
    def test_prune(self, row_document):
        """Stale ids are dropped."""
        sel = Selection(["a", "gone"])
        assert sel.prune(row_document) == ["gone"]
        assert sel.ids == ["a"]


class TestCycle:
    """Tests for keyboard cycling."""

    @pytest.mark.unit
    def test_cycle_forward_wraps(self, row_document):
        """Tab moves to the next sibling and wraps."""
        sel = Selection(["b"])
        assert sel.cycle(row_document) == "c"
        assert sel.cycle(row_document) == "a"

    @pytest.mark.unit
    def test_cycle_backward(self, row_document):
        """Shift-Tab moves to the previous sibling."""
        sel = Selection(["a"])
        assert sel.cycle(row_document, -1) == "c"

    @pytest.mark.unit
    def test_cycle_within_parent(self, nested_document):
        """Cycling stays among siblings."""
        sel = Selection(["title"])
        assert sel.cycle(nested_document) == "cta"

    @pytest.mark.unit
    def test_cycle_empty_selection(self, row_document, empty_document):
        """Nothing selected starts at the first root."""
        assert Selection().cycle(row_document) == "a"
        assert Selection().cycle(empty_document) is None


class TestMarquee:
    """Tests for rubber-band selection."""

    @pytest.mark.unit
    def test_bounds_normalized(self):
        """Dragging up-left still yields a positive rectangle."""
        m = Marquee(100, 100, 20, 40)
        assert (m.bounds.left, m.bounds.top, m.bounds.right, m.bounds.bottom) == (
            20,
            40,
            100,
            100,
        )

    @pytest.mark.unit
    def test_marquee_selects_roots(self, row_document):
        """Intersecting roots are selected."""
        sel = Selection()
        sel.begin_marquee(-10, -10)
        sel.update_marquee(70, 35)
        assert sel.end_marquee(row_document) == ["a", "b"]
        assert sel.ids == ["a", "b"]
        assert sel.marquee is None

    @pytest.mark.unit
    def test_marquee_additive(self, row_document):
        """Additive marquee keeps the previous selection."""
        sel = Selection(["c"])
        sel.begin_marquee(0, 0)
        sel.update_marquee(10, 10)
        sel.end_marquee(row_document, additive=True)
        assert sel.ids == ["c", "a"]

    @pytest.mark.unit
    def test_marquee_skips_hidden(self, row_document):
        """Invisible components are not picked."""
        row_document.require("a").flags.visible = False
        sel = Selection()
        sel.begin_marquee(0, 0)
        sel.update_marquee(10, 10)
        assert sel.end_marquee(row_document) == []

    @pytest.mark.unit
    def test_end_without_begin(self, row_document):
        """Ending without a marquee is a no-op."""
        assert Selection().end_marquee(row_document) == []
