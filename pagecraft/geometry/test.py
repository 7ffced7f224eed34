"""Unit tests for geometry helpers."""

import pytest

from .lib import (
    Bounds,
    absolute_bounds,
    component_at,
    compute_bounds,
    contains_point,
    intersects,
    resolve_size,
    union_bounds,
)


class TestBounds:
    """Tests for the Bounds value type."""

    @pytest.mark.unit
    def test_derived_properties(self):
        """Width, height and centers derive from the edges."""
        b = Bounds.from_rect(10, 20, 100, 40)
        assert (b.right, b.bottom) == (110, 60)
        assert (b.width, b.height) == (100, 40)
        assert (b.center_x, b.center_y) == (60, 40)

    @pytest.mark.unit
    def test_translate_and_move(self):
        """Translation keeps size."""
        b = Bounds.from_rect(0, 0, 10, 10)
        assert b.translate(5, -5) == Bounds(5, -5, 15, 5)
        assert b.move_to(3, 4) == Bounds(3, 4, 13, 14)

    @pytest.mark.unit
    def test_expand(self):
        """expand() pads every side."""
        assert Bounds(0, 0, 10, 10).expand(2) == Bounds(-2, -2, 12, 12)

    @pytest.mark.unit
    def test_contains_point(self):
        """Right and bottom edges are exclusive."""
        b = Bounds(0, 0, 10, 10)
        assert contains_point(b, 0, 0)
        assert not contains_point(b, 10, 5)

    @pytest.mark.unit
    def test_intersects(self):
        """Overlap is strict."""
        assert intersects(Bounds(0, 0, 10, 10), Bounds(5, 5, 15, 15))
        assert not intersects(Bounds(0, 0, 10, 10), Bounds(10, 0, 20, 10))

    @pytest.mark.unit
    def test_union(self):
        """Union covers every rectangle."""
        assert union_bounds([Bounds(0, 0, 1, 1), Bounds(5, -2, 6, 3)]) == Bounds(
            0, -2, 6, 3
        )

    @pytest.mark.unit
    def test_union_empty(self):
        """An empty union is an error."""
        with pytest.raises(ValueError):
            union_bounds([])


class TestComponentBounds:
    """Tests for component bounds at different depths."""

    @pytest.mark.unit
    def test_parent_space(self, nested_document):
        """compute_bounds uses the local offset."""
        cta = nested_document.require("cta")
        assert compute_bounds(cta) == Bounds.from_rect(10, 60, 120, 40)

    @pytest.mark.unit
    def test_document_space(self, nested_document):
        """absolute_bounds sums every ancestor offset."""
        assert absolute_bounds(nested_document, "cta") == Bounds.from_rect(
            130, 180, 120, 40
        )
        assert absolute_bounds(nested_document, "section") == Bounds.from_rect(
            100, 100, 400, 300
        )

    @pytest.mark.unit
    def test_absolute_bounds_follow_parent(self, nested_document):
        """Moving a parent moves children in document space."""
        nested_document.require("section").position.x += 50
        assert absolute_bounds(nested_document, "title").left == 180

    @pytest.mark.unit
    def test_auto_size(self, nested_document):
        """auto resolves to the children extent."""
        card = nested_document.require("card")
        card.size.width = "auto"
        card.size.height = "auto"
        assert resolve_size(card, nested_document) == (190, 100)

    @pytest.mark.unit
    def test_auto_size_childless(self, nested_document):
        """auto without children is zero."""
        note = nested_document.require("note")
        note.size.width = "auto"
        assert resolve_size(note, nested_document) == (0, 24)


class TestHitTesting:
    """Tests for component_at."""

    @pytest.mark.unit
    def test_deepest_wins(self, nested_document):
        """The deepest component under the point is returned."""
        assert component_at(nested_document, 140, 190).id == "cta"
        assert component_at(nested_document, 300, 300).id == "section"

    @pytest.mark.unit
    def test_miss(self, nested_document):
        """Empty canvas returns None."""
        assert component_at(nested_document, 5, 5) is None

    @pytest.mark.unit
    def test_invisible_skipped(self, nested_document):
        """Hidden components are not hit-testable."""
        nested_document.require("cta").flags.visible = False
        assert component_at(nested_document, 140, 190).id == "card"

    @pytest.mark.unit
    def test_topmost_sibling(self, row_document, component_factory):
        """Later siblings paint above earlier ones."""
        row_document.add(component_factory("over", x=0, y=0, width=50, height=40))
        assert component_at(row_document, 10, 10).id == "over"
