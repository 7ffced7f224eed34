"""Unit tests for the snap engine."""

import pytest

from pagecraft.geometry import Bounds
from pagecraft.model import Constraints

from .lib import (
    GuideAxis,
    GuideEdge,
    ResizeHandle,
    calculate_snap_guides,
    clamp_size,
    snap_move,
    snap_resize,
    snap_to_grid,
)


class TestSnapToGrid:
    """Tests for grid rounding."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [(37, 40), (31, 40), (29, 20), (30, 20), (-30, -40), (0, 0)],
    )
    def test_nearest_multiple(self, value, expected):
        """Values round to the nearest multiple; halves go lower."""
        assert snap_to_grid(value, 20) == expected

    @pytest.mark.unit
    def test_disabled_grid(self):
        """A zero grid leaves values untouched."""
        assert snap_to_grid(7.3, 0) == 7.3


class TestGuides:
    """Tests for alignment guide calculation."""

    @pytest.mark.unit
    def test_candidates_and_active(self):
        """Every matching feature pair is a candidate; one is active."""
        moving = Bounds.from_rect(103, 0, 50, 40)
        guides = calculate_snap_guides(
            moving, {"s": Bounds.from_rect(100, 200, 50, 40)}, threshold=5
        )
        assert len(guides) == 3
        assert all(g.axis is GuideAxis.VERTICAL and g.visible for g in guides)
        [active] = [g for g in guides if g.active]
        assert active.moving_edge is GuideEdge.START
        assert active.target_edge is GuideEdge.START
        assert active.position == 100
        assert active.offset == -3

    @pytest.mark.unit
    def test_out_of_threshold(self):
        """Distant siblings produce no guides."""
        guides = calculate_snap_guides(
            Bounds.from_rect(0, 0, 10, 10),
            {"s": Bounds.from_rect(500, 500, 10, 10)},
            threshold=5,
        )
        assert guides == []

    @pytest.mark.unit
    def test_closest_wins(self):
        """The smallest distance becomes active."""
        siblings = {
            "far": Bounds.from_rect(100, 300, 50, 40),
            "near": Bounds.from_rect(104, 400, 50, 40),
        }
        guides = calculate_snap_guides(
            Bounds.from_rect(103, 0, 50, 40), siblings, threshold=5
        )
        [active] = [g for g in guides if g.active]
        assert active.sibling_ids == ("near",)
        assert active.distance == 1

    @pytest.mark.unit
    def test_tie_goes_to_first_sibling(self):
        """Equal distances resolve by insertion order."""
        siblings = [
            ("first", Bounds.from_rect(100, 300, 50, 40)),
            ("second", Bounds.from_rect(106, 400, 50, 40)),
        ]
        guides = calculate_snap_guides(
            Bounds.from_rect(103, 0, 50, 40), siblings, threshold=5
        )
        [active] = [g for g in guides if g.active]
        assert active.sibling_ids == ("first",)

    @pytest.mark.unit
    def test_one_active_per_axis(self):
        """Both axes may carry an active guide."""
        guides = calculate_snap_guides(
            Bounds.from_rect(2, 2, 50, 40),
            {"s": Bounds.from_rect(0, 0, 50, 40)},
            threshold=5,
        )
        active = [g for g in guides if g.active]
        assert {g.axis for g in active} == {GuideAxis.VERTICAL, GuideAxis.HORIZONTAL}

    @pytest.mark.unit
    def test_only_matching_features_pair(self):
        """A left edge near a sibling's right edge is not a guide."""
        guides = calculate_snap_guides(
            Bounds.from_rect(153, 0, 50, 40),
            {"s": Bounds.from_rect(100, 200, 50, 40)},
            threshold=5,
        )
        assert guides == []

    @pytest.mark.unit
    def test_default_threshold_from_environment(self, monkeypatch):
        """The threshold comes from PAGECRAFT_SNAP_THRESHOLD."""
        monkeypatch.setenv("PAGECRAFT_SNAP_THRESHOLD", "1")
        guides = calculate_snap_guides(
            Bounds.from_rect(103, 0, 50, 40), {"s": Bounds.from_rect(100, 200, 50, 40)}
        )
        assert guides == []


class TestSnapMove:
    """Tests for move snapping."""

    @pytest.mark.unit
    def test_grid_only(self):
        """Without siblings the grid decides."""
        result = snap_move(Bounds.from_rect(33, 47, 50, 40), {}, grid_size=20)
        assert (result.x, result.y) == (40, 40)
        assert result.guides == []

    @pytest.mark.unit
    def test_guide_overrides_grid(self):
        """An active guide replaces the grid position on its axis."""
        result = snap_move(
            Bounds.from_rect(33, 47, 50, 40),
            {"s": Bounds.from_rect(43, 200, 50, 40)},
            grid_size=20,
            threshold=5,
        )
        assert (result.x, result.y) == (43, 40)
        assert len(result.active_guides) == 1

    @pytest.mark.unit
    def test_guide_near_proposal_beats_grid_rounding(self):
        """A sibling edge close to the proposed x wins even when the grid rounds away."""
        result = snap_move(
            Bounds.from_rect(111, 0, 50, 40),
            {"s": Bounds.from_rect(108, 200, 50, 40)},
            grid_size=20,
            threshold=5,
        )
        assert result.x == 108
        [active] = result.active_guides
        assert active.sibling_ids == ("s",)
        assert active.distance == 3

    @pytest.mark.unit
    def test_resize_guide_near_raw_edge(self):
        """Resize edges also see guides the grid would round past."""
        result = snap_resize(
            Bounds.from_rect(0, 0, 100, 50),
            ResizeHandle.E,
            11,
            0,
            siblings={"s": Bounds.from_rect(58, 100, 50, 50)},
            grid_size=20,
            threshold=5,
        )
        assert result.bounds.right == 108

    @pytest.mark.unit
    def test_disabled(self):
        """Snapping off returns the proposal unchanged."""
        result = snap_move(
            Bounds.from_rect(33, 47, 50, 40), {}, grid_size=20, snap_enabled=False
        )
        assert (result.x, result.y) == (33, 47)


class TestClampSize:
    """Tests for constraint clamping."""

    @pytest.mark.unit
    def test_min_max(self):
        """Sizes are clamped to limits."""
        c = Constraints(min_width=40, max_width=200, min_height=20)
        assert clamp_size(10, 10, c) == (40, 20)
        assert clamp_size(500, 30, c) == (200, 30)

    @pytest.mark.unit
    def test_no_constraints(self):
        """Negative sizes collapse to zero."""
        assert clamp_size(-5, 10, None) == (0, 10)

    @pytest.mark.unit
    def test_aspect_ratio_width_driven(self):
        """Horizontal and corner handles derive height."""
        c = Constraints(aspect_ratio=2)
        assert clamp_size(100, 10, c, ResizeHandle.E) == (100, 50)
        assert clamp_size(100, 10, c, ResizeHandle.SE) == (100, 50)

    @pytest.mark.unit
    def test_aspect_ratio_height_driven(self):
        """N/S handles derive width."""
        c = Constraints(aspect_ratio=2)
        assert clamp_size(100, 30, c, ResizeHandle.N) == (60, 30)

    @pytest.mark.unit
    def test_limits_win_over_ratio(self):
        """A ratio that cannot hold inside the limits yields to them."""
        c = Constraints(aspect_ratio=1, max_width=50)
        assert clamp_size(80, 10, c, ResizeHandle.SE) == (50, 50)


class TestSnapResize:
    """Tests for resize snapping."""

    START = Bounds.from_rect(0, 0, 100, 50)

    @pytest.mark.unit
    def test_east_handle_grid(self):
        """The moving edge snaps to the grid."""
        result = snap_resize(self.START, ResizeHandle.E, 23, 0, grid_size=20)
        assert result.bounds == Bounds(0, 0, 120, 50)

    @pytest.mark.unit
    def test_west_handle_keeps_right_edge(self):
        """The edge opposite the handle stays fixed."""
        result = snap_resize(self.START, ResizeHandle.W, -23, 0, grid_size=20)
        assert result.bounds == Bounds(-20, 0, 100, 50)

    @pytest.mark.unit
    def test_corner_handle(self):
        """Corner handles move two edges."""
        start = Bounds.from_rect(10, 10, 100, 50)
        result = snap_resize(start, ResizeHandle.SE, 10, 10, grid_size=0)
        assert result.bounds == Bounds.from_rect(10, 10, 110, 60)

    @pytest.mark.unit
    def test_snap_violating_constraints_skipped(self):
        """Constraints win over the grid."""
        result = snap_resize(
            self.START,
            ResizeHandle.E,
            23,
            0,
            constraints=Constraints(max_width=115),
            grid_size=20,
        )
        assert result.bounds.right == 115

    @pytest.mark.unit
    def test_guide_snap(self):
        """The moving right edge snaps to a sibling right edge."""
        result = snap_resize(
            self.START,
            ResizeHandle.E,
            28,
            0,
            siblings={"s": Bounds.from_rect(80, 100, 50, 50)},
            grid_size=0,
            threshold=5,
        )
        assert result.bounds.right == 130
        assert [g.sibling_ids for g in result.guides] == [("s",)]

    @pytest.mark.unit
    def test_aspect_ratio_kept(self):
        """Snapped width re-derives height."""
        result = snap_resize(
            self.START,
            ResizeHandle.E,
            23,
            0,
            constraints=Constraints(aspect_ratio=2),
            grid_size=20,
        )
        assert result.bounds == Bounds(0, 0, 120, 60)

    @pytest.mark.unit
    def test_snap_disabled(self):
        """No snapping when disabled."""
        result = snap_resize(
            self.START, ResizeHandle.E, 23, 0, grid_size=20, snap_enabled=False
        )
        assert result.bounds.right == 123
