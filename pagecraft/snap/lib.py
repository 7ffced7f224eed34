"""Grid snapping, alignment guides and constrained resizing.

All functions are pure: they take bounds in one coordinate space (normally
the moving component's parent space, siblings included) and return new
bounds plus the guides to display. Applying the result is left to the
caller.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

from pagecraft.config import get_snap_threshold
from pagecraft.geometry import Bounds
from pagecraft.model import Constraints

logger = logging.getLogger(__name__)

Siblings = Mapping[str, Bounds] | Iterable[tuple[str, Bounds]]


class GuideAxis(str, Enum):
    """Orientation of a guide line.

    A vertical guide is a line at some x; a horizontal guide sits at some y.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class GuideEdge(str, Enum):
    """Feature of a box a guide is attached to."""

    START = "start"
    CENTER = "center"
    END = "end"


class ResizeHandle(str, Enum):
    """One of the eight resize grips."""

    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NE = "ne"
    NW = "nw"
    SE = "se"
    SW = "sw"

    @property
    def moves_left(self) -> bool:
        return "w" in self.value

    @property
    def moves_right(self) -> bool:
        return "e" in self.value

    @property
    def moves_top(self) -> bool:
        return "n" in self.value

    @property
    def moves_bottom(self) -> bool:
        return "s" in self.value

    @property
    def drives_height(self) -> bool:
        """Vertical-only handles make height the driving dimension."""
        return self in (ResizeHandle.N, ResizeHandle.S)


@dataclass(frozen=True)
class SnapGuide:
    """A candidate alignment between the moving box and a sibling.

    Attributes:
        axis: Guide orientation.
        position: Coordinate of the guide line.
        sibling_ids: Siblings the guide aligns with.
        moving_edge: Feature of the moving box.
        target_edge: Feature of the sibling.
        distance: Absolute gap before snapping.
        offset: Signed shift that brings the moving feature onto the guide.
        visible: Guide should be drawn.
        active: Guide is the one applied on its axis.
    """

    axis: GuideAxis
    position: float
    sibling_ids: tuple[str, ...]
    moving_edge: GuideEdge
    target_edge: GuideEdge
    distance: float
    offset: float
    visible: bool = True
    active: bool = False


@dataclass
class SnapResult:
    """Snapped top-left corner for a move."""

    x: float
    y: float
    guides: list[SnapGuide] = field(default_factory=list)

    @property
    def active_guides(self) -> list[SnapGuide]:
        return [g for g in self.guides if g.active]


@dataclass
class ResizeResult:
    """Snapped bounds for a resize."""

    bounds: Bounds
    guides: list[SnapGuide] = field(default_factory=list)


# =============================================================================
# Grid
# =============================================================================


def snap_to_grid(value: float, grid: float) -> float:
    """Round to the nearest multiple of `grid`; exact halves go to the lower one.

    A non-positive grid disables rounding.
    """
    if grid <= 0:
        return value
    return float(math.ceil(value / grid - 0.5) * grid)


# =============================================================================
# Guides
# =============================================================================


def _features(bounds: Bounds, axis: GuideAxis) -> tuple[tuple[GuideEdge, float], ...]:
    if axis is GuideAxis.VERTICAL:
        return (
            (GuideEdge.START, bounds.left),
            (GuideEdge.CENTER, bounds.center_x),
            (GuideEdge.END, bounds.right),
        )
    return (
        (GuideEdge.START, bounds.top),
        (GuideEdge.CENTER, bounds.center_y),
        (GuideEdge.END, bounds.bottom),
    )


def _iter_siblings(siblings: Siblings) -> list[tuple[str, Bounds]]:
    if isinstance(siblings, Mapping):
        return list(siblings.items())
    return list(siblings)


def _collect(
    moving: Iterable[tuple[GuideEdge, float]],
    axis: GuideAxis,
    siblings: list[tuple[str, Bounds]],
    threshold: float,
) -> list[SnapGuide]:
    """Candidates on one axis with the closest marked active."""
    moving = list(moving)
    candidates: list[SnapGuide] = []
    best: int | None = None
    for sibling_id, sibling in siblings:
        for target_edge, target in _features(sibling, axis):
            for moving_edge, value in moving:
                if moving_edge is not target_edge:
                    continue
                distance = abs(target - value)
                if distance > threshold:
                    continue
                candidates.append(
                    SnapGuide(
                        axis=axis,
                        position=target,
                        sibling_ids=(sibling_id,),
                        moving_edge=moving_edge,
                        target_edge=target_edge,
                        distance=distance,
                        offset=target - value,
                    )
                )
                # Strict comparison: earlier siblings win ties
                if best is None or distance < candidates[best].distance:
                    best = len(candidates) - 1
    if best is not None:
        candidates[best] = replace(candidates[best], active=True)
    return candidates


def calculate_snap_guides(
    moving: Bounds,
    siblings: Siblings,
    threshold: float | None = None,
) -> list[SnapGuide]:
    """Alignment guides between a moving box and its siblings.

    Compares left/center/right (vertical guides) and top/middle/bottom
    (horizontal guides) of the moving box against the same features of each
    sibling. At most one guide per axis is active: the closest, with ties
    going to the sibling listed first.

    Args:
        moving: Bounds of the component being moved.
        siblings: Sibling id -> bounds, in insertion order.
        threshold: Maximum distance; PAGECRAFT_SNAP_THRESHOLD when None.

    Returns:
        Vertical candidates followed by horizontal ones.
    """
    limit = get_snap_threshold() if threshold is None else threshold
    ordered = _iter_siblings(siblings)
    return _collect(
        _features(moving, GuideAxis.VERTICAL), GuideAxis.VERTICAL, ordered, limit
    ) + _collect(
        _features(moving, GuideAxis.HORIZONTAL), GuideAxis.HORIZONTAL, ordered, limit
    )


def _active(guides: list[SnapGuide], axis: GuideAxis) -> SnapGuide | None:
    return next((g for g in guides if g.active and g.axis is axis), None)


def snap_move(
    bounds: Bounds,
    siblings: Siblings,
    grid_size: float,
    snap_enabled: bool = True,
    threshold: float | None = None,
) -> SnapResult:
    """Snap a proposed position.

    Grid rounding is applied first; an active guide then overrides the grid
    on its axis. Guides are measured from the proposed position, falling back
    to the grid-rounded one, so rounding never hides a nearby sibling edge.
    """
    if not snap_enabled:
        return SnapResult(bounds.left, bounds.top)

    x = snap_to_grid(bounds.left, grid_size)
    y = snap_to_grid(bounds.top, grid_size)
    raw = calculate_snap_guides(bounds, siblings, threshold)
    rounded = calculate_snap_guides(bounds.move_to(x, y), siblings, threshold)

    x, vertical = _axis_snap(raw, rounded, GuideAxis.VERTICAL, bounds.left, x)
    y, horizontal = _axis_snap(raw, rounded, GuideAxis.HORIZONTAL, bounds.top, y)
    return SnapResult(x, y, vertical + horizontal)


def _axis_snap(
    raw: list[SnapGuide],
    rounded: list[SnapGuide],
    axis: GuideAxis,
    proposed: float,
    gridded: float,
) -> tuple[float, list[SnapGuide]]:
    guide = _active(raw, axis)
    if guide is not None:
        return proposed + guide.offset, [g for g in raw if g.axis is axis]
    guide = _active(rounded, axis)
    if guide is not None:
        return gridded + guide.offset, [g for g in rounded if g.axis is axis]
    return gridded, []


# =============================================================================
# Resize
# =============================================================================


def _clamp(value: float, low: float | None, high: float | None) -> float:
    if low is not None:
        value = max(value, low)
    if high is not None:
        value = min(value, high)
    return value


def _fits(value: float, low: float | None, high: float | None) -> bool:
    return (low is None or value >= low) and (high is None or value <= high)


def clamp_size(
    width: float,
    height: float,
    constraints: Constraints | None,
    handle: ResizeHandle | None = None,
) -> tuple[float, float]:
    """Clamp a size to constraints, deriving one side from the aspect ratio.

    Horizontal and corner handles drive width; N/S handles drive height. When
    the ratio and the limits cannot both hold, the limits win.
    """
    width = max(0.0, width)
    height = max(0.0, height)
    if constraints is None:
        return width, height

    c = constraints
    width = _clamp(width, c.min_width, c.max_width)
    height = _clamp(height, c.min_height, c.max_height)
    if c.aspect_ratio:
        if handle is not None and handle.drives_height:
            width = _clamp(height * c.aspect_ratio, c.min_width, c.max_width)
            height = _clamp(width / c.aspect_ratio, c.min_height, c.max_height)
        else:
            height = _clamp(width / c.aspect_ratio, c.min_height, c.max_height)
            width = _clamp(height * c.aspect_ratio, c.min_width, c.max_width)
    return width, height


def _anchor(start: Bounds, handle: ResizeHandle, width: float, height: float) -> Bounds:
    """Place a size so the edges opposite the handle stay fixed."""
    left = start.right - width if handle.moves_left else start.left
    top = start.bottom - height if handle.moves_top else start.top
    return Bounds.from_rect(left, top, width, height)


def _edge_snap(
    edge: GuideEdge,
    value: float,
    axis: GuideAxis,
    siblings: list[tuple[str, Bounds]],
    threshold: float,
    grid_size: float,
) -> tuple[float, SnapGuide | None]:
    """Snap one moving edge: a sibling guide near the raw or gridded value wins."""
    gridded = snap_to_grid(value, grid_size)
    for candidate in (value, gridded):
        guide = _active(_collect([(edge, candidate)], axis, siblings, threshold), axis)
        if guide is not None:
            return guide.position, guide
    return gridded, None


def snap_resize(
    start: Bounds,
    handle: ResizeHandle,
    dx: float,
    dy: float,
    constraints: Constraints | None = None,
    siblings: Siblings = (),
    grid_size: float = 0,
    snap_enabled: bool = True,
    threshold: float | None = None,
) -> ResizeResult:
    """Resize from a handle by a pointer delta.

    The edges the handle grabs move by (dx, dy); the size is clamped to the
    constraints, then the moving edges are snapped to the grid and to sibling
    guides. A snap that would break the constraints is skipped on that axis.

    Args:
        start: Bounds when the resize began.
        handle: Grabbed handle.
        dx: Pointer delta since the start.
        dy: Pointer delta since the start.
        constraints: Size limits and aspect ratio.
        siblings: Sibling id -> bounds for guides.
        grid_size: Grid spacing (0 disables the grid).
        snap_enabled: Master switch for grid and guides.
        threshold: Guide distance; PAGECRAFT_SNAP_THRESHOLD when None.
    """
    width = start.width + (dx if handle.moves_right else -dx if handle.moves_left else 0)
    height = start.height + (
        dy if handle.moves_bottom else -dy if handle.moves_top else 0
    )
    width, height = clamp_size(width, height, constraints, handle)
    bounds = _anchor(start, handle, width, height)
    if not snap_enabled:
        return ResizeResult(bounds)

    limit = get_snap_threshold() if threshold is None else threshold
    ordered = _iter_siblings(siblings)
    c = constraints or Constraints()
    ratio = c.aspect_ratio
    guides: list[SnapGuide] = []

    if (handle.moves_left or handle.moves_right) and not (ratio and handle.drives_height):
        edge, value = (
            (GuideEdge.START, bounds.left)
            if handle.moves_left
            else (GuideEdge.END, bounds.right)
        )
        target, guide = _edge_snap(
            edge, value, GuideAxis.VERTICAL, ordered, limit, grid_size
        )
        new_width = start.right - target if handle.moves_left else target - start.left
        new_height = new_width / ratio if ratio else height
        if _fits(new_width, c.min_width, c.max_width) and _fits(
            new_height, c.min_height, c.max_height
        ) and new_width >= 0:
            width, height = new_width, new_height
            if guide is not None:
                guides.append(guide)
        else:
            logger.debug("Skipped horizontal resize snap: violates constraints")

    if (handle.moves_top or handle.moves_bottom) and not (
        ratio and not handle.drives_height
    ):
        edge, value = (
            (GuideEdge.START, bounds.top)
            if handle.moves_top
            else (GuideEdge.END, bounds.bottom)
        )
        target, guide = _edge_snap(
            edge, value, GuideAxis.HORIZONTAL, ordered, limit, grid_size
        )
        new_height = start.bottom - target if handle.moves_top else target - start.top
        new_width = new_height * ratio if ratio else width
        if _fits(new_height, c.min_height, c.max_height) and _fits(
            new_width, c.min_width, c.max_width
        ) and new_height >= 0:
            width, height = new_width, new_height
            if guide is not None:
                guides.append(guide)
        else:
            logger.debug("Skipped vertical resize snap: violates constraints")

    return ResizeResult(_anchor(start, handle, width, height), guides)


__all__ = [
    "GuideAxis",
    "GuideEdge",
    "ResizeHandle",
    "SnapGuide",
    "SnapResult",
    "ResizeResult",
    "snap_to_grid",
    "calculate_snap_guides",
    "snap_move",
    "clamp_size",
    "snap_resize",
]
