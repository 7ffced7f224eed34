"""Bounds computation and hit-testing.

Component positions are stored relative to the parent; everything that
compares components across levels (alignment, marquee, drop zones) works on
absolute bounds obtained by summing ancestor offsets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pagecraft.model import AUTO, Component, Document


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle (left/top inclusive, right/bottom exclusive)."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> Bounds:
        return cls(left=x, top=y, right=x + width, bottom=y + height)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2

    def translate(self, dx: float, dy: float) -> Bounds:
        """Return a copy moved by (dx, dy)."""
        return Bounds(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def move_to(self, x: float, y: float) -> Bounds:
        """Return a copy with the same size at (x, y)."""
        return Bounds.from_rect(x, y, self.width, self.height)

    def expand(self, amount: float) -> Bounds:
        """Return a copy grown by `amount` on every side."""
        return Bounds(
            self.left - amount,
            self.top - amount,
            self.right + amount,
            self.bottom + amount,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "width": self.width,
            "height": self.height,
        }


def _extent(document: Document | None, component: Component, axis: str) -> float:
    """Largest child far edge along an axis, 0 without children."""
    if document is None or not component.children:
        return 0.0
    result = 0.0
    for child in document.children_of(component.id):
        width, height = resolve_size(child, document)
        if axis == "x":
            result = max(result, child.position.x + width)
        else:
            result = max(result, child.position.y + height)
    return result


def resolve_size(
    component: Component, document: Document | None = None
) -> tuple[float, float]:
    """Numeric (width, height) of a component.

    "auto" resolves to the extent of the component's children (0 when it has
    none or no document is given to look them up).
    """
    width = component.size.width
    height = component.size.height
    return (
        _extent(document, component, "x") if width == AUTO else float(width),
        _extent(document, component, "y") if height == AUTO else float(height),
    )


def compute_bounds(component: Component, document: Document | None = None) -> Bounds:
    """Bounds of a component in its parent's coordinate space."""
    width, height = resolve_size(component, document)
    return Bounds.from_rect(component.position.x, component.position.y, width, height)


def absolute_bounds(document: Document, component_id: str) -> Bounds:
    """Bounds of a component in document space."""
    component = document.require(component_id)
    ox, oy = document.origin_of(component.parent_id)
    return compute_bounds(component, document).translate(ox, oy)


def contains_point(bounds: Bounds, x: float, y: float) -> bool:
    """Check whether a point lies inside bounds."""
    return bounds.left <= x < bounds.right and bounds.top <= y < bounds.bottom


def intersects(a: Bounds, b: Bounds) -> bool:
    """Check whether two rectangles overlap (touching edges do not)."""
    return a.left < b.right and b.left < a.right and a.top < b.bottom and b.top < a.bottom


def union_bounds(items: list[Bounds]) -> Bounds:
    """Smallest rectangle covering every input.

    Raises:
        ValueError: If `items` is empty.
    """
    if not items:
        raise ValueError("union_bounds() requires at least one rectangle")
    return Bounds(
        left=min(b.left for b in items),
        top=min(b.top for b in items),
        right=max(b.right for b in items),
        bottom=max(b.bottom for b in items),
    )


def component_at(
    document: Document,
    x: float,
    y: float,
    parent_id: str | None = None,
) -> Component | None:
    """Hit-test a document-space point.

    Later siblings paint above earlier ones, so they are tested first; the
    deepest visible component under the point wins.
    """
    for component in reversed(document.children_of(parent_id)):
        if not component.flags.visible:
            continue
        if contains_point(absolute_bounds(document, component.id), x, y):
            return component_at(document, x, y, component.id) or component
    return None


__all__ = [
    "Bounds",
    "resolve_size",
    "compute_bounds",
    "absolute_bounds",
    "contains_point",
    "intersects",
    "union_bounds",
    "component_at",
]
