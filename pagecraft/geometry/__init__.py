"""Geometry module - bounds and hit-testing in parent and document space.

Example usage:
    >>> from pagecraft.geometry import absolute_bounds
    >>> box = absolute_bounds(document, "cta")
    >>> box.left, box.width
"""

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
