"""Snap module - grid rounding, alignment guides and constrained resize.

Example usage:
    >>> from pagecraft.snap import snap_to_grid
    >>> snap_to_grid(37, 20)
    40.0
    >>> snap_to_grid(30, 20)
    20.0
"""

from .lib import (
    GuideAxis,
    GuideEdge,
    ResizeHandle,
    ResizeResult,
    SnapGuide,
    SnapResult,
    calculate_snap_guides,
    clamp_size,
    snap_move,
    snap_resize,
    snap_to_grid,
)

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
