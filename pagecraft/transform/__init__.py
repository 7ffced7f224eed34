"""Transform module - bulk operations and pointer drag sessions.

This module provides:
- Align, distribute, group, ungroup, duplicate, delete, move and resize
- Typed operation results (never raised for expected failures)
- DragSession, the coalescing pointer-drag state machine

Example usage:
    >>> from pagecraft.transform import AlignMode, align
    >>> result = align(document, ["a", "b", "c"], AlignMode.LEFT)
    >>> result.ok
    True
"""

from .drag import DragKind, DragOperation, DragSession, DragState
from .lib import (
    AlignMode,
    DistributeAxis,
    ErrorKind,
    OperationError,
    OperationResult,
    align,
    delete,
    distribute,
    duplicate,
    group,
    move_by,
    move_to,
    resize,
    resolve_targets,
    ungroup,
)

__all__ = [
    # Results
    "ErrorKind",
    "OperationError",
    "OperationResult",
    # Operations
    "AlignMode",
    "DistributeAxis",
    "resolve_targets",
    "align",
    "distribute",
    "group",
    "ungroup",
    "duplicate",
    "delete",
    "move_by",
    "move_to",
    "resize",
    # Drag
    "DragState",
    "DragKind",
    "DragOperation",
    "DragSession",
]
