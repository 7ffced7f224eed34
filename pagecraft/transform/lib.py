"""Bulk transform operations on the document.

Every operation takes the document and a list of component ids, mutates
the document in place and reports an `OperationResult`. Operations never
touch history; the editor records one entry per successful result.

Expected failures (too few components, locked components, unknown ids) are
returned as typed failures with the document left untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pagecraft.config import EnvVar, get_environment
from pagecraft.geometry import Bounds, absolute_bounds, resolve_size, union_bounds
from pagecraft.model import Document, Size
from pagecraft.schema import BuiltinRegistry, ComponentRegistry
from pagecraft.snap import ResizeHandle, clamp_size

logger = logging.getLogger(__name__)


# =============================================================================
# Results
# =============================================================================


class ErrorKind(str, Enum):
    """Failure taxonomy shared by every editor operation."""

    INVALID_OPERATION = "invalid_operation"
    NOT_FOUND = "not_found"
    UNRESOLVABLE_REFERENCE = "unresolvable_reference"
    CORRUPT_TREE = "corrupt_tree"
    HISTORY_EXHAUSTED = "history_exhausted"
    CONSTRAINT_CONFLICT = "constraint_conflict"


@dataclass(frozen=True)
class OperationError:
    """Why an operation was rejected."""

    kind: ErrorKind
    message: str


@dataclass
class OperationResult:
    """Outcome of one user-intent operation.

    Attributes:
        ok: Whether the operation was applied.
        label: Operation name (used as the history label).
        affected: Ids of components that were changed, created or removed.
        error: Rejection reason when not ok.
        selection: Selection the operation wants active afterwards, if any.
        output: Value produced by read-only operations (e.g. generated code).
    """

    ok: bool
    label: str
    affected: list[str] = field(default_factory=list)
    error: OperationError | None = None
    selection: list[str] | None = None
    output: Any = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(
        cls,
        label: str,
        affected: Sequence[str] = (),
        selection: Sequence[str] | None = None,
    ) -> OperationResult:
        return cls(
            ok=True,
            label=label,
            affected=list(affected),
            selection=None if selection is None else list(selection),
        )

    @classmethod
    def failure(cls, label: str, kind: ErrorKind, message: str) -> OperationResult:
        logger.info(f"Rejected {label}: {message}")
        return cls(ok=False, label=label, error=OperationError(kind, message))


class AlignMode(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class DistributeAxis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


# =============================================================================
# Target resolution
# =============================================================================


def resolve_targets(
    document: Document,
    component_ids: Sequence[str],
    label: str,
    *,
    minimum: int = 1,
    allow_locked: bool = False,
) -> tuple[list[str], OperationResult | None]:
    """Validate ids and reduce them to the top-most selected components.

    Returns:
        (ids, None) on success or ([], failure result).
    """
    missing = [cid for cid in component_ids if cid not in document]
    if missing:
        return [], OperationResult.failure(
            label, ErrorKind.NOT_FOUND, f"Unknown component(s): {', '.join(missing)}"
        )
    ids = document.top_level(list(dict.fromkeys(component_ids)))
    if len(ids) < minimum:
        return [], OperationResult.failure(
            label,
            ErrorKind.INVALID_OPERATION,
            f"{label} needs at least {minimum} component(s), got {len(ids)}",
        )
    if not allow_locked:
        locked = [cid for cid in ids if document.require(cid).flags.locked]
        if locked:
            return [], OperationResult.failure(
                label,
                ErrorKind.INVALID_OPERATION,
                f"Locked component(s): {', '.join(locked)}",
            )
    return ids, None


def _shift(document: Document, component_id: str, dx: float, dy: float) -> None:
    if dx == 0 and dy == 0:
        return
    component = document.require(component_id)
    component.position.x += dx
    component.position.y += dy
    document.touch(component_id)


# =============================================================================
# Align / distribute
# =============================================================================


def align(
    document: Document, component_ids: Sequence[str], mode: AlignMode | str
) -> OperationResult:
    """Line components up on one edge or center.

    Left/top use the minimum edge, right/bottom the maximum edge and
    center/middle the average center of the selection. Works in document
    space, so components under different parents can be aligned.
    """
    mode = AlignMode(mode)
    label = f"align {mode.value}"
    ids, failure = resolve_targets(document, component_ids, label, minimum=2)
    if failure:
        return failure

    boxes = {cid: absolute_bounds(document, cid) for cid in ids}
    values = boxes.values()
    if mode is AlignMode.LEFT:
        ref = min(b.left for b in values)
    elif mode is AlignMode.RIGHT:
        ref = max(b.right for b in values)
    elif mode is AlignMode.CENTER:
        ref = sum(b.center_x for b in values) / len(boxes)
    elif mode is AlignMode.TOP:
        ref = min(b.top for b in values)
    elif mode is AlignMode.BOTTOM:
        ref = max(b.bottom for b in values)
    else:
        ref = sum(b.center_y for b in values) / len(boxes)

    for cid, box in boxes.items():
        if mode is AlignMode.LEFT:
            _shift(document, cid, ref - box.left, 0)
        elif mode is AlignMode.RIGHT:
            _shift(document, cid, ref - box.right, 0)
        elif mode is AlignMode.CENTER:
            _shift(document, cid, ref - box.center_x, 0)
        elif mode is AlignMode.TOP:
            _shift(document, cid, 0, ref - box.top)
        elif mode is AlignMode.BOTTOM:
            _shift(document, cid, 0, ref - box.bottom)
        else:
            _shift(document, cid, 0, ref - box.center_y)
    return OperationResult.success(label, ids)


def distribute(
    document: Document, component_ids: Sequence[str], axis: DistributeAxis | str
) -> OperationResult:
    """Space components evenly between the first and last along an axis.

    spacing = (span - sum of sizes) / (n - 1); the outermost components stay
    where they are.
    """
    axis = DistributeAxis(axis)
    label = f"distribute {axis.value}"
    ids, failure = resolve_targets(document, component_ids, label, minimum=3)
    if failure:
        return failure

    horizontal = axis is DistributeAxis.HORIZONTAL
    boxes = {cid: absolute_bounds(document, cid) for cid in ids}

    def start(box: Bounds) -> float:
        return box.left if horizontal else box.top

    def extent(box: Bounds) -> float:
        return box.width if horizontal else box.height

    ordered = sorted(ids, key=lambda cid: start(boxes[cid]))
    first, last = boxes[ordered[0]], boxes[ordered[-1]]
    span = start(last) + extent(last) - start(first)
    spacing = (span - sum(extent(b) for b in boxes.values())) / (len(ordered) - 1)

    cursor = start(first) + extent(first) + spacing
    for cid in ordered[1:-1]:
        delta = cursor - start(boxes[cid])
        _shift(document, cid, delta if horizontal else 0, 0 if horizontal else delta)
        cursor += extent(boxes[cid]) + spacing
    return OperationResult.success(label, ordered)


# =============================================================================
# Group / ungroup
# =============================================================================


def group(
    document: Document,
    component_ids: Sequence[str],
    padding: float | None = None,
    registry: ComponentRegistry | None = None,
) -> OperationResult:
    """Wrap components sharing a parent in a new group container.

    The container covers the union of the members' bounds grown by
    `padding` (PAGECRAFT_GROUP_PADDING when None) and takes the first
    member's place among its siblings. Members keep their absolute
    position. The new group becomes the selection.
    """
    label = "group"
    ids, failure = resolve_targets(document, component_ids, label, minimum=2)
    if failure:
        return failure
    parents = {document.require(cid).parent_id for cid in ids}
    if len(parents) != 1:
        return OperationResult.failure(
            label, ErrorKind.INVALID_OPERATION, "Grouped components must share a parent"
        )
    parent_id = parents.pop()
    pad = get_environment(EnvVar.PAGECRAFT_GROUP_PADDING) if padding is None else padding

    box = union_bounds([absolute_bounds(document, cid) for cid in ids]).expand(pad)
    ox, oy = document.origin_of(parent_id)
    siblings = document.child_ids(parent_id)
    index = min(siblings.index(cid) for cid in ids)
    # Keep members in their current paint order
    members = sorted(ids, key=siblings.index)

    container = document.create_component(
        "group",
        registry or BuiltinRegistry(),
        x=box.left - ox,
        y=box.top - oy,
        parent_id=parent_id,
        index=index,
        width=box.width,
        height=box.height,
    )
    for cid in members:
        document.reparent(cid, container.id)
        document.touch(cid)
    logger.debug(f"Grouped {len(members)} components into {container.id}")
    return OperationResult.success(label, [container.id, *members], [container.id])


def ungroup(document: Document, component_ids: Sequence[str]) -> OperationResult:
    """Dissolve containers, splicing their children into the parent.

    Children keep their absolute position and are inserted where the
    container was. The released children become the selection.
    """
    label = "ungroup"
    ids, failure = resolve_targets(document, component_ids, label)
    if failure:
        return failure
    empty = [cid for cid in ids if not document.require(cid).children]
    if empty:
        return OperationResult.failure(
            label, ErrorKind.INVALID_OPERATION, f"Nothing to ungroup in: {', '.join(empty)}"
        )

    released: list[str] = []
    for group_id in ids:
        container = document.require(group_id)
        parent_id = container.parent_id
        index = document.index_in_parent(group_id)
        children = list(container.children)
        for offset, child_id in enumerate(children):
            document.reparent(child_id, parent_id, index + 1 + offset)
            document.touch(child_id)
        document.remove_subtree(group_id)
        released.extend(children)
    return OperationResult.success(label, [*ids, *released], released)


# =============================================================================
# Duplicate / delete
# =============================================================================


def duplicate(
    document: Document,
    component_ids: Sequence[str],
    offset: float | None = None,
) -> OperationResult:
    """Clone components (whole subtrees) with fresh ids.

    Each clone is inserted right after its original and shifted by
    `offset` (PAGECRAFT_DUPLICATE_OFFSET when None) on both axes, so
    relative offsets inside a multi-selection are preserved. The clones
    become the selection.
    """
    label = "duplicate"
    ids, failure = resolve_targets(document, component_ids, label, allow_locked=True)
    if failure:
        return failure
    delta = get_environment(EnvVar.PAGECRAFT_DUPLICATE_OFFSET) if offset is None else offset

    clones: list[str] = []
    created: list[str] = []
    for cid in ids:
        new_root, new_ids = document.clone_subtree(cid)
        original = document.require(cid)
        document.attach(new_root, original.parent_id, document.index_in_parent(cid) + 1)
        clone = document.require(new_root)
        clone.position.x += delta
        clone.position.y += delta
        clones.append(new_root)
        created.extend(new_ids)
    return OperationResult.success(label, created, clones)


def delete(document: Document, component_ids: Sequence[str]) -> OperationResult:
    """Remove components and their entire subtrees."""
    label = "delete"
    ids, failure = resolve_targets(document, component_ids, label)
    if failure:
        return failure
    removed: list[str] = []
    for cid in ids:
        removed.extend(document.remove_subtree(cid))
    return OperationResult.success(label, removed, [])


# =============================================================================
# Move / resize
# =============================================================================


def move_by(
    document: Document, component_ids: Sequence[str], dx: float, dy: float
) -> OperationResult:
    """Translate components by a delta (keyboard nudge, programmatic move)."""
    label = "move"
    ids, failure = resolve_targets(document, component_ids, label)
    if failure:
        return failure
    for cid in ids:
        _shift(document, cid, dx, dy)
    return OperationResult.success(label, ids)


def move_to(document: Document, component_id: str, x: float, y: float) -> OperationResult:
    """Place one component at a position in its parent's space."""
    label = "move"
    ids, failure = resolve_targets(document, [component_id], label)
    if failure:
        return failure
    position = document.require(component_id).position
    _shift(document, component_id, x - position.x, y - position.y)
    return OperationResult.success(label, ids)


def resize(
    document: Document,
    component_id: str,
    width: float,
    height: float,
    handle: ResizeHandle | str | None = None,
) -> OperationResult:
    """Set a component's size, clamped to its constraints.

    The top-left corner stays fixed unless `handle` grabs the left or top
    edge, in which case the opposite edge stays fixed.
    """
    label = "resize"
    ids, failure = resolve_targets(document, [component_id], label)
    if failure:
        return failure
    grip = ResizeHandle(handle) if handle is not None else ResizeHandle.SE
    component = document.require(component_id)
    old_w, old_h = resolve_size(component, document)
    new_w, new_h = clamp_size(width, height, component.constraints, grip)
    if grip.moves_left:
        component.position.x += old_w - new_w
    if grip.moves_top:
        component.position.y += old_h - new_h
    component.size = Size(width=new_w, height=new_h)
    document.touch(component_id)
    return OperationResult.success(label, ids)


__all__ = [
    "ErrorKind",
    "OperationError",
    "OperationResult",
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
]
