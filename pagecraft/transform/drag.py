"""Pointer drag lifecycle: Idle -> Dragging -> (Idle | Cancelled).

A `DragSession` writes live positions/sizes straight into the document
while dragging. Pointer events are coalesced: `pointer_move` only stores the
latest pointer and `flush` (called once per animation frame) applies it.
Nothing reaches history until the editor records the result of `commit`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from pagecraft.geometry import (
    Bounds,
    absolute_bounds,
    compute_bounds,
    contains_point,
)
from pagecraft.model import Document, Position, Size
from pagecraft.schema import ComponentRegistry
from pagecraft.snap import ResizeHandle, SnapGuide, snap_move, snap_resize

from .lib import ErrorKind, OperationResult, resolve_targets

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    CANCELLED = "cancelled"


class DragKind(str, Enum):
    MOVE = "move"
    RESIZE = "resize"
    CREATE = "create"
    DUPLICATE = "duplicate"


@dataclass
class DragOperation:
    """Transient description of the drag in progress.

    Attributes:
        kind: What the drag does.
        start_pointer: Pointer at pointer-down (document space).
        current_pointer: Latest applied pointer.
        component_ids: Components being dragged; the first is the snapping
            reference.
        handle: Grip for resize drags.
        drop_zone_id: Container the components would be dropped into.
    """

    kind: DragKind
    start_pointer: Point
    current_pointer: Point
    component_ids: list[str] = field(default_factory=list)
    handle: ResizeHandle | None = None
    drop_zone_id: str | None = None


class DragSession:
    """State machine for one pointer-down ... pointer-up interaction.

    Example:
        >>> session = DragSession(document)
        >>> session.begin(DragKind.MOVE, ["hero"], (120, 80))
        >>> session.pointer_move(180, 95)
        >>> session.flush()
        >>> result = session.commit()
    """

    def __init__(self, document: Document):
        self.document = document
        self.state = DragState.IDLE
        self.operation: DragOperation | None = None
        self.guides: list[SnapGuide] = []
        self._pending: Point | None = None
        self._origins: dict[str, tuple[Position, Size]] = {}
        self._start_bounds: dict[str, Bounds] = {}
        self._created: list[str] = []

    @property
    def active(self) -> bool:
        return self.state is DragState.DRAGGING

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def begin(
        self,
        kind: DragKind | str,
        component_ids: Sequence[str] = (),
        pointer: Point = (0.0, 0.0),
        *,
        handle: ResizeHandle | str | None = None,
        component_type: str | None = None,
        registry: ComponentRegistry | None = None,
    ) -> OperationResult:
        """Start a drag.

        Args:
            kind: move, resize, create or duplicate.
            component_ids: Components under the pointer (ignored for create).
            pointer: Pointer-down position in document space.
            handle: Resize grip (resize drags only).
            component_type: Palette type (create drags only).
            registry: Metadata for created components.
        """
        kind = DragKind(kind)
        label = f"{kind.value} drag"
        if self.active:
            return OperationResult.failure(
                label, ErrorKind.INVALID_OPERATION, "A drag is already in progress"
            )

        created: list[str] = []
        grip = None
        if kind is DragKind.CREATE:
            if not component_type:
                return OperationResult.failure(
                    label, ErrorKind.INVALID_OPERATION, "Create drags need a component type"
                )
            component = self.document.create_component(
                component_type, registry, x=pointer[0], y=pointer[1]
            )
            ids = [component.id]
            created = [component.id]
        else:
            ids, failure = resolve_targets(self.document, component_ids, label)
            if failure:
                return failure
            undraggable = [c for c in ids if not self.document.require(c).flags.draggable]
            if undraggable:
                return OperationResult.failure(
                    label,
                    ErrorKind.INVALID_OPERATION,
                    f"Not draggable: {', '.join(undraggable)}",
                )
            if kind is DragKind.RESIZE:
                if len(ids) != 1 or handle is None:
                    return OperationResult.failure(
                        label,
                        ErrorKind.INVALID_OPERATION,
                        "Resize drags need exactly one component and a handle",
                    )
                grip = ResizeHandle(handle)
            if kind is DragKind.DUPLICATE:
                ids, created = self._clone(ids)

        self._origins = {
            cid: (
                self.document.require(cid).position.model_copy(),
                self.document.require(cid).size.model_copy(),
            )
            for cid in ids
        }
        self._start_bounds = {
            cid: compute_bounds(self.document.require(cid), self.document) for cid in ids
        }
        self._created = created
        self._pending = None
        self.guides = []
        self.operation = DragOperation(
            kind=kind,
            start_pointer=pointer,
            current_pointer=pointer,
            component_ids=list(ids),
            handle=grip,
        )
        self.state = DragState.DRAGGING
        return OperationResult.success(label, ids, ids)

    def pointer_move(self, x: float, y: float) -> bool:
        """Record the latest pointer; applied on the next `flush`.

        Returns:
            False when no drag is active.
        """
        if not self.active:
            return False
        self._pending = (x, y)
        return True

    def flush(self) -> list[SnapGuide]:
        """Apply the latest pending pointer to the document.

        Returns:
            Guides to display for this frame.
        """
        if not self.active or self._pending is None or self.operation is None:
            return self.guides
        op = self.operation
        op.current_pointer = self._pending
        self._pending = None
        dx = op.current_pointer[0] - op.start_pointer[0]
        dy = op.current_pointer[1] - op.start_pointer[1]

        if op.kind is DragKind.RESIZE:
            self._apply_resize(dx, dy)
        else:
            self._apply_move(dx, dy)
            op.drop_zone_id = self._find_drop_zone(*op.current_pointer)
        return self.guides

    def commit(self) -> OperationResult:
        """Finish the drag (pointer-up).

        Moves/creates over a different drop zone are reparented into it,
        keeping their absolute position.

        Returns:
            Result labelled with the drag kind; `affected` is empty when the
            drag changed nothing.
        """
        if not self.active or self.operation is None:
            return OperationResult.failure(
                "drag", ErrorKind.INVALID_OPERATION, "No drag in progress"
            )
        self.flush()
        op = self.operation
        ids = op.component_ids

        if op.drop_zone_id is not None and op.kind is not DragKind.RESIZE:
            for cid in ids:
                self.document.reparent(cid, op.drop_zone_id)
            logger.debug(f"Dropped {len(ids)} component(s) into {op.drop_zone_id}")

        changed = [cid for cid in ids if self._changed(cid)]
        affected = list(self._created) or changed
        if op.drop_zone_id is not None:
            affected = list(dict.fromkeys([*affected, *ids]))
        for cid in affected:
            if cid in self.document and cid not in self._created:
                self.document.touch(cid)

        self._reset(DragState.IDLE)
        return OperationResult.success(op.kind.value, affected, ids)

    def cancel(self) -> OperationResult:
        """Abort the drag (Escape), restoring pre-drag state.

        Components created by create/duplicate drags are removed.
        """
        if not self.active or self.operation is None:
            return OperationResult.failure(
                "cancel drag", ErrorKind.INVALID_OPERATION, "No drag in progress"
            )
        for cid, (position, size) in self._origins.items():
            if cid in self.document and cid not in self._created:
                component = self.document.require(cid)
                component.position = position.model_copy()
                component.size = size.model_copy()
        created_roots = self.document.top_level(self._created)
        for cid in created_roots:
            self.document.remove_subtree(cid)
        logger.info(f"Cancelled {self.operation.kind.value} drag")
        restored = list(self._origins)
        self._reset(DragState.CANCELLED)
        return OperationResult.success("cancel drag", restored)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _reset(self, state: DragState) -> None:
        self.state = state
        self.operation = None
        self.guides = []
        self._pending = None
        self._origins = {}
        self._start_bounds = {}
        self._created = []

    def _clone(self, ids: list[str]) -> tuple[list[str], list[str]]:
        clones: list[str] = []
        created: list[str] = []
        for cid in ids:
            new_root, new_ids = self.document.clone_subtree(cid)
            parent_id = self.document.require(cid).parent_id
            index = self.document.index_in_parent(cid) + 1
            self.document.attach(new_root, parent_id, index)
            clones.append(new_root)
            created.extend(new_ids)
        return clones, created

    def _changed(self, component_id: str) -> bool:
        component = self.document.require(component_id)
        position, size = self._origins[component_id]
        return component.position != position or component.size != size

    def _sibling_bounds(self, component_id: str) -> list[tuple[str, Bounds]]:
        dragged = set(self.operation.component_ids) if self.operation else set()
        return [
            (s.id, compute_bounds(s, self.document))
            for s in self.document.siblings_of(component_id)
            if s.id not in dragged and s.flags.visible
        ]

    def _apply_move(self, dx: float, dy: float) -> None:
        op = self.operation
        primary = op.component_ids[0]
        start = self._start_bounds[primary]
        settings = self.document.settings
        result = snap_move(
            start.translate(dx, dy),
            self._sibling_bounds(primary),
            settings.grid_size,
            settings.snap_enabled,
        )
        snapped_dx = result.x - start.left
        snapped_dy = result.y - start.top
        for cid in op.component_ids:
            origin, _ = self._origins[cid]
            position = self.document.require(cid).position
            position.x = origin.x + snapped_dx
            position.y = origin.y + snapped_dy
        self.guides = result.guides

    def _apply_resize(self, dx: float, dy: float) -> None:
        op = self.operation
        cid = op.component_ids[0]
        component = self.document.require(cid)
        settings = self.document.settings
        result = snap_resize(
            self._start_bounds[cid],
            op.handle,
            dx,
            dy,
            constraints=component.constraints,
            siblings=self._sibling_bounds(cid),
            grid_size=settings.grid_size,
            snap_enabled=settings.snap_enabled,
        )
        box = result.bounds
        component.position = Position(x=box.left, y=box.top)
        component.size = Size(width=box.width, height=box.height)
        self.guides = result.guides

    def _find_drop_zone(self, x: float, y: float) -> str | None:
        """Deepest droppable container under the pointer accepting the drag.

        Returns None when the best target is the current parent.
        """
        op = self.operation
        primary = self.document.require(op.component_ids[0])
        excluded = set(op.component_ids)
        for cid in op.component_ids:
            excluded.update(self.document.descendants(cid))

        target: str | None = None
        level: str | None = None
        while True:
            hit = None
            for child in reversed(self.document.children_of(level)):
                if child.id in excluded or not child.flags.visible:
                    continue
                if contains_point(absolute_bounds(self.document, child.id), x, y):
                    hit = child
                    break
            if hit is None:
                break
            if all(
                hit.accepts_type(self.document.require(c).type) for c in op.component_ids
            ):
                target = hit.id
            level = hit.id

        if target == primary.parent_id:
            return None
        return target


__all__ = ["DragState", "DragKind", "DragOperation", "DragSession"]
