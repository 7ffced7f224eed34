"""Editor facade: one method per user intent.

The editor owns the document, the selection, the undo/redo history and the
active drag session. Every mutating method returns an `OperationResult`;
successful results that changed something are recorded as exactly one
history entry, after the mutation has completed. Rejected operations leave
both the document and the history untouched.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from pagecraft.codegen import CodeGenerationOptions, generate
from pagecraft.collab import (
    MutationPublisher,
    RemoteMutation,
    apply_changes,
    apply_remote_mutation,
    build_mutation,
)
from pagecraft.history import HistoryManager
from pagecraft.model import (
    Breakpoint,
    CorruptDocumentError,
    Document,
    DocumentSnapshot,
    Settings,
    validate_document,
)
from pagecraft.schema import BuiltinRegistry, ComponentRegistry
from pagecraft.selection import Selection
from pagecraft.snap import ResizeHandle, SnapGuide
from pagecraft.transform import (
    AlignMode,
    DistributeAxis,
    DragKind,
    DragSession,
    DragState,
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
    ungroup,
)

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class Editor:
    """Single-writer editing session for one document.

    Example:
        >>> editor = Editor()
        >>> hero = editor.add_component("hero", x=0, y=0)
        >>> editor.move(dx=20, dy=0)
        >>> editor.undo().ok
        True
        >>> editor.generate("vue").output.paths[0]
        'src/components/Hero.vue'

    Args:
        document: Document to edit. A new empty document when None.
        registry: Component metadata source for created components.
        history_limit: Undoable history steps (PAGECRAFT_HISTORY_LIMIT
            when None).
        publisher: Receives local changes for collaborators.
        user_id: Author id attached to published changes.
    """

    def __init__(
        self,
        document: Document | None = None,
        registry: ComponentRegistry | None = None,
        history_limit: int | None = None,
        publisher: MutationPublisher | None = None,
        user_id: str = "local",
    ):
        self.document = document if document is not None else Document()
        self.registry = registry or BuiltinRegistry()
        self.selection = Selection()
        self.history = HistoryManager(history_limit)
        self.history.reset(self.document.snapshot())
        self.publisher = publisher
        self.user_id = user_id
        self._drag: DragSession | None = None
        self._sequence = 0

    # =========================================================================
    # State
    # =========================================================================

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def drag_state(self) -> DragState:
        return self._drag.state if self._drag else DragState.IDLE

    @property
    def guides(self) -> list[SnapGuide]:
        """Snap guides of the drag in progress."""
        return self._drag.guides if self._drag and self._drag.active else []

    def _targets(self, component_ids: Sequence[str] | None) -> list[str]:
        return list(component_ids) if component_ids is not None else self.selection.ids

    def _record(self, result: OperationResult) -> OperationResult:
        """Apply the result's selection and commit a history entry."""
        if not result.ok:
            return result
        if result.selection is not None:
            self.selection.select_many(result.selection)
        self.selection.prune(self.document)
        if result.affected:
            previous = self.history.current
            self.history.save(
                self.document.snapshot(), result.label, tuple(self.selection.ids)
            )
            if previous is not None:
                self._publish(previous.snapshot, result)
        return result

    def _publish(self, before: DocumentSnapshot, result: OperationResult) -> None:
        if self.publisher is None or result.label.startswith("remote:"):
            return
        for cid in result.affected:
            if cid not in before.components or cid not in self.document:
                continue
            mutation = build_mutation(
                before.components[cid],
                self.document.require(cid),
                self.user_id,
                self._sequence + 1,
            )
            if mutation is not None:
                self._sequence += 1
                self.publisher.publish(mutation)

    # =========================================================================
    # Selection
    # =========================================================================

    def _selected(self, label: str = "select") -> OperationResult:
        return OperationResult.success(label, (), self.selection.ids)

    def select(
        self, component_ids: Sequence[str] | str, additive: bool = False
    ) -> OperationResult:
        """Replace (or extend) the selection."""
        ids = [component_ids] if isinstance(component_ids, str) else list(component_ids)
        missing = [cid for cid in ids if cid not in self.document]
        if missing:
            return OperationResult.failure(
                "select", ErrorKind.NOT_FOUND, f"Unknown component(s): {', '.join(missing)}"
            )
        if additive:
            for cid in ids:
                self.selection.add(cid)
        else:
            self.selection.select_many(ids)
        return self._selected()

    def toggle_selection(self, component_id: str) -> OperationResult:
        """Shift-click: add or remove one component."""
        if component_id not in self.document:
            return OperationResult.failure(
                "select", ErrorKind.NOT_FOUND, f"Unknown component '{component_id}'"
            )
        self.selection.toggle(component_id)
        return self._selected()

    def select_all(self) -> OperationResult:
        self.selection.select_all(self.document)
        return self._selected()

    def clear_selection(self) -> OperationResult:
        self.selection.clear()
        return self._selected()

    def cycle_selection(self, step: int = 1) -> OperationResult:
        """Tab / Shift-Tab through siblings."""
        self.selection.cycle(self.document, step)
        return self._selected()

    def marquee_begin(self, x: float, y: float) -> None:
        self.selection.begin_marquee(x, y)

    def marquee_update(self, x: float, y: float) -> None:
        self.selection.update_marquee(x, y)

    def marquee_end(self, additive: bool = False) -> OperationResult:
        """Select the root components under the rubber band."""
        self.selection.end_marquee(self.document, additive)
        return self._selected()

    # =========================================================================
    # Creation and edits
    # =========================================================================

    def add_component(
        self,
        component_type: str,
        *,
        parent_id: str | None = None,
        x: float = 0.0,
        y: float = 0.0,
        index: int | None = None,
        props: dict[str, Any] | None = None,
        style: dict[str, Any] | None = None,
        width: float | str | None = None,
        height: float | str | None = None,
    ) -> OperationResult:
        """Create a component from the palette.

        The parent (if any) must be a droppable container accepting the type.
        The new component becomes the selection.
        """
        label = "add"
        failure = self._check_parent(parent_id, [component_type], label)
        if failure:
            return failure
        component = self.document.create_component(
            component_type,
            self.registry,
            x=x,
            y=y,
            parent_id=parent_id,
            index=index,
            props=props,
            style=style,
            width=width,
            height=height,
        )
        return self._record(OperationResult.success(label, [component.id], [component.id]))

    def insert_tree(
        self,
        tree: dict[str, Any] | list[dict[str, Any]],
        parent_id: str | None = None,
        index: int | None = None,
    ) -> OperationResult:
        """Insert a nested subtree (template or generator output) with fresh ids."""
        label = "insert"
        nodes = tree if isinstance(tree, list) else [tree]
        types = [n.get("type", "") for n in nodes if isinstance(n, Mapping)]
        failure = self._check_parent(parent_id, types, label)
        if failure:
            return failure
        before = self.document.snapshot()
        try:
            inserted = self.document.insert_tree(tree, parent_id, index, self.registry)
        except (PydanticValidationError, ValueError, TypeError, AttributeError) as e:
            self.document.restore(before)
            return OperationResult.failure(label, ErrorKind.INVALID_OPERATION, str(e))
        created = [cid for cid in self.document.components if cid not in before.components]
        return self._record(OperationResult.success(label, created, inserted))

    def _check_parent(
        self, parent_id: str | None, types: Sequence[str], label: str
    ) -> OperationResult | None:
        if parent_id is None:
            return None
        parent = self.document.get(parent_id)
        if parent is None:
            return OperationResult.failure(
                label, ErrorKind.NOT_FOUND, f"Unknown parent '{parent_id}'"
            )
        rejected = [t for t in types if not parent.accepts_type(t)]
        if rejected:
            return OperationResult.failure(
                label,
                ErrorKind.INVALID_OPERATION,
                f"'{parent_id}' does not accept: {', '.join(rejected)}",
            )
        return None

    def update_component(
        self,
        component_id: str,
        *,
        props: dict[str, Any] | None = None,
        style: dict[str, Any] | None = None,
        flags: dict[str, Any] | None = None,
    ) -> OperationResult:
        """Merge props, style or flags into a component.

        A `None` value inside props/style removes that key.
        """
        changes = {
            name: value
            for name, value in (("props", props), ("style", style), ("flags", flags))
            if value is not None
        }
        return self._record(apply_changes(self.document, component_id, changes, "update"))

    # =========================================================================
    # Transforms
    # =========================================================================

    def move(
        self, component_ids: Sequence[str] | None = None, dx: float = 0.0, dy: float = 0.0
    ) -> OperationResult:
        """Nudge components (the selection by default) by a delta."""
        return self._record(move_by(self.document, self._targets(component_ids), dx, dy))

    def move_to(self, component_id: str, x: float, y: float) -> OperationResult:
        return self._record(move_to(self.document, component_id, x, y))

    def resize(
        self,
        component_id: str,
        width: float,
        height: float,
        handle: ResizeHandle | str | None = None,
    ) -> OperationResult:
        return self._record(resize(self.document, component_id, width, height, handle))

    def align(
        self, mode: AlignMode | str, component_ids: Sequence[str] | None = None
    ) -> OperationResult:
        return self._record(align(self.document, self._targets(component_ids), mode))

    def distribute(
        self, axis: DistributeAxis | str, component_ids: Sequence[str] | None = None
    ) -> OperationResult:
        return self._record(distribute(self.document, self._targets(component_ids), axis))

    def group(
        self, component_ids: Sequence[str] | None = None, padding: float | None = None
    ) -> OperationResult:
        return self._record(
            group(self.document, self._targets(component_ids), padding, self.registry)
        )

    def ungroup(self, component_ids: Sequence[str] | None = None) -> OperationResult:
        return self._record(ungroup(self.document, self._targets(component_ids)))

    def duplicate(
        self, component_ids: Sequence[str] | None = None, offset: float | None = None
    ) -> OperationResult:
        return self._record(duplicate(self.document, self._targets(component_ids), offset))

    def delete(self, component_ids: Sequence[str] | None = None) -> OperationResult:
        return self._record(delete(self.document, self._targets(component_ids)))

    # =========================================================================
    # Drag
    # =========================================================================

    def begin_drag(
        self,
        kind: DragKind | str,
        pointer: Point,
        component_ids: Sequence[str] | None = None,
        *,
        handle: ResizeHandle | str | None = None,
        component_type: str | None = None,
    ) -> OperationResult:
        """Pointer-down on a component, handle or palette item.

        Nothing is recorded until `end_drag`.
        """
        if self._drag is not None and self._drag.active:
            return OperationResult.failure(
                "drag", ErrorKind.INVALID_OPERATION, "A drag is already in progress"
            )
        kind = DragKind(kind)
        ids = [] if kind is DragKind.CREATE else self._targets(component_ids)
        session = DragSession(self.document)
        result = session.begin(
            kind,
            ids,
            pointer,
            handle=handle,
            component_type=component_type,
            registry=self.registry,
        )
        if result:
            self._drag = session
            self.selection.select_many(result.selection or [])
        return result

    def pointer_move(self, x: float, y: float) -> bool:
        """Queue a pointer position; applied on the next `frame`."""
        return self._drag is not None and self._drag.pointer_move(x, y)

    def frame(self) -> list[SnapGuide]:
        """Animation-frame tick: apply the latest pointer position."""
        if self._drag is None:
            return []
        return self._drag.flush()

    def end_drag(self) -> OperationResult:
        """Pointer-up: commit the drag as one history entry."""
        if self._drag is None or not self._drag.active:
            return OperationResult.failure(
                "drag", ErrorKind.INVALID_OPERATION, "No drag in progress"
            )
        session, self._drag = self._drag, None
        return self._record(session.commit())

    def cancel_drag(self) -> OperationResult:
        """Escape: restore the pre-drag state without a history entry."""
        if self._drag is None or not self._drag.active:
            return OperationResult.failure(
                "cancel drag", ErrorKind.INVALID_OPERATION, "No drag in progress"
            )
        session, self._drag = self._drag, None
        result = session.cancel()
        self.selection.prune(self.document)
        return result

    # =========================================================================
    # History
    # =========================================================================

    def undo(self) -> OperationResult:
        """Restore the state before the last recorded operation."""
        return self._travel("undo", self.history.undo)

    def redo(self) -> OperationResult:
        """Re-apply the last undone operation."""
        return self._travel("redo", self.history.redo)

    def _travel(self, label: str, step) -> OperationResult:
        if self._drag is not None and self._drag.active:
            self.cancel_drag()
        snapshot = step()
        if snapshot is None:
            logger.debug(f"Nothing to {label}")
            return OperationResult(
                ok=False,
                label=label,
                error=OperationError(ErrorKind.HISTORY_EXHAUSTED, f"Nothing to {label}"),
            )
        previous = self.document.components
        self.document.restore(snapshot)
        changed = sorted(
            cid
            for cid in set(previous) | set(self.document.components)
            if previous.get(cid) != self.document.components.get(cid)
        )
        entry = self.history.current
        self.selection.select_many(entry.selection if entry else ())
        self.selection.prune(self.document)
        return OperationResult.success(label, changed, self.selection.ids)

    # =========================================================================
    # Settings
    # =========================================================================

    def _update_settings(self, label: str, **changes: Any) -> OperationResult:
        current = self.document.settings.model_dump()
        try:
            self.document.settings = Settings.model_validate({**current, **changes})
        except PydanticValidationError as e:
            return OperationResult.failure(label, ErrorKind.INVALID_OPERATION, str(e))
        return OperationResult.success(label)

    def set_grid_size(self, size: int) -> OperationResult:
        """Set the grid size (clamped to 5-100)."""
        return self._update_settings("set grid size", grid_size=size)

    def toggle_snap(self, enabled: bool | None = None) -> OperationResult:
        value = not self.document.settings.snap_enabled if enabled is None else enabled
        return self._update_settings("toggle snap", snap_enabled=value)

    def set_zoom(self, zoom: float) -> OperationResult:
        """Set the zoom percentage (clamped to 25-300)."""
        return self._update_settings("set zoom", zoom=zoom)

    def set_breakpoint(self, breakpoint: Breakpoint | str) -> OperationResult:
        return self._update_settings("set breakpoint", active_breakpoint=breakpoint)

    # =========================================================================
    # Documents, collaboration and output
    # =========================================================================

    def load(self, data: Document | Mapping[str, Any]) -> OperationResult:
        """Replace the document, resetting selection and history.

        Corrupt documents are refused and the current document is kept.
        """
        try:
            if isinstance(data, Document):
                errors = validate_document(data.to_dict())
                if errors:
                    raise CorruptDocumentError(errors)
                document = data
            else:
                document = Document.from_dict(data)
        except CorruptDocumentError as e:
            return OperationResult.failure("load", ErrorKind.CORRUPT_TREE, str(e))
        if self._drag is not None and self._drag.active:
            self.cancel_drag()
        self.document = document
        self._drag = None
        self.selection.clear()
        self.history.reset(document.snapshot())
        logger.info(f"Loaded document {document.id} ({len(document)} components)")
        return OperationResult.success("load")

    def apply_remote(self, event: RemoteMutation | Mapping[str, Any]) -> OperationResult:
        """Apply a collaborator's change as one history entry.

        Malformed feed events are reported as `invalid_operation`.
        """
        if not isinstance(event, RemoteMutation):
            try:
                event = RemoteMutation.from_dict(dict(event))
            except (KeyError, TypeError, ValueError) as e:
                return OperationResult.failure(
                    "remote update",
                    ErrorKind.INVALID_OPERATION,
                    f"Malformed remote event: {e!r}",
                )
        return self._record(apply_remote_mutation(self.document, event))

    def generate(
        self, target: str | None = None, options: CodeGenerationOptions | None = None
    ) -> OperationResult:
        """Generate code from the current document.

        Returns:
            Result whose `output` is the `CodeGenerationResult`; unknown
            targets are reported as `invalid_operation`.
        """
        label = f"generate {target}" if target else "generate"
        try:
            output = generate(self.document, target, options)
        except KeyError as e:
            return OperationResult.failure(label, ErrorKind.INVALID_OPERATION, e.args[0])
        result = OperationResult.success(label)
        result.output = output
        return result


__all__ = ["Editor"]
