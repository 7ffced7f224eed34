"""Document model for the page builder.

The document is the **source of truth** every other subsystem reads:
selection, snapping, history and code generation all address components
by id through this arena instead of holding object references.

Components live in a flat `id -> Component` mapping; parent/child links are
id references (`children`, `parent_id`). Root order is kept in `roots`.
"""

import copy
import logging
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from pydantic import ValidationError as PydanticValidationError

from pagecraft.config import get_grid_size
from pagecraft.schema import BuiltinRegistry, ComponentRegistry, ComponentSpec

logger = logging.getLogger(__name__)

AUTO = "auto"

GRID_SIZE_RANGE = (5, 100)
ZOOM_RANGE = (25.0, 300.0)


def _utcnow() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# Component fields
# =============================================================================


class Position(BaseModel):
    """Offset of a component inside its parent's coordinate space."""

    model_config = ConfigDict(allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0


class Size(BaseModel):
    """Component extent; either side may be the symbolic value "auto"."""

    model_config = ConfigDict(allow_inf_nan=False)

    width: float | Literal["auto"] = 100.0
    height: float | Literal["auto"] = 40.0


class Constraints(BaseModel):
    """Resize limits enforced by the snap engine."""

    model_config = ConfigDict(allow_inf_nan=False)

    min_width: float | None = Field(default=None, ge=0)
    min_height: float | None = Field(default=None, ge=0)
    max_width: float | None = Field(default=None, ge=0)
    max_height: float | None = Field(default=None, ge=0)
    aspect_ratio: float | None = Field(
        default=None, gt=0, description="width / height"
    )

    def is_empty(self) -> bool:
        """True when no limit is set."""
        return all(value is None for value in self.model_dump().values())


class Flags(BaseModel):
    """Interaction flags.

    Attributes:
        locked: Component is immutable to transforms.
        visible: Component is rendered and hit-testable.
        draggable: Component may start a drag.
        droppable: Component accepts dropped children.
    """

    locked: bool = False
    visible: bool = True
    draggable: bool = True
    droppable: bool = False


class Metadata(BaseModel):
    """Bookkeeping updated on every mutation."""

    created_at: datetime = Field(default_factory=_utcnow)
    modified_at: datetime = Field(default_factory=_utcnow)
    version: int = Field(default=1, ge=1)


class Component(BaseModel):
    """One node of the editable tree.

    Attributes:
        id: Unique, never-reused identifier.
        type: Tag selecting the renderer/emitter template.
        props: Serializable component properties.
        style: Style properties, independent from props.
        position: Offset in the parent's coordinate space.
        size: Width/height (number or "auto").
        children: Ordered child ids.
        parent_id: Owning component id, None for roots.
        constraints: Optional resize limits.
        flags: Interaction flags.
        accepts: Child types admitted when droppable (None = any).
        metadata: Timestamps and mutation counter.
    """

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    props: dict[str, Any] = Field(default_factory=dict)
    style: dict[str, Any] = Field(default_factory=dict)
    position: Position = Field(default_factory=Position)
    size: Size = Field(default_factory=Size)
    children: list[str] = Field(default_factory=list)
    parent_id: str | None = None
    constraints: Constraints | None = None
    flags: Flags = Field(default_factory=Flags)
    accepts: list[str] | None = None
    metadata: Metadata = Field(default_factory=Metadata)

    def accepts_type(self, component_type: str) -> bool:
        """Check whether this component is a drop zone for a type."""
        if not self.flags.droppable:
            return False
        return self.accepts is None or component_type in self.accepts


# =============================================================================
# Document settings
# =============================================================================


class Breakpoint(str, Enum):
    """Viewport the canvas is currently designed for."""

    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


class Settings(BaseModel):
    """Per-project canvas settings.

    `grid_size` is clamped to 5-100 and `zoom` (percent) to 25-300.
    `active_breakpoint` only selects the canvas preview width; code
    generation ignores it.
    """

    grid_size: int = Field(default_factory=get_grid_size, validate_default=True)
    snap_enabled: bool = True
    zoom: float = 100.0
    active_breakpoint: Breakpoint = Breakpoint.DESKTOP

    @field_validator("grid_size")
    @classmethod
    def _clamp_grid(cls, value: int) -> int:
        low, high = GRID_SIZE_RANGE
        return max(low, min(high, value))

    @field_validator("zoom")
    @classmethod
    def _clamp_zoom(cls, value: float) -> float:
        low, high = ZOOM_RANGE
        return max(low, min(high, value))


# =============================================================================
# Integrity validation
# =============================================================================


@dataclass
class ValidationError:
    """Represents an integrity error in a document.

    Attributes:
        node_id: ID of the component where the error occurred.
        message: Human-readable error description.
        error_type: Machine-readable error classification.
    """

    node_id: str
    message: str
    error_type: str


class CorruptDocumentError(ValueError):
    """Raised when a loaded document fails integrity validation."""

    def __init__(self, errors: list[ValidationError]):
        self.errors = errors
        summary = "; ".join(e.message for e in errors[:5])
        more = f" (+{len(errors) - 5} more)" if len(errors) > 5 else ""
        super().__init__(f"Corrupt document: {summary}{more}")


@dataclass(frozen=True)
class DocumentSnapshot:
    """Immutable copy of the component arena.

    Attributes:
        components: Read-only mapping of deep-copied components.
        roots: Root order at snapshot time.
    """

    components: Mapping[str, Component]
    roots: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain data."""
        return {
            "components": {
                cid: c.model_dump(mode="json") for cid, c in self.components.items()
            },
            "roots": list(self.roots),
        }


# =============================================================================
# Document
# =============================================================================


class Document(BaseModel):
    """Component arena plus canvas settings for one project.

    Mutate only through the transform operations and `Editor`; the methods
    here keep the tree invariants (unique ids, one parent, no cycles) but do
    not record history.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = "Untitled"
    components: dict[str, Component] = Field(default_factory=dict)
    roots: list[str] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)

    _issued: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._issued.update(self.components)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def __contains__(self, component_id: object) -> bool:
        return component_id in self.components

    def __len__(self) -> int:
        return len(self.components)

    def get(self, component_id: str) -> Component | None:
        """Get a component by id."""
        return self.components.get(component_id)

    def require(self, component_id: str) -> Component:
        """Get a component by id.

        Raises:
            KeyError: If no component has this id.
        """
        try:
            return self.components[component_id]
        except KeyError:
            raise KeyError(f"Unknown component '{component_id}'") from None

    def child_ids(self, parent_id: str | None) -> list[str]:
        """Ordered child ids of a parent (root ids when parent_id is None)."""
        if parent_id is None:
            return self.roots
        return self.require(parent_id).children

    def children_of(self, parent_id: str | None) -> list[Component]:
        """Ordered children of a parent (roots when parent_id is None)."""
        return [self.components[cid] for cid in self.child_ids(parent_id)]

    def parent_of(self, component_id: str) -> Component | None:
        """Get the parent component, or None for roots."""
        parent_id = self.require(component_id).parent_id
        return self.components.get(parent_id) if parent_id else None

    def siblings_of(self, component_id: str) -> list[Component]:
        """Components sharing the parent of `component_id`, in order."""
        parent_id = self.require(component_id).parent_id
        return [c for c in self.children_of(parent_id) if c.id != component_id]

    def index_in_parent(self, component_id: str) -> int:
        """Position of a component within its parent's child list."""
        parent_id = self.require(component_id).parent_id
        return self.child_ids(parent_id).index(component_id)

    def ancestors(self, component_id: str) -> list[str]:
        """Ancestor ids from the direct parent up to the root."""
        result: list[str] = []
        current = self.require(component_id).parent_id
        while current is not None:
            result.append(current)
            current = self.components[current].parent_id
        return result

    def is_ancestor(self, ancestor_id: str, component_id: str) -> bool:
        """Check whether `ancestor_id` is a proper ancestor of `component_id`."""
        return ancestor_id in self.ancestors(component_id)

    def descendants(self, component_id: str) -> list[str]:
        """All descendant ids in pre-order, excluding the component itself."""
        result: list[str] = []
        stack = list(reversed(self.require(component_id).children))
        while stack:
            cid = stack.pop()
            result.append(cid)
            stack.extend(reversed(self.components[cid].children))
        return result

    def walk(self, parent_id: str | None = None) -> Iterator[Component]:
        """Iterate components in document (pre-)order under a parent."""
        for cid in list(self.child_ids(parent_id)):
            component = self.components[cid]
            yield component
            yield from self.walk(cid)

    def top_level(self, component_ids: list[str]) -> list[str]:
        """Drop ids whose ancestor is also listed, keeping input order."""
        wanted = set(component_ids)
        return [
            cid
            for cid in component_ids
            if cid in self.components
            and not any(a in wanted for a in self.ancestors(cid))
        ]

    def origin_of(self, parent_id: str | None) -> tuple[float, float]:
        """Document-space origin of a parent's coordinate space."""
        x = y = 0.0
        current = parent_id
        while current is not None:
            component = self.components[current]
            x += component.position.x
            y += component.position.y
            current = component.parent_id
        return x, y

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def new_id(self, prefix: str = "c") -> str:
        """Issue an id never used before in this document."""
        while True:
            candidate = f"{prefix}-{uuid4().hex[:8]}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate

    def create_component(
        self,
        component_type: str,
        registry: ComponentRegistry | None = None,
        *,
        x: float = 0.0,
        y: float = 0.0,
        parent_id: str | None = None,
        index: int | None = None,
        props: dict[str, Any] | None = None,
        style: dict[str, Any] | None = None,
        width: float | str | None = None,
        height: float | str | None = None,
    ) -> Component:
        """Create a component from registry metadata and add it.

        Unknown types get generic defaults rather than failing.

        Args:
            component_type: Type tag.
            registry: Metadata source; built-in registry when None.
            x: Position in the parent's space.
            y: Position in the parent's space.
            parent_id: Parent to attach to (root when None).
            index: Insertion index among siblings (append when None).
            props: Props merged over the registry defaults.
            style: Initial style.
            width: Overrides the default width.
            height: Overrides the default height.

        Returns:
            The added component.
        """
        spec = (registry or BuiltinRegistry()).get(component_type)
        if spec is None:
            logger.debug(f"No registry entry for '{component_type}', using defaults")
        component = self._instantiate(
            component_type,
            spec,
            x=x,
            y=y,
            props=props,
            style=style,
            width=width,
            height=height,
        )
        return self.add(component, parent_id=parent_id, index=index)

    def _instantiate(
        self,
        component_type: str,
        spec: ComponentSpec | None,
        *,
        x: float,
        y: float,
        props: dict[str, Any] | None,
        style: dict[str, Any] | None,
        width: float | str | None,
        height: float | str | None,
        component_id: str | None = None,
    ) -> Component:
        default_w, default_h = spec.default_size if spec else (100.0, 40.0)
        merged_props = copy.deepcopy(spec.default_props) if spec else {}
        merged_props.update(copy.deepcopy(props or {}))
        constraints = None
        if spec is not None:
            candidate = Constraints(**spec.constraints.to_dict())
            constraints = None if candidate.is_empty() else candidate
        return Component(
            id=component_id or self.new_id(component_type),
            type=component_type,
            props=merged_props,
            style=copy.deepcopy(style or {}),
            position=Position(x=x, y=y),
            size=Size(
                width=default_w if width is None else width,
                height=default_h if height is None else height,
            ),
            constraints=constraints,
            flags=Flags(droppable=spec.droppable if spec else False),
            accepts=list(spec.accepts) if spec and spec.accepts is not None else None,
        )

    def add(
        self,
        component: Component,
        parent_id: str | None = None,
        index: int | None = None,
    ) -> Component:
        """Attach a childless component to the tree.

        Raises:
            ValueError: If the id is taken or the component has children.
            KeyError: If the parent does not exist.
        """
        if component.id in self.components:
            raise ValueError(f"Duplicate component id '{component.id}'")
        if component.children:
            raise ValueError("Use insert_tree() to add components with children")
        siblings = self.child_ids(parent_id)
        component.parent_id = parent_id
        self.components[component.id] = component
        self._issued.add(component.id)
        if index is None:
            siblings.append(component.id)
        else:
            siblings.insert(index, component.id)
        return component

    def insert_tree(
        self,
        tree: dict[str, Any] | list[dict[str, Any]],
        parent_id: str | None = None,
        index: int | None = None,
        registry: ComponentRegistry | None = None,
    ) -> list[str]:
        """Insert a nested component subtree with fresh ids.

        Accepts the nested form produced by `to_tree()` and by external
        template/AI generators: `{"type", "props", "style", "position",
        "size", "children": [...]}`. Missing fields take registry defaults;
        incoming ids are ignored.

        Returns:
            Ids of the inserted top-level components.
        """
        registry = registry or BuiltinRegistry()
        nodes = tree if isinstance(tree, list) else [tree]
        inserted: list[str] = []
        for offset, node in enumerate(nodes):
            at = None if index is None else index + offset
            inserted.append(self._insert_node(node, parent_id, at, registry))
        return inserted

    def _insert_node(
        self,
        node: dict[str, Any],
        parent_id: str | None,
        index: int | None,
        registry: ComponentRegistry,
    ) -> str:
        component_type = node.get("type")
        if not isinstance(component_type, str) or not component_type:
            raise ValueError("Subtree node is missing a 'type'")
        position = node.get("position") or {}
        size = node.get("size") or {}
        component = self._instantiate(
            component_type,
            registry.get(component_type),
            x=position.get("x", 0.0),
            y=position.get("y", 0.0),
            props=node.get("props"),
            style=node.get("style"),
            width=size.get("width"),
            height=size.get("height"),
        )
        if "flags" in node:
            component.flags = Flags.model_validate(
                {**component.flags.model_dump(), **node["flags"]}
            )
        if "constraints" in node and node["constraints"] is not None:
            component.constraints = Constraints.model_validate(node["constraints"])
        self.add(component, parent_id=parent_id, index=index)
        for child in node.get("children", []):
            self._insert_node(child, component.id, None, registry)
        return component.id

    # -------------------------------------------------------------------------
    # Structural mutation
    # -------------------------------------------------------------------------

    def touch(self, component_id: str) -> Component:
        """Record a mutation: bump version and modification time."""
        component = self.require(component_id)
        component.metadata.version += 1
        component.metadata.modified_at = _utcnow()
        return component

    def detach(self, component_id: str) -> int:
        """Unlink a component from its parent, keeping it in the arena.

        Returns:
            The index it occupied among its siblings.
        """
        component = self.require(component_id)
        siblings = self.child_ids(component.parent_id)
        index = siblings.index(component_id)
        siblings.pop(index)
        component.parent_id = None
        return index

    def attach(
        self, component_id: str, parent_id: str | None, index: int | None = None
    ) -> None:
        """Link a detached arena component under a parent."""
        component = self.require(component_id)
        if parent_id is not None and (
            parent_id == component_id or self.is_ancestor(component_id, parent_id)
        ):
            raise ValueError(f"Cannot attach '{component_id}' inside itself")
        siblings = self.child_ids(parent_id)
        component.parent_id = parent_id
        if index is None:
            siblings.append(component_id)
        else:
            siblings.insert(index, component_id)

    def reparent(
        self,
        component_id: str,
        parent_id: str | None,
        index: int | None = None,
    ) -> None:
        """Move a component under a new parent, keeping its absolute position.

        Raises:
            ValueError: If the new parent is the component or a descendant.
        """
        if parent_id is not None and (
            parent_id == component_id or self.is_ancestor(component_id, parent_id)
        ):
            raise ValueError(f"Cannot move '{component_id}' inside itself")
        component = self.require(component_id)
        old_x, old_y = self.origin_of(component.parent_id)
        new_x, new_y = self.origin_of(parent_id)
        self.detach(component_id)
        component.position.x += old_x - new_x
        component.position.y += old_y - new_y
        self.attach(component_id, parent_id, index)

    def remove_subtree(self, component_id: str) -> list[str]:
        """Delete a component and every descendant.

        Returns:
            Removed ids, the component first.
        """
        removed = [component_id, *self.descendants(component_id)]
        self.detach(component_id)
        for cid in removed:
            del self.components[cid]
        return removed

    def clone_subtree(self, component_id: str) -> tuple[str, list[str]]:
        """Deep-copy a subtree into the arena under fresh ids (detached).

        Returns:
            (new root id, all new ids).
        """
        mapping: dict[str, str] = {}
        source_ids = [component_id, *self.descendants(component_id)]
        for cid in source_ids:
            mapping[cid] = self.new_id(self.components[cid].type)
        for cid in source_ids:
            source = self.components[cid]
            clone = source.model_copy(deep=True)
            clone.id = mapping[cid]
            clone.children = [mapping[c] for c in source.children]
            clone.parent_id = mapping.get(source.parent_id) if cid != component_id else None
            clone.metadata = Metadata()
            self.components[clone.id] = clone
        return mapping[component_id], list(mapping.values())

    # -------------------------------------------------------------------------
    # Snapshots and serialization
    # -------------------------------------------------------------------------

    def snapshot(self) -> DocumentSnapshot:
        """Take an immutable deep copy of the component arena."""
        return DocumentSnapshot(
            components=MappingProxyType(
                {cid: c.model_copy(deep=True) for cid, c in self.components.items()}
            ),
            roots=tuple(self.roots),
        )

    def restore(self, snapshot: DocumentSnapshot) -> None:
        """Replace the component arena with a copy of a snapshot."""
        self.components = {
            cid: c.model_copy(deep=True) for cid, c in snapshot.components.items()
        }
        self.roots = list(snapshot.roots)
        self._issued.update(self.components)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        return self.model_dump(mode="json")

    def to_tree(self, parent_id: str | None = None) -> list[dict[str, Any]]:
        """Nested view: each component with its children embedded."""
        result = []
        for component in self.children_of(parent_id):
            node = component.model_dump(mode="json", exclude={"children", "parent_id"})
            node["children"] = self.to_tree(component.id)
            result.append(node)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Document":
        """Load a document, rejecting corrupt trees.

        Raises:
            CorruptDocumentError: On duplicate ids, cycles, dangling or
                inconsistent references, non-finite geometry or schema errors.
        """
        return load_document(data)


# =============================================================================
# Loading
# =============================================================================


def _flatten_nested(
    roots: list[Any], errors: list[ValidationError]
) -> tuple[dict[str, dict[str, Any]], list[str]]:
    """Convert nested-tree input to the arena form, reporting duplicates."""
    components: dict[str, dict[str, Any]] = {}
    id_counts: dict[str, int] = {}
    path: set[int] = set()

    def visit(node: Any, parent_id: str | None) -> str | None:
        if not isinstance(node, dict):
            errors.append(
                ValidationError("", "Tree node is not an object", "schema")
            )
            return None
        node_id = str(node.get("id", ""))
        obj_id = id(node)
        if obj_id in path:
            errors.append(
                ValidationError(
                    node_id,
                    f"Cycle detected: node '{node_id}' is its own ancestor",
                    "cycle",
                )
            )
            return None
        id_counts[node_id] = id_counts.get(node_id, 0) + 1
        path.add(obj_id)
        child_ids = []
        for child in node.get("children", []) or []:
            child_id = visit(child, node_id)
            if child_id is not None:
                child_ids.append(child_id)
        path.remove(obj_id)
        flat = {k: v for k, v in node.items() if k != "children"}
        flat["children"] = child_ids
        flat["parent_id"] = parent_id
        components.setdefault(node_id, flat)
        return node_id

    root_ids = [rid for rid in (visit(r, None) for r in roots) if rid is not None]

    for node_id, count in id_counts.items():
        if count > 1:
            errors.append(
                ValidationError(
                    node_id,
                    f"Duplicate ID '{node_id}' appears {count} times",
                    "duplicate_id",
                )
            )
    return components, root_ids


def _check_finite(node_id: str, raw: dict[str, Any], errors: list[ValidationError]) -> None:
    for section, keys in (("position", ("x", "y")), ("size", ("width", "height"))):
        values = raw.get(section) or {}
        if not isinstance(values, dict):
            continue
        for key in keys:
            value = values.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                if not math.isfinite(value):
                    errors.append(
                        ValidationError(
                            node_id,
                            f"{section}.{key} of '{node_id}' is not finite",
                            "non_finite",
                        )
                    )


def _check_arena(
    components: dict[str, dict[str, Any]],
    roots: list[str],
    errors: list[ValidationError],
) -> None:
    """Structural checks on the arena form."""
    owners: dict[str, list[str | None]] = {}

    for rid in roots:
        owners.setdefault(rid, []).append(None)
        if rid not in components:
            errors.append(
                ValidationError(rid, f"Root '{rid}' does not exist", "dangling_reference")
            )

    for key, raw in components.items():
        if not isinstance(raw, dict):
            errors.append(ValidationError(key, f"Component '{key}' is not an object", "schema"))
            continue
        if raw.get("id", key) != key:
            errors.append(
                ValidationError(
                    key,
                    f"Component stored under '{key}' has id '{raw.get('id')}'",
                    "duplicate_id",
                )
            )
        _check_finite(key, raw, errors)
        for child_id in raw.get("children", []) or []:
            owners.setdefault(child_id, []).append(key)
            if child_id not in components:
                errors.append(
                    ValidationError(
                        key,
                        f"Child '{child_id}' of '{key}' does not exist",
                        "dangling_reference",
                    )
                )

    for cid, parents in owners.items():
        if len(parents) > 1:
            errors.append(
                ValidationError(
                    cid,
                    f"Component '{cid}' has {len(parents)} parents",
                    "duplicate_id",
                )
            )
        elif cid in components and isinstance(components[cid], dict):
            declared = components[cid].get("parent_id", parents[0])
            if declared != parents[0]:
                errors.append(
                    ValidationError(
                        cid,
                        f"Component '{cid}' declares parent '{declared}' "
                        f"but is listed under '{parents[0]}'",
                        "parent_mismatch",
                    )
                )

    # Cycle and reachability check
    state: dict[str, int] = {}  # 1 = on path, 2 = done

    def visit(cid: str) -> None:
        state[cid] = 1
        raw = components.get(cid)
        children = raw.get("children", []) if isinstance(raw, dict) else []
        for child_id in children or []:
            if child_id not in components:
                continue
            if state.get(child_id) == 1:
                errors.append(
                    ValidationError(
                        child_id,
                        f"Cycle detected: node '{child_id}' is its own ancestor",
                        "cycle",
                    )
                )
            elif child_id not in state:
                visit(child_id)
        state[cid] = 2

    for rid in roots:
        if rid in components and rid not in state:
            visit(rid)
    for cid in components:
        if cid not in state:
            errors.append(
                ValidationError(
                    cid, f"Component '{cid}' is not reachable from a root", "orphan"
                )
            )
            visit(cid)


def validate_document(data: Mapping[str, Any]) -> list[ValidationError]:
    """Validate raw document data for integrity issues.

    Checks for:
    - Duplicate IDs (across the whole document)
    - Cycles (components listed as their own ancestor)
    - Dangling child/root references and components with several parents
    - parent_id fields disagreeing with the child lists
    - Non-finite positions and sizes
    - Field-level schema errors

    Args:
        data: Arena form (`components` mapping + `roots`) or nested form
            (`roots` holding component objects with embedded children).

    Returns:
        List of ValidationError objects. Empty list if valid.
    """
    errors, _ = _normalize(data)
    return errors


def _normalize(
    data: Mapping[str, Any],
) -> tuple[list[ValidationError], dict[str, Any] | None]:
    errors: list[ValidationError] = []
    if not isinstance(data, Mapping):
        return [ValidationError("", "Document must be a JSON object", "schema")], None
    roots = data.get("roots", []) or []
    if "components" in data:
        components = dict(data.get("components") or {})
        root_ids = list(roots)
        _check_arena(components, root_ids, errors)
    else:
        components, root_ids = _flatten_nested(list(roots), errors)
        for key, raw in components.items():
            _check_finite(key, raw, errors)
    if errors:
        return errors, None

    # Fill parent links from structure
    normalized_components: dict[str, Any] = {}
    for key, raw in components.items():
        normalized_components[key] = {**raw, "id": key, "parent_id": None}
    for key, raw in components.items():
        for child_id in raw.get("children", []) or []:
            normalized_components[child_id]["parent_id"] = key

    normalized = {k: v for k, v in data.items() if k not in ("components", "roots")}
    normalized["components"] = normalized_components
    normalized["roots"] = root_ids

    try:
        Document.model_validate(normalized)
    except PydanticValidationError as exc:
        for error in exc.errors():
            loc = error.get("loc", ())
            node_id = str(loc[1]) if len(loc) > 1 and loc[0] == "components" else ""
            where = ".".join(str(part) for part in loc)
            errors.append(
                ValidationError(node_id, f"{where}: {error.get('msg')}", "schema")
            )
        return errors, None
    return errors, normalized


def load_document(data: Mapping[str, Any]) -> Document:
    """Build a Document from plain data, rejecting corrupt trees.

    This is the only fatal failure path of the core: a corrupt document is
    refused before any operation can touch it.

    Raises:
        CorruptDocumentError: If `validate_document` reports any error.
    """
    errors, normalized = _normalize(data)
    if errors or normalized is None:
        logger.warning(f"Rejected corrupt document ({len(errors)} errors)")
        raise CorruptDocumentError(errors)
    return Document.model_validate(normalized)


def is_valid_document(data: Mapping[str, Any]) -> bool:
    """Check if raw document data passes integrity validation."""
    return not validate_document(data)


__all__ = [
    "AUTO",
    "Position",
    "Size",
    "Constraints",
    "Flags",
    "Metadata",
    "Component",
    "Breakpoint",
    "Settings",
    "Document",
    "DocumentSnapshot",
    "ValidationError",
    "CorruptDocumentError",
    "validate_document",
    "load_document",
    "is_valid_document",
]
