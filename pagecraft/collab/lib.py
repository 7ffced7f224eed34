"""Remote mutation feed for collaborative editing.

Remote changes arrive as `RemoteMutation` events and are applied like any
local edit. Conflicts resolve last-write-wins in arrival order:

- `props`, `style` and `flags` merge key by key (a later event overwrites
  the same key; a `None` value removes a props/style key);
- `position`, `size` and `constraints` are replaced as whole values.

Broadcasting local changes is an external concern described by the
`MutationPublisher` protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from pagecraft.model import Component, Constraints, Document, Flags, Position, Size
from pagecraft.transform import ErrorKind, OperationResult

logger = logging.getLogger(__name__)

MERGED_FIELDS = frozenset({"props", "style", "flags"})
REPLACED_FIELDS = frozenset({"position", "size", "constraints"})
GEOMETRY_FIELDS = frozenset({"position", "size"})


@dataclass(frozen=True)
class RemoteMutation:
    """A change made by another collaborator.

    Attributes:
        component_id: Target component.
        changed_fields: Field name -> new value (or partial mapping for
            merged fields).
        user_id: Author of the change.
        sequence: Sender-side counter, informational only.
    """

    component_id: str
    changed_fields: dict[str, Any] = field(default_factory=dict)
    user_id: str = "anonymous"
    sequence: int = 0

    @property
    def label(self) -> str:
        """History label for this change."""
        return f"remote:{self.user_id} update"

    def to_dict(self) -> dict[str, Any]:
        return {
            "component_id": self.component_id,
            "changed_fields": self.changed_fields,
            "user_id": self.user_id,
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteMutation:
        return cls(
            component_id=data["component_id"],
            changed_fields=dict(data.get("changed_fields", {})),
            user_id=data.get("user_id", "anonymous"),
            sequence=int(data.get("sequence", 0)),
        )


class MutationPublisher(Protocol):
    """Outgoing side of the collaboration channel."""

    def publish(self, mutation: RemoteMutation) -> None:
        """Send a local change to other collaborators."""
        ...


def _merge(current: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    merged = dict(current)
    for key, value in changes.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


def apply_remote_mutation(document: Document, event: RemoteMutation) -> OperationResult:
    """Apply a remote change to the document.

    Returns:
        Result labelled "remote:<user_id> update"; `not_found` for unknown
        components, `invalid_operation` for unknown fields, invalid values or
        geometry changes to locked components.
    """
    result = apply_changes(document, event.component_id, event.changed_fields, event.label)
    if result:
        logger.debug(f"Applied {event.label} #{event.sequence} to {event.component_id}")
    return result


def apply_changes(
    document: Document,
    component_id: str,
    changed_fields: dict[str, Any],
    label: str,
) -> OperationResult:
    """Merge field changes into one component.

    All fields are validated before anything is written, so a rejected
    change leaves the component untouched.
    """
    component = document.get(component_id)
    if component is None:
        return OperationResult.failure(
            label, ErrorKind.NOT_FOUND, f"Unknown component '{component_id}'"
        )
    if not changed_fields:
        return OperationResult.failure(label, ErrorKind.INVALID_OPERATION, "Nothing to change")
    unknown = set(changed_fields) - MERGED_FIELDS - REPLACED_FIELDS
    if unknown:
        return OperationResult.failure(
            label,
            ErrorKind.INVALID_OPERATION,
            f"Unsupported field(s): {', '.join(sorted(unknown))}",
        )
    if component.flags.locked and GEOMETRY_FIELDS & set(changed_fields):
        return OperationResult.failure(
            label,
            ErrorKind.INVALID_OPERATION,
            f"Component '{component.id}' is locked",
        )

    updates: dict[str, Any] = {}
    try:
        for name, value in changed_fields.items():
            if name == "props":
                updates[name] = _merge(component.props, dict(value))
            elif name == "style":
                updates[name] = _merge(component.style, dict(value))
            elif name == "flags":
                updates[name] = Flags.model_validate(
                    {**component.flags.model_dump(), **dict(value)}
                )
            elif name == "position":
                updates[name] = Position.model_validate(value)
            elif name == "size":
                updates[name] = Size.model_validate(value)
            else:
                updates[name] = (
                    None if value is None else Constraints.model_validate(value)
                )
    except (PydanticValidationError, TypeError, ValueError) as e:
        return OperationResult.failure(
            label, ErrorKind.INVALID_OPERATION, f"Invalid value: {e}"
        )

    for name, value in updates.items():
        setattr(component, name, value)
    document.touch(component.id)
    return OperationResult.success(label, [component.id])


def build_mutation(
    before: Component,
    after: Component,
    user_id: str,
    sequence: int = 0,
) -> RemoteMutation | None:
    """Describe a local change for publishing.

    Returns:
        A mutation carrying only the fields that differ, or None.
    """
    changed: dict[str, Any] = {}
    for name in ("props", "style"):
        old, new = getattr(before, name), getattr(after, name)
        delta = {k: v for k, v in new.items() if old.get(k) != v}
        delta.update({k: None for k in old if k not in new})
        if delta:
            changed[name] = delta
    old_flags, new_flags = before.flags.model_dump(), after.flags.model_dump()
    flag_delta = {k: v for k, v in new_flags.items() if old_flags[k] != v}
    if flag_delta:
        changed["flags"] = flag_delta
    for name in sorted(REPLACED_FIELDS):
        old, new = getattr(before, name), getattr(after, name)
        if old != new:
            changed[name] = None if new is None else new.model_dump(mode="json")
    if not changed:
        return None
    return RemoteMutation(after.id, changed, user_id, sequence)


__all__ = [
    "RemoteMutation",
    "MutationPublisher",
    "apply_remote_mutation",
    "apply_changes",
    "build_mutation",
]
