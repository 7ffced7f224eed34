"""Collab module - applying and describing collaborator changes."""

from .lib import (
    MutationPublisher,
    RemoteMutation,
    apply_changes,
    apply_remote_mutation,
    build_mutation,
)

__all__ = [
    "RemoteMutation",
    "MutationPublisher",
    "apply_remote_mutation",
    "apply_changes",
    "build_mutation",
]
