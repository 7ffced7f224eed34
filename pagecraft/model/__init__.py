"""Model module - the editable document arena.

This module provides the persisted document structure (components keyed by
id, ordered roots, canvas settings) and its integrity validation.

Example usage:
    >>> from pagecraft.model import Document
    >>> doc = Document(name="Landing")
    >>> button = doc.create_component("button", x=40, y=40)
    >>> doc.require(button.id).props["text"]
    'Button'
"""

from .lib import (
    AUTO,
    Breakpoint,
    Component,
    Constraints,
    CorruptDocumentError,
    Document,
    DocumentSnapshot,
    Flags,
    Metadata,
    Position,
    Settings,
    Size,
    ValidationError,
    is_valid_document,
    load_document,
    validate_document,
)

__all__ = [
    # Component fields
    "AUTO",
    "Position",
    "Size",
    "Constraints",
    "Flags",
    "Metadata",
    "Component",
    # Document
    "Breakpoint",
    "Settings",
    "Document",
    "DocumentSnapshot",
    # Validation
    "ValidationError",
    "CorruptDocumentError",
    "validate_document",
    "load_document",
    "is_valid_document",
]
