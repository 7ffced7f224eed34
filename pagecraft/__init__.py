"""pagecraft: visual page-builder engine with multi-target code generation."""

from pagecraft.codegen import CodeGenerationOptions, generate, list_targets
from pagecraft.editor import Editor
from pagecraft.model import (
    Component,
    CorruptDocumentError,
    Document,
    load_document,
    validate_document,
)
from pagecraft.schema import ComponentType, get_default_props
from pagecraft.transform import ErrorKind, OperationResult

__all__ = [
    # Model
    "Component",
    "Document",
    "load_document",
    "validate_document",
    "CorruptDocumentError",
    # Schema
    "ComponentType",
    "get_default_props",
    # Editing
    "Editor",
    "ErrorKind",
    "OperationResult",
    # Code generation
    "CodeGenerationOptions",
    "generate",
    "list_targets",
]
