"""Codegen module - multi-target code generation from a document.

This module provides:
- A frozen render tree detached from the live document
- A shared element mapping table (component type -> tag, attributes, content)
- Target emitters registered by name (react, vue, angular, html)

Example usage:
    >>> from pagecraft.codegen import generate, CodeGenerationOptions
    >>> result = generate(document, "vue", CodeGenerationOptions(typescript=True))
    >>> [f.path for f in result.files]
    ['src/components/Hero.vue', 'src/App.vue', ...]
"""

from .lib import (
    APP_CLASS,
    ELEMENT_TAGS,
    ELEMENT_TEMPLATES,
    CodeEmitter,
    CodeGenerationOptions,
    CodeGenerationRequest,
    CodeGenerationResult,
    Diagnostic,
    Element,
    ElementTemplate,
    ExportPackager,
    FileKind,
    GeneratedFile,
    MarkupDialect,
    RenderNode,
    component_names,
    freeze_document,
    generate,
    generate_request,
    get_emitter,
    list_targets,
    register_emitter,
    resolve_element,
    write_result,
)

__all__ = [
    "APP_CLASS",
    "ELEMENT_TAGS",
    "ELEMENT_TEMPLATES",
    "CodeEmitter",
    "CodeGenerationOptions",
    "CodeGenerationRequest",
    "CodeGenerationResult",
    "Diagnostic",
    "Element",
    "ElementTemplate",
    "ExportPackager",
    "FileKind",
    "GeneratedFile",
    "MarkupDialect",
    "RenderNode",
    "component_names",
    "freeze_document",
    "generate",
    "generate_request",
    "get_emitter",
    "list_targets",
    "register_emitter",
    "resolve_element",
    "write_result",
]
