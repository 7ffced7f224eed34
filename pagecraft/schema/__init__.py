"""Schema module - built-in component registry and documented defaults.

This module provides:
- Creation-time metadata (default props, size, constraints) per type
- Drop-zone rules (droppable, accepted child types)
- The default values code generation omits

Example usage:
    >>> from pagecraft.schema import BuiltinRegistry
    >>> spec = BuiltinRegistry().get("button")
    >>> spec.default_props["text"]
    'Button'
"""

from .lib import (
    COMPONENT_REGISTRY,
    STYLE_DEFAULTS,
    BuiltinRegistry,
    ComponentCategory,
    ComponentRegistry,
    ComponentSpec,
    ComponentType,
    ConstraintDefaults,
    get_component_spec,
    get_default_props,
    is_default_prop,
    is_default_style,
)

__all__ = [
    "ComponentCategory",
    "ComponentType",
    "ConstraintDefaults",
    "ComponentSpec",
    "ComponentRegistry",
    "BuiltinRegistry",
    "COMPONENT_REGISTRY",
    "STYLE_DEFAULTS",
    "get_component_spec",
    "get_default_props",
    "is_default_prop",
    "is_default_style",
]
