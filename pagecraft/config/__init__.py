"""Centralized configuration management for pagecraft.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from pagecraft.config import EnvVar, get_environment
    >>>
    >>> limit = get_environment(EnvVar.PAGECRAFT_HISTORY_LIMIT)  # Returns int: 50
    >>> limit = get_environment(EnvVar.PAGECRAFT_HISTORY_LIMIT, override=10)
    >>>
    >>> for var in list_environment_variables("canvas"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    canvas: Grid size, snap threshold, duplicate offset, group padding
    history: Undo/redo retention
    codegen: Default target and indentation
    storage: Document store directory
    general: Logging level
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_data_dir,
    get_environment,
    get_environment_info,
    get_grid_size,
    get_history_limit,
    get_snap_threshold,
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_grid_size",
    "get_snap_threshold",
    "get_history_limit",
    "get_data_dir",
    # Introspection
    "list_environment_variables",
]
