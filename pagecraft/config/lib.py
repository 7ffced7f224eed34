"""Environment-driven settings for pagecraft.

Every tunable lives in the `EnvVar` enum together with its default, its
type and a one-line description. Values resolve as: explicit override,
then the process environment, then the built-in default. A value that
cannot be converted to the declared type falls back to the default.

Example:
    >>> from pagecraft.config import EnvVar, get_environment
    >>>
    >>> grid = get_environment(EnvVar.PAGECRAFT_GRID_SIZE)  # 20 unless set
    >>> grid = get_environment(EnvVar.PAGECRAFT_GRID_SIZE, override=8)
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Variable Definitions
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Declaration of one setting.

    Attributes:
        name: Variable name as read from the environment.
        default: Value used when the variable is unset or unparsable.
        var_type: Target type (str, int, float or Path).
        description: Shown by `python -m pagecraft env`.
        category: Listing group.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """Settings recognised by pagecraft, grouped by category.

    Categories:
        - canvas: Grid, snapping and transform defaults
        - history: Undo/redo limits
        - codegen: Code generation defaults
        - storage: Document store locations
        - general: Logging
    """

    # -------------------------------------------------------------------------
    # Canvas
    # -------------------------------------------------------------------------
    PAGECRAFT_GRID_SIZE = EnvConfig(
        name="PAGECRAFT_GRID_SIZE",
        default=20,
        var_type=int,
        description="Grid unit for new documents (clamped to 5-100)",
        category="canvas",
    )
    PAGECRAFT_SNAP_THRESHOLD = EnvConfig(
        name="PAGECRAFT_SNAP_THRESHOLD",
        default=5.0,
        var_type=float,
        description="Maximum distance at which a snap guide engages",
        category="canvas",
    )
    PAGECRAFT_DUPLICATE_OFFSET = EnvConfig(
        name="PAGECRAFT_DUPLICATE_OFFSET",
        default=20,
        var_type=int,
        description="Offset applied to both axes when duplicating",
        category="canvas",
    )
    PAGECRAFT_GROUP_PADDING = EnvConfig(
        name="PAGECRAFT_GROUP_PADDING",
        default=10,
        var_type=int,
        description="Padding added around grouped components",
        category="canvas",
    )

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------
    PAGECRAFT_HISTORY_LIMIT = EnvConfig(
        name="PAGECRAFT_HISTORY_LIMIT",
        default=50,
        var_type=int,
        description="Maximum number of undoable history steps",
        category="history",
    )

    # -------------------------------------------------------------------------
    # Code generation
    # -------------------------------------------------------------------------
    PAGECRAFT_DEFAULT_TARGET = EnvConfig(
        name="PAGECRAFT_DEFAULT_TARGET",
        default="react",
        var_type=str,
        description="Default code generation target (react, vue, angular, html)",
        category="codegen",
    )
    PAGECRAFT_INDENT_SIZE = EnvConfig(
        name="PAGECRAFT_INDENT_SIZE",
        default=2,
        var_type=int,
        description="Spaces per indentation level in generated code",
        category="codegen",
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    PAGECRAFT_DATA_DIR = EnvConfig(
        name="PAGECRAFT_DATA_DIR",
        default=None,  # Computed from cwd
        var_type=Path,
        description="Directory holding the document database",
        category="storage",
    )

    # -------------------------------------------------------------------------
    # General
    # -------------------------------------------------------------------------
    PAGECRAFT_LOG_LEVEL = EnvConfig(
        name="PAGECRAFT_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Logging level name (DEBUG, INFO, WARNING, ERROR)",
        category="general",
    )


# =============================================================================
# Conversion
# =============================================================================

_CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: str,
    int: int,
    float: float,
    Path: Path,
}


def _convert(raw: str, config: EnvConfig) -> Any:
    """Parse a raw environment string, falling back to the default."""
    converter = _CONVERTERS.get(config.var_type, str)
    try:
        return converter(raw.strip() if config.var_type is not str else raw)
    except ValueError:
        return config.default


# =============================================================================
# Lookup
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Resolve a setting.

    Args:
        env_var: Setting to read.
        override: Returned unchanged when not None.

    Returns:
        The override, the converted environment value, or the default.

    Example:
        >>> get_environment(EnvVar.PAGECRAFT_HISTORY_LIMIT)
        50
        >>> get_environment(EnvVar.PAGECRAFT_HISTORY_LIMIT, override=10)
        10
    """
    if override is not None:
        return override
    config: EnvConfig = env_var.value
    raw = os.environ.get(config.name)
    if raw is None or raw == "":
        return config.default
    return _convert(raw, config)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Declaration (name, default, type, description) of a setting."""
    return env_var.value


# =============================================================================
# Shortcuts
# =============================================================================


def get_grid_size(override: int | None = None) -> int:
    """Get the grid unit for new documents."""
    return get_environment(EnvVar.PAGECRAFT_GRID_SIZE, override)


def get_snap_threshold(override: float | None = None) -> float:
    """Get the snap guide engagement distance."""
    return float(get_environment(EnvVar.PAGECRAFT_SNAP_THRESHOLD, override))


def get_history_limit(override: int | None = None) -> int:
    """Get the maximum number of undoable history steps.

    Values below 1 are raised to 1 so the current state is always kept.
    """
    return max(1, get_environment(EnvVar.PAGECRAFT_HISTORY_LIMIT, override))


def get_data_dir(override: Path | str | None = None) -> Path:
    """Get the document store directory.

    Resolution: override > PAGECRAFT_DATA_DIR > {cwd}/.pagecraft
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.PAGECRAFT_DATA_DIR)
    if env_path:
        return env_path

    return Path.cwd() / ".pagecraft"


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """Settings in declaration order, optionally limited to one category.

    Args:
        category: canvas, history, codegen, storage or general. None lists
            every setting.
    """
    return [var for var in EnvVar if category is None or var.value.category == category]


__all__ = [
    # Declarations
    "EnvConfig",
    "EnvVar",
    # Lookup
    "get_environment",
    "get_environment_info",
    # Shortcuts
    "get_grid_size",
    "get_snap_threshold",
    "get_history_limit",
    "get_data_dir",
    "list_environment_variables",
]
