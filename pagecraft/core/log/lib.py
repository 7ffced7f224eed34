"""Core logging implementation for pagecraft."""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "resolve_level", "setup_logging"]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: int | str | None) -> int:
    """Turn a level name or number into a logging level.

    Unknown names fall back to INFO.

    Args:
        level: Level number, level name (case-insensitive) or None.

    Returns:
        Logging level number.
    """
    if level is None:
        from pagecraft.config import EnvVar, get_environment

        level = get_environment(EnvVar.PAGECRAFT_LOG_LEVEL)
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str | None = None, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level. Defaults to PAGECRAFT_LOG_LEVEL.
        stream: Output stream.
    """
    logging.basicConfig(
        level=resolve_level(level),
        format=DEFAULT_FORMAT,
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "pagecraft")
