"""React target - Vite project with JSX/TSX function components."""

from .lib import JsxDialect, ReactEmitter

__all__ = ["JsxDialect", "ReactEmitter"]
