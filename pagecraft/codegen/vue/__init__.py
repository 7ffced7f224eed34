"""Vue target - Vite project with single-file components."""

from .lib import VueEmitter, VueTemplateDialect

__all__ = ["VueEmitter", "VueTemplateDialect"]
