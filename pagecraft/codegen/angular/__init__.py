"""Angular target - standalone components with external templates."""

from .lib import AngularEmitter, AngularTemplateDialect

__all__ = ["AngularEmitter", "AngularTemplateDialect"]
