"""HTML target - static page and stylesheet."""

from .lib import HtmlEmitter

__all__ = ["HtmlEmitter"]
