"""Selection module - selected ids, keyboard cycling and marquee selection."""

from .lib import Marquee, Selection

__all__ = ["Marquee", "Selection"]
