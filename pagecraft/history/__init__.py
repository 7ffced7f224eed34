"""History module - bounded undo/redo over document snapshots.

Example usage:
    >>> from pagecraft.history import HistoryManager
    >>> history = HistoryManager(max_entries=50)
    >>> history.reset(document.snapshot())
"""

from .lib import HistoryEntry, HistoryManager

__all__ = ["HistoryEntry", "HistoryManager"]
