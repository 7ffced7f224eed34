"""Bounded undo/redo history of document snapshots.

The history is a linear list of entries with a cursor. Entry 0 is the
state the document was loaded or created in; every committed operation
appends one entry. Undo/redo move the cursor and hand back the snapshot to
restore. Saving while the cursor is not at the end discards the redo
branch.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from pagecraft.config import get_history_limit
from pagecraft.model import DocumentSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One recorded document state.

    Attributes:
        snapshot: Deep copy of the component arena after the operation.
        label: Name of the operation that produced it.
        timestamp: When the entry was recorded.
        selection: Selected ids at that point.
    """

    snapshot: DocumentSnapshot
    label: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    selection: tuple[str, ...] = ()


class HistoryManager:
    """Linear undo/redo stack keeping at most `max_entries` undoable states.

    Example:
        >>> history = HistoryManager(max_entries=50)
        >>> history.reset(document.snapshot())
        >>> history.save(document.snapshot(), "move")
        >>> previous = history.undo()
        >>> document.restore(previous)

    Args:
        max_entries: Cap on states behind the current one; the current
            state is kept on top of it.
            Uses PAGECRAFT_HISTORY_LIMIT when None.
    """

    def __init__(self, max_entries: int | None = None):
        self._max_entries = get_history_limit(max_entries)
        self._entries: list[HistoryEntry] = []
        self._index = -1

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._entries)

    def reset(
        self,
        snapshot: DocumentSnapshot,
        label: str = "initial",
        selection: tuple[str, ...] = (),
    ) -> HistoryEntry:
        """Drop all entries and start from `snapshot`."""
        entry = HistoryEntry(snapshot, label, selection=tuple(selection))
        self._entries = [entry]
        self._index = 0
        return entry

    def save(
        self,
        snapshot: DocumentSnapshot,
        label: str,
        selection: tuple[str, ...] = (),
    ) -> HistoryEntry:
        """Record the state after an operation.

        Discards any redo branch, appends, then evicts the oldest entries
        beyond the cap.
        """
        del self._entries[self._index + 1 :]
        entry = HistoryEntry(snapshot, label, selection=tuple(selection))
        self._entries.append(entry)
        self._index = len(self._entries) - 1

        overflow = len(self._entries) - (self._max_entries + 1)
        if overflow > 0:
            evicted = self._entries[:overflow]
            del self._entries[:overflow]
            self._index -= overflow
            logger.debug(
                f"History cap {self._max_entries} reached, evicted "
                f"{', '.join(e.label for e in evicted)}"
            )
        return entry

    def undo(self) -> DocumentSnapshot | None:
        """Step back one entry.

        Returns:
            Snapshot to restore, or None when nothing is left to undo.
        """
        if not self.can_undo:
            return None
        self._index -= 1
        return self._entries[self._index].snapshot

    def redo(self) -> DocumentSnapshot | None:
        """Step forward one entry.

        Returns:
            Snapshot to restore, or None when nothing is left to redo.
        """
        if not self.can_redo:
            return None
        self._index += 1
        return self._entries[self._index].snapshot

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def undo_depth(self) -> int:
        return max(0, self._index)

    @property
    def redo_depth(self) -> int:
        return len(self._entries) - 1 - self._index

    @property
    def current(self) -> HistoryEntry | None:
        """Entry matching the document's present state."""
        if self._index < 0:
            return None
        return self._entries[self._index]

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self._entries]

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()
        self._index = -1


__all__ = ["HistoryEntry", "HistoryManager"]
