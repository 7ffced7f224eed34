"""Selection state: an ordered set of component ids plus an optional marquee."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pagecraft.geometry import Bounds, absolute_bounds, intersects
from pagecraft.model import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marquee:
    """Rubber-band rectangle in document space."""

    origin_x: float
    origin_y: float
    current_x: float
    current_y: float

    @property
    def bounds(self) -> Bounds:
        """Normalized rectangle regardless of drag direction."""
        return Bounds(
            left=min(self.origin_x, self.current_x),
            top=min(self.origin_y, self.current_y),
            right=max(self.origin_x, self.current_x),
            bottom=max(self.origin_y, self.current_y),
        )


class Selection:
    """Ordered set of selected component ids.

    Order is selection order; the first id is the primary component (used
    as the snapping reference for multi-component moves).
    """

    def __init__(self, ids: Iterable[str] | None = None):
        self._ids: dict[str, None] = dict.fromkeys(ids or ())
        self.marquee: Marquee | None = None

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"Selection({self.ids!r})"

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    @property
    def primary(self) -> str | None:
        return next(iter(self._ids), None)

    def contains(self, component_id: str) -> bool:
        return component_id in self._ids

    def select(self, component_id: str) -> None:
        """Replace the selection with one component."""
        self._ids = {component_id: None}

    def select_many(self, component_ids: Iterable[str]) -> None:
        """Replace the selection, keeping the given order."""
        self._ids = dict.fromkeys(component_ids)

    def add(self, component_id: str) -> None:
        self._ids.setdefault(component_id, None)

    def remove(self, component_ids: Iterable[str]) -> None:
        for component_id in component_ids:
            self._ids.pop(component_id, None)

    def toggle(self, component_id: str) -> bool:
        """Flip membership of one id.

        Returns:
            True if the id is selected afterwards.
        """
        if component_id in self._ids:
            del self._ids[component_id]
            return False
        self._ids[component_id] = None
        return True

    def clear(self) -> None:
        self._ids.clear()
        self.marquee = None

    def select_all(self, document: Document) -> None:
        """Select every root component."""
        self.select_many(document.roots)

    def cycle(self, document: Document, step: int = 1) -> str | None:
        """Move the selection to the next/previous sibling (keyboard Tab).

        With nothing selected the first root is chosen.

        Returns:
            The newly selected id, or None for an empty document.
        """
        current = next(reversed(self._ids), None)
        if current is None or current not in document:
            if not document.roots:
                return None
            target = document.roots[0]
        else:
            siblings = document.child_ids(document.require(current).parent_id)
            index = siblings.index(current)
            target = siblings[(index + step) % len(siblings)]
        self.select(target)
        return target

    def prune(self, document: Document) -> list[str]:
        """Drop ids no longer in the document.

        Returns:
            The removed ids.
        """
        stale = [cid for cid in self._ids if cid not in document]
        self.remove(stale)
        if stale:
            logger.debug(f"Pruned {len(stale)} stale selection ids")
        return stale

    # -------------------------------------------------------------------------
    # Marquee
    # -------------------------------------------------------------------------

    def begin_marquee(self, x: float, y: float) -> Marquee:
        self.marquee = Marquee(x, y, x, y)
        return self.marquee

    def update_marquee(self, x: float, y: float) -> Marquee | None:
        if self.marquee is None:
            return None
        self.marquee = Marquee(self.marquee.origin_x, self.marquee.origin_y, x, y)
        return self.marquee

    def end_marquee(self, document: Document, additive: bool = False) -> list[str]:
        """Finish a rubber-band selection.

        Selects visible root components whose bounds intersect the rectangle.
        With `additive`, hits are appended to the current selection.

        Returns:
            The ids hit by the marquee.
        """
        if self.marquee is None:
            return []
        area = self.marquee.bounds
        self.marquee = None
        hits = [
            c.id
            for c in document.children_of(None)
            if c.flags.visible and intersects(absolute_bounds(document, c.id), area)
        ]
        if additive:
            for cid in hits:
                self.add(cid)
        else:
            self.select_many(hits)
        return hits


__all__ = ["Marquee", "Selection"]
