"""Selected-outlet projection over an intersection index."""

from __future__ import annotations

from pyoutlets.models.intersection import IntersectionIndex, Neighbor
from pyoutlets.models.outlet import OutletId


class SelectionHighlighter:
    """Tracks the selected outlet and exposes its neighbors.

    Performs no computation of its own and never mutates the index.
    """

    def __init__(self, index: IntersectionIndex | None = None) -> None:
        self._index = index if index is not None else IntersectionIndex.empty()
        self._selected: OutletId | None = None

    @property
    def selected(self) -> OutletId | None:
        return self._selected

    @property
    def neighbors(self) -> tuple[Neighbor, ...]:
        if self._selected is None:
            return ()
        record = self._index.get(self._selected)
        return record.neighbors if record is not None else ()

    def update_index(self, index: IntersectionIndex) -> None:
        """Point at a freshly computed index; the selection is kept."""
        self._index = index

    def select(self, outlet_id: OutletId) -> tuple[Neighbor, ...]:
        """Select *outlet_id* and return its neighbors (empty if unknown)."""
        self._selected = outlet_id
        return self.neighbors

    def clear(self) -> None:
        self._selected = None

    def is_highlighted(self, outlet_id: OutletId) -> bool:
        return any(neighbor.outlet_id == outlet_id for neighbor in self.neighbors)
