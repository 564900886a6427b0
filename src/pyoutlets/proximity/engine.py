"""Pairwise outlet intersection engine.

Two outlets intersect when the great-circle distance between them is
within the service radius, i.e. their service areas overlap.

The computation is O(n²) over the outlet count, which is fine for a few
thousand outlets.  A grid or k-d tree would be needed well beyond that.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pyoutlets.models.intersection import IntersectionIndex, IntersectionRecord, Neighbor
from pyoutlets.models.outlet import Outlet, OutletId, outlet_id_sort_key
from pyoutlets.proximity.geo import haversine_km

_logger = logging.getLogger(__name__)


def _neighbor_sort_key(neighbor: Neighbor) -> tuple[float, tuple[int, int | str]]:
    return (neighbor.distance_km, outlet_id_sort_key(neighbor.outlet_id))


def compute_intersections(outlets: Sequence[Outlet], radius_km: float) -> IntersectionIndex:
    """Build the intersection index for *outlets*.

    Every outlet must carry coordinates.  The threshold test uses the
    unrounded distance; the recorded ``distance_km`` is rounded to two
    decimals for display.  The input is never mutated and identical input
    yields an equal index.
    """
    if radius_km < 0:
        raise ValueError(f"radius_km must be >= 0, got {radius_km}")

    neighbors: dict[OutletId, list[Neighbor]] = {outlet.id: [] for outlet in outlets}
    count = len(outlets)

    # Haversine is symmetric, so each unordered pair is evaluated once and
    # recorded on both sides with the same value.
    for i in range(count):
        a = outlets[i]
        for j in range(i + 1, count):
            b = outlets[j]
            if a.id == b.id:
                continue
            distance = haversine_km(a.lat, a.lng, b.lat, b.lng)  # type: ignore[arg-type]
            if distance > radius_km:
                continue
            rounded = round(distance, 2)
            neighbors[a.id].append(Neighbor(outlet_id=b.id, distance_km=rounded))
            neighbors[b.id].append(Neighbor(outlet_id=a.id, distance_km=rounded))

    records: dict[OutletId, IntersectionRecord] = {}
    for outlet_id, found in neighbors.items():
        found.sort(key=_neighbor_sort_key)
        records[outlet_id] = IntersectionRecord(
            outlet_id=outlet_id,
            has_intersection=bool(found),
            neighbors=tuple(found),
        )

    _logger.debug(
        "Computed intersections for %d outlets (radius=%.2fkm): %d intersecting",
        len(records),
        radius_km,
        sum(1 for record in records.values() if record.has_intersection),
    )
    return IntersectionIndex(records, radius_km=radius_km)


class ProximityEngine:
    """Caches the last computed index keyed on (outlet-set version, radius).

    The outlet set is treated as an atomic snapshot: ``update_outlets``
    replaces it wholesale and bumps the version, and the cached index is
    swapped in one assignment so readers never see a partial result.
    """

    def __init__(self, *, radius_km: float) -> None:
        if radius_km < 0:
            raise ValueError(f"radius_km must be >= 0, got {radius_km}")
        self._radius_km = radius_km
        self._outlets: tuple[Outlet, ...] = ()
        self._version = 0
        self._cache_key: tuple[int, float] | None = None
        self._index = IntersectionIndex.empty(radius_km)

    @property
    def radius_km(self) -> float:
        return self._radius_km

    @property
    def version(self) -> int:
        return self._version

    @property
    def outlets(self) -> tuple[Outlet, ...]:
        return self._outlets

    def update_outlets(self, outlets: Sequence[Outlet]) -> None:
        self._outlets = tuple(outlets)
        self._version += 1

    def set_radius(self, radius_km: float) -> None:
        if radius_km < 0:
            raise ValueError(f"radius_km must be >= 0, got {radius_km}")
        self._radius_km = radius_km

    @property
    def index(self) -> IntersectionIndex:
        """Current index, recomputed when the outlet set or radius changed."""
        key = (self._version, self._radius_km)
        if self._cache_key != key:
            self._index = compute_intersections(self._outlets, self._radius_km)
            self._cache_key = key
        return self._index
