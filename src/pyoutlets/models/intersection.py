"""Intersection index models."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from pyoutlets.models.outlet import OutletId


class Neighbor(BaseModel):
    """An outlet within range, with its distance rounded for display."""

    model_config = ConfigDict(frozen=True)

    outlet_id: OutletId
    distance_km: float


class IntersectionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    outlet_id: OutletId
    has_intersection: bool
    neighbors: tuple[Neighbor, ...] = ()


class IntersectionIndex(Mapping[OutletId, IntersectionRecord]):
    """Read-only mapping ``outlet id -> IntersectionRecord``.

    Instances are never mutated; recomputation produces a new index.
    """

    __slots__ = ("_records", "_radius_km")

    def __init__(self, records: Mapping[OutletId, IntersectionRecord], *, radius_km: float) -> None:
        self._records: Mapping[OutletId, IntersectionRecord] = MappingProxyType(dict(records))
        self._radius_km = radius_km

    @property
    def radius_km(self) -> float:
        return self._radius_km

    def __getitem__(self, outlet_id: OutletId) -> IntersectionRecord:
        return self._records[outlet_id]

    def __iter__(self) -> Iterator[OutletId]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IntersectionIndex):
            return self._radius_km == other._radius_km and dict(self._records) == dict(other._records)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"IntersectionIndex(outlets={len(self)}, radius_km={self._radius_km})"

    @property
    def intersecting_ids(self) -> tuple[OutletId, ...]:
        return tuple(oid for oid, record in self._records.items() if record.has_intersection)

    @property
    def isolated_ids(self) -> tuple[OutletId, ...]:
        return tuple(oid for oid, record in self._records.items() if not record.has_intersection)

    @classmethod
    def empty(cls, radius_km: float = 0.0) -> IntersectionIndex:
        return cls({}, radius_km=radius_km)
