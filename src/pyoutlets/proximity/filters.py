"""Outlet list filters used before and after the proximity engine."""

from __future__ import annotations

from collections.abc import Iterable

from pyoutlets.models.location import UserLocation
from pyoutlets.models.outlet import Outlet, outlet_id_sort_key
from pyoutlets.proximity.geo import haversine_km


def locatable(outlets: Iterable[Outlet]) -> list[Outlet]:
    """Drop outlets without usable coordinates."""
    return [outlet for outlet in outlets if outlet.has_coordinates]


def is_open_24_hours(outlet: Outlet) -> bool:
    if outlet.features.twenty_four_hours is not None:
        return outlet.features.twenty_four_hours
    hours = (outlet.operating_hours or "").lower()
    return "24 hours" in hours or "24hrs" in hours or "24/7" in hours


def filter_outlets(
    outlets: Iterable[Outlet],
    *,
    query: str = "",
    twenty_four_hours: bool = False,
) -> list[Outlet]:
    """Case-insensitive name/address search plus an optional 24-hour filter."""
    needle = query.strip().lower()
    result: list[Outlet] = []
    for outlet in outlets:
        if needle and needle not in outlet.name.lower() and needle not in outlet.address.lower():
            continue
        if twenty_four_hours and not is_open_24_hours(outlet):
            continue
        result.append(outlet)
    return result


def nearest_outlets(
    outlets: Iterable[Outlet],
    location: UserLocation,
    *,
    radius_km: float | None = None,
    limit: int | None = None,
) -> list[tuple[Outlet, float]]:
    """Outlets ordered by distance from *location* as ``(outlet, km)`` pairs."""
    ranked: list[tuple[Outlet, float]] = []
    for outlet in outlets:
        if not outlet.has_coordinates:
            continue
        distance = haversine_km(location.lat, location.lng, outlet.lat, outlet.lng)  # type: ignore[arg-type]
        if radius_km is not None and distance > radius_km:
            continue
        ranked.append((outlet, distance))
    ranked.sort(key=lambda item: (item[1], outlet_id_sort_key(item[0].id)))
    if limit is not None:
        return ranked[: max(limit, 0)]
    return ranked
