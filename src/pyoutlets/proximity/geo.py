"""Great-circle distance helpers."""

from __future__ import annotations

import math

from pyoutlets._constants import EARTH_RADIUS_KM


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in kilometres between two points on a spherical Earth."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push ``a`` a hair above 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_within_radius(lat1: float, lng1: float, lat2: float, lng2: float, radius_km: float) -> bool:
    return haversine_km(lat1, lng1, lat2, lng2) <= radius_km


def km_to_meters(km: float) -> float:
    return km * 1000.0


def meters_to_km(meters: float) -> float:
    return meters / 1000.0


def format_distance(meters: float) -> str:
    """Format a distance for display: ``"850m"`` below 1 km, ``"1.2km"`` above."""
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"
