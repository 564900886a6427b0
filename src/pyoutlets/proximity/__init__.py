"""Outlet proximity: distances, intersections and selection."""

from pyoutlets.proximity.engine import ProximityEngine, compute_intersections
from pyoutlets.proximity.filters import filter_outlets, is_open_24_hours, locatable, nearest_outlets
from pyoutlets.proximity.geo import format_distance, haversine_km, is_within_radius, km_to_meters, meters_to_km
from pyoutlets.proximity.highlighter import SelectionHighlighter

__all__ = [
    "ProximityEngine",
    "SelectionHighlighter",
    "compute_intersections",
    "filter_outlets",
    "format_distance",
    "haversine_km",
    "is_open_24_hours",
    "is_within_radius",
    "km_to_meters",
    "locatable",
    "meters_to_km",
    "nearest_outlets",
]
