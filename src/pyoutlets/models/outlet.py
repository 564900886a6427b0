"""Outlet models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyoutlets.models._base import OutletsBaseModel, safe_float, safe_str

OutletId = int | str


def outlet_id_sort_key(outlet_id: OutletId) -> tuple[int, int | str]:
    """Total order over mixed int/str ids (numeric ids first)."""
    if isinstance(outlet_id, int):
        return (0, outlet_id)
    return (1, outlet_id)


class OutletFeatures(OutletsBaseModel):
    """Recognized outlet amenities.

    Every flag is ``None`` ("unknown") unless the backend states it
    explicitly.  Keys outside this set are dropped.
    """

    twenty_four_hours: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("twenty_four_hours", "24_hours", "24hours", "open_24_hours"),
    )
    drive_thru: bool | None = Field(default=None, validation_alias=AliasChoices("drive_thru", "drive_through"))
    delivery: bool | None = Field(default=None, validation_alias=AliasChoices("delivery", "mcdelivery"))
    breakfast: bool | None = None
    wifi: bool | None = None
    dessert_center: bool | None = Field(default=None, validation_alias=AliasChoices("dessert_center", "dessert_kiosk"))


class Outlet(OutletsBaseModel):
    """A physical outlet as returned by ``/api/v1/outlets``.

    Coordinates that are missing, unparseable or out of range load as
    ``None``; such outlets must be filtered out (see
    :func:`pyoutlets.proximity.filters.locatable`) before they reach the
    proximity engine.
    """

    id: OutletId
    name: str = ""
    address: str = ""
    lat: float | None = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    lng: float | None = Field(default=None, validation_alias=AliasChoices("lng", "lon", "longitude"))
    operating_hours: str | None = Field(
        default=None,
        validation_alias=AliasChoices("operating_hours", "operatingHours", "hours"),
    )
    navigation_link: str | None = Field(
        default=None,
        validation_alias=AliasChoices("navigation_link", "waze_link", "wazeLink"),
    )
    features: OutletFeatures = Field(default_factory=OutletFeatures)

    @field_validator("lat", mode="before")
    @classmethod
    def _coerce_lat(cls, value: Any) -> float | None:
        parsed = safe_float(value)
        if parsed is None or not -90.0 <= parsed <= 90.0:
            return None
        return parsed

    @field_validator("lng", mode="before")
    @classmethod
    def _coerce_lng(cls, value: Any) -> float | None:
        parsed = safe_float(value)
        if parsed is None or not -180.0 <= parsed <= 180.0:
            return None
        return parsed

    @field_validator("operating_hours", mode="before")
    @classmethod
    def _coerce_hours(cls, value: Any) -> str | None:
        # Some records carry a per-weekday dict instead of a single string.
        if isinstance(value, dict):
            parts = [f"{day}: {hours}" for day, hours in value.items() if safe_str(hours)]
            return "; ".join(parts) or None
        return safe_str(value)

    @field_validator("features", mode="before")
    @classmethod
    def _coerce_features(cls, value: Any) -> Any:
        if value is None or not isinstance(value, dict):
            return {}
        return value

    @property
    def has_coordinates(self) -> bool:
        # 0/0 is treated as "not geocoded".
        return self.lat is not None and self.lng is not None and not (self.lat == 0.0 and self.lng == 0.0)


class OutletInfo(OutletsBaseModel):
    """Outlet card extracted from an assistant chat message."""

    name: str
    address: str
    distance: str = ""
    operating_hours: str = ""
    navigation_link: str = ""
