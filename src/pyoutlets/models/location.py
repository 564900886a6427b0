"""User location models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pyoutlets.models._base import ErrorInfo


class LocationPermission(StrEnum):
    UNKNOWN = "unknown"
    PROMPT = "prompt"
    GRANTED = "granted"
    DENIED = "denied"

    @classmethod
    def _missing_(cls, value: object) -> LocationPermission:
        return cls.UNKNOWN


class UserLocation(BaseModel):
    """A position on the map.

    Two instances compare equal when their coordinates are equal,
    regardless of identity.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    lat: float = Field(..., ge=-90.0, le=90.0, validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(..., ge=-180.0, le=180.0, validation_alias=AliasChoices("lng", "lon", "longitude"))

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


class LocationState(BaseModel):
    """Snapshot of a ``LocationAcquisition`` instance.

    Parameters
    ----------
    location : UserLocation or None
        Last successfully acquired position.
    permission : LocationPermission
        Latest known permission state.
    in_flight : bool
        Whether a sensor call is outstanding.
    is_supported : bool
        Whether the platform has a position sensor at all.
    last_error : ErrorInfo or None
        Last acquisition failure; kept until ``clear_error()``.
    """

    model_config = ConfigDict(frozen=True)

    location: UserLocation | None = None
    permission: LocationPermission = LocationPermission.UNKNOWN
    in_flight: bool = False
    is_supported: bool = True
    last_error: ErrorInfo | None = None

    @field_validator("permission", mode="before")
    @classmethod
    def _coerce_permission(cls, value: Any) -> LocationPermission:
        if isinstance(value, LocationPermission):
            return value
        return LocationPermission(str(value).lower())
