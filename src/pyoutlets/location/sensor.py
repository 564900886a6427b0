"""Platform position sensor interface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

from pyoutlets.models.location import LocationPermission


class SensorErrorCode(IntEnum):
    """Failure codes reported by the platform (W3C geolocation numbering)."""

    UNKNOWN = 0
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3

    @classmethod
    def _missing_(cls, value: object) -> SensorErrorCode:
        return cls.UNKNOWN


class SensorError(Exception):
    """Typed failure raised by a :class:`PositionSensor`."""

    def __init__(self, code: SensorErrorCode | int, message: str = "") -> None:
        self.code = SensorErrorCode(code)
        self.message = message
        super().__init__(message or self.code.name)


@dataclass(frozen=True, slots=True)
class Position:
    lat: float
    lng: float
    accuracy_m: float | None = None


class PositionSensor(Protocol):
    """Single-shot position source plus an out-of-band permission query.

    ``get_current_position`` must enforce ``timeout_ms`` itself and
    report failures as :class:`SensorError`.  Once issued, a call is not
    expected to be cancellable.
    """

    @property
    def is_supported(self) -> bool:
        ...

    async def get_current_position(
        self,
        *,
        high_accuracy: bool,
        timeout_ms: int,
        maximum_age_ms: int,
    ) -> Position:
        ...

    async def query_permission(self) -> LocationPermission:
        ...
