"""User location acquisition.

``LocationAcquisition`` is the only writer of its ``LocationState``;
consumers receive immutable snapshots through ``state`` or ``subscribe``.
"""

from pyoutlets.location.acquisition import LocationAcquisition
from pyoutlets.location.policy import (
    LocationPolicy,
    Platform,
    build_attempt_policies,
    initial_policy,
    relaxed_policy,
)
from pyoutlets.location.sensor import Position, PositionSensor, SensorError, SensorErrorCode

__all__ = [
    "LocationAcquisition",
    "LocationPolicy",
    "Platform",
    "Position",
    "PositionSensor",
    "SensorError",
    "SensorErrorCode",
    "build_attempt_policies",
    "initial_policy",
    "relaxed_policy",
]
