"""Sensor request policies.

An acquisition walks a small, explicit table of policies: one entry per
attempt.  Only ``POSITION_UNAVAILABLE`` moves on to the next entry; every
other failure ends the cycle.
"""

from __future__ import annotations

import dataclasses
from enum import StrEnum

from pyoutlets._constants import (
    DEFAULT_MAXIMUM_AGE_MS,
    DEFAULT_TIMEOUT_MS,
    MAX_TIMEOUT_MS,
    RELAXED_TIMEOUT_FACTOR,
)
from pyoutlets.location.sensor import SensorErrorCode


class Platform(StrEnum):
    GENERIC = "generic"
    FIREFOX = "firefox"
    SAFARI = "safari"

    @classmethod
    def from_user_agent(cls, user_agent: str | None) -> Platform:
        if not user_agent:
            return cls.GENERIC
        ua = user_agent.lower()
        if "firefox" in ua:
            return cls.FIREFOX
        if "safari" in ua and "chrome" not in ua:
            return cls.SAFARI
        return cls.GENERIC


# Some platforms need noticeably longer for a first fix.
_FIRST_FIX_TIMEOUT_MS: dict[Platform, int] = {
    Platform.FIREFOX: 35_000,
    Platform.SAFARI: 25_000,
}


@dataclasses.dataclass(frozen=True)
class LocationPolicy:
    high_accuracy: bool = True
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    maximum_age_ms: int = DEFAULT_MAXIMUM_AGE_MS


def initial_policy(platform: Platform) -> LocationPolicy:
    return LocationPolicy(
        high_accuracy=True,
        timeout_ms=_FIRST_FIX_TIMEOUT_MS.get(platform, DEFAULT_TIMEOUT_MS),
    )


def relaxed_policy(policy: LocationPolicy, *, max_timeout_ms: int = MAX_TIMEOUT_MS) -> LocationPolicy:
    """Low-accuracy follow-up with a longer (but capped) timeout."""
    return dataclasses.replace(
        policy,
        high_accuracy=False,
        timeout_ms=int(min(policy.timeout_ms * RELAXED_TIMEOUT_FACTOR, max_timeout_ms)),
    )


def build_attempt_policies(
    platform: Platform = Platform.GENERIC,
    *,
    max_timeout_ms: int = MAX_TIMEOUT_MS,
) -> tuple[LocationPolicy, ...]:
    first = initial_policy(platform)
    return (first, relaxed_policy(first, max_timeout_ms=max_timeout_ms))


def is_retryable(code: SensorErrorCode) -> bool:
    # TIMEOUT is not retried.
    return code == SensorErrorCode.POSITION_UNAVAILABLE
