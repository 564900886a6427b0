"""Client configuration for pyoutlets."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyoutlets._constants import (
    BASE_URL,
    DEFAULT_RADIUS_KM,
    EXTENDED_TIMEOUT_S,
    REQUEST_TIMEOUT_S,
)
from pyoutlets.exceptions import OutletsConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise OutletsConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class OutletsConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Backend base URL (outlet and chat endpoints live under it).
    request_timeout : float
        Default per-request budget in seconds.
    extended_timeout : float
        Budget for requests that may hit a cold backend (outlet list).
    create_timeout : float
        Budget for ``SessionCoordinator.create_session``.  Longer than
        ``send_timeout`` because it is usually the first backend contact.
    send_timeout : float
        Budget for ``SessionCoordinator.send_message``.
    delete_timeout : float
        Budget for the remote delete issued by ``end_session``.
    radius_km : float
        Service radius used for outlet intersections.
    user_agent : str or None
        Platform user agent, used to pick location sensor timeouts.
    metrics_enabled : bool
        Record per-request timings in an ``ApiMetrics`` instance.
    """

    base_url: str = BASE_URL
    request_timeout: float = REQUEST_TIMEOUT_S
    extended_timeout: float = EXTENDED_TIMEOUT_S
    create_timeout: float = EXTENDED_TIMEOUT_S
    send_timeout: float = REQUEST_TIMEOUT_S
    delete_timeout: float = REQUEST_TIMEOUT_S
    radius_km: float = DEFAULT_RADIUS_KM
    user_agent: str | None = None
    metrics_enabled: bool = True

    def __post_init__(self) -> None:
        if not self.base_url:
            raise OutletsConfigError("base_url must be non-empty")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        for name in ("request_timeout", "extended_timeout", "create_timeout", "send_timeout", "delete_timeout"):
            if getattr(self, name) <= 0:
                raise OutletsConfigError(f"{name} must be positive")
        if self.radius_km < 0:
            raise OutletsConfigError(f"radius_km must be >= 0, got {self.radius_km}")

    @classmethod
    def from_env(cls, **overrides: Any) -> OutletsConfig:
        """Create configuration from ``OUTLETS_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("OUTLETS_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        user_agent = env.get("OUTLETS_USER_AGENT")
        if user_agent is not None:
            config_kwargs["user_agent"] = user_agent

        _ENV_FLOAT_MAP = {
            "OUTLETS_REQUEST_TIMEOUT": "request_timeout",
            "OUTLETS_EXTENDED_TIMEOUT": "extended_timeout",
            "OUTLETS_CREATE_TIMEOUT": "create_timeout",
            "OUTLETS_SEND_TIMEOUT": "send_timeout",
            "OUTLETS_DELETE_TIMEOUT": "delete_timeout",
            "OUTLETS_RADIUS_KM": "radius_km",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "metrics_enabled" not in overrides:
            config_kwargs["metrics_enabled"] = _env_bool(env.get("OUTLETS_METRICS_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
