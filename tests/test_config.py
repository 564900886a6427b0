from __future__ import annotations

import pytest

from pyoutlets.config import OutletsConfig
from pyoutlets.exceptions import OutletsConfigError

_ENV_KEYS = (
    "OUTLETS_BASE_URL",
    "OUTLETS_USER_AGENT",
    "OUTLETS_REQUEST_TIMEOUT",
    "OUTLETS_EXTENDED_TIMEOUT",
    "OUTLETS_CREATE_TIMEOUT",
    "OUTLETS_SEND_TIMEOUT",
    "OUTLETS_DELETE_TIMEOUT",
    "OUTLETS_RADIUS_KM",
    "OUTLETS_METRICS_ENABLED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = OutletsConfig()

    assert config.base_url == "http://localhost:8000"
    assert config.radius_km == 5.0
    assert config.create_timeout == 60.0
    assert config.send_timeout == 30.0
    assert config.delete_timeout == 30.0
    assert config.metrics_enabled is True


def test_base_url_trailing_slash_is_stripped() -> None:
    assert OutletsConfig(base_url="https://api.example.com/").base_url == "https://api.example.com"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": ""},
        {"request_timeout": 0},
        {"send_timeout": -1.0},
        {"radius_km": -0.1},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(OutletsConfigError):
        OutletsConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env_reads_outlets_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OUTLETS_BASE_URL", "https://mcd.example.com/")
    monkeypatch.setenv("OUTLETS_USER_AGENT", "Mozilla/5.0 Firefox/121.0")
    monkeypatch.setenv("OUTLETS_SEND_TIMEOUT", "12.5")
    monkeypatch.setenv("OUTLETS_RADIUS_KM", "3")
    monkeypatch.setenv("OUTLETS_METRICS_ENABLED", "off")

    config = OutletsConfig.from_env()

    assert config.base_url == "https://mcd.example.com"
    assert config.user_agent == "Mozilla/5.0 Firefox/121.0"
    assert config.send_timeout == 12.5
    assert config.radius_km == 3.0
    assert config.metrics_enabled is False


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OUTLETS_RADIUS_KM", "3")
    monkeypatch.setenv("OUTLETS_METRICS_ENABLED", "no")

    config = OutletsConfig.from_env(radius_km=7.5, metrics_enabled=True)

    assert config.radius_km == 7.5
    assert config.metrics_enabled is True


def test_from_env_rejects_non_numeric(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OUTLETS_CREATE_TIMEOUT", "soon")

    with pytest.raises(OutletsConfigError, match="OUTLETS_CREATE_TIMEOUT"):
        OutletsConfig.from_env()


def test_unrecognized_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OUTLETS_METRICS_ENABLED", "maybe")

    assert OutletsConfig.from_env().metrics_enabled is True
