from __future__ import annotations

import json
from typing import Any

import pytest

from pyoutlets.client import OutletsClient
from pyoutlets.config import OutletsConfig
from pyoutlets.exceptions import OutletsError
from pyoutlets.location.sensor import Position
from pyoutlets.models.chat import SessionStatus
from pyoutlets.models.location import LocationPermission

BASE = "https://outlets.example.com"

OUTLETS = [
    {"id": 1, "name": "KLCC", "address": "Suria KLCC", "latitude": 3.1570, "longitude": 101.7123},
    {"id": 2, "name": "Ampang", "address": "Jalan Ampang", "latitude": 3.1600, "longitude": 101.7150},
    {"id": 3, "name": "Setapak", "address": "Setapak", "latitude": 3.2000, "longitude": 101.8000},
    {"id": 4, "name": "Pending", "address": "Not geocoded yet"},
]


class _FakeResponse:
    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self._text = "" if body is None else json.dumps(body)

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _RoutingHttpSession:
    def __init__(self, routes: dict[tuple[str, str], tuple[int, Any]]) -> None:
        self._routes = routes
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append((method, url, kwargs))
        status, body = self._routes[(method, url.removeprefix(BASE))]
        return _FakeResponse(status, body)

    async def close(self) -> None:
        self.closed = True


class _StaticSensor:
    is_supported = True

    def __init__(self) -> None:
        self.calls = 0

    async def get_current_position(self, *, high_accuracy: bool, timeout_ms: int, maximum_age_ms: int) -> Position:
        self.calls += 1
        return Position(lat=3.1579, lng=101.7116)

    async def query_permission(self) -> LocationPermission:
        return LocationPermission.PROMPT


def _routes() -> dict[tuple[str, str], tuple[int, Any]]:
    return {
        ("GET", "/api/v1/outlets"): (200, {"outlets": OUTLETS, "total": len(OUTLETS)}),
        ("GET", "/api/v1/outlets/nearby"): (200, {"outlets": OUTLETS[:1]}),
        ("POST", "/api/v1/chat/session"): (200, {"session_id": "abc", "welcome_message": "Welcome!"}),
        ("POST", "/api/v1/chat/message"): (200, {"response": "KLCC is closest.", "session_id": "abc"}),
        ("DELETE", "/api/v1/chat/session/abc"): (200, {"message": "Session deleted"}),
        ("GET", "/api/v1/chat/health"): (200, {"status": "healthy"}),
    }


@pytest.mark.asyncio
async def test_load_outlets_builds_index_and_updates_highlighter() -> None:
    http = _RoutingHttpSession(_routes())
    config = OutletsConfig(base_url=BASE)

    async with OutletsClient(config, session=http) as client:
        index = await client.load_outlets()

        assert sorted(index) == [1, 2, 3]
        assert [o.id for o in client.outlets] == [1, 2, 3]
        assert index.intersecting_ids == (1, 2)
        assert [n.outlet_id for n in client.highlighter.select(2)] == [1]

        narrowed = client.set_radius(0.1)
        assert narrowed.intersecting_ids == ()
        assert client.highlighter.neighbors == ()

        assert client.metrics is not None
        assert client.metrics.snapshot().total_requests == 1

    # Externally supplied sessions are left open.
    assert http.closed is False
    assert http.calls[0][2]["timeout"].total == config.extended_timeout


@pytest.mark.asyncio
async def test_chat_flow_attaches_acquired_location_and_ends_on_exit() -> None:
    http = _RoutingHttpSession(_routes())
    sensor = _StaticSensor()

    async with OutletsClient(OutletsConfig(base_url=BASE), session=http, sensor=sensor) as client:
        assert client.location.state.permission == LocationPermission.PROMPT

        await client.chat.create_session()
        await client.location.acquire()
        reply = await client.chat.send_message("Which outlet is closest?")

        assert reply.text == "KLCC is closest."
        assert client.chat.status == SessionStatus.ACTIVE
        assert (await client.health_check()).healthy is True

    sent = [kwargs["json"] for method, url, kwargs in http.calls if url.endswith("/chat/message")]
    assert sent[0]["user_location"] == {"lat": 3.1579, "lng": 101.7116}
    create_timeouts = [kwargs["timeout"].total for method, url, kwargs in http.calls if url.endswith("/chat/session")]
    assert create_timeouts == [60.0]
    assert ("DELETE", f"{BASE}/api/v1/chat/session/abc") in [(m, u) for m, u, _ in http.calls]


@pytest.mark.asyncio
async def test_nearby_outlets_acquires_location_when_unknown() -> None:
    http = _RoutingHttpSession(_routes())
    sensor = _StaticSensor()

    async with OutletsClient(OutletsConfig(base_url=BASE, radius_km=2.0), session=http, sensor=sensor) as client:
        nearby = await client.get_nearby_outlets()
        await client.get_nearby_outlets(radius_km=1.0, limit=3)

    assert [o.id for o in nearby] == [1]
    assert sensor.calls == 1
    params = [kwargs["params"] for _, url, kwargs in http.calls if url.endswith("/nearby")]
    assert params[0] == {"lat": 3.1579, "lng": 101.7116, "radius": 2.0, "limit": 10}
    assert params[1]["radius"] == 1.0
    assert params[1]["limit"] == 3


@pytest.mark.asyncio
async def test_client_requires_context_manager() -> None:
    client = OutletsClient(OutletsConfig(base_url=BASE), metrics=None)

    with pytest.raises(OutletsError):
        await client.load_outlets()
    with pytest.raises(OutletsError):
        _ = client.chat
