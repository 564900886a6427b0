"""Outlet data source endpoints.

Endpoints:
  - GET /api/v1/outlets
  - GET /api/v1/outlets/{id}
  - GET /api/v1/outlets/search
  - GET /api/v1/outlets/nearby
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyoutlets._api._common import expect_object, extract_items
from pyoutlets._constants import DEFAULT_RADIUS_KM, OUTLETS_PREFIX
from pyoutlets._transport import Transport
from pyoutlets.models.outlet import Outlet, OutletId

_logger = logging.getLogger(__name__)


def _parse_outlets(endpoint: str, items: list[Any]) -> list[Outlet]:
    outlets: list[Outlet] = []
    for item in items:
        try:
            outlets.append(Outlet.model_validate(item))
        except ValidationError:
            _logger.warning("Skipping malformed outlet record from %s", endpoint, exc_info=True)
    return outlets


async def fetch_outlets(transport: Transport, *, timeout: float | None = None) -> list[Outlet]:
    """Fetch every outlet.

    Pass the extended timeout: this is usually the first request and may
    wake up an idle backend.
    """
    decoded = await transport.request_json("GET", OUTLETS_PREFIX, timeout=timeout)
    outlets = _parse_outlets(OUTLETS_PREFIX, extract_items(decoded, "outlets", "items", "data"))
    _logger.debug("Fetched %d outlets", len(outlets))
    return outlets


async def fetch_outlet(transport: Transport, outlet_id: OutletId, *, timeout: float | None = None) -> Outlet:
    endpoint = f"{OUTLETS_PREFIX}/{outlet_id}"
    decoded = await transport.request_json("GET", endpoint, timeout=timeout)
    return Outlet.model_validate(expect_object(endpoint, decoded))


async def search_outlets(
    transport: Transport,
    query: str,
    *,
    limit: int = 20,
    offset: int = 0,
    timeout: float | None = None,
) -> list[Outlet]:
    endpoint = f"{OUTLETS_PREFIX}/search"
    decoded = await transport.request_json(
        "GET",
        endpoint,
        params={"q": query, "limit": limit, "offset": offset},
        timeout=timeout,
    )
    return _parse_outlets(endpoint, extract_items(decoded, "outlets", "items", "data"))


async def fetch_nearby_outlets(
    transport: Transport,
    lat: float,
    lng: float,
    *,
    radius_km: float = DEFAULT_RADIUS_KM,
    limit: int = 10,
    timeout: float | None = None,
) -> list[Outlet]:
    endpoint = f"{OUTLETS_PREFIX}/nearby"
    decoded = await transport.request_json(
        "GET",
        endpoint,
        params={"lat": lat, "lng": lng, "radius": radius_km, "limit": limit},
        timeout=timeout,
    )
    return _parse_outlets(endpoint, extract_items(decoded, "outlets", "items", "data"))
