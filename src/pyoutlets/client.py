"""High-level async client tying the kernel components together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pyoutlets._api import outlets as _outlets_api
from pyoutlets._metrics import ApiMetrics
from pyoutlets._transport import JsonTransport
from pyoutlets.chat.backend import HttpChatBackend
from pyoutlets.chat.coordinator import SessionCoordinator
from pyoutlets.config import OutletsConfig
from pyoutlets.exceptions import OutletsError
from pyoutlets.location.acquisition import LocationAcquisition
from pyoutlets.location.policy import Platform
from pyoutlets.location.sensor import PositionSensor
from pyoutlets.models.chat import HealthStatus
from pyoutlets.models.intersection import IntersectionIndex
from pyoutlets.models.outlet import Outlet, OutletId
from pyoutlets.proximity.engine import ProximityEngine
from pyoutlets.proximity.filters import locatable
from pyoutlets.proximity.highlighter import SelectionHighlighter

_logger = logging.getLogger(__name__)


class OutletsClient:
    """Async client for the outlet map backend.

    Usage::

        async with OutletsClient(config, sensor=sensor) as client:
            await client.load_outlets()
            client.highlighter.select(outlet_id)
            await client.chat.create_session()
            await client.location.acquire()
            reply = await client.chat.send_message("Which outlets are open 24 hours?")
    """

    def __init__(
        self,
        config: OutletsConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        sensor: PositionSensor | None = None,
        metrics: ApiMetrics | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._metrics = metrics if metrics is not None else (ApiMetrics() if config.metrics_enabled else None)
        self._transport: JsonTransport | None = None
        self._engine = ProximityEngine(radius_km=config.radius_km)
        self._highlighter = SelectionHighlighter(self._engine.index)
        self._location = LocationAcquisition(sensor, platform=Platform.from_user_agent(config.user_agent))
        self._chat: SessionCoordinator | None = None
        self._unbind_location: Callable[[], None] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> OutletsClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(self._config, self._http_session, metrics=self._metrics)
        self._chat = SessionCoordinator.from_config(
            HttpChatBackend.from_config(self._transport, self._config),
            self._config,
        )
        self._unbind_location = self._chat.bind_location(self._location)
        await self._location.refresh_permission()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._chat is not None:
            if self._chat.session.is_active:
                await self._chat.end_session()
            self._chat.dispose()
            self._chat = None
        if self._unbind_location is not None:
            self._unbind_location()
            self._unbind_location = None
        self._location.dispose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> JsonTransport:
        if self._transport is None:
            raise OutletsError("Client not initialized. Use 'async with OutletsClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def config(self) -> OutletsConfig:
        return self._config

    @property
    def metrics(self) -> ApiMetrics | None:
        return self._metrics

    @property
    def location(self) -> LocationAcquisition:
        return self._location

    @property
    def chat(self) -> SessionCoordinator:
        if self._chat is None:
            raise OutletsError("Client not initialized. Use 'async with OutletsClient(...) as client:'")
        return self._chat

    @property
    def highlighter(self) -> SelectionHighlighter:
        return self._highlighter

    @property
    def outlets(self) -> tuple[Outlet, ...]:
        return self._engine.outlets

    @property
    def intersections(self) -> IntersectionIndex:
        return self._engine.index

    # ------------------------------------------------------------------
    # Outlets
    # ------------------------------------------------------------------

    async def load_outlets(self) -> IntersectionIndex:
        """Fetch all outlets, keep the locatable ones and recompute intersections."""
        transport = self._require_transport()
        fetched = await _outlets_api.fetch_outlets(transport, timeout=self._config.extended_timeout)
        usable = locatable(fetched)
        if len(usable) != len(fetched):
            _logger.debug("Dropped %d outlets without coordinates", len(fetched) - len(usable))
        return self._replace_outlets(usable)

    def set_radius(self, radius_km: float) -> IntersectionIndex:
        self._engine.set_radius(radius_km)
        index = self._engine.index
        self._highlighter.update_index(index)
        return index

    def _replace_outlets(self, outlets: list[Outlet]) -> IntersectionIndex:
        self._engine.update_outlets(outlets)
        index = self._engine.index
        self._highlighter.update_index(index)
        _logger.debug("Intersection index ready for %d outlets", len(index))
        return index

    async def get_outlet(self, outlet_id: OutletId) -> Outlet:
        return await _outlets_api.fetch_outlet(self._require_transport(), outlet_id)

    async def search_outlets(self, query: str, *, limit: int = 20, offset: int = 0) -> list[Outlet]:
        return await _outlets_api.search_outlets(self._require_transport(), query, limit=limit, offset=offset)

    async def get_nearby_outlets(self, *, radius_km: float | None = None, limit: int = 10) -> list[Outlet]:
        """Outlets near the user's current location (acquired if unknown)."""
        location = self._location.location
        if location is None:
            location = await self._location.acquire()
        return await _outlets_api.fetch_nearby_outlets(
            self._require_transport(),
            location.lat,
            location.lng,
            radius_km=radius_km if radius_km is not None else self._config.radius_km,
            limit=limit,
        )

    async def health_check(self) -> HealthStatus:
        return await HttpChatBackend(self._require_transport()).health_check()
