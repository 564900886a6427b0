"""User location acquisition over an unreliable platform sensor."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from pyoutlets._listeners import Listeners
from pyoutlets.exceptions import (
    LocationError,
    LocationNotSupportedError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    LocationUnavailableError,
    LocationUnknownError,
)
from pyoutlets.location.policy import LocationPolicy, Platform, build_attempt_policies, is_retryable
from pyoutlets.location.sensor import PositionSensor, SensorError, SensorErrorCode
from pyoutlets.models._base import ErrorInfo
from pyoutlets.models.location import LocationPermission, LocationState, UserLocation

_logger = logging.getLogger(__name__)


def _map_sensor_error(err: SensorError) -> LocationError:
    if err.code == SensorErrorCode.PERMISSION_DENIED:
        return LocationPermissionDeniedError(
            "Location access denied. Enable location permissions to find nearby outlets."
        )
    if err.code == SensorErrorCode.POSITION_UNAVAILABLE:
        return LocationUnavailableError(
            "Location information is unavailable. Check the device's location settings."
        )
    if err.code == SensorErrorCode.TIMEOUT:
        return LocationTimeoutError("Location request timed out. Please try again.")
    return LocationUnknownError(err.message)


class LocationAcquisition:
    """Owns one :class:`LocationState` and the sensor calls that feed it.

    Overlapping :meth:`acquire` calls share a single sensor call and all
    observe its outcome.  :meth:`clear` and :meth:`dispose` bump a
    generation counter so that a sensor call still outstanding at that
    point resolves without touching state.  Sensor calls cannot be
    cancelled, so a cycle started after a reset waits for the discarded
    one to settle before it calls the sensor: at most one physical call is
    outstanding per instance.

    Usage::

        acquisition = LocationAcquisition(sensor, platform=Platform.FIREFOX)
        unsubscribe = acquisition.subscribe(render)
        location = await acquisition.acquire()
    """

    def __init__(
        self,
        sensor: PositionSensor | None,
        *,
        platform: Platform = Platform.GENERIC,
        policies: Sequence[LocationPolicy] | None = None,
    ) -> None:
        self._sensor = sensor
        self._policies: tuple[LocationPolicy, ...] = (
            tuple(policies) if policies else build_attempt_policies(platform)
        )
        self._state = LocationState(is_supported=sensor is not None and sensor.is_supported)
        # Cycle serving the current generation.
        self._inflight: asyncio.Task[UserLocation] | None = None
        # Most recently started cycle of any generation.
        self._sensor_task: asyncio.Task[UserLocation] | None = None
        self._generation = 0
        self._listeners: Listeners[LocationState] = Listeners()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> LocationState:
        return self._state

    @property
    def location(self) -> UserLocation | None:
        return self._state.location

    @property
    def policies(self) -> tuple[LocationPolicy, ...]:
        return self._policies

    def subscribe(self, listener: Callable[[LocationState], None]) -> Callable[[], None]:
        """Call *listener* with every new state; returns an unsubscribe function."""
        return self._listeners.add(listener)

    def _apply(self, **changes: Any) -> None:
        updated = self._state.model_copy(update=changes)
        if updated == self._state:
            return
        self._state = updated
        self._listeners.notify(updated)

    def _finish(self, generation: int, **changes: Any) -> None:
        """Apply the outcome of a sensor cycle unless it has gone stale."""
        if generation != self._generation:
            _logger.debug("Discarding stale location result (generation %d)", generation)
            return
        self._inflight = None
        self._apply(in_flight=False, **changes)

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    async def acquire(self) -> UserLocation:
        """Return the user's position.

        Raises
        ------
        LocationNotSupportedError
            The platform has no sensor.
        LocationPermissionDeniedError
            Access refused; permission becomes ``denied``.
        LocationUnavailableError
            Still unavailable after the relaxed retry.
        LocationTimeoutError
            The sensor timed out (not retried).
        LocationUnknownError
            Anything else.
        """
        if not self._state.is_supported:
            exc = LocationNotSupportedError("Geolocation is not supported by this platform")
            self._apply(last_error=ErrorInfo.from_exception(exc))
            raise exc

        task = self._inflight
        if task is None:
            _logger.debug("Starting location request (generation %d)", self._generation)
            previous = self._sensor_task
            if previous is not None and previous.done():
                previous = None
            task = asyncio.get_running_loop().create_task(self._run_cycle(self._generation, previous))
            task.add_done_callback(_consume_result)
            self._inflight = task
            self._sensor_task = task
            self._apply(in_flight=True)
        else:
            _logger.debug("Joining in-flight location request")

        # Shielded so one cancelled caller does not cancel the shared call.
        return await asyncio.shield(task)

    async def _run_cycle(
        self,
        generation: int,
        previous: asyncio.Task[UserLocation] | None = None,
    ) -> UserLocation:
        sensor = self._sensor
        assert sensor is not None  # noqa: S101
        if previous is not None:
            _logger.debug("Waiting for the discarded location request to settle")
            try:
                await asyncio.wait((previous,))
            except asyncio.CancelledError:
                self._finish(generation)
                raise
        last_attempt = len(self._policies) - 1

        for attempt, policy in enumerate(self._policies):
            _logger.debug("Location attempt %d with %s", attempt + 1, policy)
            try:
                position = await sensor.get_current_position(
                    high_accuracy=policy.high_accuracy,
                    timeout_ms=policy.timeout_ms,
                    maximum_age_ms=policy.maximum_age_ms,
                )
                location = UserLocation(lat=position.lat, lng=position.lng)
            except SensorError as err:
                if is_retryable(err.code) and attempt < last_attempt:
                    _logger.debug("Position unavailable on attempt %d; relaxing accuracy", attempt + 1)
                    continue
                raise self._fail(generation, _map_sensor_error(err)) from err
            except asyncio.CancelledError:
                self._finish(generation)
                raise
            except Exception as err:
                raise self._fail(generation, LocationUnknownError(str(err) or type(err).__name__)) from err

            _logger.debug("Location acquired (accuracy=%sm)", position.accuracy_m)
            self._finish(generation, location=location, permission=LocationPermission.GRANTED)
            return location

        # Unreachable with a non-empty policy table.
        raise self._fail(generation, LocationUnknownError("no location policy configured"))

    def _fail(self, generation: int, exc: LocationError) -> LocationError:
        _logger.debug("Location request failed: %s", exc)
        changes: dict[str, Any] = {"last_error": ErrorInfo.from_exception(exc)}
        if isinstance(exc, LocationPermissionDeniedError):
            changes["permission"] = LocationPermission.DENIED
        self._finish(generation, **changes)
        return exc

    # ------------------------------------------------------------------
    # Permission
    # ------------------------------------------------------------------

    def on_permission_change(self, permission: LocationPermission | str) -> None:
        """Platform notification; only the permission field changes."""
        self._apply(permission=LocationPermission(permission))

    async def refresh_permission(self) -> LocationPermission:
        """Query the platform for the current permission state."""
        permission = LocationPermission.UNKNOWN
        if self._sensor is not None:
            try:
                permission = LocationPermission(await self._sensor.query_permission())
            except Exception:
                _logger.warning("Could not check location permission", exc_info=True)
        self._apply(permission=permission)
        return permission

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def clear_error(self) -> None:
        self._apply(last_error=None)

    def clear(self) -> None:
        """Forget the location and error; an outstanding result is discarded."""
        self._generation += 1
        self._inflight = None
        self._apply(location=None, last_error=None, in_flight=False)

    def dispose(self) -> None:
        self._generation += 1
        self._inflight = None
        self._listeners.clear()
        self._state = self._state.model_copy(update={"in_flight": False})


def _consume_result(task: asyncio.Task[UserLocation]) -> None:
    # Retrieve the exception so an outcome nobody awaited is not reported
    # as "never retrieved" by the event loop.
    if not task.cancelled():
        task.exception()
