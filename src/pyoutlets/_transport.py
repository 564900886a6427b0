"""JSON-over-HTTP transport with timing and error mapping."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyoutlets._constants import USER_AGENT
from pyoutlets._metrics import ApiMetrics, RequestTiming
from pyoutlets._redact import redact_for_log
from pyoutlets.config import OutletsConfig
from pyoutlets.exceptions import OutletsApiError, OutletsTimeoutError, OutletsTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules only depend on this protocol so tests can pass a
    plain fake instead of a real HTTP session.
    """

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        ...


def _error_message(status: int, text: str) -> tuple[str, str]:
    """Pick a human readable message out of an error body.

    Returns ``(message, detail)``.
    """
    detail = ""
    try:
        body = json.loads(text) if text else None
    except json.JSONDecodeError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                detail = value
                break
    if detail:
        return detail, detail
    if status >= 500:
        return "Server error. The service is temporarily unavailable.", ""
    return f"HTTP error! status: {status}", ""


class JsonTransport:
    """HTTP transport for the outlet/chat backend."""

    def __init__(
        self,
        config: OutletsConfig,
        http_session: aiohttp.ClientSession,
        *,
        metrics: ApiMetrics | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._metrics = metrics

    def _record(self, method: str, path: str, started: float, status: int | None, error: str | None) -> None:
        if self._metrics is None:
            return
        self._metrics.record(
            RequestTiming(
                method=method,
                url=path,
                duration_ms=(time.monotonic() - started) * 1000.0,
                status=status,
                error=error,
            )
        )

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Send a JSON request and return the decoded body.

        ``None`` is returned for empty bodies (e.g. ``204 No Content``).
        """
        method = method.upper()
        url = f"{self._config.base_url}{path}"
        budget = timeout if timeout is not None else self._config.request_timeout
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("%s %s params=%s body=%s", method, url, redact_for_log(params), redact_for_log(json_body))

        started = time.monotonic()
        try:
            async with self._http.request(
                method,
                url,
                json=dict(json_body) if json_body is not None else None,
                params=dict(params) if params is not None else None,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=budget),
            ) as resp:
                status = resp.status
                text = await resp.text()
        except TimeoutError as exc:
            self._record(method, path, started, None, "timeout")
            raise OutletsTimeoutError(
                f"Request to {path} timed out after {budget:.0f}s. The server might be starting up.",
                endpoint=path,
            ) from exc
        except aiohttp.ClientError as exc:
            self._record(method, path, started, None, str(exc) or type(exc).__name__)
            raise OutletsTransportError(
                f"Request to {path} failed: {exc}",
                endpoint=path,
            ) from exc

        _logger.debug("%s %s -> %d", method, url, status)

        if not 200 <= status < 300:
            message, detail = _error_message(status, text)
            self._record(method, path, started, status, message)
            raise OutletsApiError(
                message,
                status_code=status,
                endpoint=path,
                detail=detail,
            )

        self._record(method, path, started, status, None)

        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise OutletsTransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                status_code=status,
                endpoint=path,
            ) from exc
