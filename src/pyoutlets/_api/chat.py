"""Chat endpoints.

Endpoints:
  - POST   /api/v1/chat/session
  - POST   /api/v1/chat/message
  - DELETE /api/v1/chat/session/{session_id}
  - GET    /api/v1/chat/history/{session_id}
  - GET    /api/v1/chat/health
"""

from __future__ import annotations

import logging
from typing import Any

from pyoutlets._api._common import expect_object
from pyoutlets._constants import CHAT_PREFIX
from pyoutlets._transport import Transport
from pyoutlets.models.chat import ChatHistory, ChatReply, CreateSessionResult, HealthStatus
from pyoutlets.models.location import UserLocation

_logger = logging.getLogger(__name__)


async def create_session(
    transport: Transport,
    *,
    metadata: dict[str, Any] | None = None,
    timeout: float | None = None,
) -> CreateSessionResult:
    endpoint = f"{CHAT_PREFIX}/session"
    body: dict[str, Any] = {}
    if metadata:
        body["metadata"] = metadata
    decoded = await transport.request_json("POST", endpoint, json_body=body, timeout=timeout)
    return CreateSessionResult.model_validate(expect_object(endpoint, decoded))


async def send_message(
    transport: Transport,
    session_id: str,
    text: str,
    *,
    location: UserLocation | None = None,
    timeout: float | None = None,
) -> ChatReply:
    endpoint = f"{CHAT_PREFIX}/message"
    body: dict[str, Any] = {"message": text, "session_id": session_id}
    if location is not None:
        body["user_location"] = {"lat": location.lat, "lng": location.lng}
    _logger.debug("Sending chat message (location included: %s)", location is not None)
    decoded = await transport.request_json("POST", endpoint, json_body=body, timeout=timeout)
    return ChatReply.model_validate(expect_object(endpoint, decoded))


async def delete_session(
    transport: Transport,
    session_id: str,
    *,
    timeout: float | None = None,
) -> None:
    await transport.request_json("DELETE", f"{CHAT_PREFIX}/session/{session_id}", timeout=timeout)


async def fetch_history(
    transport: Transport,
    session_id: str,
    *,
    timeout: float | None = None,
) -> ChatHistory:
    endpoint = f"{CHAT_PREFIX}/history/{session_id}"
    decoded = await transport.request_json("GET", endpoint, timeout=timeout)
    payload = expect_object(endpoint, decoded)
    payload.setdefault("session_id", session_id)
    return ChatHistory.model_validate(payload)


async def health_check(transport: Transport, *, timeout: float | None = None) -> HealthStatus:
    endpoint = f"{CHAT_PREFIX}/health"
    decoded = await transport.request_json("GET", endpoint, timeout=timeout)
    return HealthStatus.model_validate(expect_object(endpoint, decoded))
