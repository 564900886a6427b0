"""Remote chat backend interface and its HTTP implementation."""

from __future__ import annotations

from typing import Protocol

from pydantic import ValidationError

from pyoutlets._api import chat as _chat_api
from pyoutlets._transport import Transport
from pyoutlets.config import OutletsConfig
from pyoutlets.exceptions import (
    OutletsApiError,
    OutletsTransportError,
    SessionCreateError,
    SessionDeleteError,
    SessionSendError,
)
from pyoutlets.models.chat import ChatHistory, ChatReply, CreateSessionResult, HealthStatus
from pyoutlets.models.location import UserLocation

_BACKEND_ERRORS = (OutletsApiError, OutletsTransportError, ValidationError)


class ChatBackend(Protocol):
    """The three operations the session coordinator relies on.

    Implementations may take arbitrarily long; the coordinator applies its
    own time budgets.
    """

    async def create_session(self) -> CreateSessionResult:
        ...

    async def send_message(self, session_id: str, text: str, location: UserLocation | None) -> ChatReply:
        ...

    async def delete_session(self, session_id: str) -> None:
        ...


def _detail(exc: Exception) -> str:
    if isinstance(exc, OutletsApiError) and exc.detail:
        return exc.detail
    return str(exc)


class HttpChatBackend:
    """:class:`ChatBackend` over the ``/api/v1/chat`` HTTP endpoints.

    Each operation passes its own time budget to the transport; ``None``
    leaves the transport default in place.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        create_timeout: float | None = None,
        send_timeout: float | None = None,
        delete_timeout: float | None = None,
    ) -> None:
        self._transport = transport
        self._create_timeout = create_timeout
        self._send_timeout = send_timeout
        self._delete_timeout = delete_timeout

    @classmethod
    def from_config(cls, transport: Transport, config: OutletsConfig) -> HttpChatBackend:
        return cls(
            transport,
            create_timeout=config.create_timeout,
            send_timeout=config.send_timeout,
            delete_timeout=config.delete_timeout,
        )

    async def create_session(self) -> CreateSessionResult:
        try:
            return await _chat_api.create_session(self._transport, timeout=self._create_timeout)
        except _BACKEND_ERRORS as exc:
            raise SessionCreateError(f"Failed to create chat session: {_detail(exc)}") from exc

    async def send_message(self, session_id: str, text: str, location: UserLocation | None) -> ChatReply:
        try:
            return await _chat_api.send_message(
                self._transport,
                session_id,
                text,
                location=location,
                timeout=self._send_timeout,
            )
        except _BACKEND_ERRORS as exc:
            raise SessionSendError(f"Failed to send message: {_detail(exc)}") from exc

    async def delete_session(self, session_id: str) -> None:
        try:
            await _chat_api.delete_session(self._transport, session_id, timeout=self._delete_timeout)
        except _BACKEND_ERRORS as exc:
            raise SessionDeleteError(f"Failed to delete session: {_detail(exc)}") from exc

    async def fetch_history(self, session_id: str) -> ChatHistory:
        return await _chat_api.fetch_history(self._transport, session_id)

    async def health_check(self) -> HealthStatus:
        return await _chat_api.health_check(self._transport)
