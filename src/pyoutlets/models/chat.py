"""Chat session and message models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pyoutlets.models._base import ErrorInfo, OutletsBaseModel
from pyoutlets.models.location import UserLocation


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class SessionStatus(StrEnum):
    ABSENT = "absent"
    CREATING = "creating"
    ACTIVE = "active"
    SENDING = "sending"
    ENDING = "ending"


class ChatMessage(BaseModel):
    """One transcript entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: MessageRole
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("timestamp")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class ChatSession(BaseModel):
    """Immutable snapshot of a ``SessionCoordinator``."""

    model_config = ConfigDict(frozen=True)

    session_id: str | None = None
    status: SessionStatus = SessionStatus.ABSENT
    transcript: tuple[ChatMessage, ...] = ()
    last_error: ErrorInfo | None = None
    location: UserLocation | None = None

    @property
    def is_active(self) -> bool:
        return self.status in (SessionStatus.ACTIVE, SessionStatus.SENDING)

    @property
    def is_sending(self) -> bool:
        return self.status == SessionStatus.SENDING


# ---------------------------------------------------------------------------
# Backend payloads
# ---------------------------------------------------------------------------


class CreateSessionResult(OutletsBaseModel):
    """Response of ``POST /api/v1/chat/session``."""

    session_id: str = Field(validation_alias=AliasChoices("session_id", "sessionId", "id"))
    welcome_message: str | None = Field(
        default=None,
        validation_alias=AliasChoices("welcome_message", "welcomeMessage", "message"),
    )
    created_at: str | None = None
    status: str | None = None


class ChatReply(OutletsBaseModel):
    """Response of ``POST /api/v1/chat/message``."""

    response: str = Field(validation_alias=AliasChoices("response", "responseText", "response_text"))
    session_id: str | None = None
    message_type: str | None = None
    context_used: str | None = None
    outlets_found: int | None = None
    follow_up_suggestions: tuple[str, ...] = ()

    @field_validator("follow_up_suggestions", mode="before")
    @classmethod
    def _coerce_suggestions(cls, value: Any) -> Any:
        if isinstance(value, list):
            return tuple(str(item) for item in value if item)
        return value


class HistoryEntry(OutletsBaseModel):
    role: str
    content: str = Field(default="", validation_alias=AliasChoices("content", "text", "message"))
    timestamp: str | None = None


class ChatHistory(OutletsBaseModel):
    """Response of ``GET /api/v1/chat/history/{session_id}``."""

    session_id: str | None = None
    messages: tuple[HistoryEntry, ...] = ()
    total_messages: int | None = None


class HealthStatus(OutletsBaseModel):
    status: str = "unknown"
    timestamp: str | None = None
    version: str | None = None

    @property
    def healthy(self) -> bool:
        return self.status.lower() in {"healthy", "ok"}
