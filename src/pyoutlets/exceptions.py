"""Custom exception hierarchy for pyoutlets."""

from __future__ import annotations

from enum import StrEnum


class LocationErrorCode(StrEnum):
    NOT_SUPPORTED = "not_supported"
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class SessionErrorCode(StrEnum):
    CREATE_FAILED = "create_failed"
    SEND_FAILED = "send_failed"
    DELETE_FAILED = "delete_failed"
    BUSY = "busy"
    ERROR_PENDING = "error_pending"
    NO_ACTIVE_SESSION = "no_active_session"


class OutletsError(Exception):
    """Base exception for all pyoutlets errors."""


class OutletsConfigError(OutletsError):
    """Invalid or missing configuration."""


class OutletsTransportError(OutletsError):
    """HTTP-level failure (network, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class OutletsTimeoutError(OutletsTransportError):
    """Request exceeded its time budget.

    The backend is hosted on infrastructure that sleeps when idle, so the
    first request after a quiet period can take much longer than usual.
    """


class OutletsApiError(OutletsError):
    """Backend answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        detail: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(message)


# ---------------------------------------------------------------------------
# Location acquisition
# ---------------------------------------------------------------------------


class LocationError(OutletsError):
    """Position could not be acquired."""

    code: LocationErrorCode = LocationErrorCode.UNKNOWN


class LocationNotSupportedError(LocationError):
    """The platform has no position sensor."""

    code = LocationErrorCode.NOT_SUPPORTED


class LocationPermissionDeniedError(LocationError):
    """The user (or platform policy) refused access to the position."""

    code = LocationErrorCode.PERMISSION_DENIED


class LocationUnavailableError(LocationError):
    """The sensor could not determine a position."""

    code = LocationErrorCode.POSITION_UNAVAILABLE


class LocationTimeoutError(LocationError):
    """The sensor did not produce a fix within the policy timeout."""

    code = LocationErrorCode.TIMEOUT


class LocationUnknownError(LocationError):
    """Any other sensor failure; ``detail`` carries the platform message."""

    code = LocationErrorCode.UNKNOWN

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"An error occurred while retrieving location: {detail or 'Unknown error'}")


# ---------------------------------------------------------------------------
# Chat session
# ---------------------------------------------------------------------------


class SessionError(OutletsError):
    """Chat session operation failed."""

    code: SessionErrorCode = SessionErrorCode.SEND_FAILED


class SessionCreateError(SessionError):
    """Backend could not create a chat session."""

    code = SessionErrorCode.CREATE_FAILED


class SessionSendError(SessionError):
    """Backend did not answer a chat message."""

    code = SessionErrorCode.SEND_FAILED


class SessionDeleteError(SessionError):
    """Backend could not delete a chat session.

    Never fatal locally: the coordinator resets its state regardless.
    """

    code = SessionErrorCode.DELETE_FAILED


class SessionBusyError(SessionError):
    """A message is already being sent, or the previous session is still ending."""

    code = SessionErrorCode.BUSY


class SessionErrorPendingError(SessionError):
    """An earlier failure has not been acknowledged with ``clear_error()``."""

    code = SessionErrorCode.ERROR_PENDING


class SessionNotActiveError(SessionError):
    """No active chat session."""

    code = SessionErrorCode.NO_ACTIVE_SESSION
