"""Chat session state machine.

::

    absent -> creating -> active <-> sending
                            |
                            v
                          ending -> absent

Only one session exists per coordinator.  Sends are serialized: a second
``send_message`` while one is outstanding fails with ``SessionBusyError``
instead of queueing, so every assistant reply directly follows the user
message it answers.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from collections.abc import Callable
from datetime import UTC, datetime

from pyoutlets._listeners import Listeners
from pyoutlets.chat.backend import ChatBackend
from pyoutlets.config import OutletsConfig
from pyoutlets.exceptions import (
    SessionBusyError,
    SessionCreateError,
    SessionErrorPendingError,
    SessionNotActiveError,
    SessionSendError,
)
from pyoutlets.location.acquisition import LocationAcquisition
from pyoutlets.models._base import ErrorInfo
from pyoutlets.models.chat import ChatMessage, ChatReply, ChatSession, MessageRole, SessionStatus
from pyoutlets.models.location import LocationState, UserLocation

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _message_id() -> str:
    return f"msg_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


def _consume_result(task: asyncio.Task[object]) -> None:
    if not task.cancelled():
        task.exception()


class SessionCoordinator:
    """Owns the chat session, its transcript and the location attached to queries."""

    def __init__(
        self,
        backend: ChatBackend,
        *,
        create_timeout: float = 60.0,
        send_timeout: float = 30.0,
        delete_timeout: float = 30.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._backend = backend
        self._create_timeout = create_timeout
        self._send_timeout = send_timeout
        self._delete_timeout = delete_timeout
        self._clock = clock

        self._session_id: str | None = None
        self._status = SessionStatus.ABSENT
        self._transcript: list[ChatMessage] = []
        self._last_error: ErrorInfo | None = None
        self._last_reply: ChatReply | None = None
        self._location: UserLocation | None = None

        # Bumped whenever the session is torn down; results from calls issued
        # under an older generation are dropped.
        self._generation = 0
        self._creating: asyncio.Task[str] | None = None
        self._ending: asyncio.Task[bool] | None = None

        self._snapshot = ChatSession()
        self._listeners: Listeners[ChatSession] = Listeners()

    @classmethod
    def from_config(cls, backend: ChatBackend, config: OutletsConfig) -> SessionCoordinator:
        return cls(
            backend,
            create_timeout=config.create_timeout,
            send_timeout=config.send_timeout,
            delete_timeout=config.delete_timeout,
        )

    # ------------------------------------------------------------------
    # Snapshot and notifications
    # ------------------------------------------------------------------

    @property
    def session(self) -> ChatSession:
        return self._snapshot

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def location(self) -> UserLocation | None:
        return self._location

    @property
    def last_reply(self) -> ChatReply | None:
        """Full backend payload of the latest answer (suggestions, counts)."""
        return self._last_reply

    def subscribe(self, listener: Callable[[ChatSession], None]) -> Callable[[], None]:
        return self._listeners.add(listener)

    def _emit(self) -> None:
        snapshot = ChatSession(
            session_id=self._session_id,
            status=self._status,
            transcript=tuple(self._transcript),
            last_error=self._last_error,
            location=self._location,
        )
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        self._listeners.notify(snapshot)

    def _append(self, role: MessageRole, text: str) -> ChatMessage:
        message = ChatMessage(id=_message_id(), role=role, text=text, timestamp=self._clock())
        self._transcript.append(message)
        return message

    def _reset(self) -> None:
        self._session_id = None
        self._status = SessionStatus.ABSENT
        self._transcript.clear()
        self._last_error = None
        self._last_reply = None
        self._creating = None
        self._ending = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def create_session(self) -> str:
        """Create the session, or return the one that already exists.

        Concurrent callers during creation share the same backend call.
        """
        if self._status in (SessionStatus.ACTIVE, SessionStatus.SENDING) and self._session_id is not None:
            return self._session_id
        if self._status == SessionStatus.CREATING and self._creating is not None:
            return await asyncio.shield(self._creating)
        if self._status == SessionStatus.ENDING:
            raise SessionBusyError("The previous session is still ending")

        self._status = SessionStatus.CREATING
        self._emit()
        task = asyncio.get_running_loop().create_task(self._create(self._generation))
        task.add_done_callback(_consume_result)
        self._creating = task
        return await asyncio.shield(task)

    async def _create(self, generation: int) -> str:
        try:
            result = await asyncio.wait_for(self._backend.create_session(), self._create_timeout)
        except asyncio.CancelledError:
            if generation == self._generation:
                self._creating = None
                self._status = SessionStatus.ABSENT
                self._emit()
            raise
        except Exception as err:
            if isinstance(err, SessionCreateError):
                exc = err
            elif isinstance(err, TimeoutError):
                exc = SessionCreateError(f"Creating a chat session timed out after {self._create_timeout:.0f}s")
            else:
                exc = SessionCreateError(f"Failed to create chat session: {err}")
            if generation == self._generation:
                self._creating = None
                self._status = SessionStatus.ABSENT
                self._last_error = ErrorInfo.from_exception(exc)
                self._emit()
            _logger.debug("Chat session creation failed", exc_info=True)
            if exc is err:
                raise
            raise exc from err

        if generation != self._generation:
            # Torn down while the backend was creating it: do not leak it.
            await self._delete_quietly(result.session_id)
            raise SessionNotActiveError("The coordinator was reset before the session was created")

        self._creating = None
        self._session_id = result.session_id
        self._status = SessionStatus.ACTIVE
        # A new session starts without errors from earlier attempts.
        self._last_error = None
        if result.welcome_message:
            self._append(MessageRole.ASSISTANT, result.welcome_message)
        self._emit()
        _logger.debug("Chat session created")
        return result.session_id

    async def end_session(self) -> bool:
        """Delete the session remotely and reset locally.

        Returns ``True`` when the backend acknowledged the delete.
        """
        if self._status == SessionStatus.ENDING and self._ending is not None:
            return await asyncio.shield(self._ending)
        if self._status not in (SessionStatus.ACTIVE, SessionStatus.SENDING) or self._session_id is None:
            raise SessionNotActiveError("No active chat session to end")

        session_id = self._session_id
        self._generation += 1
        self._status = SessionStatus.ENDING
        self._emit()
        task = asyncio.get_running_loop().create_task(self._end(session_id, self._generation))
        task.add_done_callback(_consume_result)
        self._ending = task
        return await asyncio.shield(task)

    async def _end(self, session_id: str, generation: int) -> bool:
        try:
            return await self._delete_quietly(session_id)
        finally:
            # A dispose() while deleting may already have started a new session.
            if generation == self._generation:
                self._reset()
                self._emit()

    async def _delete_quietly(self, session_id: str) -> bool:
        try:
            await asyncio.wait_for(self._backend.delete_session(session_id), self._delete_timeout)
        except Exception as err:
            _logger.error("Failed to delete chat session: %s", str(err) or type(err).__name__)
            return False
        return True

    def dispose(self) -> None:
        """Discard the session locally without contacting the backend."""
        self._generation += 1
        self._reset()
        self._emit()
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send_message(self, text: str) -> ChatMessage:
        """Send *text* and return the assistant's reply.

        The user message is appended before the request is issued and is
        kept even if the request fails.

        Raises
        ------
        SessionNotActiveError
            No session (nothing is appended).
        SessionBusyError
            Another send is outstanding.
        SessionErrorPendingError
            ``last_error`` has not been cleared.
        SessionSendError
            The backend failed or exceeded the send budget.
        """
        if not text.strip():
            raise ValueError("message text must be non-empty")
        if self._status == SessionStatus.SENDING:
            raise SessionBusyError("A message is already being sent")
        if self._status != SessionStatus.ACTIVE or self._session_id is None:
            raise SessionNotActiveError("No active chat session")
        if self._last_error is not None:
            raise SessionErrorPendingError(f"Clear the previous error before sending ({self._last_error.code})")

        session_id = self._session_id
        generation = self._generation
        location = self._location

        self._append(MessageRole.USER, text)
        self._status = SessionStatus.SENDING
        self._emit()
        _logger.debug("Sending chat message (location attached: %s)", location is not None)

        try:
            reply = await asyncio.wait_for(
                self._backend.send_message(session_id, text, location),
                self._send_timeout,
            )
        except asyncio.CancelledError:
            if generation == self._generation:
                self._status = SessionStatus.ACTIVE
                self._emit()
            raise
        except Exception as err:
            if isinstance(err, SessionSendError):
                exc = err
            elif isinstance(err, TimeoutError):
                exc = SessionSendError(f"No reply within {self._send_timeout:.0f}s")
            else:
                exc = SessionSendError(f"Failed to send message: {err}")
            if generation == self._generation:
                self._status = SessionStatus.ACTIVE
                self._last_error = ErrorInfo.from_exception(exc)
                self._emit()
            _logger.debug("Chat message failed", exc_info=True)
            if exc is err:
                raise
            raise exc from err

        if generation != self._generation:
            raise SessionNotActiveError("The session ended before the reply arrived")

        message = self._append(MessageRole.ASSISTANT, reply.response)
        self._last_reply = reply
        self._status = SessionStatus.ACTIVE
        self._emit()
        return message

    def clear_transcript(self) -> None:
        self._transcript.clear()
        self._emit()

    def clear_error(self) -> None:
        self._last_error = None
        self._emit()

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def set_location(self, location: UserLocation | None) -> bool:
        """Set the location attached to future messages.

        Equal coordinates are a no-op and emit nothing.  Returns whether
        the stored value changed.
        """
        if location == self._location:
            return False
        self._location = location
        self._emit()
        return True

    def bind_location(self, acquisition: LocationAcquisition) -> Callable[[], None]:
        """Follow *acquisition*'s location; returns an unbind function."""

        def _on_location(state: LocationState) -> None:
            self.set_location(state.location)

        self.set_location(acquisition.location)
        return acquisition.subscribe(_on_location)
