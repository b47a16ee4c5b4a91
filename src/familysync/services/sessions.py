"""In-process session store with change notifications."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TypeVar

from familysync.domain.auth import Session, SessionEvent
from familysync.domain.errors import RequestCancelled

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionEvent, Session], None]
T = TypeVar("T")


@dataclass
class Subscription:
    """Handle for a registered session listener."""

    release: Callable[[], None]
    active: bool = True

    def unsubscribe(self) -> None:
        """Stop receiving notifications; safe to call more than once."""
        if self.active:
            self.active = False
            self.release()


@dataclass
class _CachedSession:
    session: Session
    stale_at: datetime


class SessionStore:
    """Holds resolved sessions keyed by access token.

    A cached entry is trusted for `ttl_seconds`, after which the token is
    verified with the identity provider again. Storing a session sweeps out
    expired entries and entries not verified again within a further
    `ttl_seconds`.
    """

    def __init__(self, ttl_seconds: int = 300) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._sessions: dict[str, _CachedSession] = {}
        self._listeners: list[SessionListener] = []

    def get(self, access_token: str) -> Session | None:
        """Return a live session that is still within its trust window."""
        entry = self._sessions.get(access_token)
        if entry is None:
            return None
        now = datetime.now(tz=UTC)
        if entry.session.is_expired(now):
            self._sessions.pop(access_token, None)
            self._notify(SessionEvent.EXPIRED, entry.session)
            return None
        if now >= entry.stale_at:
            return None
        return entry.session

    def set(self, session: Session) -> None:
        """Store a freshly signed-in session and announce it."""
        self._store(session)
        self._notify(SessionEvent.SIGNED_IN, session)

    def remember(self, session: Session) -> None:
        """Cache a session resolved from an existing token."""
        self._store(session)

    def clear(self, access_token: str) -> Session | None:
        """Forget a session and announce the sign-out."""
        entry = self._sessions.pop(access_token, None)
        if entry is None:
            return None
        self._notify(SessionEvent.SIGNED_OUT, entry.session)
        return entry.session

    def subscribe(self, listener: SessionListener) -> Subscription:
        """Register a listener until the returned subscription is released."""
        self._listeners.append(listener)
        return Subscription(release=lambda: self._listeners.remove(listener))

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __len__(self) -> int:
        return len(self._sessions)

    def close(self) -> None:
        """Drop every session and listener at shutdown."""
        self._sessions.clear()
        self._listeners.clear()

    def _store(self, session: Session) -> None:
        now = datetime.now(tz=UTC)
        self._sweep(now)
        self._sessions[session.access_token] = _CachedSession(
            session=session, stale_at=now + self._ttl
        )

    def _sweep(self, now: datetime) -> None:
        for token, entry in list(self._sessions.items()):
            if entry.session.is_expired(now):
                del self._sessions[token]
                self._notify(SessionEvent.EXPIRED, entry.session)
            elif now >= entry.stale_at + self._ttl:
                del self._sessions[token]

    def _notify(self, event: SessionEvent, session: Session) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception(
                    "Session listener failed", extra={"event": event.value}
                )


@dataclass
class RequestLifetime:
    """Cancellation token tying a request to the session that authorized it."""

    session: Session
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def on_session_event(self, event: SessionEvent, session: Session) -> None:
        """Cancel when this request's session signs out or expires."""
        if event is SessionEvent.SIGNED_IN:
            return
        if session.access_token == self.session.access_token:
            self.cancel()

    def deliver(self, value: T) -> T:
        """Return a result, or discard it if the request was cancelled."""
        if self.cancelled:
            raise RequestCancelled("Your session ended before the request finished.")
        return value
