"""Route guard for session-protected screens."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from fastapi import Request

from familysync.domain.errors import AuthError
from familysync.services.sessions import RequestLifetime

if TYPE_CHECKING:
    from familysync.containers import AppContainer

_BEARER_PREFIX = "bearer "


class LoginRequired(Exception):  # noqa: N818
    """No usable session backs the request; the user goes to the login screen."""


def read_access_token(request: Request, cookie_name: str) -> str | None:
    """Return the access token from the session cookie or a bearer header."""
    token = request.cookies.get(cookie_name)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith(_BEARER_PREFIX):
        return authorization[len(_BEARER_PREFIX) :].strip() or None
    return None


async def require_session(request: Request) -> AsyncIterator[RequestLifetime]:
    """Yield a request lifetime bound to the caller's session.

    The lifetime listens for session changes only while the request runs and
    is cancelled when the request finishes.
    """
    container: AppContainer = request.app.state.container
    token = read_access_token(request, container.settings.session_cookie_name)
    try:
        session = await asyncio.to_thread(
            container.auth_service.resolve_session, token
        )
    except AuthError as exc:
        raise LoginRequired from exc
    if session is None:
        raise LoginRequired
    lifetime = RequestLifetime(session)
    subscription = container.session_store.subscribe(lifetime.on_session_event)
    try:
        yield lifetime
    finally:
        subscription.unsubscribe()
        lifetime.cancel()
