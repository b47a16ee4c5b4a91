"""Supabase Auth gateway."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from supabase import AuthError as SupabaseAuthError
from supabase import Client

from familysync.domain.auth import AuthUser, Session
from familysync.domain.errors import AuthError
from familysync.services.auth import AuthGateway

logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Auth gateway over Supabase Auth.

    Token checks and revocation go through the service client. Sign-in and
    sign-up use a throwaway anon client from `client_factory` so the shared
    client never picks up an end-user session.
    """

    client: Client
    client_factory: Callable[[], Client]

    def sign_in(self, email: str, password: str) -> Session:
        """Exchange email and password for a session."""
        try:
            response = self.client_factory().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except SupabaseAuthError as exc:
            raise AuthError(exc.message or "Invalid login credentials.") from exc
        if response.session is None or response.user is None:
            raise AuthError("Invalid login credentials.")
        return _to_session(response.session, response.user)

    def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict[str, object],
        redirect_to: str | None,
    ) -> None:
        """Register an account that confirms via email."""
        options: dict[str, object] = {"data": metadata}
        if redirect_to:
            options["email_redirect_to"] = redirect_to
        try:
            self.client_factory().auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        except SupabaseAuthError as exc:
            raise AuthError(exc.message or "Sign-up failed.") from exc

    def sign_out(self, access_token: str) -> None:
        """Revoke the refresh tokens behind an access token."""
        self.client.auth.admin.sign_out(access_token)

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for a valid access token."""
        try:
            response = self.client.auth.get_user(access_token)
        except SupabaseAuthError:
            logger.info("Rejected access token")
            return None
        if response is None or response.user is None:
            return None
        return _to_user(response.user)


def _to_user(user: Any) -> AuthUser:
    metadata = user.user_metadata
    return AuthUser(
        id=UUID(str(user.id)),
        email=user.email,
        metadata=dict(metadata) if isinstance(metadata, dict) else {},
    )


def _to_session(session: Any, user: Any) -> Session:
    expires_at = session.expires_at
    return Session(
        user=_to_user(user),
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=(
            datetime.fromtimestamp(expires_at, tz=UTC)
            if isinstance(expires_at, int | float)
            else None
        ),
    )
