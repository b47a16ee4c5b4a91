"""Sign-in, sign-up, sign-out and session resolution."""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from familysync.domain.auth import AuthUser, Session
from familysync.domain.errors import AuthError
from familysync.domain.profiles import SELF_REGISTERING_ROLES, Role
from familysync.services.sessions import SessionStore

logger = logging.getLogger(__name__)

_JWT_SEGMENTS = 3
SESSION_CHECK_FAILED_MESSAGE = "Could not verify your session. Please sign in again."


class AuthGateway(Protocol):
    """Interface to the external identity provider."""

    def sign_in(self, email: str, password: str) -> Session:
        """Exchange credentials for a session or raise AuthError."""

    def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict[str, object],
        redirect_to: str | None,
    ) -> None:
        """Register a new account that must confirm its email."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for a valid access token, if any."""


@dataclass
class AuthService:
    """Application service for the session lifecycle."""

    gateway: AuthGateway
    store: SessionStore

    def sign_in(self, email: str, password: str) -> Session:
        """Sign in and register the new session with the store."""
        try:
            session = self.gateway.sign_in(email, password)
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("Identity provider sign-in failed")
            raise AuthError("Sign-in is unavailable. Please try again.") from exc
        self.store.set(session)
        logger.info("User signed in", extra={"user_id": str(session.user_id)})
        return session

    def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role,
        redirect_to: str | None = None,
    ) -> None:
        """Register a parent or admin account."""
        if role not in SELF_REGISTERING_ROLES:
            raise AuthError("Only parents and admins can create a family account.")
        try:
            self.gateway.sign_up(
                email,
                password,
                metadata={"full_name": full_name, "role": role.value},
                redirect_to=redirect_to,
            )
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("Identity provider sign-up failed")
            raise AuthError("Sign-up is unavailable. Please try again.") from exc

    def sign_out(self, access_token: str) -> None:
        """Revoke the session remotely and tear it down locally."""
        try:
            self.gateway.sign_out(access_token)
        except Exception:
            logger.exception("Remote sign-out failed")
        finally:
            self.store.clear(access_token)

    def get_user(self, access_token: str) -> AuthUser | None:
        """Fetch the current user from the identity provider.

        Provider failures raise AuthError; an unknown token returns None.
        """
        try:
            return self.gateway.get_user(access_token)
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("Identity provider user lookup failed")
            raise AuthError(SESSION_CHECK_FAILED_MESSAGE) from exc

    def resolve_session(self, access_token: str | None) -> Session | None:
        """Return the session for a token from the store or the provider."""
        if not access_token:
            return None
        cached = self.store.get(access_token)
        if cached is not None:
            return cached
        user = self.get_user(access_token)
        if user is None:
            self.store.clear(access_token)
            return None
        session = Session(
            user=user,
            access_token=access_token,
            expires_at=token_expiry(access_token),
        )
        if session.is_expired(datetime.now(tz=UTC)):
            return None
        self.store.remember(session)
        return session


def token_expiry(access_token: str) -> datetime | None:
    """Read the `exp` claim of an already-verified JWT."""
    parts = access_token.split(".")
    if len(parts) != _JWT_SEGMENTS:
        return None
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except (binascii.Error, ValueError):
        return None
    exp = claims.get("exp") if isinstance(claims, dict) else None
    if not isinstance(exp, int | float):
        return None
    return datetime.fromtimestamp(exp, tz=UTC)
