"""Domain models for authentication."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """Identity-provider view of a signed-in user."""

    id: UUID
    email: str | None
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class Session:
    """An authenticated session for a user."""

    user: AuthUser
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None

    @property
    def user_id(self) -> UUID:
        return self.user.id

    def is_expired(self, now: datetime) -> bool:
        """Return True once the session's expiry has passed."""
        return self.expires_at is not None and now >= self.expires_at


class SessionEvent(Enum):
    """Session lifecycle notifications."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    EXPIRED = "EXPIRED"
