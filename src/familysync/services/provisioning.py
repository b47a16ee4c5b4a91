"""Privileged account creation for invited family members."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from familysync.domain.errors import InvitationError
from familysync.domain.profiles import Role
from familysync.services.profiles import ProfileRepository

logger = logging.getLogger(__name__)


class AccountAdmin(Protocol):
    """Interface for service-role credential management."""

    def create_user(
        self, email: str, password: str, metadata: dict[str, object]
    ) -> UUID:
        """Create a confirmed credential and return its user id."""

    def delete_user(self, user_id: UUID) -> None:
        """Delete a credential."""


@dataclass
class MemberProvisioningService:
    """Creates a credential and links its profile to a family."""

    accounts: AccountAdmin
    profiles: ProfileRepository

    def provision(  # noqa: PLR0913
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role,
        family_id: UUID,
    ) -> UUID:
        """Create the member; the credential is removed if linking fails."""
        try:
            user_id = self.accounts.create_user(
                email, password, {"full_name": full_name, "role": role.value}
            )
        except Exception as exc:
            logger.exception("Credential creation failed")
            raise InvitationError(str(exc) or "Failed to create user.") from exc

        try:
            self.profiles.upsert_member(user_id, full_name, role.value, family_id)
        except Exception as exc:
            logger.exception(
                "Profile linkage failed; deleting credential",
                extra={"user_id": str(user_id)},
            )
            self.accounts.delete_user(user_id)
            raise InvitationError(
                f"Failed to update profile for invited user: {exc}"
            ) from exc

        logger.info(
            "Member provisioned",
            extra={"user_id": str(user_id), "family_id": str(family_id)},
        )
        return user_id
