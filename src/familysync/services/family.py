"""Family roster and member invitations."""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from familysync.domain.auth import Session
from familysync.domain.errors import (
    FamilyLookupError,
    InvitationError,
    ProfileLookupError,
)
from familysync.domain.profiles import INVITABLE_ROLES, Profile, Role, manages_family
from familysync.services.fetching import fetch_section
from familysync.services.functions import INVITE_MEMBER, FunctionsClient
from familysync.services.generation import parse_json_payload
from familysync.services.profiles import ProfileService

logger = logging.getLogger(__name__)

DEFAULT_INVITE_MESSAGE = "User invited successfully!"
INVITER_MISSING_MESSAGE = "Could not find your profile."
INVITER_ROLE_MESSAGE = "Only parents and admins can invite family members."


@dataclass(frozen=True)
class Invitation:
    """Details a parent enters to add a family member."""

    full_name: str
    email: str
    password: str
    role: Role


@dataclass
class FamilyRoster:
    members: list[Profile] = field(default_factory=list)
    invitable_roles: list[str] = field(
        default_factory=lambda: [role.value for role in INVITABLE_ROLES]
    )
    errors: list[str] = field(default_factory=list)
    message: str | None = None


@dataclass
class FamilyService:
    """Application service behind the family management screen."""

    profile_service: ProfileService
    functions: FunctionsClient

    def load_roster(self, user_id: UUID) -> FamilyRoster:
        """Fetch the members of the user's family."""
        roster = FamilyRoster()
        try:
            family_id = self.profile_service.require_family_id(user_id)
        except FamilyLookupError as exc:
            roster.errors.append(str(exc))
            return roster
        roster.members = fetch_section(
            roster.errors,
            "Failed to fetch family members.",
            lambda: self.profile_service.list_members(family_id),
        )
        return roster

    async def invite_member(
        self, session: Session, invitation: Invitation
    ) -> FamilyRoster:
        """Create an account for a new member through the invite function."""
        if invitation.role not in INVITABLE_ROLES:
            raise InvitationError(f"Cannot invite a member as {invitation.role.value}.")
        try:
            inviter = self.profile_service.get_profile(session.user_id)
        except ProfileLookupError as exc:
            raise InvitationError(INVITER_MISSING_MESSAGE) from exc
        if inviter.family_id is None:
            raise InvitationError(INVITER_MISSING_MESSAGE)
        if not manages_family(inviter.role):
            logger.warning(
                "Invitation refused for role",
                extra={"user_id": str(session.user_id), "role": inviter.role},
            )
            raise InvitationError(INVITER_ROLE_MESSAGE)
        family_id = inviter.family_id

        body: dict[str, object] = {
            "email": invitation.email,
            "password": invitation.password,
            "fullName": invitation.full_name,
            "role": invitation.role.value,
            "family_id": str(family_id),
        }
        try:
            raw = await self.functions.invoke(INVITE_MEMBER, body, session.access_token)
        except Exception as exc:
            logger.exception(
                "Invite call failed", extra={"family_id": str(family_id)}
            )
            raise InvitationError("Failed to invite member.") from exc
        try:
            payload = parse_json_payload(raw)
        except ValueError as exc:
            raise InvitationError("Received an invalid response from invite.") from exc
        if payload.get("error"):
            raise InvitationError(str(payload["error"]))

        logger.info(
            "Member invited",
            extra={"family_id": str(family_id), "role": invitation.role.value},
        )
        roster = self.load_roster(session.user_id)
        roster.message = str(payload.get("message") or DEFAULT_INVITE_MESSAGE)
        return roster
