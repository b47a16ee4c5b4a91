"""Profile lookups and first-login setup."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from familysync.domain.auth import AuthUser
from familysync.domain.errors import (
    DataFetchError,
    FamilyLookupError,
    FamilyMembershipError,
    ProfileLookupError,
)
from familysync.domain.profiles import Family, Profile, Role, manages_family

logger = logging.getLogger(__name__)

PROFILE_MISSING_MESSAGE = (
    "Could not retrieve your user profile. Please try logging in again."
)
FAMILY_MISSING_MESSAGE = "Could not find user's family information."


class ProfileRepository(Protocol):
    """Persistence interface for profiles and families."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""

    def create_profile(
        self, user_id: UUID, full_name: str, role: str | None
    ) -> Profile:
        """Create and return a profile without a family."""

    def create_family(self, name: str) -> Family:
        """Create and return a family."""

    def set_family(self, user_id: UUID, family_id: UUID) -> None:
        """Link a profile to a family."""

    def upsert_member(
        self, user_id: UUID, full_name: str, role: str, family_id: UUID
    ) -> None:
        """Create or update a profile linked to a family."""

    def list_members(self, family_id: UUID, role: str | None = None) -> list[Profile]:
        """Return family members, optionally filtered by role."""


@dataclass
class ProfileService:
    """Application service for profile and family lookups."""

    repository: ProfileRepository

    def ensure_family_and_profile(self, user: AuthUser) -> Profile:
        """Create the profile and, for parents and admins, the family if missing.

        Safe to call on every login: existing rows are left untouched.
        """
        profile = self.repository.get_profile(user.id)
        if profile is None:
            full_name = str(user.metadata.get("full_name") or user.email or "")
            raw_role = user.metadata.get("role")
            profile = self.repository.create_profile(
                user.id, full_name, str(raw_role) if raw_role else None
            )
            logger.info("Created profile", extra={"user_id": str(user.id)})
        if profile.family_id is None and manages_family(profile.role):
            family = self.repository.create_family(f"{profile.full_name}'s Family")
            self.repository.set_family(user.id, family.id)
            profile = replace(profile, family_id=family.id)
            logger.info(
                "Created family",
                extra={"user_id": str(user.id), "family_id": str(family.id)},
            )
        return profile

    def get_profile(self, user_id: UUID) -> Profile:
        """Return the user's profile or raise ProfileLookupError."""
        try:
            profile = self.repository.get_profile(user_id)
        except Exception as exc:
            logger.exception("Profile lookup failed", extra={"user_id": str(user_id)})
            raise ProfileLookupError(PROFILE_MISSING_MESSAGE) from exc
        if profile is None:
            raise ProfileLookupError(PROFILE_MISSING_MESSAGE)
        return profile

    def require_family_id(self, user_id: UUID) -> UUID:
        """Look up the user's family id afresh or raise FamilyLookupError."""
        try:
            profile = self.repository.get_profile(user_id)
        except Exception as exc:
            logger.exception("Family lookup failed", extra={"user_id": str(user_id)})
            raise FamilyLookupError(FAMILY_MISSING_MESSAGE) from exc
        if profile is None or profile.family_id is None:
            raise FamilyLookupError(FAMILY_MISSING_MESSAGE)
        return profile.family_id

    def list_members(self, family_id: UUID, role: Role | None = None) -> list[Profile]:
        """Return members of a family, optionally only those with a role."""
        return self.repository.list_members(family_id, role.value if role else None)

    def require_member(self, family_id: UUID, member_id: UUID, role: Role) -> Profile:
        """Return a family member holding `role` or raise FamilyMembershipError.

        Writes reference members by id; this keeps them inside the family.
        """
        try:
            members = self.repository.list_members(family_id, role.value)
        except Exception as exc:
            logger.exception(
                "Member lookup failed", extra={"family_id": str(family_id)}
            )
            raise DataFetchError(
                f"Could not verify the selected {role.value}."
            ) from exc
        for member in members:
            if member.id == member_id:
                return member
        logger.warning(
            "Rejected member outside family",
            extra={"family_id": str(family_id), "member_id": str(member_id)},
        )
        raise FamilyMembershipError(
            f"The selected {role.value} is not part of your family."
        )
