"""Supabase repository for profiles and families."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from familysync.domain.profiles import Family, Profile
from familysync.services.profiles import ProfileRepository

_PROFILE_COLUMNS = "id, full_name, role, family_id"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase-backed repository for profiles and families."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""
        response = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def create_profile(
        self, user_id: UUID, full_name: str, role: str | None
    ) -> Profile:
        """Create a profile row without a family."""
        response = (
            self.client.table("profiles")
            .insert({"id": str(user_id), "full_name": full_name, "role": role})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create profile")
        return _parse_profile(response.data[0])

    def create_family(self, name: str) -> Family:
        """Create a family row and return it."""
        response = self.client.table("families").insert({"family_name": name}).execute()
        if not response.data:
            raise RuntimeError("Failed to create family")
        row = response.data[0]
        return Family(id=UUID(row["id"]), name=row["family_name"])

    def set_family(self, user_id: UUID, family_id: UUID) -> None:
        """Link a profile to a family."""
        self.client.table("profiles").update({"family_id": str(family_id)}).eq(
            "id", str(user_id)
        ).execute()

    def upsert_member(
        self, user_id: UUID, full_name: str, role: str, family_id: UUID
    ) -> None:
        """Create or update a member profile linked to a family."""
        response = (
            self.client.table("profiles")
            .upsert(
                {
                    "id": str(user_id),
                    "full_name": full_name,
                    "role": role,
                    "family_id": str(family_id),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to link profile to family")

    def list_members(self, family_id: UUID, role: str | None = None) -> list[Profile]:
        """Return family members ordered by name."""
        query = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("family_id", str(family_id))
        )
        if role is not None:
            query = query.eq("role", role)
        response = query.order("full_name").execute()
        return [_parse_profile(row) for row in response.data or []]


def _parse_profile(row: dict[str, object]) -> Profile:
    family_id = row.get("family_id")
    return Profile(
        id=UUID(str(row["id"])),
        full_name=row.get("full_name"),
        role=row.get("role"),
        family_id=UUID(str(family_id)) if family_id else None,
    )
