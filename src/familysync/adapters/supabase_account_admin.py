"""Supabase Auth admin API for invited members."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from familysync.services.provisioning import AccountAdmin


@dataclass
class SupabaseAccountAdmin(AccountAdmin):
    """Creates and deletes credentials with the service key."""

    client: Client

    def create_user(
        self, email: str, password: str, metadata: dict[str, object]
    ) -> UUID:
        """Create a pre-confirmed credential and return its id."""
        response = self.client.auth.admin.create_user(
            {
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": metadata,
            }
        )
        if response.user is None:
            raise RuntimeError("Failed to create user")
        return UUID(str(response.user.id))

    def delete_user(self, user_id: UUID) -> None:
        """Delete a credential by id."""
        self.client.auth.admin.delete_user(str(user_id))
