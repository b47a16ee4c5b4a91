"""Supabase repository for shopping lists."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from familysync.domain.meals import ShoppingList
from familysync.services.shopping_lists import ShoppingListRepository


@dataclass
class SupabaseShoppingListRepository(ShoppingListRepository):
    """Supabase-backed shopping list repository."""

    client: Client

    def create_shopping_list(
        self, user_id: UUID, family_id: UUID, items: dict[str, object]
    ) -> ShoppingList:
        """Insert a shopping list and return it."""
        response = (
            self.client.table("shopping_lists")
            .insert(
                {
                    "user_id": str(user_id),
                    "family_id": str(family_id),
                    "items_json": items,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shopping list")
        return _parse_shopping_list(response.data[0])

    def latest_for_family(self, family_id: UUID) -> ShoppingList | None:
        """Return the family's most recent shopping list."""
        response = (
            self.client.table("shopping_lists")
            .select("id, items_json, created_at")
            .eq("family_id", str(family_id))
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_shopping_list(response.data[0])


def _parse_shopping_list(row: dict[str, object]) -> ShoppingList:
    items = row.get("items_json")
    created_at = row.get("created_at")
    return ShoppingList(
        id=UUID(str(row["id"])),
        items=items if isinstance(items, dict) else {},
        created_at=(
            datetime.fromisoformat(created_at)
            if isinstance(created_at, str) and created_at
            else None
        ),
    )
