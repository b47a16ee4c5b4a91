"""Supabase repository for meal plans."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from familysync.domain.meals import MealPlan
from familysync.services.meal_plans import MealPlanRepository

_MEAL_PLAN_COLUMNS = "id, week_start, meals_json, assigned_to_cook_id, created_at"


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase-backed meal plan repository."""

    client: Client

    def create_meal_plan(  # noqa: PLR0913
        self,
        user_id: UUID,
        family_id: UUID,
        meals: dict[str, object],
        week_start: date,
        assigned_to_cook_id: UUID | None,
    ) -> MealPlan:
        """Insert a meal plan and return it."""
        response = (
            self.client.table("meal_plans")
            .insert(
                {
                    "user_id": str(user_id),
                    "family_id": str(family_id),
                    "meals_json": meals,
                    "week_start": week_start.isoformat(),
                    "assigned_to_cook_id": (
                        str(assigned_to_cook_id) if assigned_to_cook_id else None
                    ),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        return _parse_meal_plan(response.data[0])

    def latest_for_family(self, family_id: UUID) -> MealPlan | None:
        """Return the family's most recent meal plan."""
        response = (
            self.client.table("meal_plans")
            .select(_MEAL_PLAN_COLUMNS)
            .eq("family_id", str(family_id))
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal_plan(response.data[0])

    def list_for_cook(self, cook_id: UUID) -> list[MealPlan]:
        """Return meal plans assigned to a cook, newest first."""
        response = (
            self.client.table("meal_plans")
            .select(_MEAL_PLAN_COLUMNS)
            .eq("assigned_to_cook_id", str(cook_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_meal_plan(row) for row in response.data or []]


def _parse_meal_plan(row: dict[str, object]) -> MealPlan:
    meals = row.get("meals_json")
    cook_id = row.get("assigned_to_cook_id")
    created_at = row.get("created_at")
    return MealPlan(
        id=UUID(str(row["id"])),
        week_start=date.fromisoformat(str(row["week_start"])),
        meals=meals if isinstance(meals, dict) else {},
        assigned_to_cook_id=UUID(str(cook_id)) if cook_id else None,
        created_at=(
            datetime.fromisoformat(created_at)
            if isinstance(created_at, str) and created_at
            else None
        ),
    )
