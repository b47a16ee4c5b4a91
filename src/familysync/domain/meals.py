"""Domain models for meal plans and shopping lists."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ValidationError


class MealIdea(BaseModel):
    """A single day's dinner suggestion."""

    meal_name: str
    description: str = ""
    chef_tip: str | None = None


@dataclass(frozen=True)
class MealPlan:
    """A persisted weekly meal plan; immutable once created.

    `meals` holds the generated JSON as stored, keyed by weekday.
    """

    id: UUID
    week_start: date
    meals: dict[str, object]
    assigned_to_cook_id: UUID | None = None
    created_at: datetime | None = None

    def ideas(self) -> dict[str, MealIdea]:
        """Return the days whose entry parses as a meal idea."""
        parsed: dict[str, MealIdea] = {}
        for day, entry in self.meals.items():
            try:
                parsed[day] = MealIdea.model_validate(entry)
            except ValidationError:
                continue
        return parsed


@dataclass(frozen=True)
class ShoppingList:
    """A persisted shopping list grouped by store category."""

    id: UUID
    items: dict[str, object]
    created_at: datetime | None = None


def shopping_categories(items: dict[str, object]) -> dict[str, list[str]]:
    """Normalize a shopping list into category -> item names.

    Entries may be plain strings or objects with an `item` field; categories
    whose value is not a list are skipped.
    """
    categories: dict[str, list[str]] = {}
    for category, entries in items.items():
        if not isinstance(entries, list):
            continue
        names = []
        for entry in entries:
            if isinstance(entry, str):
                names.append(entry)
            elif isinstance(entry, dict) and isinstance(entry.get("item"), str):
                names.append(entry["item"])
        categories[category] = names
    return categories
