"""Shopping list generation from the latest meal plan."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from familysync.domain.auth import Session
from familysync.domain.errors import FamilyLookupError, GenerationError
from familysync.domain.meals import MealPlan, ShoppingList
from familysync.services.fetching import surface_fetch_errors
from familysync.services.functions import GenerationAdapter
from familysync.services.meal_plans import MealPlanRepository
from familysync.services.profiles import ProfileService

logger = logging.getLogger(__name__)

NO_MEAL_PLAN_MESSAGE = "Please generate a meal plan first."


class ShoppingListRepository(Protocol):
    """Persistence interface for shopping lists."""

    def create_shopping_list(
        self, user_id: UUID, family_id: UUID, items: dict[str, object]
    ) -> ShoppingList:
        """Insert a shopping list and return it."""

    def latest_for_family(self, family_id: UUID) -> ShoppingList | None:
        """Return the family's most recent shopping list, if any."""


@dataclass
class ShoppingListBoard:
    meal_plan: MealPlan | None = None
    shopping_list: ShoppingList | None = None
    errors: list[str] = field(default_factory=list)


@dataclass
class ShoppingListService:
    """Application service behind the shopping list screen."""

    repository: ShoppingListRepository
    meal_plans: MealPlanRepository
    profile_service: ProfileService
    generation: GenerationAdapter

    def load_board(self, user_id: UUID) -> ShoppingListBoard:
        """Fetch the latest meal plan and shopping list for the family."""
        board = ShoppingListBoard()
        try:
            family_id = self.profile_service.require_family_id(user_id)
        except FamilyLookupError as exc:
            board.errors.append(str(exc))
            return board
        try:
            board.meal_plan = self.meal_plans.latest_for_family(family_id)
        except Exception:
            logger.exception("Failed to fetch latest meal plan")
            board.errors.append("Failed to fetch latest meal plan.")
        try:
            board.shopping_list = self.repository.latest_for_family(family_id)
        except Exception:
            logger.exception("Failed to fetch shopping list")
            board.errors.append("Failed to fetch shopping list.")
        return board

    async def generate_list(
        self, session: Session, budget_mode: bool = False
    ) -> ShoppingListBoard:
        """Generate a list from the latest meal plan and store it."""
        family_id = await asyncio.to_thread(
            self.profile_service.require_family_id, session.user_id
        )
        with surface_fetch_errors("Failed to fetch latest meal plan."):
            plan = await asyncio.to_thread(self.meal_plans.latest_for_family, family_id)
        if plan is None:
            raise GenerationError(NO_MEAL_PLAN_MESSAGE)
        items = await self.generation.generate_shopping_list(
            session, plan.meals, budget_mode
        )
        with surface_fetch_errors("Failed to save shopping list."):
            created = await asyncio.to_thread(
                self.repository.create_shopping_list,
                session.user_id,
                family_id,
                items,
            )
        logger.info(
            "Shopping list saved",
            extra={"shopping_list_id": str(created.id), "family_id": str(family_id)},
        )
        return await asyncio.to_thread(self.load_board, session.user_id)
