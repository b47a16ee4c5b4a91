"""Meal plan generation and persistence."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from familysync.domain.auth import Session
from familysync.domain.errors import FamilyLookupError
from familysync.domain.meals import MealPlan
from familysync.domain.profiles import Profile, Role
from familysync.services.fetching import fetch_section, surface_fetch_errors
from familysync.services.functions import GenerationAdapter
from familysync.services.profiles import ProfileService

logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans."""

    def create_meal_plan(  # noqa: PLR0913
        self,
        user_id: UUID,
        family_id: UUID,
        meals: dict[str, object],
        week_start: date,
        assigned_to_cook_id: UUID | None,
    ) -> MealPlan:
        """Insert a meal plan and return it."""

    def latest_for_family(self, family_id: UUID) -> MealPlan | None:
        """Return the family's most recent meal plan, if any."""

    def list_for_cook(self, cook_id: UUID) -> list[MealPlan]:
        """Return meal plans assigned to a cook, newest first."""


@dataclass
class MealPlanBoard:
    cooks: list[Profile] = field(default_factory=list)
    meal_plan: MealPlan | None = None
    errors: list[str] = field(default_factory=list)


@dataclass
class CookBoard:
    meal_plans: list[MealPlan] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class MealPlanService:
    """Application service behind the meal planner and cook dashboard."""

    repository: MealPlanRepository
    profile_service: ProfileService
    generation: GenerationAdapter

    def load_board(self, user_id: UUID) -> MealPlanBoard:
        """Fetch the family's cooks for the assignment picker."""
        board = MealPlanBoard()
        try:
            family_id = self.profile_service.require_family_id(user_id)
        except FamilyLookupError as exc:
            board.errors.append(str(exc))
            return board
        board.cooks = fetch_section(
            board.errors,
            "Failed to fetch cooks.",
            lambda: self.profile_service.list_members(family_id, Role.COOK),
        )
        return board

    async def generate_plan(
        self,
        session: Session,
        preferences: str,
        mood: str | None = None,
        assigned_to_cook_id: UUID | None = None,
    ) -> MealPlanBoard:
        """Generate a week of dinners and store it as a new plan.

        Nothing is written when generation fails.
        """
        family_id = await asyncio.to_thread(
            self.profile_service.require_family_id, session.user_id
        )
        if assigned_to_cook_id is not None:
            await asyncio.to_thread(
                self.profile_service.require_member,
                family_id,
                assigned_to_cook_id,
                Role.COOK,
            )
        meals = await self.generation.generate_meal_plan(session, preferences, mood)
        with surface_fetch_errors("Failed to save meal plan."):
            plan = await asyncio.to_thread(
                self.repository.create_meal_plan,
                session.user_id,
                family_id,
                meals,
                datetime.now(tz=UTC).date(),
                assigned_to_cook_id,
            )
        logger.info(
            "Meal plan saved",
            extra={"meal_plan_id": str(plan.id), "family_id": str(family_id)},
        )
        board = await asyncio.to_thread(self.load_board, session.user_id)
        board.meal_plan = plan
        return board

    def load_cook_board(self, cook_id: UUID) -> CookBoard:
        """Return the meal plans assigned to a cook."""
        board = CookBoard()
        board.meal_plans = fetch_section(
            board.errors,
            "Failed to fetch assigned meal plans.",
            lambda: self.repository.list_for_cook(cook_id),
        )
        return board
