"""Client-side bridge to the remote generation functions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from familysync.domain.auth import Session
from familysync.domain.errors import GenerationError
from familysync.services.generation import parse_json_payload

logger = logging.getLogger(__name__)

GENERATE_MEAL_PLAN = "generate-meal-plan"
GENERATE_SHOPPING_LIST = "generate-shopping-list"
INVITE_MEMBER = "invite-member"


class FunctionsClient(Protocol):
    """Interface for invoking a named serverless function."""

    async def invoke(
        self, name: str, body: dict[str, object], access_token: str
    ) -> str:
        """Call a function as the signed-in user and return the raw body."""


@dataclass
class GenerationAdapter:
    """Request/response bridge from screens to the generation functions."""

    client: FunctionsClient

    async def generate_meal_plan(
        self, session: Session, preferences: str, mood: str | None = None
    ) -> dict[str, object]:
        """Ask for a 7-day meal plan and return it keyed by day."""
        body: dict[str, object] = {"preferences": preferences}
        if mood:
            body["mood"] = mood
        payload = await self._call(GENERATE_MEAL_PLAN, body, session)
        return _expect_object(
            payload, "mealPlan", "The AI did not return a valid meal plan."
        )

    async def generate_shopping_list(
        self, session: Session, meal_plan: dict[str, object], budget_mode: bool
    ) -> dict[str, object]:
        """Ask for a shopping list derived from a meal plan."""
        payload = await self._call(
            GENERATE_SHOPPING_LIST,
            {"mealPlan": meal_plan, "budgetMode": budget_mode},
            session,
        )
        return _expect_object(
            payload, "shoppingList", "The AI did not return a valid shopping list."
        )

    async def _call(
        self, name: str, body: dict[str, object], session: Session
    ) -> dict[str, object]:
        try:
            raw = await self.client.invoke(name, body, session.access_token)
        except Exception as exc:
            logger.exception("Function call failed", extra={"function": name})
            raise GenerationError(f"Failed to call {name}.") from exc
        try:
            payload = parse_json_payload(raw)
        except ValueError as exc:
            logger.warning("Unparseable function response", extra={"function": name})
            raise GenerationError(f"Received an invalid response from {name}.") from exc
        error = payload.get("error")
        if error:
            raise GenerationError(str(error))
        return payload


def _expect_object(
    payload: dict[str, object], key: str, message: str
) -> dict[str, object]:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise GenerationError(message)
    return value
