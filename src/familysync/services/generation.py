"""Meal plan and shopping list generation with an LLM."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


class TextGenerationClient(Protocol):
    """Interface for LLM text generation returning a JSON document."""

    async def generate(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Return the raw model output for a prompt."""


def strip_code_fences(text: str) -> str:
    """Remove a leading and trailing markdown code fence, if present."""
    stripped = text.strip()
    stripped = _LEADING_FENCE.sub("", stripped)
    stripped = _TRAILING_FENCE.sub("", stripped)
    return stripped.strip()


def parse_json_payload(text: str) -> dict[str, object]:
    """Parse fenced or unfenced JSON text into an object."""
    payload = json.loads(strip_code_fences(text))
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object")
    return payload


def meal_plan_prompt(preferences: str, mood: str | None) -> str:
    """Build the 7-day dinner plan prompt."""
    return (
        "You are an expert family meal planning assistant for an app called "
        "FamilySync.\n"
        f'A user has provided their family\'s food preferences: "{preferences}".\n'
        f'The user has also specified the mood for the week: "{mood or "any"}".\n'
        "Your task is to generate a diverse, cuisine-rotated 7-day dinner meal "
        "plan.\n"
        'For each day, provide "meal_name", a brief "description", and an '
        'interesting "chef_tip" or a "Did You Know?" fact related to the meal.\n'
        "Output the plan as a single, valid JSON object with lowercase day names "
        'as keys (e.g., "monday", "tuesday").\n'
        "Do not include any text, notes, or markdown formatting before or after "
        "the JSON object."
    )


def shopping_list_prompt(meal_plan: dict[str, object], budget_mode: bool) -> str:
    """Build the aisle-grouped shopping list prompt."""
    lines = [
        "Based on the following 7-day meal plan, generate a shopping list "
        "categorized by smart store aisles (e.g., Produce, Meat & Seafood, "
        "Dairy & Eggs, Pantry, Spices & Oils, Bakery).",
    ]
    if budget_mode:
        lines.append(
            "The user is in 'budget-friendly' mode, so please suggest cheaper "
            "alternatives for ingredients where appropriate (e.g., 'chicken "
            "breast (or cheaper chicken thighs)')."
        )
    lines.append("The user's meal plan is:")
    lines.append(json.dumps(meal_plan, indent=2))
    lines.append(
        "Output the shopping list as a single, valid JSON object whose keys are "
        "aisle names and whose values are lists of item strings. Do not include "
        "any text, notes, or markdown formatting before or after the JSON object."
    )
    return "\n".join(lines)


@dataclass
class GenerationService:
    """Service that prompts the model and parses its JSON output."""

    client: TextGenerationClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate_meal_plan(
        self, preferences: str, mood: str | None = None
    ) -> dict[str, object]:
        """Return a meal plan keyed by lowercase day name."""
        return await self._generate(meal_plan_prompt(preferences, mood))

    async def generate_shopping_list(
        self, meal_plan: dict[str, object], budget_mode: bool = False
    ) -> dict[str, object]:
        """Return a shopping list keyed by store aisle."""
        return await self._generate(shopping_list_prompt(meal_plan, budget_mode))

    async def _generate(self, prompt: str) -> dict[str, object]:
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
        )
        return parse_json_payload(raw)
