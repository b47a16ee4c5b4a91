"""Tests for generation parsing and the function adapter."""

import asyncio
import json

import pytest

from familysync.domain.errors import GenerationError
from familysync.services.functions import (
    GENERATE_MEAL_PLAN,
    GENERATE_SHOPPING_LIST,
    GenerationAdapter,
)
from familysync.services.generation import (
    GenerationService,
    meal_plan_prompt,
    parse_json_payload,
    shopping_list_prompt,
    strip_code_fences,
)
from tests.conftest import (
    FakeFunctionsClient,
    FakeTextGenerationClient,
    make_session,
)

PLAN = {"monday": {"meal_name": "Tacos", "description": "Fun", "chef_tip": "Lime"}}


def test_fenced_and_unfenced_payloads_parse_identically() -> None:
    raw = json.dumps({"mealPlan": PLAN})

    assert parse_json_payload(f"```json\n{raw}\n```") == parse_json_payload(raw)
    assert parse_json_payload(f"```\n{raw}```") == parse_json_payload(raw)


def test_strip_code_fences_leaves_plain_text() -> None:
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


def test_parse_json_payload_rejects_non_objects() -> None:
    with pytest.raises(ValueError):
        parse_json_payload("[1, 2]")


def test_adapter_returns_meal_plan_from_fenced_response() -> None:
    client = FakeFunctionsClient(
        responses={
            GENERATE_MEAL_PLAN: f"```json\n{json.dumps({'mealPlan': PLAN})}\n```"
        }
    )
    session = make_session()

    result = asyncio.run(
        GenerationAdapter(client).generate_meal_plan(session, "vegetarian", "cozy")
    )

    assert result == PLAN
    name, body, token = client.calls[0]
    assert name == GENERATE_MEAL_PLAN
    assert body == {"preferences": "vegetarian", "mood": "cozy"}
    assert token == session.access_token


def test_adapter_omits_empty_mood() -> None:
    client = FakeFunctionsClient(
        responses={GENERATE_MEAL_PLAN: json.dumps({"mealPlan": PLAN})}
    )

    asyncio.run(GenerationAdapter(client).generate_meal_plan(make_session(), "fish"))

    assert client.calls[0][1] == {"preferences": "fish"}


def test_adapter_surfaces_error_field_verbatim() -> None:
    client = FakeFunctionsClient(
        responses={GENERATE_MEAL_PLAN: json.dumps({"error": "Quota exceeded"})}
    )

    with pytest.raises(GenerationError) as excinfo:
        asyncio.run(GenerationAdapter(client).generate_meal_plan(make_session(), "x"))

    assert str(excinfo.value) == "Quota exceeded"


def test_adapter_requires_expected_key() -> None:
    client = FakeFunctionsClient(
        responses={GENERATE_SHOPPING_LIST: json.dumps({"something": {}})}
    )

    with pytest.raises(GenerationError) as excinfo:
        asyncio.run(
            GenerationAdapter(client).generate_shopping_list(
                make_session(), PLAN, budget_mode=True
            )
        )

    assert str(excinfo.value) == "The AI did not return a valid shopping list."
    assert client.calls[0][1] == {"mealPlan": PLAN, "budgetMode": True}


def test_adapter_wraps_transport_failures() -> None:
    client = FakeFunctionsClient(error=RuntimeError("connection reset"))

    with pytest.raises(GenerationError):
        asyncio.run(GenerationAdapter(client).generate_meal_plan(make_session(), "x"))


def test_adapter_rejects_unparseable_body() -> None:
    client = FakeFunctionsClient(responses={GENERATE_MEAL_PLAN: "not json"})

    with pytest.raises(GenerationError):
        asyncio.run(GenerationAdapter(client).generate_meal_plan(make_session(), "x"))


def test_generation_service_parses_fenced_model_output() -> None:
    text_client = FakeTextGenerationClient(output=f"```json\n{json.dumps(PLAN)}\n```")
    service = GenerationService(
        client=text_client, model="gpt-5.2", reasoning_effort=None, store=False
    )

    result = asyncio.run(service.generate_meal_plan("vegan", None))

    assert result == PLAN
    assert '"vegan"' in text_client.prompts[0]
    assert '"any"' in text_client.prompts[0]


def test_meal_plan_prompt_mentions_keys() -> None:
    prompt = meal_plan_prompt("no nuts", "adventurous")

    assert "meal_name" in prompt
    assert "chef_tip" in prompt
    assert '"adventurous"' in prompt


def test_shopping_list_prompt_budget_mode() -> None:
    assert "budget-friendly" in shopping_list_prompt(PLAN, budget_mode=True)
    assert "budget-friendly" not in shopping_list_prompt(PLAN, budget_mode=False)
    assert "Tacos" in shopping_list_prompt(PLAN, budget_mode=False)
