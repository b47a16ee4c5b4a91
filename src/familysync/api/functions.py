"""Hosted generation and invitation functions under /functions/v1."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from familysync.domain.errors import (
    AuthError,
    InvitationError,
    ProfileLookupError,
    UnknownRoleError,
)
from familysync.domain.profiles import INVITABLE_ROLES, Role, manages_family
from familysync.services.family import INVITER_ROLE_MESSAGE
from familysync.services.functions import (
    GENERATE_MEAL_PLAN,
    GENERATE_SHOPPING_LIST,
    INVITE_MEMBER,
)

if TYPE_CHECKING:
    from familysync.containers import AppContainer
    from familysync.domain.auth import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type"
    ),
}


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _reply(payload: dict[str, object], status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)


async def _read_body(request: Request) -> dict[str, object]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


async def _caller(request: Request) -> AuthUser | None:
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    try:
        return await asyncio.to_thread(
            _container(request).auth_service.get_user, token.strip()
        )
    except AuthError:
        return None


def _unauthorized() -> JSONResponse:
    return _reply({"error": "Unauthorized"}, status.HTTP_401_UNAUTHORIZED)


@router.options("/{name}")
async def preflight(name: str) -> PlainTextResponse:
    """Answer CORS preflight requests."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post(f"/{GENERATE_MEAL_PLAN}")
async def generate_meal_plan(request: Request) -> JSONResponse:
    """Return `{mealPlan}` for `{preferences, mood?}`."""
    if await _caller(request) is None:
        return _unauthorized()
    body = await _read_body(request)
    preferences = body.get("preferences")
    if not preferences:
        return _reply(
            {"error": "Preferences are required to generate a meal plan."},
            status.HTTP_400_BAD_REQUEST,
        )
    mood = body.get("mood")
    try:
        meal_plan = await _container(request).generation_service.generate_meal_plan(
            str(preferences), str(mood) if mood else None
        )
    except Exception as exc:
        logger.exception("Error in %s", GENERATE_MEAL_PLAN)
        return _reply(
            {"error": str(exc) or "Failed to generate a meal plan."},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return _reply({"mealPlan": meal_plan})


@router.post(f"/{GENERATE_SHOPPING_LIST}")
async def generate_shopping_list(request: Request) -> JSONResponse:
    """Return `{shoppingList}` for `{mealPlan, budgetMode}`."""
    if await _caller(request) is None:
        return _unauthorized()
    body = await _read_body(request)
    meal_plan = body.get("mealPlan")
    if not isinstance(meal_plan, dict) or not meal_plan:
        return _reply(
            {"error": "A meal plan is required to generate a shopping list."},
            status.HTTP_400_BAD_REQUEST,
        )
    service = _container(request).generation_service
    try:
        shopping_list = await service.generate_shopping_list(
            meal_plan, bool(body.get("budgetMode"))
        )
    except Exception as exc:
        logger.exception("Error in %s", GENERATE_SHOPPING_LIST)
        return _reply(
            {"error": str(exc) or "Failed to generate a shopping list."},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return _reply({"shoppingList": shopping_list})


@router.post(f"/{INVITE_MEMBER}")
async def invite_member(request: Request) -> JSONResponse:
    """Create a confirmed account for a new member of the caller's family."""
    container = _container(request)
    caller = await _caller(request)
    if caller is None:
        return _unauthorized()
    body = await _read_body(request)
    try:
        family_id, role = _parse_invite(body)
        inviter = await asyncio.to_thread(
            container.profile_service.get_profile, caller.id
        )
    except (InvitationError, ProfileLookupError) as exc:
        return _reply({"error": str(exc)}, status.HTTP_400_BAD_REQUEST)
    if not manages_family(inviter.role):
        return _reply(
            {"error": INVITER_ROLE_MESSAGE},
            status.HTTP_403_FORBIDDEN,
        )
    if inviter.family_id != family_id:
        return _reply(
            {"error": "You can only invite members to your own family."},
            status.HTTP_403_FORBIDDEN,
        )
    try:
        await asyncio.to_thread(
            container.provisioning_service.provision,
            str(body["email"]),
            str(body["password"]),
            str(body["fullName"]),
            role,
            family_id,
        )
    except InvitationError as exc:
        return _reply({"error": str(exc)}, status.HTTP_400_BAD_REQUEST)
    return _reply({"message": "User invited successfully!"})


def _parse_invite(body: dict[str, object]) -> tuple[UUID, Role]:
    raw_family_id = body.get("family_id")
    if not raw_family_id:
        raise InvitationError("The inviting user's family ID is missing.")
    for key in ("email", "password", "fullName"):
        if not body.get(key):
            raise InvitationError(f"{key} is required.")
    try:
        family_id = UUID(str(raw_family_id))
    except ValueError as exc:
        raise InvitationError("The inviting user's family ID is invalid.") from exc
    try:
        role = Role.parse(body.get("role"))
    except UnknownRoleError as exc:
        raise InvitationError(str(exc)) from exc
    if role not in INVITABLE_ROLES:
        raise InvitationError(f"Cannot invite a member as {role.value}.")
    return family_id, role
