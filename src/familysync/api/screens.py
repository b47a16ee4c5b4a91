"""Screen endpoints behind the route guard."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from familysync.api.guard import require_session
from familysync.api.models import (
    ActivityForm,
    ChoreForm,
    InviteForm,
    MealPlanForm,
    ShoppingListForm,
)
from familysync.domain.activities import NewActivity
from familysync.domain.chores import NewChore
from familysync.domain.meals import shopping_categories
from familysync.domain.profiles import Role
from familysync.navigation import AppRoute, dashboard_features
from familysync.services.family import Invitation
from familysync.services.sessions import RequestLifetime

if TYPE_CHECKING:
    from familysync.containers import AppContainer
    from familysync.domain.activities import Activity
    from familysync.domain.chores import Chore
    from familysync.domain.meals import MealPlan, ShoppingList
    from familysync.domain.profiles import Profile
    from familysync.services.activities import ActivityBoard, DriverSchedule
    from familysync.services.chores import ChildChoreBoard, ChoreBoard
    from familysync.services.family import FamilyRoster
    from familysync.services.meal_plans import CookBoard, MealPlanBoard
    from familysync.services.shopping_lists import ShoppingListBoard

router = APIRouter(tags=["screens"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get(AppRoute.DASHBOARD.value)
async def dashboard(
    lifetime: RequestLifetime = Depends(require_session),
) -> dict[str, object]:
    """Parent landing screen."""
    email = lifetime.session.user.email
    return lifetime.deliver(
        {
            "email": email,
            "greeting": f"Welcome, {email}!" if email else "Welcome!",
            "features": dashboard_features(),
        }
    )


@router.get(AppRoute.CHORE_MANAGEMENT.value)
async def chore_management(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    board = await asyncio.to_thread(
        _container(request).chore_service.load_board, lifetime.session.user_id
    )
    return lifetime.deliver(_chore_board_payload(board))


@router.post(AppRoute.CHORE_MANAGEMENT.value)
async def add_chore(
    form: ChoreForm,
    request: Request,
    lifetime: RequestLifetime = Depends(require_session),
) -> dict[str, object]:
    """Assign a chore and return the refreshed board."""
    board = await asyncio.to_thread(
        _container(request).chore_service.add_chore,
        lifetime.session.user_id,
        NewChore(
            task=form.task,
            assigned_to_child_id=form.assigned_to_child_id,
            due_date=form.due_date,
            reward_points=form.reward_points,
        ),
    )
    return lifetime.deliver(_chore_board_payload(board))


@router.get(AppRoute.CHILD_DASHBOARD.value)
async def child_dashboard(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    board = await asyncio.to_thread(
        _container(request).chore_service.load_child_board, lifetime.session.user_id
    )
    return lifetime.deliver(_child_board_payload(board))


@router.post(AppRoute.CHILD_DASHBOARD.value + "/chores/{chore_id}/complete")
async def complete_chore(
    chore_id: UUID,
    request: Request,
    lifetime: RequestLifetime = Depends(require_session),
) -> dict[str, object]:
    """Mark one of the child's chores as done."""
    board = await asyncio.to_thread(
        _container(request).chore_service.complete_chore,
        lifetime.session.user_id,
        chore_id,
    )
    return lifetime.deliver(_child_board_payload(board))


@router.get(AppRoute.ACTIVITY_PLANNER.value)
async def activity_planner(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    board = await _container(request).activity_service.load_board(
        lifetime.session.user_id
    )
    return lifetime.deliver(_activity_board_payload(board))


@router.post(AppRoute.ACTIVITY_PLANNER.value)
async def add_activity(
    form: ActivityForm,
    request: Request,
    lifetime: RequestLifetime = Depends(require_session),
) -> dict[str, object]:
    """Schedule an activity and return the refreshed board."""
    board = await _container(request).activity_service.add_activity(
        lifetime.session.user_id,
        NewActivity(
            title=form.title,
            child_id=form.child_id,
            date=form.date,
            time=form.time,
            location=form.location,
            assigned_to_driver_id=form.assigned_to_driver_id,
        ),
    )
    return lifetime.deliver(_activity_board_payload(board))


@router.get(AppRoute.DRIVER_DASHBOARD.value)
async def driver_dashboard(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    schedule = await asyncio.to_thread(
        _container(request).activity_service.load_driver_schedule,
        lifetime.session.user_id,
    )
    return lifetime.deliver(_driver_schedule_payload(schedule))


@router.get(AppRoute.MEAL_PLANNER.value)
async def meal_planner(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    board = await asyncio.to_thread(
        _container(request).meal_plan_service.load_board, lifetime.session.user_id
    )
    return lifetime.deliver(_meal_plan_board_payload(board))


@router.post(AppRoute.MEAL_PLANNER.value)
async def generate_meal_plan(
    form: MealPlanForm,
    request: Request,
    lifetime: RequestLifetime = Depends(require_session),
) -> dict[str, object]:
    """Generate and save a weekly meal plan."""
    board = await _container(request).meal_plan_service.generate_plan(
        lifetime.session,
        preferences=form.preferences,
        mood=form.mood,
        assigned_to_cook_id=form.assigned_cook_id,
    )
    return lifetime.deliver(_meal_plan_board_payload(board))


@router.get(AppRoute.COOK_DASHBOARD.value)
async def cook_dashboard(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    board = await asyncio.to_thread(
        _container(request).meal_plan_service.load_cook_board,
        lifetime.session.user_id,
    )
    return lifetime.deliver(_cook_board_payload(board))


@router.get(AppRoute.SHOPPING_LIST.value)
async def shopping_list(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    board = await asyncio.to_thread(
        _container(request).shopping_list_service.load_board,
        lifetime.session.user_id,
    )
    return lifetime.deliver(_shopping_board_payload(board))


@router.post(AppRoute.SHOPPING_LIST.value)
async def generate_shopping_list(
    form: ShoppingListForm,
    request: Request,
    lifetime: RequestLifetime = Depends(require_session),
) -> dict[str, object]:
    """Generate a shopping list from the latest meal plan."""
    board = await _container(request).shopping_list_service.generate_list(
        lifetime.session, budget_mode=form.budget_mode
    )
    return lifetime.deliver(_shopping_board_payload(board))


@router.get(AppRoute.FAMILY_MANAGEMENT.value)
async def family_management(
    request: Request, lifetime: RequestLifetime = Depends(require_session)
) -> dict[str, object]:
    roster = await asyncio.to_thread(
        _container(request).family_service.load_roster, lifetime.session.user_id
    )
    return lifetime.deliver(_roster_payload(roster))


@router.post(AppRoute.FAMILY_MANAGEMENT.value)
async def invite_member(
    form: InviteForm,
    request: Request,
    lifetime: RequestLifetime = Depends(require_session),
) -> dict[str, object]:
    """Invite a new family member and return the refreshed roster."""
    roster = await _container(request).family_service.invite_member(
        lifetime.session,
        Invitation(
            full_name=form.full_name,
            email=form.email,
            password=form.password,
            role=Role(form.role),
        ),
    )
    return lifetime.deliver(_roster_payload(roster))


def _profile_payload(profile: Profile) -> dict[str, object]:
    return {
        "id": str(profile.id),
        "full_name": profile.full_name,
        "role": profile.role,
    }


def _chore_payload(chore: Chore) -> dict[str, object]:
    return {
        "id": str(chore.id),
        "task": chore.task,
        "assigned_to_child_id": (
            str(chore.assigned_to_child_id) if chore.assigned_to_child_id else None
        ),
        "child_name": chore.child_name,
        "due_date": chore.due_date.isoformat() if chore.due_date else None,
        "status": chore.status,
        "reward_points": chore.points,
    }


def _activity_payload(activity: Activity) -> dict[str, object]:
    return {
        "id": str(activity.id),
        "title": activity.title,
        "child_id": str(activity.child_id) if activity.child_id else None,
        "child_name": activity.child_name,
        "date": activity.date.isoformat(),
        "time": activity.time.isoformat(timespec="minutes"),
        "location": activity.location,
        "assigned_to_driver_id": (
            str(activity.assigned_to_driver_id)
            if activity.assigned_to_driver_id
            else None
        ),
        "driver_name": activity.driver_name,
    }


def _meal_plan_payload(plan: MealPlan) -> dict[str, object]:
    return {
        "id": str(plan.id),
        "week_start": plan.week_start.isoformat(),
        "meals": {day: idea.model_dump() for day, idea in plan.ideas().items()},
        "assigned_to_cook_id": (
            str(plan.assigned_to_cook_id) if plan.assigned_to_cook_id else None
        ),
    }


def _shopping_list_payload(items: ShoppingList) -> dict[str, object]:
    return {
        "id": str(items.id),
        "categories": shopping_categories(items.items),
    }


def _chore_board_payload(board: ChoreBoard) -> dict[str, object]:
    return {
        "children": [_profile_payload(child) for child in board.children],
        "chores": [_chore_payload(chore) for chore in board.chores],
        "errors": board.errors,
    }


def _child_board_payload(board: ChildChoreBoard) -> dict[str, object]:
    return {
        "pending": [_chore_payload(chore) for chore in board.pending],
        "completed": [_chore_payload(chore) for chore in board.completed],
        "total_points": board.total_points,
        "errors": board.errors,
    }


def _activity_board_payload(board: ActivityBoard) -> dict[str, object]:
    return {
        "children": [_profile_payload(child) for child in board.children],
        "drivers": [_profile_payload(driver) for driver in board.drivers],
        "activities": [_activity_payload(item) for item in board.activities],
        "errors": board.errors,
    }


def _driver_schedule_payload(schedule: DriverSchedule) -> dict[str, object]:
    return {
        "activities": [_activity_payload(item) for item in schedule.activities],
        "errors": schedule.errors,
    }


def _meal_plan_board_payload(board: MealPlanBoard) -> dict[str, object]:
    return {
        "cooks": [_profile_payload(cook) for cook in board.cooks],
        "meal_plan": _meal_plan_payload(board.meal_plan) if board.meal_plan else None,
        "errors": board.errors,
    }


def _cook_board_payload(board: CookBoard) -> dict[str, object]:
    return {
        "meal_plans": [_meal_plan_payload(plan) for plan in board.meal_plans],
        "errors": board.errors,
    }


def _shopping_board_payload(board: ShoppingListBoard) -> dict[str, object]:
    return {
        "meal_plan": _meal_plan_payload(board.meal_plan) if board.meal_plan else None,
        "shopping_list": (
            _shopping_list_payload(board.shopping_list)
            if board.shopping_list
            else None
        ),
        "errors": board.errors,
    }


def _roster_payload(roster: FamilyRoster) -> dict[str, object]:
    return {
        "members": [_profile_payload(member) for member in roster.members],
        "invitable_roles": roster.invitable_roles,
        "message": roster.message,
        "errors": roster.errors,
    }
