"""Login, signup, logout and post-login dispatch endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import RedirectResponse

from familysync.api.guard import read_access_token
from familysync.api.models import LoginForm, SignupForm
from familysync.domain.errors import FamilySyncError, ProfileLookupError
from familysync.domain.profiles import SELF_REGISTERING_ROLES, Role
from familysync.navigation import AppRoute
from familysync.services.dispatch import DispatchState

if TYPE_CHECKING:
    from familysync.containers import AppContainer
    from familysync.domain.auth import Session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

SIGNUP_MESSAGE = (
    "Sign up successful! Please check your email to confirm your account."
)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def redirect_to(location: str) -> RedirectResponse:
    """Navigate the browser with 303 See Other."""
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)


def clear_session_cookie(response: Response, container: AppContainer) -> None:
    response.delete_cookie(container.settings.session_cookie_name)


@router.get(AppRoute.LOGIN.value)
async def login_screen(error: str | None = None) -> dict[str, object]:
    """Login form payload; echoes an error passed by a redirect."""
    return {"error": error, "signup": AppRoute.SIGNUP.value}


@router.post(AppRoute.LOGIN.value)
async def login(form: LoginForm, request: Request) -> RedirectResponse:
    """Sign in, make sure the profile exists, then hand over to dispatch."""
    container = _container(request)
    session = await asyncio.to_thread(
        container.auth_service.sign_in, form.email, form.password
    )
    try:
        await asyncio.to_thread(
            container.profile_service.ensure_family_and_profile, session.user
        )
    except Exception as exc:
        logger.exception(
            "First-login setup failed", extra={"user_id": str(session.user_id)}
        )
        await asyncio.to_thread(container.auth_service.sign_out, session.access_token)
        detail = str(exc) if isinstance(exc, FamilySyncError) else "unexpected error"
        raise ProfileLookupError(
            f"Login succeeded, but failed to set up your profile: {detail}"
        ) from exc
    response = redirect_to(AppRoute.DISPATCH.value)
    _set_session_cookie(response, container, session)
    return response


@router.get(AppRoute.SIGNUP.value)
async def signup_screen() -> dict[str, object]:
    return {
        "roles": sorted(role.value for role in SELF_REGISTERING_ROLES),
        "login": AppRoute.LOGIN.value,
    }


@router.post(AppRoute.SIGNUP.value)
async def signup(form: SignupForm, request: Request) -> dict[str, str]:
    """Register a parent or admin; the account is active after email confirmation."""
    container = _container(request)
    await asyncio.to_thread(
        container.auth_service.sign_up,
        form.email,
        form.password,
        full_name=form.full_name,
        role=Role(form.role),
        redirect_to=(
            f"{container.settings.public_base_url.rstrip('/')}{AppRoute.LOGIN.value}"
        ),
    )
    return {"message": SIGNUP_MESSAGE}


@router.post("/logout")
async def logout(request: Request) -> RedirectResponse:
    """End the session and return to the login screen."""
    container = _container(request)
    token = read_access_token(request, container.settings.session_cookie_name)
    if token:
        await asyncio.to_thread(container.auth_service.sign_out, token)
    response = redirect_to(AppRoute.LOGIN.value)
    clear_session_cookie(response, container)
    return response


@router.get(AppRoute.DISPATCH.value)
async def dispatch(request: Request) -> RedirectResponse:
    """Send the signed-in user to the screen for their role."""
    container = _container(request)
    token = read_access_token(request, container.settings.session_cookie_name)
    result = await asyncio.to_thread(container.role_dispatcher.dispatch, token)
    response = redirect_to(result.location)
    if result.state is not DispatchState.ROUTED:
        clear_session_cookie(response, container)
    return response


def _set_session_cookie(
    response: RedirectResponse, container: AppContainer, session: Session
) -> None:
    max_age = None
    if session.expires_at is not None:
        remaining = session.expires_at - datetime.now(tz=UTC)
        max_age = max(int(remaining.total_seconds()), 0)
    response.set_cookie(
        container.settings.session_cookie_name,
        session.access_token,
        max_age=max_age,
        httponly=True,
        secure=container.settings.session_cookie_secure,
        samesite="lax",
    )
