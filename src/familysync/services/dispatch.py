"""Post-login routing by role."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import assert_never
from urllib.parse import urlencode

from familysync.domain.errors import AuthError, ProfileLookupError
from familysync.domain.profiles import Role
from familysync.navigation import AppRoute
from familysync.services.auth import AuthService
from familysync.services.profiles import ProfileService

logger = logging.getLogger(__name__)


class DispatchState(Enum):
    """States a dispatch passes through; the last one is always a navigation."""

    RESOLVING = "resolving"
    LOADING_PROFILE = "loading-profile"
    ROUTING = "routing"
    UNAUTHENTICATED = "unauthenticated"
    SIGNED_OUT = "signed-out"
    ROUTED = "routed"


def route_for_role(role: Role) -> AppRoute:
    """Map a role to its landing screen."""
    match role:
        case Role.ADMIN | Role.PARENT:
            return AppRoute.DASHBOARD
        case Role.CHILD:
            return AppRoute.CHILD_DASHBOARD
        case Role.COOK:
            return AppRoute.COOK_DASHBOARD
        case Role.DRIVER:
            return AppRoute.DRIVER_DASHBOARD
        case _:
            assert_never(role)


@dataclass(frozen=True)
class Dispatch:
    """Outcome of a dispatch: where to go and why."""

    state: DispatchState
    route: AppRoute
    error: str | None = None

    @property
    def location(self) -> str:
        if self.error is None:
            return self.route.value
        return f"{self.route.value}?{urlencode({'error': self.error})}"


@dataclass
class RoleDispatcher:
    """Resolves the signed-in user once and picks exactly one destination."""

    auth_service: AuthService
    profile_service: ProfileService

    def dispatch(self, access_token: str | None) -> Dispatch:
        state = DispatchState.RESOLVING
        if not access_token:
            return Dispatch(DispatchState.UNAUTHENTICATED, AppRoute.LOGIN)
        try:
            user = self.auth_service.get_user(access_token)
        except AuthError as exc:
            return Dispatch(
                DispatchState.UNAUTHENTICATED, AppRoute.LOGIN, error=str(exc)
            )
        if user is None:
            return Dispatch(DispatchState.UNAUTHENTICATED, AppRoute.LOGIN)

        state = DispatchState.LOADING_PROFILE
        try:
            profile = self.profile_service.get_profile(user.id)
            state = DispatchState.ROUTING
            role = Role.parse(profile.role)
        except ProfileLookupError as exc:
            logger.warning(
                "Dispatch failed; signing out",
                extra={"user_id": str(user.id), "state": state.value},
            )
            self.auth_service.sign_out(access_token)
            return Dispatch(DispatchState.SIGNED_OUT, AppRoute.LOGIN, error=str(exc))

        route = route_for_role(role)
        logger.info(
            "Dispatched user",
            extra={"user_id": str(user.id), "route": route.value},
        )
        return Dispatch(DispatchState.ROUTED, route)
