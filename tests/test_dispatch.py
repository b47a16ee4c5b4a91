"""Tests for post-login role dispatch."""

from urllib.parse import parse_qs, urlparse

import pytest

from familysync.domain.profiles import Role
from familysync.navigation import AppRoute
from familysync.services.auth import AuthService
from familysync.services.dispatch import DispatchState, RoleDispatcher, route_for_role
from familysync.services.profiles import ProfileService
from familysync.services.sessions import SessionStore
from tests.conftest import FakeAuthGateway, InMemoryProfileRepository, make_session


@pytest.mark.parametrize(
    ("role", "route"),
    [
        (Role.ADMIN, AppRoute.DASHBOARD),
        (Role.PARENT, AppRoute.DASHBOARD),
        (Role.CHILD, AppRoute.CHILD_DASHBOARD),
        (Role.COOK, AppRoute.COOK_DASHBOARD),
        (Role.DRIVER, AppRoute.DRIVER_DASHBOARD),
    ],
)
def test_route_for_role(role: Role, route: AppRoute) -> None:
    assert route_for_role(role) is route


def _dispatcher(
    gateway: FakeAuthGateway, repository: InMemoryProfileRepository
) -> RoleDispatcher:
    return RoleDispatcher(
        AuthService(gateway=gateway, store=SessionStore()),
        ProfileService(repository),
    )


def test_driver_profile_dispatches_to_driver_dashboard() -> None:
    gateway = FakeAuthGateway()
    repository = InMemoryProfileRepository()
    session = gateway.register(make_session())
    repository.add_profile("Dee", "driver", user_id=session.user_id)

    result = _dispatcher(gateway, repository).dispatch(session.access_token)

    assert result.state is DispatchState.ROUTED
    assert result.location == "/driver-dashboard"
    assert gateway.signed_out == []


def test_missing_token_redirects_to_login() -> None:
    result = _dispatcher(FakeAuthGateway(), InMemoryProfileRepository()).dispatch(None)

    assert result.state is DispatchState.UNAUTHENTICATED
    assert result.location == "/login"


def test_unknown_token_redirects_to_login() -> None:
    result = _dispatcher(FakeAuthGateway(), InMemoryProfileRepository()).dispatch(
        "stale-token"
    )

    assert result.state is DispatchState.UNAUTHENTICATED


def test_unrecognized_role_signs_out_with_error() -> None:
    gateway = FakeAuthGateway()
    repository = InMemoryProfileRepository()
    session = gateway.register(make_session())
    repository.add_profile("Grandpa", "grandparent", user_id=session.user_id)

    result = _dispatcher(gateway, repository).dispatch(session.access_token)

    assert result.state is DispatchState.SIGNED_OUT
    assert result.route is AppRoute.LOGIN
    assert gateway.signed_out == [session.access_token]
    query = parse_qs(urlparse(result.location).query)
    assert query["error"] == ["Unrecognized role: 'grandparent'."]


def test_null_role_signs_out() -> None:
    gateway = FakeAuthGateway()
    repository = InMemoryProfileRepository()
    session = gateway.register(make_session())
    repository.add_profile("Nobody", None, user_id=session.user_id)

    result = _dispatcher(gateway, repository).dispatch(session.access_token)

    assert result.state is DispatchState.SIGNED_OUT
    assert gateway.signed_out == [session.access_token]


def test_missing_profile_signs_out() -> None:
    gateway = FakeAuthGateway()
    session = gateway.register(make_session())

    result = _dispatcher(gateway, InMemoryProfileRepository()).dispatch(
        session.access_token
    )

    assert result.state is DispatchState.SIGNED_OUT
    assert "Could not retrieve your user profile" in (result.error or "")


def test_profile_fetch_failure_signs_out() -> None:
    gateway = FakeAuthGateway()
    repository = InMemoryProfileRepository(fail_get=True)
    session = gateway.register(make_session())

    result = _dispatcher(gateway, repository).dispatch(session.access_token)

    assert result.state is DispatchState.SIGNED_OUT
    assert gateway.signed_out == [session.access_token]


def test_provider_outage_redirects_to_login_with_error() -> None:
    gateway = FakeAuthGateway(fail_get_user=True)
    session = gateway.register(make_session())

    result = _dispatcher(gateway, InMemoryProfileRepository()).dispatch(
        session.access_token
    )

    assert result.state is DispatchState.UNAUTHENTICATED
    assert urlparse(result.location).path == "/login"
    assert parse_qs(urlparse(result.location).query)["error"] == [
        "Could not verify your session. Please sign in again."
    ]
    assert gateway.signed_out == []
