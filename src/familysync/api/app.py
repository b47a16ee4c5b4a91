"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlencode

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from familysync.api.auth import clear_session_cookie, redirect_to
from familysync.api.auth import router as auth_router
from familysync.api.functions import router as functions_router
from familysync.api.guard import LoginRequired
from familysync.api.screens import router as screens_router
from familysync.app_logging import configure_logging
from familysync.containers import AppContainer
from familysync.domain.errors import (
    AuthError,
    ChoreTransitionError,
    DataFetchError,
    FamilyMembershipError,
    FamilySyncError,
    GenerationError,
    InvitationError,
    ProfileLookupError,
    RequestCancelled,
)
from familysync.navigation import AppRoute

ERROR_STATUS: dict[type[FamilySyncError], int] = {
    AuthError: 401,
    InvitationError: 400,
    ChoreTransitionError: 409,
    DataFetchError: 502,
    FamilyMembershipError: 403,
    GenerationError: 502,
}


def error_status(exc: FamilySyncError) -> int:
    """Return the HTTP status for a domain error, most specific class first."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.session_store.close()
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(screens_router)
    app.include_router(functions_router)

    @app.exception_handler(LoginRequired)
    async def login_required(request: Request, exc: LoginRequired) -> Response:
        return _to_login(request)

    @app.exception_handler(RequestCancelled)
    async def request_cancelled(request: Request, exc: RequestCancelled) -> Response:
        logger.info("Discarded result of a cancelled request: %s", request.url.path)
        return _to_login(request)

    @app.exception_handler(ProfileLookupError)
    async def profile_lookup_failed(
        request: Request, exc: ProfileLookupError
    ) -> Response:
        return _to_login(request, error=str(exc))

    @app.exception_handler(FamilySyncError)
    async def domain_error(request: Request, exc: FamilySyncError) -> Response:
        status_code = error_status(exc)
        logger.warning(
            "Request failed: %s %s -> %s", request.method, request.url.path, status_code
        )
        return JSONResponse({"error": str(exc)}, status_code=status_code)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> RedirectResponse:
        return redirect_to(AppRoute.DISPATCH.value)

    return app


def _to_login(request: Request, error: str | None = None) -> RedirectResponse:
    location = AppRoute.LOGIN.value
    if error:
        location = f"{location}?{urlencode({'error': error})}"
    response = redirect_to(location)
    clear_session_cookie(response, request.app.state.container)
    return response
