"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from wanderlust.api.auth import router as auth_router
from wanderlust.api.dependencies import LoginRequired
from wanderlust.api.listings import router as listings_router
from wanderlust.api.method_override import MethodOverrideMiddleware
from wanderlust.app_logging import configure_logging
from wanderlust.containers import AppContainer
from wanderlust.domain.errors import (
    AuthenticationFailure,
    DuplicateUser,
    InvalidIdentifier,
    NotFound,
    StorageFailure,
    ValidationError,
)

GENERIC_ERROR = "Something went wrong. Please try again later."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Wanderlust", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=settings.session_max_age_seconds,
        https_only=settings.session_https_only,
        same_site="lax",
    )
    app.add_middleware(MethodOverrideMiddleware)

    @app.exception_handler(ValidationError)
    async def validation_error(
        request: Request, exc: ValidationError
    ) -> PlainTextResponse:
        logger.info("Rejected payload", extra={"path": request.url.path})
        return PlainTextResponse(
            f"Invalid input: {exc}", status_code=status.HTTP_400_BAD_REQUEST
        )

    @app.exception_handler(InvalidIdentifier)
    async def invalid_identifier(
        request: Request, exc: InvalidIdentifier
    ) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(AuthenticationFailure)
    async def authentication_failure(
        request: Request, exc: AuthenticationFailure
    ) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=status.HTTP_401_UNAUTHORIZED)

    @app.exception_handler(DuplicateUser)
    async def duplicate_user(
        request: Request, exc: DuplicateUser
    ) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=status.HTTP_409_CONFLICT)

    @app.exception_handler(LoginRequired)
    async def login_required(
        request: Request, exc: LoginRequired
    ) -> RedirectResponse:
        return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)

    @app.exception_handler(StorageFailure)
    async def storage_failure(
        request: Request, exc: StorageFailure
    ) -> PlainTextResponse:
        logger.error(
            "Storage operation failed",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return PlainTextResponse(
            _error_message(settings.environment, exc),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> PlainTextResponse:
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return PlainTextResponse(
            _error_message(settings.environment, exc),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.get("/")
    async def root() -> RedirectResponse:
        """Send visitors to the listings index."""
        return RedirectResponse("/listings", status_code=status.HTTP_302_FOUND)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    app.include_router(listings_router)
    app.include_router(auth_router)

    @app.api_route(
        "/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def unknown_route(path: str) -> PlainTextResponse:
        """Answer any path no other route claims."""
        return PlainTextResponse(
            "Page not found", status_code=status.HTTP_404_NOT_FOUND
        )

    return app


def _error_message(environment: str, exc: Exception) -> str:
    """Return a generic error message, with debug info when running locally."""
    if environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{GENERIC_ERROR} (debug: {detail})"
    return GENERIC_ERROR
