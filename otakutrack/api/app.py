"""FastAPI application configuration."""

import logging

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from otakutrack.api.admin import router as admin_router
from otakutrack.api.analytics import router as analytics_router
from otakutrack.api.auth import router as auth_router
from otakutrack.api.clubs import router as clubs_router
from otakutrack.api.health import router as health_router
from otakutrack.api.models import ErrorResponse
from otakutrack.api.notifications import router as notifications_router
from otakutrack.api.reminders import router as reminders_router
from otakutrack.api.reviews import router as reviews_router
from otakutrack.api.shows import router as shows_router
from otakutrack.api.watchlist import router as watchlist_router
from otakutrack.config import get_settings
from otakutrack.observability.sentry import init_sentry
from otakutrack.utils.logging import configure_logging

configure_logging()
init_sentry()

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    message: str,
    errors: list[dict[str, object]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the error envelope.

    :param request: The failing request.
    :param exc: The raised HTTP exception.
    :returns: JSON error response.
    """
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request validation errors in the error envelope.

    :param request: The failing request.
    :param exc: The validation error.
    :returns: JSON error response with the individual field errors.
    """
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    logger.info(f"Validation failed on {request.method} {request.url.path}: {len(errors)} errors")
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation failed",
        errors=errors,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected errors as a generic 500.

    :param request: The failing request.
    :param exc: The unhandled exception.
    :returns: JSON error response.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    :returns: Configured FastAPI application instance.
    """
    settings = get_settings()
    application = FastAPI(
        title="OtakuTrack API",
        version=settings.api_version,
        responses={
            401: {"model": ErrorResponse, "description": "Unauthorised"},
            500: {"model": ErrorResponse, "description": "Internal server error"},
        },
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routers
    api_router = APIRouter(prefix="/api")
    api_router.include_router(auth_router)
    api_router.include_router(shows_router)
    api_router.include_router(watchlist_router)
    api_router.include_router(reviews_router)
    api_router.include_router(clubs_router)
    api_router.include_router(reminders_router)
    api_router.include_router(notifications_router)
    api_router.include_router(analytics_router)
    api_router.include_router(admin_router)

    application.include_router(health_router)
    application.include_router(api_router)

    logger.info("FastAPI application created")

    return application


# Application instance for uvicorn
app = create_app()
