"""Main FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from users_api.config import Settings, get_settings
from users_api.middleware import setup_middleware
from users_api.routes import api_router
from users_api.services import init_services, shutdown_services
from users_api.services.validation import violations_from_errors

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the ones loaded from the environment

    Returns:
        FastAPI application with its own user store and list cache
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Handle application lifespan events."""
        # Startup
        logger.info(f"{settings.app_name} v{settings.app_version} started")
        logger.info(f"Environment: {settings.environment}")
        init_services(app, settings)

        yield

        # Shutdown
        shutdown_services(app)
        logger.info(f"{settings.app_name} shutting down")

    app = FastAPI(
        title=settings.app_name,
        description="Users API - in-memory user management service",
        version=settings.app_version,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    setup_middleware(app, settings)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report unparseable bodies and path parameters as field violations."""
        violations = violations_from_errors(exc.errors())
        logger.info("Rejected %s %s: %d violation(s)", request.method, request.url.path, len(violations))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(violations),
        )

    app.include_router(api_router)
    return app


settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())

app = create_app(settings)


def run() -> None:
    """Run the server."""
    import uvicorn

    uvicorn.run(
        "users_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
