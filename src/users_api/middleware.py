"""Middleware setup for the FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from users_api.auth import BearerAuthMiddleware
from users_api.config import Settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def get_allowed_origins(ui_url: str | None = None, environment: str = "development") -> list[str]:
    """Get list of allowed CORS origins based on configuration.

    Args:
        ui_url: URL of the UI application
        environment: Environment name (development, production, etc.)

    Returns:
        List of allowed origin URLs
    """
    allowed_origins: list[str] = []

    if ui_url:
        allowed_origins.append(ui_url.rstrip("/"))
        if ui_url.startswith("http://"):
            allowed_origins.append(ui_url.replace("http://", "https://", 1).rstrip("/"))
        if ui_url.startswith("https://"):
            allowed_origins.append(ui_url.replace("https://", "http://", 1).rstrip("/"))

    if environment.lower() in {"development", "dev", "local"}:
        allowed_origins.extend(
            [
                "http://localhost:5173",
                "http://127.0.0.1:5173",
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ]
        )

    # Deduplicate while preserving order
    return list(dict.fromkeys(allowed_origins))


def get_cors_headers(origin: str | None, ui_url: str | None = None, environment: str = "development") -> dict[str, str]:
    """Get CORS headers for a given origin.

    Args:
        origin: The origin from the request header
        ui_url: URL of the UI application
        environment: Environment name (development, production, etc.)

    Returns:
        Dictionary of CORS headers, empty if origin is not allowed
    """
    if not origin:
        return {}

    if origin in get_allowed_origins(ui_url, environment):
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": "*",
            "Access-Control-Allow-Headers": "*",
        }
    return {}


async def log_requests(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Log the method and path of each request and the status of its response."""
    logger.info("HTTP %s %s", request.method, request.url.path)
    response = await call_next(request)
    logger.info("Response Status Code: %d", response.status_code)
    return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Outermost catch-all turning unhandled exceptions into a generic 500.

    Runs outside the CORS middleware, so allowed-origin headers are added
    to the error response here.
    """

    def __init__(self, app: ASGIApp, ui_url: str | None = None, environment: str = "development") -> None:
        super().__init__(app)
        self.ui_url = ui_url
        self.environment = environment

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error("Unhandled exception: %s", exc, exc_info=True)
            origin = request.headers.get("origin")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": INTERNAL_ERROR_MESSAGE},
                headers=get_cors_headers(origin, ui_url=self.ui_url, environment=self.environment),
            )


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Setup middleware for the FastAPI application.

    The last middleware added runs first, so the resulting order for an
    inbound request is: error handling, CORS, authentication, logging,
    HTTPS redirect (when enabled), routes.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    if settings.https_redirect:
        app.add_middleware(HTTPSRedirectMiddleware)
        logger.info("HTTPS redirect enabled")

    app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)
    app.add_middleware(BearerAuthMiddleware, settings=settings)

    allowed_origins = get_allowed_origins(settings.ui_url, settings.environment)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )
    logger.info("CORS enabled for origins: %s (environment=%s)", allowed_origins, settings.environment)

    app.add_middleware(ErrorHandlingMiddleware, ui_url=settings.ui_url, environment=settings.environment)
