"""JWT bearer authentication.

Tokens are verified when present and the outcome is attached to the request
as ``request.state.auth``. No route requires authentication, so a missing or
invalid token never changes the response.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fastapi import Request
from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from users_api.config import Settings

logger = logging.getLogger(__name__)


class AuthStatus(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of checking a request's bearer token."""

    status: AuthStatus
    subject: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)
    reason: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED


ANONYMOUS = AuthResult(status=AuthStatus.ANONYMOUS)


def authenticate(authorization: str | None, settings: Settings) -> AuthResult:
    """Verify the value of an Authorization header.

    Args:
        authorization: Raw header value, or None when absent
        settings: Settings holding the signing key, algorithm, issuer and audience

    Returns:
        AuthResult describing the principal or why verification failed
    """
    if not authorization:
        return ANONYMOUS

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return AuthResult(status=AuthStatus.FAILED, reason="Unsupported authorization scheme")

    try:
        claims = jwt.decode(
            token.strip(),
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require_aud": True, "require_iss": True, "require_exp": True},
        )
    except JWTError as e:
        return AuthResult(status=AuthStatus.FAILED, reason=str(e))

    subject = claims.get("sub")
    if subject is None:
        return AuthResult(status=AuthStatus.FAILED, claims=claims, reason="Token has no subject")
    return AuthResult(status=AuthStatus.AUTHENTICATED, subject=str(subject), claims=claims)


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Attach the bearer-token outcome to every request."""

    def __init__(self, app: ASGIApp, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        result = authenticate(request.headers.get("authorization"), self.settings)
        request.state.auth = result
        if result.status is AuthStatus.FAILED:
            logger.debug("Bearer token rejected: %s", result.reason)
        elif result.is_authenticated:
            logger.debug("Authenticated subject %s", result.subject)
        return await call_next(request)
