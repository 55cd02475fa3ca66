"""Data models."""

from users_api.models.health import HealthCheckResponse
from users_api.models.user import User, UserFields, UserPayload, Violation

__all__ = [
    "HealthCheckResponse",
    "User",
    "UserFields",
    "UserPayload",
    "Violation",
]
