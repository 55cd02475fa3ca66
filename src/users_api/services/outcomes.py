"""Outcome types returned by the user request handlers."""

from dataclasses import dataclass, field
from typing import Any

from users_api.models.user import Violation


@dataclass(frozen=True)
class Ok:
    """Successful outcome.

    ``value`` is None for responses without a body (204).
    """

    value: Any = None
    status_code: int = 200
    location: str | None = None


@dataclass(frozen=True)
class ValidationFailure:
    violations: list[Violation] = field(default_factory=list)


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class InternalFailure:
    message: str


Outcome = Ok | ValidationFailure | NotFound | InternalFailure
