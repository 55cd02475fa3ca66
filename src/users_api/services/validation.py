"""Validation gate for user payloads."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from users_api.models.user import UserFields, UserPayload, Violation


@dataclass
class ValidationResult:
    """Result of validating a user payload."""

    fields: UserFields | None = None
    violations: list[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations


def violations_from_errors(errors: Sequence[dict[str, Any]]) -> list[Violation]:
    """Convert pydantic error dicts into field-level violations.

    The field is the last string element of the error location, so
    ``("body", "name")`` and ``("path", "user_id")`` both map to the bare
    field name. Errors on the whole body map to ``"body"``.
    """
    violations = []
    for error in errors:
        names = [part for part in error.get("loc", ()) if isinstance(part, str)]
        violations.append(Violation(field=names[-1] if names else "body", error=error["msg"]))
    return violations


def validate_user(payload: UserPayload) -> ValidationResult:
    """Check a candidate user against the field rules.

    Args:
        payload: Incoming create/update body

    Returns:
        ValidationResult with the validated fields, or the violations
        ordered by field (name before email)
    """
    # Omit missing values so pydantic reports them as required
    data = payload.model_dump(include={"name", "email"}, exclude_none=True)
    try:
        return ValidationResult(fields=UserFields.model_validate(data))
    except ValidationError as e:
        return ValidationResult(violations=violations_from_errors(e.errors()))
