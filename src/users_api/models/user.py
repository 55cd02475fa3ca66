"""User models for the Users API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidatorFunctionWrapHandler, field_validator


class User(BaseModel):
    """User entity model.

    Records are immutable; an update replaces the stored record with a new
    instance carrying the same ``id``.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Jane Doe",
                "email": "jane.doe@example.com",
            }
        },
    )

    id: int = Field(..., description="Server-assigned identifier for the user")
    name: str = Field(..., description="Full name of the user")
    email: str = Field(..., description="Email address of the user")


class UserPayload(BaseModel):
    """Request body for creating or updating a user.

    Fields are optional here so that missing values reach the validation
    gate and come back as field-level violations. Any client-supplied ``id``
    is accepted and ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "email": "jane.doe@example.com",
            }
        },
    )

    id: Any = Field(None, description="Ignored, ids are assigned by the server")
    name: str | None = Field(None, description="Full name of the user")
    email: str | None = Field(None, description="Email address of the user")


class UserFields(BaseModel):
    """Validated mutable fields of a user."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if value and not value.strip():
            raise ValueError("Name must not be blank")
        return value

    @field_validator("email", mode="wrap")
    @classmethod
    def keep_submitted_email(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Check the address syntax but keep the value exactly as submitted."""
        handler(value)
        return value


class Violation(BaseModel):
    """A single field-level validation failure."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "email",
                "error": "value is not a valid email address",
            }
        },
    )

    field: str
    error: str
