"""User schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

UserName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)]


def check_unique(value: str, info: ValidationInfo) -> str:
    """Reject a value already held by another user.

    The lookup is supplied by the caller as ``context={"is_taken": ...}``;
    without it the check is skipped.
    """
    is_taken = (info.context or {}).get("is_taken")
    if is_taken is not None and is_taken(info.field_name, value):
        raise PydanticCustomError("unique", "Value has already been taken")
    return value


class UserCreateRequest(BaseModel):
    """User registration request."""

    name: UserName = Field(..., examples=["Gabriel Nunes"])
    email: EmailStr = Field(..., examples=["gabriel_nunes@example.org"])
    password: str = Field(..., min_length=6, max_length=255, examples=["#sdasd$ssdaAA@"])
    password_confirmation: str | None = Field(
        None, validate_default=True, examples=["#sdasd$ssdaAA@"]
    )

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("name", "email")
    @classmethod
    def must_be_unique(cls, value: str, info: ValidationInfo) -> str:
        return check_unique(value, info)

    @field_validator("password_confirmation")
    @classmethod
    def confirm_password(cls, value: str | None, info: ValidationInfo) -> str | None:
        # Only compared once the password itself passed its own checks
        if "password" in info.data and value != info.data["password"]:
            raise PydanticCustomError("confirmed", "Password confirmation does not match")
        return value


class ChangeEmailRequest(BaseModel):
    """Change email request."""

    email: EmailStr = Field(..., examples=["gabriel_robert@example.org"])

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("email")
    @classmethod
    def must_be_unique(cls, value: str, info: ValidationInfo) -> str:
        return check_unique(value, info)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class UserMessageResponse(BaseModel):
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
