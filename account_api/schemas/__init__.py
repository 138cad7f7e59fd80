"""Pydantic schemas for request/response validation."""

from account_api.schemas.auth import (
    AccessTokenResponse,
    AuthenticateRequest,
    NewAccessTokenResponse,
)
from account_api.schemas.user import (
    ChangeEmailRequest,
    MessageResponse,
    UserCreateRequest,
    UserMessageResponse,
    UserResponse,
)

__all__ = [
    "AccessTokenResponse",
    "AuthenticateRequest",
    "NewAccessTokenResponse",
    "ChangeEmailRequest",
    "MessageResponse",
    "UserCreateRequest",
    "UserMessageResponse",
    "UserResponse",
]
