"""User and token API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from account_api.api.dependencies import (
    get_account_service,
    get_current_user,
    get_request_data,
    request_body,
)
from account_api.models.user import User
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
from account_api.services.accounts import (
    EMAIL_UPDATED,
    TOKENS_REVOKED,
    USER_CREATED,
    AccountService,
)

router = APIRouter(tags=["user"])

UNAUTHENTICATED_RESPONSE = {401: {"model": MessageResponse, "description": "Unauthenticated"}}
VALIDATION_RESPONSE = {422: {"description": "Incorrect fields"}}


@router.post(
    "/sanctum/token",
    response_model=NewAccessTokenResponse,
    tags=["sanctum authentication"],
    responses=VALIDATION_RESPONSE,
    openapi_extra=request_body(AuthenticateRequest),
)
async def authenticate(
    data: Annotated[dict[str, Any], Depends(get_request_data)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Issue a new personal access token for a device."""
    new_token = service.authenticate(data)
    return NewAccessTokenResponse(
        access_token=AccessTokenResponse.model_validate(new_token.access_token),
        plain_text_token=new_token.plain_text_token,
    )


@router.post(
    "/user",
    response_model=UserMessageResponse,
    responses=VALIDATION_RESPONSE,
    openapi_extra=request_body(UserCreateRequest),
)
async def store(
    data: Annotated[dict[str, Any], Depends(get_request_data)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Register a new user."""
    user = service.register(data)
    return {"message": USER_CREATED, "user": user}


@router.get("/me", response_model=UserResponse, responses=UNAUTHENTICATED_RESPONSE)
async def me(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Get the authenticated user."""
    return service.me(current_user)


@router.patch(
    "/user/change-email",
    response_model=UserMessageResponse,
    responses={**UNAUTHENTICATED_RESPONSE, **VALIDATION_RESPONSE},
    openapi_extra=request_body(ChangeEmailRequest),
)
async def update_email(
    data: Annotated[dict[str, Any], Depends(get_request_data)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Change the authenticated user's email."""
    user = service.change_email(current_user, data)
    return {"message": EMAIL_UPDATED, "user": user}


@router.delete("/user/logout", response_model=MessageResponse, responses=UNAUTHENTICATED_RESPONSE)
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Revoke all of the authenticated user's tokens."""
    service.logout(current_user)
    return {"message": TOKENS_REVOKED}
