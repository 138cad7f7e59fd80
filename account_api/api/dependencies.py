"""FastAPI dependencies for authentication, request data and services."""

import logging
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from account_api.database import get_db
from account_api.errors import UnauthenticatedError
from account_api.models.user import User
from account_api.services.accounts import AccountService
from account_api.services.tokens import TokenService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def get_request_data(request: Request) -> dict[str, Any]:
    """Collect query parameters and the JSON or form body into one mapping.

    Body fields win over query parameters. A body that cannot be decoded is
    treated as empty so that field rules report what is missing.
    """
    data: dict[str, Any] = dict(request.query_params)

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data.update({key: value for key, value in form.items() if isinstance(value, str)})
        return data

    if not await request.body():
        return data
    try:
        payload = await request.json()
    except ValueError:
        logger.debug("Ignoring request body that is not valid JSON")
        return data
    if isinstance(payload, dict):
        data.update(payload)
    return data


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from a personal access token."""
    if credentials is None:
        raise UnauthenticatedError()

    user = TokenService(db).resolve_user(credentials.credentials)
    if user is None:
        raise UnauthenticatedError()

    return user


def get_account_service(
    db: Annotated[Session, Depends(get_db)],
) -> AccountService:
    """Get account service with dependencies."""
    return AccountService(db)


def request_body(model: type[BaseModel]) -> dict[str, Any]:
    """OpenAPI ``requestBody`` entry for endpoints that read raw request data."""
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": schema},
                "application/x-www-form-urlencoded": {"schema": schema},
            },
        }
    }
