"""Account service: registration, authentication and profile operations."""

import logging
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from account_api.config import get_settings
from account_api.errors import CREDENTIALS_INCORRECT, ValidationError, field_message
from account_api.models.user import User
from account_api.schemas.auth import AuthenticateRequest
from account_api.schemas.user import ChangeEmailRequest, UserCreateRequest
from account_api.services.auth import get_password_hash, verify_password
from account_api.services.tokens import NewAccessToken, TokenService

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)

USER_CREATED = "User created successfully!"
EMAIL_UPDATED = "User e-mail updated successfully!"
TOKENS_REVOKED = "All user tokens were revoked !"  # noqa: S105


def parse_request(
    schema: type[RequestT],
    data: Mapping[str, Any],
    is_taken: Callable[[str, Any], bool] | None = None,
) -> RequestT:
    """Validate request data against a schema, raising ValidationError on failure."""
    context = {"is_taken": is_taken} if is_taken is not None else None
    try:
        return schema.model_validate(dict(data), context=context)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from None


class AccountService:
    """Service for account and token operations."""

    def __init__(
        self,
        db: Session,
        token_service: TokenService | None = None,
        change_email_require_unique: bool | None = None,
    ):
        self.db = db
        self.token_service = token_service or TokenService(db)
        if change_email_require_unique is None:
            change_email_require_unique = get_settings().change_email_require_unique
        self.change_email_require_unique = change_email_require_unique

    def authenticate(self, data: Mapping[str, Any]) -> NewAccessToken:
        """Exchange email and password for a new token on a device.

        An unknown email and a wrong password fail identically.
        """
        credentials = parse_request(AuthenticateRequest, data)

        user = self.get_user_by_email(credentials.email)
        if not user or not verify_password(credentials.password, user.password):
            logger.info("Rejected credentials for token request")
            raise ValidationError.with_messages({"email": CREDENTIALS_INCORRECT})

        new_token = self.token_service.create_token(user, credentials.device_name)
        self.db.commit()
        return new_token

    def register(self, data: Mapping[str, Any]) -> User:
        """Create a user after every registration check passes."""
        request = parse_request(UserCreateRequest, data, is_taken=self.is_taken)

        user = User(
            name=request.name,
            email=request.email,
            password=get_password_hash(request.password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise self._taken({"name": request.name, "email": request.email}) from None
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    def me(self, user: User) -> User:
        """Return the authenticated user."""
        return user

    def change_email(self, user: User, data: Mapping[str, Any]) -> User:
        """Replace the authenticated user's email address."""
        is_taken = None
        if self.change_email_require_unique:
            is_taken = partial(self.is_taken, ignore_id=user.id)

        request = parse_request(ChangeEmailRequest, data, is_taken=is_taken)

        user.email = request.email
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise self._taken({"email": request.email}, ignore_id=user.id) from None
        self.db.refresh(user)

        logger.info(f"Updated email for user {user.id}")
        return user

    def logout(self, user: User) -> int:
        """Revoke every token the user holds."""
        revoked = self.token_service.revoke_all(user)
        self.db.commit()
        return revoked

    def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email, ignoring case."""
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def is_taken(self, field: str, value: Any, ignore_id: int | None = None) -> bool:
        """Check whether another user already holds a name or email."""
        column = getattr(User, field)
        if field == "email":
            query = self.db.query(User.id).filter(func.lower(column) == str(value).lower())
        else:
            query = self.db.query(User.id).filter(column == value)
        if ignore_id is not None:
            query = query.filter(User.id != ignore_id)
        return query.first() is not None

    def _taken(self, values: dict[str, Any], ignore_id: int | None = None) -> ValidationError:
        """Map a store uniqueness violation onto the fields that collided."""
        taken = [field for field, value in values.items() if self.is_taken(field, value, ignore_id)]
        if not taken:
            # Constraint names are not portable across drivers
            taken = [next(iter(values))]
        logger.warning(f"Uniqueness violation on {', '.join(taken)}")
        return ValidationError.with_messages(
            {field: field_message("unique", field) for field in taken}
        )
