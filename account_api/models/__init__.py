"""SQLAlchemy models."""

from account_api.models.personal_access_token import PersonalAccessToken
from account_api.models.user import User

__all__ = [
    "User",
    "PersonalAccessToken",
]
