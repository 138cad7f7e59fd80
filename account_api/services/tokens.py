"""Personal access token issuance, lookup and revocation."""

import hashlib
import hmac
import logging
import secrets
import string
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from account_api.config import get_settings
from account_api.models.personal_access_token import PersonalAccessToken
from account_api.models.user import User

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits

# Longer ids cannot fit a signed 64-bit primary key
MAX_TOKEN_ID_DIGITS = 18


def generate_secret(length: int) -> str:
    """Generate a random alphanumeric token secret."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def hash_token(secret: str) -> str:
    """Digest stored in place of the plaintext secret."""
    return hashlib.sha256(secret.encode()).hexdigest()


@dataclass
class NewAccessToken:
    """A freshly created token together with its one-time plaintext value."""

    access_token: PersonalAccessToken
    plain_text_token: str


class TokenService:
    """Registry of personal access tokens."""

    def __init__(
        self,
        db: Session,
        expiration_minutes: int | None = None,
        secret_length: int | None = None,
    ):
        settings = get_settings()
        self.db = db
        if expiration_minutes is None:
            expiration_minutes = settings.token_expiration_minutes
        self.expiration_minutes = expiration_minutes
        self.secret_length = secret_length or settings.token_secret_length

    def create_token(
        self, user: User, name: str, abilities: list[str] | None = None
    ) -> NewAccessToken:
        """Issue a new token for a user and device label.

        The caller is responsible for committing the session.
        """
        secret = generate_secret(self.secret_length)
        access_token = PersonalAccessToken(
            user_id=user.id,
            name=name,
            token=hash_token(secret),
            abilities=abilities if abilities is not None else ["*"],
        )
        self.db.add(access_token)
        self.db.flush()

        logger.info(f"Issued token {access_token.id} ('{name}') for user {user.id}")
        return NewAccessToken(access_token, f"{access_token.id}|{secret}")

    def find_token(self, plain_text_token: str) -> PersonalAccessToken | None:
        """Look up a token by its plaintext value.

        Accepts both the ``<id>|<secret>`` form and a bare secret.
        """
        if "|" not in plain_text_token:
            return (
                self.db.query(PersonalAccessToken)
                .filter(PersonalAccessToken.token == hash_token(plain_text_token))
                .first()
            )

        token_id, _, secret = plain_text_token.partition("|")
        if not (token_id.isascii() and token_id.isdigit()) or len(token_id) > MAX_TOKEN_ID_DIGITS:
            return None

        access_token = (
            self.db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.id == int(token_id))
            .first()
        )
        if access_token is None or not hmac.compare_digest(access_token.token, hash_token(secret)):
            return None
        return access_token

    def is_expired(self, access_token: PersonalAccessToken) -> bool:
        """Check a token against the configured lifetime."""
        if self.expiration_minutes is None:
            return False
        created_at = access_token.created_at
        if created_at.tzinfo is None:
            # SQLite drops the offset; timestamps are written in UTC
            created_at = created_at.replace(tzinfo=UTC)
        return created_at <= datetime.now(UTC) - timedelta(minutes=self.expiration_minutes)

    def resolve_user(self, plain_text_token: str) -> User | None:
        """Return the owner of a valid token and stamp its last use."""
        access_token = self.find_token(plain_text_token)
        if access_token is None or self.is_expired(access_token):
            return None

        access_token.last_used_at = datetime.now(UTC)
        self.db.commit()
        return access_token.user

    def tokens_for(self, user: User) -> list[PersonalAccessToken]:
        """All tokens currently owned by a user."""
        return (
            self.db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.user_id == user.id)
            .order_by(PersonalAccessToken.id)
            .all()
        )

    def revoke_all(self, user: User) -> int:
        """Delete every token owned by a user and return how many were removed.

        The caller is responsible for committing the session.
        """
        revoked = (
            self.db.query(PersonalAccessToken)
            .filter(PersonalAccessToken.user_id == user.id)
            .delete(synchronize_session="fetch")
        )
        logger.info(f"Revoked {revoked} token(s) for user {user.id}")
        return revoked
