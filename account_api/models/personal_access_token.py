"""Personal access token model."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from account_api.database import Base
from account_api.models.mixins import TimestampMixin


class PersonalAccessToken(Base, TimestampMixin):
    """Opaque bearer token issued to a user for one device.

    Only the SHA-256 digest of the secret is stored; the plaintext is handed
    to the client once, at creation.
    """

    __tablename__ = "personal_access_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)  # device label, e.g. "IOS"
    token = Column(String(64), unique=True, nullable=False)
    abilities = Column(JSON, nullable=True, default=lambda: ["*"])
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="tokens")
