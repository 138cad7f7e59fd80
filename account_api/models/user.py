"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from account_api.database import Base
from account_api.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User account that owns personal access tokens."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash

    # Relationships
    tokens = relationship(
        "PersonalAccessToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
