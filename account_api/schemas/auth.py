"""Token schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

DeviceName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class AuthenticateRequest(BaseModel):
    """Token request."""

    email: EmailStr = Field(..., examples=["gabriel_nunes@example.org"])
    password: str = Field(..., min_length=1, examples=["#sdasd$ssdaAA@"])
    device_name: DeviceName = Field(..., examples=["IOS"])

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class AccessTokenResponse(BaseModel):
    """Stored token metadata; never includes the secret."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    abilities: list[str] | None
    user_id: int
    last_used_at: datetime | None = None
    created_at: datetime


class NewAccessTokenResponse(BaseModel):
    """Freshly issued token; the plaintext value is only shown here."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: AccessTokenResponse = Field(alias="accessToken")
    plain_text_token: str = Field(
        alias="plainTextToken",
        examples=["2|MZEBxLy1zulPtND6brlf8GOPy57Q4DwYunlibXGj"],
    )
