"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- JSON bodies use camelCase (longUrl, shortCode, ...); Python code uses
  snake_case, mapped by the alias generator
- Request fields the services check themselves are Optional, so a missing
  field produces the service's InvalidInputError message
- "originalUrl" (PUT body, QR response) and "destinationUrl" (link body) name
  the same value: the long URL a short code redirects to
- Every response is wrapped in a {"success": true, ...} envelope
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ShortenRequest(CamelModel):
    """Request model for URL shortening endpoint."""
    long_url: Optional[str] = Field(None, description="The long URL to shorten")


class UpdateLinkRequest(CamelModel):
    """New destination for an existing link; accepts originalUrl or destinationUrl."""
    original_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("originalUrl", "destinationUrl", "original_url"),
        description="The new destination URL",
    )


class RegisterRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LinkOut(CamelModel):
    """Public representation of a link."""
    id: int
    short_code: str
    destination_url: str
    short_url: str
    clicks: int
    owner_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without their offset; they are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class UserOut(CamelModel):
    """Account fields that are safe to return (never the password hash)."""
    id: int
    name: str
    email: str


class LinkResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    data: LinkOut


class LinkListResponse(CamelModel):
    success: bool = True
    count: int
    data: list[LinkOut]


class UserResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    data: UserOut


class TokenResponse(CamelModel):
    success: bool = True
    token: str


class QRCodeResponse(CamelModel):
    success: bool = True
    qr_code: str = Field(..., description="PNG image as a base64 data URL")
    short_code: str
    short_url: str
    original_url: str


class MessageResponse(CamelModel):
    success: bool = True
    message: str
