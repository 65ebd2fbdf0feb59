"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- User: Account that links can be attributed to
- Link: Maps a short code to its destination URL, with click analytics

Design Decisions:
- Unique index on short_code: the database, not the application, guarantees
  that no two links share a code
- Non-unique index on destination_url for the deduplication lookup; owners may
  edit a destination onto one that already exists elsewhere
- clicks is a plain counter updated with a single atomic UPDATE statement
- owner_id is nullable: anonymous submissions produce unowned links
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Registered account.

    Fields:
    - id: Auto-incrementing primary key (embedded in access tokens)
    - name: Display name
    - email: Unique, stored lower-cased
    - password_hash: Salted hash; never serialized to clients
    - created_at / updated_at: Bookkeeping timestamps
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(String(100), nullable=False))
    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True)
    )
    password_hash: str = Field(sa_column=Column(String(255), nullable=False))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Link(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - id: Auto-incrementing primary key, used by the owner-scoped API
    - short_code: Unique random code, immutable after creation
    - destination_url: The long URL a redirect resolves to (owner-editable)
    - short_url: BASE_URL + /s/ + short_code, stored for convenience
    - clicks: Successful redirects so far; never decreases
    - owner_id: Creating user, or None for anonymous links
    - created_at / updated_at: Set at creation / on each edit

    Indexes:
    - short_code: Unique index for redirects (most critical path)
    - destination_url: Deduplication lookup on shorten
    - owner_id, created_at: Dashboard listing, newest first
    """
    __tablename__ = "links"

    id: Optional[int] = Field(default=None, primary_key=True)
    short_code: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True),
        max_length=32
    )
    destination_url: str = Field(sa_column=Column(Text, nullable=False, index=True))
    short_url: str = Field(sa_column=Column(Text, nullable=False))
    clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    owner_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
            index=True
        )
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
