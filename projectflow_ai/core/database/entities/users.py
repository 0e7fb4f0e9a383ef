"""
User entity models.

The ``user`` table is owned by the authentication layer of the host
application. The agent core only reads it: to resolve the caller of a run and
to surface collaborator/creator profiles from tools.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class UserBase(Base):
    """Base fields for user entity."""

    name: Optional[str] = Field(default=None, max_length=255)
    email: str = Field(max_length=255)
    image: Optional[str] = Field(default=None)
    bio: Optional[str] = Field(default=None)

    # Preferences agents may use when writing prompts
    language: str = Field(default="en", max_length=8)
    timezone: str = Field(default="UTC", max_length=100)
    date_format: str = Field(default="MM/DD/YYYY", max_length=16)

    active_organization_id: Optional[int] = Field(default=None)


class User(UserBase, table=True):
    """Entity for an application user.

    Table: user
    """

    __tablename__ = "user"

    id: str = Field(primary_key=True, max_length=255)
    email_verified: Optional[datetime] = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"
