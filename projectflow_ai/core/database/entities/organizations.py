"""
Organization entity models.

Organizations group users; projects may belong to one. Membership rows carry
the per-member flags that tools consult for permission checks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class Organization(Base, table=True):
    """Entity for an organization.

    Table: organizations
    """

    __tablename__ = "organizations"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=256)
    access_code: str = Field(max_length=14, unique=True)
    created_by_id: str = Field(foreign_key="user.id", max_length=255, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Organization(id={self.id}, name={self.name})"


class OrganizationMember(Base, table=True):
    """Entity for a user's membership in an organization.

    ``role`` is one of ``admin``, ``worker`` or ``mentor``. ``can_assign_tasks``
    authorizes a non-owner member to create tasks in organization projects.

    Table: organization_members
    """

    __tablename__ = "organization_members"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organizations.id", index=True)
    user_id: str = Field(foreign_key="user.id", max_length=255, index=True)

    role: str = Field(max_length=16)
    can_add_members: bool = Field(default=False)
    can_assign_tasks: bool = Field(default=False)

    joined_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"OrganizationMember(organization_id={self.organization_id}, user_id={self.user_id}, role={self.role})"
