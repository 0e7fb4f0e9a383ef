"""
Project entity models.

This module contains projects and their explicit collaborators. A project is
visible to its creator, to members of its organization (if any), and to
collaborators; write access depends on the collaborator permission.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class Project(Base, table=True):
    """Entity for a project.

    ``status`` is ``active`` or ``archived``; ``share_status`` is ``private``,
    ``shared_read`` or ``shared_write``.

    Table: projects
    """

    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=256)
    description: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None, max_length=512)
    status: str = Field(default="active", max_length=16)
    share_status: str = Field(default="private", max_length=16)

    created_by_id: str = Field(foreign_key="user.id", max_length=255, index=True)
    organization_id: Optional[int] = Field(default=None, foreign_key="organizations.id", index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Project(id={self.id}, title={self.title})"


class ProjectCollaborator(Base, table=True):
    """Entity for an explicit project collaborator.

    Table: project_collaborators
    """

    __tablename__ = "project_collaborators"

    project_id: int = Field(foreign_key="projects.id", primary_key=True)
    collaborator_id: str = Field(foreign_key="user.id", primary_key=True, max_length=255, index=True)
    permission: str = Field(max_length=8)
    joined_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return (
            f"ProjectCollaborator(project_id={self.project_id}, "
            f"collaborator_id={self.collaborator_id}, permission={self.permission})"
        )
