"""
Task entity models.

Tasks belong to a project and are ordered by ``order_index``. Every mutation
made through the agent tools is mirrored in ``task_activity_log``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class TaskBase(Base):
    """Base fields for task entity."""

    title: str = Field(max_length=256)
    description: Optional[str] = Field(default=None)
    status: str = Field(default="pending", max_length=16)
    priority: str = Field(default="medium", max_length=16)
    due_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    order_index: int = Field(default=0)


class Task(TaskBase, table=True):
    """Entity for a project task.

    Table: tasks
    """

    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)

    assigned_to_id: Optional[str] = Field(default=None, foreign_key="user.id", max_length=255, index=True)
    created_by_id: str = Field(foreign_key="user.id", max_length=255, index=True)
    completed_by_id: Optional[str] = Field(default=None, foreign_key="user.id", max_length=255)
    last_edited_by_id: Optional[str] = Field(default=None, foreign_key="user.id", max_length=255)
    last_edited_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Task(id={self.id}, project_id={self.project_id}, order_index={self.order_index})"


class TaskActivityLog(Base, table=True):
    """Entity for one task activity entry (created, status change, ...).

    Table: task_activity_log
    """

    __tablename__ = "task_activity_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", index=True)
    user_id: str = Field(foreign_key="user.id", max_length=255, index=True)
    action: str = Field(max_length=100)
    old_value: Optional[str] = Field(default=None)
    new_value: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
