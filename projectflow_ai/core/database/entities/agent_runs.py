"""
Agent run entity models.

This module contains the database entity for agent run lifecycle. Each run is
one invocation of one agent by one caller, with a single terminal outcome.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class AgentRunBase(Base):
    """Base fields for agent run entity."""

    agent_id: str = Field(max_length=64, index=True, description="Stable id of the agent that ran")
    user_id: str = Field(max_length=255, index=True, description="Caller that initiated the run")

    status: str = Field(max_length=16, description="running, succeeded or failed")
    summary: Optional[str] = Field(default=None, description="Result summary on success")
    error: Optional[str] = Field(default=None, description="Error message on failure")


class AgentRunRow(AgentRunBase, table=True):
    """Entity for agent run lifecycle and outcome.

    Table: agent_runs
    """

    __tablename__ = "agent_runs"

    id: str = Field(primary_key=True, max_length=64)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"AgentRunRow(id={self.id}, agent_id={self.agent_id}, status={self.status})"
