"""
Agent run event entity models.

Events form an append-only timeline for each agent run. The payload column
holds the JSON text of the whole event dict (including its ``type``).
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class AgentEventRow(Base, table=True):
    """Entity for one journaled occurrence during a run.

    The integer primary key increases with insertion order and breaks ties
    between events sharing a timestamp.

    Table: agent_run_events
    """

    __tablename__ = "agent_run_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    run_id: str = Field(foreign_key="agent_runs.id", max_length=64, index=True)
    type: str = Field(max_length=128, description="Event type tag")
    payload: str = Field(default="{}", description="JSON event payload data")
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime(timezone=True))

    def get_payload_dict(self) -> Dict[str, Any]:
        """Get payload as a dictionary."""
        try:
            return json.loads(self.payload) if self.payload else {}
        except (json.JSONDecodeError, TypeError):
            return {}

    def __repr__(self) -> str:
        return f"AgentEventRow(id={self.id}, run_id={self.run_id}, type={self.type})"
