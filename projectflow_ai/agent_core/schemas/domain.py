from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import Field

from .base import BaseSchema, CamelSchema


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AgentRunStatus(str, Enum):
    running = "running"
    succeeded = "succeeded"
    failed = "failed"


TERMINAL_RUN_STATUSES = frozenset({AgentRunStatus.succeeded, AgentRunStatus.failed})


class AgentEventType(str, Enum):
    """Event types emitted by the runner itself.

    Agents emit their own free-form event types in addition to these.
    """

    run_started = "agent-run:start"
    run_succeeded = "agent-run:succeeded"
    run_failed = "agent-run:failed"


class AgentRun(BaseSchema):
    id: str = Field(default_factory=lambda: str(uuid4()))

    agent_id: str
    user_id: str

    status: AgentRunStatus = AgentRunStatus.running
    summary: Optional[str] = None
    error: Optional[str] = None

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class AgentEvent(BaseSchema):
    id: Optional[int] = None
    run_id: str

    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=_utc_now)


class AgentResultBase(CamelSchema):
    """Fields every agent result carries; ``summary`` is stored on the run."""

    summary: str
