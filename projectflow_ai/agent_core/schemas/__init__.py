"""Pydantic schemas shared across the agent core."""

from .base import BaseSchema, CamelSchema
from .domain import (
    TERMINAL_RUN_STATUSES,
    AgentEvent,
    AgentEventType,
    AgentResultBase,
    AgentRun,
    AgentRunStatus,
)

__all__ = [
    "BaseSchema",
    "CamelSchema",
    "AgentEvent",
    "AgentEventType",
    "AgentResultBase",
    "AgentRun",
    "AgentRunStatus",
    "TERMINAL_RUN_STATUSES",
]
