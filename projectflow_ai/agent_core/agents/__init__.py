"""Agent contract and the built-in agents."""

from .base import AgentContext, AgentDefinition, AgentEventPayload, EventLogger
from .project_planning import (
    PROJECT_PLANNING_AGENT_ID,
    PlannedTaskSuggestion,
    ProjectPlan,
    ProjectPlanningInput,
    ProjectPlanningResult,
    project_planning_agent,
)

__all__ = [
    "AgentContext",
    "AgentDefinition",
    "AgentEventPayload",
    "EventLogger",
    "PROJECT_PLANNING_AGENT_ID",
    "PlannedTaskSuggestion",
    "ProjectPlan",
    "ProjectPlanningInput",
    "ProjectPlanningResult",
    "project_planning_agent",
]
