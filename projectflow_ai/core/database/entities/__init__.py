"""
Database entity models.

Each module represents a table (or a small group of related tables):

- users: application users (read-only for the agent core)
- organizations: organizations and their members
- projects: projects and explicit collaborators
- tasks: project tasks and the task activity log
- agent_runs: agent run lifecycle and outcome
- agent_events: append-only event timeline of agent runs
"""

from . import (
    agent_events,
    agent_runs,
    organizations,
    projects,
    tasks,
    users,
)
from .agent_events import AgentEventRow
from .agent_runs import AgentRunRow
from .organizations import Organization, OrganizationMember
from .projects import Project, ProjectCollaborator
from .tasks import Task, TaskActivityLog
from .users import User

__all__ = [
    "agent_events",
    "agent_runs",
    "organizations",
    "projects",
    "tasks",
    "users",
    "AgentEventRow",
    "AgentRunRow",
    "Organization",
    "OrganizationMember",
    "Project",
    "ProjectCollaborator",
    "Task",
    "TaskActivityLog",
    "User",
]
