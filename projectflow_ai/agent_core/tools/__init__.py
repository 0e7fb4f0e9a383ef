"""Agent tools.

This package provides the tool contract (``ToolDefinition``,
``ToolCallContext``, ``ToolRegistry``) and the project/task tools used by the
project planning agent.
"""

from .base import DbClient, ToolCallContext, ToolDefinition, ToolRegistry
from .project_tasks import (
    CreateTasksBatchInput,
    CreateTasksBatchResult,
    GetProjectOverviewInput,
    GetProjectTasksInput,
    GetProjectTasksResult,
    NewTaskInput,
    ProjectOverview,
    ProjectTaskSummary,
    build_project_task_tools,
    create_tasks_batch_tool,
    get_project_overview_tool,
    get_project_tasks_tool,
)

__all__ = [
    # Contract
    "DbClient",
    "ToolCallContext",
    "ToolDefinition",
    "ToolRegistry",
    # Project/task tool instances
    "get_project_overview_tool",
    "get_project_tasks_tool",
    "create_tasks_batch_tool",
    "build_project_task_tools",
    # Project/task DTOs
    "GetProjectOverviewInput",
    "GetProjectTasksInput",
    "GetProjectTasksResult",
    "CreateTasksBatchInput",
    "CreateTasksBatchResult",
    "NewTaskInput",
    "ProjectOverview",
    "ProjectTaskSummary",
]
