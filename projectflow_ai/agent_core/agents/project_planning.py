"""Project planning agent.

Reads a project and its tasks through the project tools, asks the LLM for an
ordered task plan and, when the caller allows it, creates the planned tasks
in the project with one ``task.createBatch`` call.

Timeline events emitted (in order):

- ``project-planning:fetch-context:start`` / ``:done``
- ``project-planning:llm:request`` / ``:response``
- ``project-planning:write:start`` / ``:done`` (only when writing)
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, Field, PositiveInt

from projectflow_ai.core.logging_config import get_logger

from ..llm.base import LLMMessage, LLMStructuredRequest
from ..schemas.base import CamelSchema
from ..schemas.domain import AgentResultBase
from ..tools.project_tasks import (
    MAX_BATCH_TASKS,
    CreateTasksBatchResult,
    GetProjectTasksResult,
    ProjectOverview,
    ProjectTaskSummary,
)
from .base import AgentContext, AgentDefinition

logger = get_logger(__name__)

PROJECT_PLANNING_AGENT_ID = "project-planning"

MAX_BRIEF_TASKS = 50
PLANNING_TEMPERATURE = 0.3

SYSTEM_PROMPT = (
    "You are an expert project planning assistant. Given a project and its existing tasks, "
    "you propose a clear, actionable task plan. Return concise, well-scoped tasks that move the "
    "project forward. Use the provided schema and do not include tasks that already obviously "
    "exist unless they need refinement."
)

USER_PROMPT_HEADER = [
    "Plan the next steps for the following project.",
    "You must:",
    "- Propose a list of tasks in a reasonable execution order.",
    "- Prefer fewer, higher-quality tasks over many tiny ones.",
    "- Include suggestedDueDate only when it is helpful and realistic.",
    "- Optionally suggest an assignee via suggestedAssigneeId when it is clearly implied (e.g. project owner).",
    "- Avoid duplicating existing tasks unless they need to be significantly improved.",
    "",
    "Project context:",
]


def _validate_iso_datetime(value: str) -> str:
    text = value.strip()
    if "T" not in text:
        raise ValueError("must be an ISO-8601 date-time")
    try:
        datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text)
    except ValueError as e:
        raise ValueError("must be an ISO-8601 date-time") from e
    return value


IsoDateTime = Annotated[str, AfterValidator(_validate_iso_datetime)]


class ProjectPlanningInput(CamelSchema):
    project_id: PositiveInt
    extra_context: Optional[str] = Field(default=None, max_length=2000)
    target_date: Optional[IsoDateTime] = None
    allow_write: bool = False


class PlannedTaskSuggestion(CamelSchema):
    """One task proposed by the LLM."""

    title: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = Field(default=None, max_length=2000)
    order_index: int = Field(default=0, ge=0)
    suggested_due_date: Optional[IsoDateTime] = None
    suggested_assignee_id: Optional[str] = Field(default=None, max_length=255)


class ProjectPlan(CamelSchema):
    """Shape the LLM must return."""

    summary: str = Field(..., min_length=1)
    notes: Optional[str] = None
    tasks: List[PlannedTaskSuggestion] = Field(..., min_length=1)


class ProjectPlanningResult(AgentResultBase):
    project_id: int
    tasks: List[PlannedTaskSuggestion]
    notes: str = ""


def _format_task_line(task: ProjectTaskSummary) -> str:
    line = f"- [{task.status}] ({task.priority}) {task.title}"
    if task.due_date is not None:
        line += f" (due {task.due_date.isoformat()})"
    return line


def build_project_brief(
    overview: ProjectOverview,
    tasks: List[ProjectTaskSummary],
    *,
    extra_context: Optional[str] = None,
    target_date: Optional[str] = None,
) -> str:
    """Render the project context block sent to the LLM."""
    lines = [f"Project: {overview.title} (status: {overview.status})"]
    if overview.description:
        lines.append(f"Description: {overview.description}")

    if tasks:
        lines.append("Existing tasks:")
        lines.extend(_format_task_line(task) for task in tasks[:MAX_BRIEF_TASKS])
    else:
        lines.append("There are currently no tasks for this project.")

    if extra_context:
        lines += ["", "Additional user context:", extra_context]

    if target_date:
        lines += ["", f"Target completion date: {target_date}"]

    return "\n".join(lines)


def build_planning_messages(brief: str) -> List[LLMMessage]:
    return [
        LLMMessage(role="system", content=SYSTEM_PROMPT),
        LLMMessage(role="user", content="\n".join([*USER_PROMPT_HEADER, brief])),
    ]


async def run_project_planning(ctx: AgentContext, data: ProjectPlanningInput) -> ProjectPlanningResult:
    """Plan tasks for ``data.project_id`` and optionally create them."""
    project_id = data.project_id

    await ctx.log({"type": "project-planning:fetch-context:start", "projectId": project_id})

    overview: ProjectOverview = await ctx.call_tool("project.getOverview", {"project_id": project_id})
    existing: GetProjectTasksResult = await ctx.call_tool("project.getTasks", {"project_id": project_id})

    await ctx.log(
        {
            "type": "project-planning:fetch-context:done",
            "projectId": project_id,
            "existingTaskCount": len(existing.tasks),
        }
    )

    brief = build_project_brief(
        overview,
        existing.tasks,
        extra_context=data.extra_context,
        target_date=data.target_date,
    )

    await ctx.log({"type": "project-planning:llm:request", "projectId": project_id})

    response = await ctx.llm.generate_structured(
        LLMStructuredRequest(
            messages=build_planning_messages(brief),
            temperature=PLANNING_TEMPERATURE,
            output_schema=ProjectPlan,
        )
    )
    plan: ProjectPlan = response.parsed

    await ctx.log(
        {
            "type": "project-planning:llm:response",
            "projectId": project_id,
            "rawTextLength": len(response.raw_text),
            "taskCount": len(plan.tasks),
        }
    )

    # Positions follow the model's list order, whatever indices it sent.
    planned = [task.model_copy(update={"order_index": index}) for index, task in enumerate(plan.tasks)]

    write_notes = ""
    if data.allow_write and planned:
        new_tasks = [
            {
                "title": task.title,
                "description": task.description,
                "assigned_to_id": task.suggested_assignee_id,
                "priority": "medium",
                "due_date": task.suggested_due_date,
            }
            for task in planned[:MAX_BATCH_TASKS]
        ]

        await ctx.log({"type": "project-planning:write:start", "projectId": project_id, "taskCount": len(new_tasks)})

        created: CreateTasksBatchResult = await ctx.call_tool(
            "task.createBatch", {"project_id": project_id, "tasks": new_tasks}
        )
        created_count = len(created.created_task_ids)
        write_notes = f"\n\nCreated {created_count} tasks in the project."

        await ctx.log(
            {"type": "project-planning:write:done", "projectId": project_id, "createdTaskCount": created_count}
        )
        logger.info(f"Run {ctx.run_id} created {created_count} planned tasks in project {project_id}")

    return ProjectPlanningResult(
        project_id=project_id,
        tasks=planned,
        summary=plan.summary,
        notes=(plan.notes or "") + write_notes,
    )


project_planning_agent = AgentDefinition(
    id=PROJECT_PLANNING_AGENT_ID,
    name="Project Planning Agent",
    description="Generates a structured task plan from a high-level project description.",
    input_schema=ProjectPlanningInput,
    run=run_project_planning,
    tool_names=("project.getOverview", "project.getTasks", "task.createBatch"),
)
