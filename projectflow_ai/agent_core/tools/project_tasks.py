"""Project and task tools.

Three tools give agents read access to a project and its tasks and let them
create tasks in bulk. Each handler opens its own database session, applies the
same permission rules as the corresponding API endpoint (see
``permissions``), and returns a validated output model.

- ``project.getOverview``: project metadata, collaborators, creator and the
  caller's write access.
- ``project.getTasks``: the project's tasks in display order.
- ``task.createBatch``: create 1-50 tasks, appended after the current last
  task, each with one ``created`` activity-log entry.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import Field, PositiveInt
from sqlalchemy import func, select

from projectflow_ai.core.database.entities import (
    ProjectCollaborator,
    Task,
    TaskActivityLog,
    User,
)
from projectflow_ai.core.logging_config import get_logger

from ..errors import InvalidToolInputError
from ..schemas.base import CamelSchema
from .base import ToolCallContext, ToolDefinition, ToolRegistry
from .permissions import ensure_can_create_tasks, ensure_can_read, load_project

logger = get_logger(__name__)

MAX_BATCH_TASKS = 50

TaskStatus = Literal["pending", "in_progress", "completed", "blocked"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


# --------------------
# Shared DTOs
# --------------------


class UserProfile(CamelSchema):
    """Public profile fields of a user."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None


class ProjectCollaboratorSummary(CamelSchema):
    collaborator_id: str
    permission: Literal["read", "write"]
    joined_at: datetime
    collaborator: Optional[UserProfile] = None


class ProjectOverview(CamelSchema):
    """Project metadata plus collaborators and the caller's write access."""

    id: int
    title: str
    description: Optional[str] = None
    status: str
    share_status: str
    organization_id: Optional[int] = None
    created_by_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    collaborators: List[ProjectCollaboratorSummary] = Field(default_factory=list)
    created_by: Optional[UserProfile] = None
    user_has_write_access: bool


class ProjectTaskSummary(CamelSchema):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    order_index: int
    created_at: datetime
    last_edited_at: Optional[datetime] = None
    assigned_to_id: Optional[str] = None
    created_by_id: str


# --------------------
# Tool: project.getOverview
# --------------------


class GetProjectOverviewInput(CamelSchema):
    project_id: PositiveInt


def _profile(user: Optional[User]) -> Optional[UserProfile]:
    if user is None:
        return None
    return UserProfile(id=user.id, name=user.name, email=user.email, image=user.image)


async def get_project_overview(ctx: ToolCallContext, args: GetProjectOverviewInput) -> ProjectOverview:
    """Load a project with collaborators, enforcing project read access."""
    async with ctx.db() as session:
        project = await load_project(session, args.project_id)
        access = await ensure_can_read(
            session,
            project,
            ctx.session_user_id,
            denied_message="Access denied - You don't have permission to view this project",
        )

        stmt = (
            select(ProjectCollaborator, User)
            .outerjoin(User, ProjectCollaborator.collaborator_id == User.id)
            .where(ProjectCollaborator.project_id == project.id)
        )
        rows = (await session.execute(stmt)).all()
        creator = await session.get(User, project.created_by_id)

    return ProjectOverview(
        id=project.id,
        title=project.title,
        description=project.description,
        status=project.status,
        share_status=project.share_status,
        organization_id=project.organization_id,
        created_by_id=project.created_by_id,
        created_at=project.created_at,
        updated_at=project.updated_at,
        collaborators=[
            ProjectCollaboratorSummary(
                collaborator_id=collab.collaborator_id,
                permission=collab.permission,
                joined_at=collab.joined_at,
                collaborator=_profile(user),
            )
            for collab, user in rows
        ],
        created_by=_profile(creator),
        user_has_write_access=access.can_write,
    )


# --------------------
# Tool: project.getTasks
# --------------------


class GetProjectTasksInput(CamelSchema):
    project_id: PositiveInt


class GetProjectTasksResult(CamelSchema):
    project_id: int
    tasks: List[ProjectTaskSummary]


async def get_project_tasks(ctx: ToolCallContext, args: GetProjectTasksInput) -> GetProjectTasksResult:
    """List a project's tasks ordered by ``order_index`` then creation time."""
    async with ctx.db() as session:
        project = await load_project(session, args.project_id)
        await ensure_can_read(
            session,
            project,
            ctx.session_user_id,
            denied_message="Access denied - You don't have permission to view tasks for this project",
        )

        stmt = (
            select(Task)
            .where(Task.project_id == project.id)
            .order_by(Task.order_index, Task.created_at, Task.id)
        )
        rows = (await session.execute(stmt)).scalars().all()

    tasks = [
        ProjectTaskSummary(
            id=row.id,
            title=row.title,
            description=row.description,
            status=row.status,
            priority=row.priority,
            due_date=row.due_date,
            completed_at=row.completed_at,
            order_index=row.order_index,
            created_at=row.created_at,
            last_edited_at=row.last_edited_at,
            assigned_to_id=row.assigned_to_id,
            created_by_id=row.created_by_id,
        )
        for row in rows
    ]
    return GetProjectTasksResult(project_id=project.id, tasks=tasks)


# --------------------
# Tool: task.createBatch
# --------------------


class NewTaskInput(CamelSchema):
    title: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = None
    assigned_to_id: Optional[str] = None
    priority: TaskPriority = "medium"
    due_date: Optional[str] = Field(default=None, description="ISO-8601 date-time")


class CreateTasksBatchInput(CamelSchema):
    project_id: PositiveInt
    tasks: List[NewTaskInput] = Field(..., min_length=1, max_length=MAX_BATCH_TASKS)


class CreateTasksBatchResult(CamelSchema):
    project_id: int
    created_task_ids: List[int]


def parse_due_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 due date, raising a caller-facing error if malformed.

    Values are normalized to UTC; values without an offset (including
    date-only values) are read as UTC.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidToolInputError("Invalid dueDate provided for one of the tasks") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


async def create_tasks_batch(ctx: ToolCallContext, args: CreateTasksBatchInput) -> CreateTasksBatchResult:
    """Create tasks after the project's current last task.

    Order indices continue from ``MAX(order_index)`` (0 for an empty project)
    and increase by one per item. The rows and their activity entries are
    committed together.
    """
    user_id = ctx.session_user_id

    async with ctx.db() as session:
        project = await load_project(session, args.project_id)
        await ensure_can_create_tasks(session, project, user_id)

        due_dates = [parse_due_date(item.due_date) for item in args.tasks]

        # TODO: read the max and insert under a row lock so concurrent batches
        # on the same project cannot hand out the same order index.
        max_stmt = select(func.coalesce(func.max(Task.order_index), 0)).where(Task.project_id == project.id)
        next_order_index = int((await session.execute(max_stmt)).scalar_one()) + 1

        rows: List[Task] = []
        for item, due_date in zip(args.tasks, due_dates):
            rows.append(
                Task(
                    project_id=project.id,
                    title=item.title,
                    description=item.description or "",
                    assigned_to_id=item.assigned_to_id,
                    priority=item.priority,
                    due_date=due_date,
                    status="pending",
                    created_by_id=user_id,
                    order_index=next_order_index,
                )
            )
            next_order_index += 1

        session.add_all(rows)
        await session.flush()

        session.add_all(
            [
                TaskActivityLog(task_id=row.id, user_id=user_id, action="created", new_value="Task created")
                for row in rows
            ]
        )
        await session.commit()

        created_task_ids = [row.id for row in rows]

    logger.info(f"Created {len(created_task_ids)} tasks in project {project.id} for user {user_id}")
    return CreateTasksBatchResult(project_id=project.id, created_task_ids=created_task_ids)


# --------------------
# Tool instances
# --------------------

get_project_overview_tool = ToolDefinition(
    name="project.getOverview",
    description=(
        "Fetch a single project with collaborators and access information, "
        "enforcing the same permissions as the project detail endpoint."
    ),
    input_schema=GetProjectOverviewInput,
    output_schema=ProjectOverview,
    handler=get_project_overview,
)

get_project_tasks_tool = ToolDefinition(
    name="project.getTasks",
    description=(
        "Fetch all tasks for a project that the current user has access to, "
        "ordered by orderIndex then createdAt."
    ),
    input_schema=GetProjectTasksInput,
    output_schema=GetProjectTasksResult,
    handler=get_project_tasks,
)

create_tasks_batch_tool = ToolDefinition(
    name="task.createBatch",
    description=(
        "Create multiple tasks in a single project, reusing the same permission "
        "and ordering rules as the task creation endpoint."
    ),
    input_schema=CreateTasksBatchInput,
    output_schema=CreateTasksBatchResult,
    handler=create_tasks_batch,
)


def build_project_task_tools() -> ToolRegistry:
    """Registry holding the three project/task tools."""
    return ToolRegistry([get_project_overview_tool, get_project_tasks_tool, create_tasks_batch_tool])
