from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from pydantic import ValidationError
from sqlalchemy import select

from projectflow_ai.agent_core.errors import AccessDeniedError, InvalidToolInputError, ProjectNotFoundError
from projectflow_ai.agent_core.tools.base import ToolCallContext
from projectflow_ai.agent_core.tools.project_tasks import (
    create_tasks_batch_tool,
    get_project_overview_tool,
    get_project_tasks_tool,
    parse_due_date,
)
from projectflow_ai.core.database.entities import Task, TaskActivityLog


def _ctx(session_factory, user_id: str) -> ToolCallContext:
    return ToolCallContext(db=session_factory, session_user_id=user_id)


@pytest_asyncio.fixture
async def people(seed):
    for uid in ("owner", "reader", "writer", "stranger", "member", "assigner"):
        await seed.user(uid)


@pytest_asyncio.fixture
async def project(seed, people):
    proj = await seed.project("owner")
    await seed.collaborator(proj.id, "reader", permission="read")
    await seed.collaborator(proj.id, "writer", permission="write")
    return proj


@pytest_asyncio.fixture
async def org_project(seed, people):
    org = await seed.organization("owner")
    await seed.member(org.id, "member", can_assign_tasks=False)
    await seed.member(org.id, "assigner", can_assign_tasks=True)
    return await seed.project("owner", title="Org project", organization_id=org.id)


async def _tasks(session_factory, project_id: int):
    async with session_factory() as s:
        stmt = select(Task).where(Task.project_id == project_id).order_by(Task.order_index)
        return list((await s.execute(stmt)).scalars().all())


# --------------------
# project.getOverview / project.getTasks
# --------------------


@pytest.mark.asyncio
async def test_overview_for_owner_includes_collaborators_and_write_access(session_factory, project) -> None:
    out = await get_project_overview_tool.execute(_ctx(session_factory, "owner"), {"projectId": project.id})

    assert out.id == project.id
    assert out.title == "Website relaunch"
    assert out.user_has_write_access is True
    assert out.created_by is not None and out.created_by.id == "owner"
    assert {c.collaborator_id: c.permission for c in out.collaborators} == {"reader": "read", "writer": "write"}
    assert all(c.collaborator is not None for c in out.collaborators)


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id,can_write", [("reader", False), ("writer", True)])
async def test_overview_write_access_follows_collaborator_permission(
    session_factory, project, user_id, can_write
) -> None:
    out = await get_project_overview_tool.execute(_ctx(session_factory, user_id), {"projectId": project.id})

    assert out.user_has_write_access is can_write


@pytest.mark.asyncio
async def test_org_member_can_read_org_project(session_factory, org_project) -> None:
    overview = await get_project_overview_tool.execute(_ctx(session_factory, "member"), {"projectId": org_project.id})
    tasks = await get_project_tasks_tool.execute(_ctx(session_factory, "member"), {"projectId": org_project.id})

    assert overview.user_has_write_access is True
    assert tasks.tasks == []


@pytest.mark.asyncio
async def test_read_tools_deny_the_same_callers(session_factory, project) -> None:
    ctx = _ctx(session_factory, "stranger")

    with pytest.raises(AccessDeniedError, match="don't have permission to view this project"):
        await get_project_overview_tool.execute(ctx, {"projectId": project.id})
    with pytest.raises(AccessDeniedError, match="don't have permission to view tasks for this project"):
        await get_project_tasks_tool.execute(ctx, {"projectId": project.id})


@pytest.mark.asyncio
async def test_read_tools_report_missing_project(session_factory, people) -> None:
    ctx = _ctx(session_factory, "owner")

    with pytest.raises(ProjectNotFoundError, match="Project not found"):
        await get_project_overview_tool.execute(ctx, {"projectId": 999})
    with pytest.raises(ProjectNotFoundError):
        await get_project_tasks_tool.execute(ctx, {"projectId": 999})


@pytest.mark.asyncio
async def test_get_tasks_orders_by_order_index(session_factory, seed, project) -> None:
    await seed.task(project.id, "owner", title="third", order_index=3)
    await seed.task(project.id, "owner", title="first", order_index=1, priority="high")
    await seed.task(
        project.id, "owner", title="second", order_index=2, due_date=datetime(2025, 1, 1, tzinfo=timezone.utc)
    )

    out = await get_project_tasks_tool.execute(_ctx(session_factory, "reader"), {"projectId": project.id})

    assert out.project_id == project.id
    assert [t.title for t in out.tasks] == ["first", "second", "third"]
    assert out.tasks[0].priority == "high"
    assert out.tasks[1].due_date is not None
    assert out.tasks[1].due_date.replace(tzinfo=None) == datetime(2025, 1, 1)


@pytest.mark.asyncio
async def test_read_tools_validate_project_id(session_factory, people) -> None:
    with pytest.raises(ValidationError):
        await get_project_overview_tool.execute(_ctx(session_factory, "owner"), {"projectId": 0})


# --------------------
# task.createBatch
# --------------------


@pytest.mark.asyncio
async def test_create_batch_appends_after_existing_max_order_index(session_factory, seed, project) -> None:
    await seed.task(project.id, "owner", title="old-1", order_index=1)
    await seed.task(project.id, "owner", title="old-5", order_index=5)

    out = await create_tasks_batch_tool.execute(
        _ctx(session_factory, "owner"),
        {"projectId": project.id, "tasks": [{"title": "a"}, {"title": "b"}, {"title": "c"}]},
    )

    assert out.project_id == project.id
    assert len(out.created_task_ids) == 3
    created = [t for t in await _tasks(session_factory, project.id) if t.id in out.created_task_ids]
    assert [(t.title, t.order_index) for t in created] == [("a", 6), ("b", 7), ("c", 8)]


@pytest.mark.asyncio
async def test_create_batch_on_empty_project_starts_at_one(session_factory, project) -> None:
    out = await create_tasks_batch_tool.execute(
        _ctx(session_factory, "owner"),
        {
            "projectId": project.id,
            "tasks": [
                {"title": "a", "priority": "high", "dueDate": "2025-05-01T09:00:00Z", "assignedToId": "writer"},
                {"title": "b", "description": "details"},
            ],
        },
    )

    tasks = await _tasks(session_factory, project.id)
    assert [t.id for t in tasks] == out.created_task_ids
    assert [t.order_index for t in tasks] == [1, 2]
    assert all(t.status == "pending" and t.created_by_id == "owner" for t in tasks)
    assert tasks[0].priority == "high"
    assert tasks[0].assigned_to_id == "writer"
    assert tasks[0].due_date is not None and tasks[0].due_date.replace(tzinfo=None) == datetime(2025, 5, 1, 9)
    assert tasks[1].priority == "medium"
    assert tasks[1].description == "details"


@pytest.mark.asyncio
async def test_create_batch_writes_one_activity_entry_per_task(session_factory, project) -> None:
    out = await create_tasks_batch_tool.execute(
        _ctx(session_factory, "writer"),
        {"projectId": project.id, "tasks": [{"title": "a"}, {"title": "b"}]},
    )

    async with session_factory() as s:
        logs = list((await s.execute(select(TaskActivityLog))).scalars().all())

    assert sorted(log.task_id for log in logs) == sorted(out.created_task_ids)
    assert all(log.action == "created" and log.new_value == "Task created" for log in logs)
    assert all(log.user_id == "writer" for log in logs)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2025-05-01", datetime(2025, 5, 1, tzinfo=timezone.utc)),
        ("2025-05-01T09:00:00", datetime(2025, 5, 1, 9, tzinfo=timezone.utc)),
        ("2025-05-01T09:00:00Z", datetime(2025, 5, 1, 9, tzinfo=timezone.utc)),
        ("2025-05-01T11:00:00+02:00", datetime(2025, 5, 1, 9, tzinfo=timezone.utc)),
    ],
)
def test_parse_due_date_returns_utc(raw: str, expected: datetime) -> None:
    parsed = parse_due_date(raw)

    assert parsed == expected
    assert parsed.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_create_batch_accepts_due_dates_without_offset(session_factory, project) -> None:
    out = await create_tasks_batch_tool.execute(
        _ctx(session_factory, "owner"),
        {
            "projectId": project.id,
            "tasks": [
                {"title": "date only", "dueDate": "2025-05-01"},
                {"title": "local time", "dueDate": "2025-05-01T09:00:00"},
            ],
        },
    )

    tasks = await _tasks(session_factory, project.id)
    assert [t.id for t in tasks] == out.created_task_ids
    assert [t.due_date.replace(tzinfo=None) for t in tasks] == [datetime(2025, 5, 1), datetime(2025, 5, 1, 9)]


@pytest.mark.asyncio
async def test_create_batch_ignores_unknown_task_fields(session_factory, project) -> None:
    out = await create_tasks_batch_tool.execute(
        _ctx(session_factory, "owner"),
        {"projectId": project.id, "source": "agent", "tasks": [{"title": "x", "status": "completed"}]},
    )

    [task] = await _tasks(session_factory, project.id)
    assert task.id == out.created_task_ids[0]
    assert task.status == "pending"


@pytest.mark.asyncio
async def test_create_batch_rejects_bad_due_date_without_inserting(session_factory, project) -> None:
    with pytest.raises(InvalidToolInputError, match="Invalid dueDate provided for one of the tasks"):
        await create_tasks_batch_tool.execute(
            _ctx(session_factory, "owner"),
            {"projectId": project.id, "tasks": [{"title": "ok"}, {"title": "bad", "dueDate": "not-a-date"}]},
        )

    assert await _tasks(session_factory, project.id) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", ["reader", "stranger"])
async def test_create_batch_requires_write_collaboration(session_factory, project, user_id) -> None:
    with pytest.raises(AccessDeniedError, match="You don't have permission to create tasks in this project"):
        await create_tasks_batch_tool.execute(
            _ctx(session_factory, user_id), {"projectId": project.id, "tasks": [{"title": "x"}]}
        )


@pytest.mark.asyncio
async def test_org_project_task_creation_needs_assign_permission(session_factory, org_project) -> None:
    with pytest.raises(AccessDeniedError, match="Only the organization owner or authorized members can create tasks"):
        await create_tasks_batch_tool.execute(
            _ctx(session_factory, "member"), {"projectId": org_project.id, "tasks": [{"title": "x"}]}
        )

    out = await create_tasks_batch_tool.execute(
        _ctx(session_factory, "assigner"), {"projectId": org_project.id, "tasks": [{"title": "x"}]}
    )
    assert len(out.created_task_ids) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("tasks", [[], [{"title": ""}], [{"title": "t"}] * 51, [{"title": "t", "priority": "asap"}]])
async def test_create_batch_input_limits(session_factory, project, tasks) -> None:
    with pytest.raises(ValidationError):
        await create_tasks_batch_tool.execute(_ctx(session_factory, "owner"), {"projectId": project.id, "tasks": tasks})
