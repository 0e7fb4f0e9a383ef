from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import AsyncIterator, Iterable, Optional

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv
from pydantic_ai import models
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from projectflow_ai.core.database import create_all, create_engine, create_sessionmaker
from projectflow_ai.core.database.entities import (
    Organization,
    OrganizationMember,
    Project,
    ProjectCollaborator,
    Task,
    User,
)

# Load dotenv files early so settings-driven tests see the test environment
TEST_ROOT = Path(__file__).resolve().parent
load_dotenv(TEST_ROOT / ".env", override=False)
load_dotenv(TEST_ROOT / ".env.example", override=False)

# Only FunctionModel/TestModel may answer LLM calls in tests
models.ALLOW_MODEL_REQUESTS = False


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


# --------------------
# SQLite database
# --------------------


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    eng = create_engine("sqlite+aiosqlite:///:memory:")
    await create_all(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(engine)


class Seeder:
    """Insert application rows the agent core reads."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sf = session_factory
        self._org_counter = 0

    async def _add(self, row):
        async with self._sf() as s:
            s.add(row)
            await s.commit()
            await s.refresh(row)
            return row

    async def user(self, user_id: str, *, name: Optional[str] = None) -> User:
        return await self._add(User(id=user_id, name=name or user_id.title(), email=f"{user_id}@example.com"))

    async def organization(self, owner_id: str, *, name: str = "Acme") -> Organization:
        self._org_counter += 1
        return await self._add(
            Organization(name=name, access_code=f"CODE{self._org_counter:06d}", created_by_id=owner_id)
        )

    async def member(
        self,
        organization_id: int,
        user_id: str,
        *,
        role: str = "worker",
        can_assign_tasks: bool = False,
    ) -> OrganizationMember:
        return await self._add(
            OrganizationMember(
                organization_id=organization_id,
                user_id=user_id,
                role=role,
                can_assign_tasks=can_assign_tasks,
            )
        )

    async def project(
        self,
        owner_id: str,
        *,
        title: str = "Website relaunch",
        description: Optional[str] = "Relaunch the marketing site",
        organization_id: Optional[int] = None,
    ) -> Project:
        return await self._add(
            Project(title=title, description=description, created_by_id=owner_id, organization_id=organization_id)
        )

    async def collaborator(self, project_id: int, user_id: str, *, permission: str = "read") -> ProjectCollaborator:
        return await self._add(
            ProjectCollaborator(project_id=project_id, collaborator_id=user_id, permission=permission)
        )

    async def task(
        self,
        project_id: int,
        created_by_id: str,
        *,
        title: str,
        order_index: int,
        status: str = "pending",
        priority: str = "medium",
        due_date: Optional[datetime] = None,
    ) -> Task:
        return await self._add(
            Task(
                project_id=project_id,
                created_by_id=created_by_id,
                title=title,
                order_index=order_index,
                status=status,
                priority=priority,
                due_date=due_date,
            )
        )


@pytest.fixture
def seed(session_factory: async_sessionmaker[AsyncSession]) -> Seeder:
    return Seeder(session_factory)
