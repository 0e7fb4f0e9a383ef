from __future__ import annotations

"""SQLAlchemy async repository implementations.

This module provides the SQL persistence implementation for the repository
interfaces defined in ``projectflow_ai.agent_core.repos.interfaces``.

Usage
-----

Typical wiring (tests or application setup):

- Create an async engine with ``projectflow_ai.core.database.create_engine``.
- Create tables with ``create_all`` (for tests/dev; production schemas are
  owned by the host application).
- Create a session factory with ``create_sessionmaker``.
- Build repository instances with ``build_sql_repos``.

Transaction model
-----------------

Each repository method opens an ``AsyncSession``, performs its operation, and
commits. Every event is therefore durable when ``append`` returns, and the
terminal update of a run is a single guarded ``UPDATE``.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from projectflow_ai.core.database.base import utc_now
from projectflow_ai.core.database.entities import AgentEventRow, AgentRunRow, User

from ..runtime.serialization import safe_json_dumps
from ..schemas.domain import AgentEvent, AgentRun, AgentRunStatus
from .interfaces import EventRepository, RunRepository, UserRepository


def _to_run(row: AgentRunRow) -> AgentRun:
    return AgentRun(
        id=row.id,
        agent_id=row.agent_id,
        user_id=row.user_id,
        status=AgentRunStatus(row.status),
        summary=row.summary,
        error=row.error,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


@dataclass(frozen=True)
class SqlUserRepository(UserRepository):
    """SQL implementation of ``UserRepository``."""

    session_factory: async_sessionmaker[AsyncSession]

    async def get(self, user_id: str) -> Optional[User]:
        async with self.session_factory() as s:
            return await s.get(User, user_id)


@dataclass(frozen=True)
class SqlRunRepository(RunRepository):
    """SQL implementation of ``RunRepository``."""

    session_factory: async_sessionmaker[AsyncSession]

    async def create(self, run: AgentRun) -> None:
        """
        Persist a new run record.

        Args:
            run: The run domain object to insert.
        """
        async with self.session_factory() as s:
            s.add(
                AgentRunRow(
                    id=run.id,
                    agent_id=run.agent_id,
                    user_id=run.user_id,
                    status=str(getattr(run.status, "value", run.status)),
                    summary=run.summary,
                    error=run.error,
                    created_at=run.created_at,
                    updated_at=run.updated_at,
                )
            )
            await s.commit()

    async def finish(
        self,
        run_id: str,
        *,
        status: AgentRunStatus,
        summary: Optional[str] = None,
        error: Optional[str] = None,
    ) -> bool:
        """
        Terminate a run that is still ``running``.

        The ``WHERE status = 'running'`` guard makes a second terminal update
        a no-op.

        Returns:
            True if exactly one running row was updated.
        """
        stmt = (
            update(AgentRunRow)
            .where(AgentRunRow.id == run_id, AgentRunRow.status == AgentRunStatus.running.value)
            .values(
                status=str(getattr(status, "value", status)),
                summary=summary,
                error=error,
                updated_at=utc_now(),
            )
        )
        async with self.session_factory() as s:
            result = await s.execute(stmt)
            await s.commit()
            return result.rowcount == 1

    async def get(self, run_id: str) -> Optional[AgentRun]:
        """
        Retrieve a run by its ID.

        Returns:
            The AgentRun domain object if found, otherwise None.
        """
        async with self.session_factory() as s:
            row = await s.get(AgentRunRow, run_id)
            if row is None:
                return None
            return _to_run(row)

    async def list_for_user(self, user_id: str, limit: int = 100, offset: int = 0) -> list[AgentRun]:
        async with self.session_factory() as s:
            stmt = (
                select(AgentRunRow)
                .where(AgentRunRow.user_id == user_id)
                .order_by(AgentRunRow.created_at.desc())
                .offset(offset)
                .limit(limit)
            )
            rows = (await s.execute(stmt)).scalars().all()
            return [_to_run(row) for row in rows]


@dataclass(frozen=True)
class SqlEventRepository(EventRepository):
    """SQL implementation of ``EventRepository`` (append-only)."""

    session_factory: async_sessionmaker[AsyncSession]

    async def append(self, event: AgentEvent) -> None:
        """
        Append a new event to the store.

        The payload is stored as JSON text; values JSON cannot represent are
        downgraded rather than rejected.

        Args:
            event: The event domain object.
        """
        async with self.session_factory() as s:
            s.add(
                AgentEventRow(
                    run_id=event.run_id,
                    type=event.type,
                    payload=safe_json_dumps(event.payload),
                    created_at=event.created_at,
                )
            )
            await s.commit()

    async def list(self, run_id: str, limit: int = 1000) -> list[AgentEvent]:
        """
        List events for a run ordered by creation time, then insertion order.
        """
        async with self.session_factory() as s:
            stmt = (
                select(AgentEventRow)
                .where(AgentEventRow.run_id == run_id)
                .order_by(AgentEventRow.created_at, AgentEventRow.id)
                .limit(limit)
            )
            rows = (await s.execute(stmt)).scalars().all()
            return [
                AgentEvent(
                    id=row.id,
                    run_id=row.run_id,
                    type=row.type,
                    payload=row.get_payload_dict(),
                    created_at=row.created_at,
                )
                for row in rows
            ]


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    users: SqlUserRepository
    runs: SqlRunRepository
    events: SqlEventRepository


def build_sql_repos(*, session_factory: async_sessionmaker[AsyncSession]) -> SqlRepoBundle:
    """Build a ``SqlRepoBundle`` from a session factory."""
    return SqlRepoBundle(
        users=SqlUserRepository(session_factory=session_factory),
        runs=SqlRunRepository(session_factory=session_factory),
        events=SqlEventRepository(session_factory=session_factory),
    )
