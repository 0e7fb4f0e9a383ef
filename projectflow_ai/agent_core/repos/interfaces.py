from __future__ import annotations

"""Repository interface contracts.

The runner depends on these Protocols instead of concrete persistence
implementations.

Contract guidelines
-------------------

- All methods are async.
- Implementations must not leak SQLAlchemy sessions or transactions to the
  runner; each method is its own unit of work.
- A run is terminated at most once: ``finish`` on a run that is no longer
  ``running`` (or does not exist) changes nothing and returns ``False``.
- The event repository is append-only.
"""

from typing import Optional, Protocol

from projectflow_ai.core.database.entities import User

from ..schemas.domain import AgentEvent, AgentRun, AgentRunStatus


class UserRepository(Protocol):
    """Resolve authenticated user ids to user records."""

    async def get(self, user_id: str) -> Optional[User]:
        """
        Retrieve a user by id.

        Args:
            user_id: The authenticated user's id.

        Returns:
            The User record if found, else None.
        """
        ...


class RunRepository(Protocol):
    """Persist and query the lifecycle of an agent run."""

    async def create(self, run: AgentRun) -> None:
        """
        Create a new run record.

        Args:
            run: The initial run state to persist (status ``running``).
        """
        ...

    async def finish(
        self,
        run_id: str,
        *,
        status: AgentRunStatus,
        summary: Optional[str] = None,
        error: Optional[str] = None,
    ) -> bool:
        """
        Move a running run to its terminal status.

        Args:
            run_id: The ID of the run to terminate.
            status: ``succeeded`` or ``failed``.
            summary: Result summary stored on success.
            error: Error message stored on failure.

        Returns:
            True if the run was running and is now terminal, False otherwise.
        """
        ...

    async def get(self, run_id: str) -> Optional[AgentRun]:
        """
        Retrieve a run by its ID.

        Args:
            run_id: The run identifier.

        Returns:
            The AgentRun object if found, else None.
        """
        ...

    async def list_for_user(self, user_id: str, limit: int = 100, offset: int = 0) -> list[AgentRun]:
        """
        List a user's runs, newest first.

        Args:
            user_id: The user whose runs to list.
            limit: Max number of records to return.
            offset: Pagination offset.
        """
        ...


class EventRepository(Protocol):
    """Append-only store for run events."""

    async def append(self, event: AgentEvent) -> None:
        """
        Append a new event to the run's event stream.

        Args:
            event: The event to persist.
        """
        ...

    async def list(self, run_id: str, limit: int = 1000) -> list[AgentEvent]:
        """
        List events for a specific run in insertion order.

        Args:
            run_id: The run identifier.
            limit: Max number of events to return.
        """
        ...
