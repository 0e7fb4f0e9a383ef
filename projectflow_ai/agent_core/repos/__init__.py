"""Repository interfaces and SQL implementations for agent persistence.

The repository layer is the persistence boundary for the agent runner.

Responsibilities
----------------

- Provide a small set of async repository interfaces (Protocols) that the
  runner depends on.
- Persist durable, auditable records of an agent run:

  - run metadata and terminal outcome,
  - event stream (append-only).

- Resolve the calling user.

The runner is written against the interfaces, so it runs the same against the
SQL implementation in ``repos.sql`` and against in-memory fakes in unit tests.
"""

from .interfaces import EventRepository, RunRepository, UserRepository
from .sql import (
    SqlEventRepository,
    SqlRepoBundle,
    SqlRunRepository,
    SqlUserRepository,
    build_sql_repos,
)

__all__ = [
    "UserRepository",
    "RunRepository",
    "EventRepository",
    "SqlUserRepository",
    "SqlRunRepository",
    "SqlEventRepository",
    "SqlRepoBundle",
    "build_sql_repos",
]
