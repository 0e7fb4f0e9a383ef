from __future__ import annotations

"""Runner dependency bundle and result type.

The runner is dependency-injected:

- ``AgentRunnerDeps`` collects the capabilities handed to agents (database,
  LLM, tools) and the repositories the runner persists through.
- ``RunAgentResult`` is what a caller gets back from a successful run.
"""

from dataclasses import dataclass
from typing import Any

from ..llm.base import LLMClient
from ..repos.interfaces import EventRepository, RunRepository, UserRepository
from ..tools.base import DbClient, ToolRegistry


@dataclass(frozen=True)
class AgentRunnerDeps:
    """Dependency bundle for ``AgentRunner``.

    Typically constructed by ``projectflow_ai.agent_core.factory`` and shared
    across runs. Holds:

    - ``db``/``llm``/``tools``: capabilities injected into each agent context
      (agents only see the tools they declare),
    - ``users``/``runs``/``events``: persistence used by the runner itself.
    """

    db: DbClient
    llm: LLMClient
    tools: ToolRegistry

    users: UserRepository
    runs: RunRepository
    events: EventRepository


@dataclass(frozen=True)
class RunAgentResult:
    """Outcome of a successful run: its id and the agent's result."""

    run_id: str
    result: Any
