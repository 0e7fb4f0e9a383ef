"""Agent contract and per-run execution context.

An agent is a declarative unit: a stable id, an input schema and an async
``run`` function. Everything an agent may touch during a run is handed to it
in an ``AgentContext`` built by the runner:

- ``db``: database capability (session factory),
- ``user``: the authenticated caller's ``User`` record,
- ``tools``: the subset of tools the agent declared,
- ``llm``: the LLM client,
- ``run_id``: id of the run being executed,
- ``log``: async callable appending an event to the run's timeline.

Agents read no module-level state; swapping any of these in a test swaps the
agent's whole environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel

from projectflow_ai.core.database.entities import User

from ..llm.base import LLMClient
from ..tools.base import DbClient, ToolCallContext, ToolRegistry

AgentEventPayload = Dict[str, Any]
"""Event dict logged by agents; must contain a ``type`` key."""

EventLogger = Callable[[AgentEventPayload], Awaitable[None]]


@dataclass(frozen=True)
class AgentContext:
    """Capabilities available to an agent for one run."""

    db: DbClient
    user: User
    tools: ToolRegistry
    llm: LLMClient
    run_id: str
    log: EventLogger

    def tool_context(self) -> ToolCallContext:
        """Tool call context carrying the run's caller identity."""
        return ToolCallContext(db=self.db, session_user_id=self.user.id)

    async def call_tool(self, name: str, args: Any) -> Any:
        """Execute a tool injected into this context as the run's caller.

        Raises:
            KeyError: If ``name`` is not among the agent's tools.
        """
        return await self.tools.get(name).execute(self.tool_context(), args)


AgentRunFn = Callable[[AgentContext, Any], Awaitable[Any]]


@dataclass(frozen=True)
class AgentDefinition:
    """Declarative agent registered with the runner.

    Attributes
    ----------
    id:
        Stable identifier persisted on each run (e.g. ``project-planning``).
    name / description:
        Human-readable metadata.
    input_schema:
        Pydantic model class the runner validates raw input against.
    run:
        Async function receiving the context and the validated input. Its
        result may expose a ``summary`` that the runner stores on the run.
    tool_names:
        Tools injected into the context; ``None`` exposes every runner tool.
    """

    id: str
    name: str
    description: str
    input_schema: Type[BaseModel]
    run: AgentRunFn
    tool_names: Optional[Tuple[str, ...]] = None
