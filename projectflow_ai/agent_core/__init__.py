"""Agent execution core.

This package contains the runtime that drives an LLM through a bounded set of
permissioned tools and records an auditable trace of every run.

Design overview
---------------

- Agents (``agent_core.agents``) are declarative: an id, an input schema and
  an async ``run(ctx, input)``. They receive every capability explicitly in an
  ``AgentContext``: database, caller, tools, LLM client and an event logger.
- Tools (``agent_core.tools``) are named, permissioned domain operations.
  They validate their input, enforce the same access rules as the API and
  never know which agent calls them.
- The LLM contract (``agent_core.llm``) offers free-form and structured
  generation; structured replies are always validated against a pydantic
  model before an agent sees them.
- ``agent_core.runtime.AgentRunner`` owns the run lifecycle: one run row,
  an append-only event timeline, and exactly one terminal outcome.

Typical usage
-------------

1. Build a runner with ``agent_core.factory.build_agent_runner``.
2. Look the agent up in ``agent_registry``.
3. ``await runner.run(agent=..., session_user_id=..., input_data=...)``.
"""

from .agent_registry import AgentRegistry, agent_registry
from .agents import AgentContext, AgentDefinition, project_planning_agent
from .runtime import AgentRunner, AgentRunnerDeps, RunAgentResult
from .schemas.domain import AgentEvent, AgentEventType, AgentRun, AgentRunStatus
from .tools import ToolCallContext, ToolDefinition, ToolRegistry

__all__ = [
    "AgentRun",
    "AgentRunStatus",
    "AgentEvent",
    "AgentEventType",
    "AgentContext",
    "AgentDefinition",
    "AgentRegistry",
    "agent_registry",
    "project_planning_agent",
    "AgentRunner",
    "AgentRunnerDeps",
    "RunAgentResult",
    "ToolCallContext",
    "ToolDefinition",
    "ToolRegistry",
]
