from __future__ import annotations

"""Convenience factories for wiring the agent core.

This module contains small helpers to build the default tool registry, the
default LLM client from settings, and an ``AgentRunner`` backed by the SQL
repositories.

The intent is to keep application wiring and tests concise, while still
allowing deployments to provide their own tools, LLM client or repositories
through ``AgentRunnerDeps``.
"""

from typing import Optional

from projectflow_ai.core.config import LLMConfig, settings

from .llm.base import LLMClient
from .llm.pydantic_ai_client import PydanticAILLMClient
from .repos.sql import build_sql_repos
from .runtime.models import AgentRunnerDeps
from .runtime.runner import AgentRunner
from .tools.base import DbClient, ToolRegistry
from .tools.project_tasks import build_project_task_tools


def build_default_tool_registry() -> ToolRegistry:
    """Build the default ``ToolRegistry``.

    The default registry holds the project/task tools shipped with the
    repository (``project.getOverview``, ``project.getTasks``,
    ``task.createBatch``).
    """
    return build_project_task_tools()


def build_llm_client(config: Optional[LLMConfig] = None) -> LLMClient:
    """Construct the default ``LLMClient`` from ``settings.llm`` (or ``config``)."""
    cfg = config or settings.llm
    return PydanticAILLMClient(
        cfg.model,
        temperature=cfg.temperature,
        max_tokens=cfg.max_tokens,
        structured_retries=cfg.structured_retries,
    )


def build_agent_runner(
    session_factory: DbClient,
    llm: LLMClient,
    tools: Optional[ToolRegistry] = None,
) -> AgentRunner:
    """Construct an ``AgentRunner`` persisting through the SQL repositories."""
    repos = build_sql_repos(session_factory=session_factory)
    deps = AgentRunnerDeps(
        db=session_factory,
        llm=llm,
        tools=tools if tools is not None else build_default_tool_registry(),
        users=repos.users,
        runs=repos.runs,
        events=repos.events,
    )
    return AgentRunner(deps)
