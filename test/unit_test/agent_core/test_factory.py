from __future__ import annotations

from typing import List

from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from projectflow_ai.agent_core.factory import (
    build_agent_runner,
    build_default_tool_registry,
    build_llm_client,
)
from projectflow_ai.agent_core.llm import LLMMessage, LLMTextRequest, PydanticAILLMClient
from projectflow_ai.agent_core.repos.sql import SqlEventRepository, SqlRunRepository, SqlUserRepository
from projectflow_ai.agent_core.runtime import AgentRunner
from projectflow_ai.agent_core.tools.base import ToolRegistry
from projectflow_ai.core.config import LLMConfig


def test_default_tool_registry_holds_project_tools() -> None:
    registry = build_default_tool_registry()

    assert sorted(registry.names()) == ["project.getOverview", "project.getTasks", "task.createBatch"]


def test_default_tool_registry_is_fresh_each_call() -> None:
    assert build_default_tool_registry() is not build_default_tool_registry()


async def test_build_llm_client_uses_config() -> None:
    seen = {}

    def reply(messages: List[ModelMessage], info: AgentInfo) -> ModelResponse:
        seen["settings"] = dict(info.model_settings or {})
        return ModelResponse(parts=[TextPart(content="hello")])

    config = LLMConfig(model="openai:gpt-4o-mini", temperature=0.7, max_tokens=64, structured_retries=2)
    client = build_llm_client(config)
    assert isinstance(client, PydanticAILLMClient)

    # Model override keeps the call offline while exercising the configured defaults.
    client._model = FunctionModel(reply)
    response = await client.generate_text(LLMTextRequest(messages=[LLMMessage(role="user", content="hi")]))

    assert response.text == "hello"
    assert seen["settings"]["temperature"] == 0.7
    assert seen["settings"]["max_tokens"] == 64


def test_build_agent_runner_wires_sql_repositories(session_factory) -> None:
    llm = PydanticAILLMClient(FunctionModel(lambda messages, info: ModelResponse(parts=[TextPart(content="{}")])))

    runner = build_agent_runner(session_factory, llm)

    assert isinstance(runner, AgentRunner)
    deps = runner.deps
    assert deps.db is session_factory
    assert deps.llm is llm
    assert isinstance(deps.tools, ToolRegistry) and len(deps.tools) == 3
    assert isinstance(deps.users, SqlUserRepository)
    assert isinstance(deps.runs, SqlRunRepository)
    assert isinstance(deps.events, SqlEventRepository)


def test_build_agent_runner_accepts_custom_tools(session_factory) -> None:
    tools = ToolRegistry()
    llm = PydanticAILLMClient("test")

    runner = build_agent_runner(session_factory, llm, tools=tools)

    assert runner.deps.tools is tools
