"""Tool contract and registry.

A tool is a named, permissioned domain capability (read a project, create
tasks, ...) that agents may call. Tools are deliberately unaware of which agent
calls them: they receive only a ``ToolCallContext`` holding the database
capability and the caller's identity, never the run id, the LLM or the event
logger. That keeps every tool testable on its own and lets it be exposed to
any agent without extra checks at the call site.

Contract for implementations:

- validate input through ``input_schema`` (done by ``ToolDefinition.execute``),
- perform every permission check inside the handler, mirroring the rules of
  the equivalent API endpoint,
- fail by raising a descriptive error; the registry never catches or
  rewrites it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Iterator, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from projectflow_ai.core.logging_config import get_logger

logger = get_logger(__name__)

DbClient = async_sessionmaker[AsyncSession]
"""Database capability shared by the runner, agents and tools."""


@dataclass(frozen=True)
class ToolCallContext:
    """Minimal context passed to each tool execution.

    Attributes
    ----------
    db:
        Session factory bound to the application database.
    session_user_id:
        Authenticated user id making the call. Tools enforce permissions
        with this id.
    """

    db: DbClient
    session_user_id: str


ToolHandler = Callable[[ToolCallContext, Any], Awaitable[Any]]


class ToolDefinition(BaseModel):
    """Pydantic model for tool definitions.

    Couples a stable name and description with the input/output schemas and
    the async handler that performs the work.
    """

    name: str = Field(..., description="Unique, stable identifier for the tool")
    description: str = Field(..., description="What the tool does and when to use it")
    input_schema: Type[BaseModel] = Field(..., description="Pydantic model class for input validation")
    output_schema: Optional[Type[BaseModel]] = Field(default=None, description="Pydantic model class for output")
    handler: ToolHandler = Field(..., description="Async handler executing the tool with validated input")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    async def execute(self, ctx: ToolCallContext, args: Any) -> Any:
        """Validate ``args`` and run the handler.

        Args:
            ctx: Call context (database capability + caller id).
            args: A mapping or an ``input_schema`` instance.

        Returns:
            Whatever the handler returns (normally an ``output_schema`` instance).

        Raises:
            pydantic.ValidationError: If ``args`` does not satisfy ``input_schema``.
        """
        parsed = self.input_schema.model_validate(args)
        logger.debug(f"Executing tool '{self.name}' for user {ctx.session_user_id}")
        return await self.handler(ctx, parsed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert tool definition to the LLM-facing discovery format.

        Returns:
            Name, description and JSON schema of the input.
        """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema.model_json_schema(by_alias=True),
        }


class ToolRegistry:
    """
    Mapping of tool names to tool definitions.

    An agent only ever sees the registry placed in its ``AgentContext``; use
    ``subset`` to hand an agent exactly the tools it declared.

    Notes:
        - ``register`` overwrites any existing mapping for the tool name.
        - ``get`` raises ``KeyError`` if the tool is missing.
    """

    def __init__(self, tools: Optional[Iterable[ToolDefinition]] = None) -> None:
        """Initialize the registry, optionally pre-populated with ``tools``."""
        self._tools: Dict[str, ToolDefinition] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool definition under its ``name``.

        Args:
            tool: The tool to register.
        """
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition:
        """
        Retrieve a registered tool by name.

        Raises:
            KeyError: If no tool is registered with the given name.
        """
        try:
            return self._tools[name]
        except KeyError as e:
            raise KeyError(f"unknown tool: {name}") from e

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def names(self) -> List[str]:
        """Registered tool names, in registration order."""
        return list(self._tools)

    def describe(self) -> List[Dict[str, Any]]:
        """Discovery descriptions of all registered tools."""
        return [tool.to_dict() for tool in self._tools.values()]

    def subset(self, names: Iterable[str]) -> "ToolRegistry":
        """
        Build a new registry holding only ``names``.

        Raises:
            KeyError: If any name is not registered here.
        """
        return ToolRegistry(self.get(name) for name in names)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __repr__(self) -> str:
        return f"ToolRegistry({self.names()})"
