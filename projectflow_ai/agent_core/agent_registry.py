from __future__ import annotations

from typing import Dict, List

from .agents.base import AgentDefinition
from .agents.project_planning import project_planning_agent


class AgentRegistry:
    """
    Registry of agent definitions keyed by agent id.

    Callers look an agent up by the id they were given (e.g. from an API
    route) and hand the definition to ``AgentRunner.run``.
    """
    def __init__(self) -> None:
        """Initialize an empty agent registry."""
        self._agents: Dict[str, AgentDefinition] = {}

    def register(self, agent: AgentDefinition) -> None:
        """
        Register an agent under its ``id``, replacing any previous entry.

        Args:
            agent: The agent definition to register.
        """
        self._agents[agent.id] = agent

    def get(self, agent_id: str) -> AgentDefinition:
        """
        Retrieve the agent registered under ``agent_id``.

        Raises:
            KeyError: If no agent is registered with that id.
        """
        try:
            return self._agents[str(agent_id)]
        except KeyError as e:
            raise KeyError(f"unknown agent: {agent_id}") from e

    def has(self, agent_id: str) -> bool:
        """Check if an agent is registered."""
        return str(agent_id) in self._agents

    def ids(self) -> List[str]:
        return list(self._agents)


agent_registry = AgentRegistry()
agent_registry.register(project_planning_agent)
