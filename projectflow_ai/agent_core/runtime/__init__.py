"""Agent runtime: the run lifecycle and event payload serialization."""

from .models import AgentRunnerDeps, RunAgentResult
from .runner import AgentRunner
from .serialization import safe_json_dumps, to_json_safe

__all__ = [
    "AgentRunner",
    "AgentRunnerDeps",
    "RunAgentResult",
    "safe_json_dumps",
    "to_json_safe",
]
