"""Error types for the agent core.

Defines a small hierarchy of exceptions raised by the runner, tools and LLM
clients. Every error carries a caller-facing message; the runner stores that
message on the failed run unchanged.
"""

from __future__ import annotations

from typing import Optional


class AgentCoreError(Exception):
    """Base error for all agent core exceptions."""


class UserNotFoundError(AgentCoreError, LookupError):
    """Raised when the calling user id does not resolve to a user record."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class ProjectNotFoundError(AgentCoreError, LookupError):
    """Raised by tools when the referenced project does not exist."""

    def __init__(self, project_id: int) -> None:
        super().__init__("Project not found")
        self.project_id = project_id


class AccessDeniedError(AgentCoreError, PermissionError):
    """Raised by tools when the caller lacks permission for the operation."""


class InvalidToolInputError(AgentCoreError, ValueError):
    """Raised by tools for input problems detected past schema validation."""


class LLMError(AgentCoreError):
    """Base error for LLM client failures."""


class LLMOutputParseError(LLMError):
    """Raised when structured generation returns text that is not JSON."""

    def __init__(self, message: str, *, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class LLMOutputValidationError(LLMError):
    """Raised when structured output does not satisfy the declared schema."""

    def __init__(self, message: str, *, raw_text: str, schema_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text
        self.schema_name = schema_name
