"""LLM capability for agents.

``LLMClient`` is the protocol agents call; ``PydanticAILLMClient`` is the
default implementation.
"""

from .base import (
    LLMClient,
    LLMMessage,
    LLMRole,
    LLMStructuredRequest,
    LLMStructuredResponse,
    LLMTextRequest,
    LLMTextResponse,
    extract_json_text,
    parse_structured_output,
)
from .pydantic_ai_client import PydanticAILLMClient

__all__ = [
    "LLMClient",
    "LLMMessage",
    "LLMRole",
    "LLMStructuredRequest",
    "LLMStructuredResponse",
    "LLMTextRequest",
    "LLMTextResponse",
    "extract_json_text",
    "parse_structured_output",
    "PydanticAILLMClient",
]
