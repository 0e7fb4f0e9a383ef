"""LLM capability contract.

Agents talk to language models through ``LLMClient``, a deliberately narrow,
two-method surface:

- ``generate_text``: free-form completion returning raw text.
- ``generate_structured``: completion whose reply is parsed as JSON and
  validated against a declared pydantic model before being returned together
  with the raw text.

Concrete providers live beside this module and are injected into the agent
context, so agent code never depends on a particular provider and tests can
substitute a fake. ``parse_structured_output`` is the shared parse/validate
step every implementation (and every fake) should use.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Generic, List, Literal, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import LLMOutputParseError, LLMOutputValidationError

T = TypeVar("T", bound=BaseModel)

LLMRole = Literal["system", "user", "assistant"]

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


@dataclass(frozen=True)
class LLMMessage:
    role: LLMRole
    content: str


@dataclass(frozen=True)
class LLMTextRequest:
    """Request for free-form generation.

    Attributes
    ----------
    messages:
        Full ordered conversation, including system and user messages.
    temperature:
        Sampling temperature; ``None`` lets the implementation decide.
    model:
        Optional model hint; implementations may ignore it.
    max_tokens:
        Approximate response budget, if supported.
    """

    messages: List[LLMMessage]
    temperature: Optional[float] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class LLMStructuredRequest(LLMTextRequest, Generic[T]):
    """Request for structured generation validated against ``output_schema``."""

    output_schema: Optional[Type[T]] = None


@dataclass(frozen=True)
class LLMTextResponse:
    text: str


@dataclass(frozen=True)
class LLMStructuredResponse(Generic[T]):
    """Raw model text and the schema-validated object parsed from it."""

    raw_text: str
    parsed: T
    metadata: dict[str, Any] = field(default_factory=dict)


class LLMClient(Protocol):
    """Protocol for LLM capability implementations."""

    async def generate_text(self, request: LLMTextRequest) -> LLMTextResponse: ...

    async def generate_structured(self, request: LLMStructuredRequest[T]) -> LLMStructuredResponse[T]: ...


def extract_json_text(text: str) -> str:
    """Pull the JSON object out of a model reply.

    Prefers a fenced ```json block; otherwise takes the span between the
    first ``{`` and the last ``}``; otherwise returns the stripped text.
    """
    fenced = _FENCED_JSON.search(text)
    if fenced and fenced.group(1).strip():
        return fenced.group(1).strip()

    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        return text[first : last + 1].strip()
    return text.strip()


def parse_structured_output(raw_text: str, schema: Type[T]) -> T:
    """Parse ``raw_text`` as JSON and validate it against ``schema``.

    Raises:
        LLMOutputParseError: If no JSON object can be decoded.
        LLMOutputValidationError: If the JSON does not satisfy ``schema``.
    """
    try:
        data = json.loads(extract_json_text(raw_text))
    except json.JSONDecodeError as e:
        raise LLMOutputParseError(
            f"LLM returned non-JSON output ({e.msg}). Raw: {raw_text[:500]}",
            raw_text=raw_text,
        ) from e

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise LLMOutputValidationError(
            f"LLM output failed validation against {schema.__name__}: {e}",
            raw_text=raw_text,
            schema_name=schema.__name__,
        ) from e
