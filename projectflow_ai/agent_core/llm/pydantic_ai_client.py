"""LLM client backed by Pydantic AI.

``PydanticAILLMClient`` implements ``LLMClient`` on top of a Pydantic AI
``Agent`` with plain-text output. Structured generation asks the model for
text, then runs it through ``parse_structured_output`` so every provider (and
every test double) goes through the same JSON extraction and validation.
When the reply does not parse, the client can re-ask the model a bounded
number of times, feeding the rejected reply and the error back as a repair
prompt.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence, Union

from pydantic_ai import Agent, ModelSettings
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models import Model

from projectflow_ai.core.logging_config import get_logger

from ..errors import LLMError, LLMOutputParseError, LLMOutputValidationError
from .base import (
    LLMMessage,
    LLMStructuredRequest,
    LLMStructuredResponse,
    LLMTextRequest,
    LLMTextResponse,
    T,
    parse_structured_output,
)

logger = get_logger(__name__)

STRUCTURED_OUTPUT_INSTRUCTION = (
    "Respond with a single JSON object only, without prose or markdown. "
    "The object must match this JSON schema:\n{schema}"
)

REPAIR_PROMPT = (
    "Your previous reply could not be used: {error}\n"
    "Reply again with a single JSON object that satisfies the requested schema and nothing else."
)


class PydanticAILLMClient:
    """``LLMClient`` implementation using a Pydantic AI model.

    Args:
        model: Pydantic AI model instance or ``"provider:model"`` string.
        temperature: Default sampling temperature when a request sets none.
        max_tokens: Default response budget when a request sets none.
        structured_retries: Extra attempts made when structured output fails
            to parse or validate.
    """

    def __init__(
        self,
        model: Union[Model, str],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        structured_retries: int = 1,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._structured_retries = max(0, structured_retries)

    def _model_settings(self, request: LLMTextRequest) -> ModelSettings:
        settings: ModelSettings = {}
        temperature = request.temperature if request.temperature is not None else self._temperature
        if temperature is not None:
            settings["temperature"] = temperature
        max_tokens = request.max_tokens if request.max_tokens is not None else self._max_tokens
        if max_tokens is not None:
            settings["max_tokens"] = max_tokens
        return settings

    @staticmethod
    def _split_messages(messages: Sequence[LLMMessage]) -> tuple[str, List[ModelMessage], str]:
        """Turn the flat conversation into (system prompt, history, final user prompt)."""
        system_prompt = "\n\n".join(m.content for m in messages if m.role == "system")
        conversation = [m for m in messages if m.role != "system"]
        if not conversation or conversation[-1].role != "user":
            raise LLMError("LLM request must end with a user message")

        history: List[ModelMessage] = []
        for message in conversation[:-1]:
            if message.role == "user":
                history.append(ModelRequest(parts=[UserPromptPart(content=message.content)]))
            else:
                history.append(ModelResponse(parts=[TextPart(content=message.content)]))

        # Pydantic AI only injects the agent's system prompt into an empty history.
        if history and system_prompt:
            first = history[0]
            if isinstance(first, ModelRequest):
                history[0] = ModelRequest(parts=[SystemPromptPart(content=system_prompt), *first.parts])
            else:
                history.insert(0, ModelRequest(parts=[SystemPromptPart(content=system_prompt)]))

        return system_prompt, history, conversation[-1].content

    async def _complete(self, request: LLMTextRequest, messages: Sequence[LLMMessage]) -> str:
        system_prompt, history, prompt = self._split_messages(messages)
        agent: Agent[None, str] = Agent(
            self._model,
            output_type=str,
            system_prompt=system_prompt if system_prompt and not history else (),
        )

        run_kwargs: dict[str, Any] = {"model_settings": self._model_settings(request)}
        if history:
            run_kwargs["message_history"] = history
        if request.model:
            run_kwargs["model"] = request.model

        logger.debug(f"Sending LLM request with {len(messages)} messages (history={len(history)})")
        result = await agent.run(prompt, **run_kwargs)
        return result.output

    async def generate_text(self, request: LLMTextRequest) -> LLMTextResponse:
        text = await self._complete(request, request.messages)
        return LLMTextResponse(text=text)

    async def generate_structured(self, request: LLMStructuredRequest[T]) -> LLMStructuredResponse[T]:
        """Generate text and validate it against ``request.output_schema``.

        Raises:
            LLMOutputParseError: If the final attempt is not JSON.
            LLMOutputValidationError: If the final attempt does not match the schema.
        """
        if request.output_schema is None:
            raise LLMError("Structured LLM request requires an output_schema")

        schema_json = json.dumps(request.output_schema.model_json_schema(by_alias=True))
        messages: List[LLMMessage] = [
            LLMMessage(role="system", content=STRUCTURED_OUTPUT_INSTRUCTION.format(schema=schema_json)),
            *request.messages,
        ]
        attempts = self._structured_retries + 1
        for attempt in range(1, attempts + 1):
            raw_text = await self._complete(request, messages)
            try:
                parsed = parse_structured_output(raw_text, request.output_schema)
            except (LLMOutputParseError, LLMOutputValidationError) as e:
                if attempt == attempts:
                    logger.warning(f"Structured output rejected after {attempts} attempt(s): {e}")
                    raise
                logger.info(f"Structured output attempt {attempt}/{attempts} rejected, asking model to repair it")
                messages = [
                    *messages,
                    LLMMessage(role="assistant", content=raw_text),
                    LLMMessage(role="user", content=REPAIR_PROMPT.format(error=e)),
                ]
                continue
            return LLMStructuredResponse(raw_text=raw_text, parsed=parsed, metadata={"attempts": attempt})

        # Unreachable: the loop either returns or raises on its last attempt.
        raise LLMError("Structured generation exhausted without a result")
