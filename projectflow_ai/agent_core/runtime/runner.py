from __future__ import annotations

"""Agent run lifecycle.

``AgentRunner`` executes one agent invocation end to end and guarantees a
single terminal outcome per run.

Lifecycle
---------

1. Resolve the calling user. An unknown user fails fast with
   ``UserNotFoundError``; no run is recorded.
2. Persist the run with status ``running``.
3. Build the ``AgentContext`` (tools narrowed to what the agent declares, a
   ``log`` function bound to the run) and append ``agent-run:start``.
4. Validate the raw input against the agent's input schema.
5. Await the agent.
6. On success, store ``succeeded`` with the result's summary and append
   ``agent-run:succeeded``.
7. On any exception, store ``failed`` with the error message, append
   ``agent-run:failed`` and re-raise the exception unchanged.

Only validation and the agent are guarded. Terminal bookkeeping runs after
the agent: an error storing ``succeeded`` reaches the caller, a failure to
append a terminal event after its status is stored is logged, and nothing
raised while recording a failure replaces the agent's error.

Events are appended in the order they are logged; nothing is buffered.
"""

from collections.abc import Mapping
from typing import Any, Optional

from projectflow_ai.core.logging_config import get_logger

from ..agents.base import AgentContext, AgentDefinition, AgentEventPayload, EventLogger
from ..errors import UserNotFoundError
from ..schemas.domain import AgentEvent, AgentEventType, AgentRun, AgentRunStatus
from .models import AgentRunnerDeps, RunAgentResult
from .serialization import to_json_safe

logger = get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error"


def _result_summary(result: Any) -> Optional[str]:
    """Return the ``summary`` a result exposes as attribute or mapping key."""
    summary = result.get("summary") if isinstance(result, Mapping) else getattr(result, "summary", None)
    return summary if isinstance(summary, str) else None


def _error_message(err: BaseException) -> str:
    return str(err) or UNKNOWN_ERROR_MESSAGE


class AgentRunner:
    """Execute agents with run persistence and an event timeline.

    The runner owns no agent logic: it wires capabilities into the context,
    records the lifecycle and reports failures unchanged to the caller.
    """

    def __init__(self, deps: AgentRunnerDeps) -> None:
        """
        Initialize the AgentRunner.

        Args:
            deps: Capabilities for agents and repositories for persistence.
        """
        self._deps = deps

    @property
    def deps(self) -> AgentRunnerDeps:
        return self._deps

    def _event_logger(self, run_id: str) -> EventLogger:
        events = self._deps.events

        async def log(event: AgentEventPayload) -> None:
            payload = to_json_safe(dict(event))
            await events.append(AgentEvent(run_id=run_id, type=str(payload.get("type", "")), payload=payload))

        return log

    async def run(self, *, agent: AgentDefinition, session_user_id: str, input_data: Any) -> RunAgentResult:
        """Run ``agent`` for ``session_user_id`` with raw ``input_data``.

        Returns:
            The run id and the agent's result.

        Raises:
            UserNotFoundError: If the caller does not resolve to a user.
            Exception: Whatever the input validation or the agent raised, after
                the run has been marked ``failed``.
        """
        user = await self._deps.users.get(session_user_id)
        if user is None:
            raise UserNotFoundError(session_user_id)

        run = AgentRun(agent_id=agent.id, user_id=user.id)
        await self._deps.runs.create(run)
        logger.info(f"Started run {run.id} of agent '{agent.id}' for user {user.id}")

        log = self._event_logger(run.id)

        try:
            tools = self._deps.tools if agent.tool_names is None else self._deps.tools.subset(agent.tool_names)
            ctx = AgentContext(
                db=self._deps.db,
                user=user,
                tools=tools,
                llm=self._deps.llm,
                run_id=run.id,
                log=log,
            )

            await log({"type": AgentEventType.run_started.value, "agentId": agent.id})

            validated = agent.input_schema.model_validate(input_data)
            result = await agent.run(ctx, validated)
        except Exception as err:
            message = _error_message(err)
            logger.error(f"Run {run.id} of agent '{agent.id}' failed: {message}")
            try:
                await self._finish(
                    run.id,
                    AgentRunStatus.failed,
                    {"type": AgentEventType.run_failed.value, "agentId": agent.id, "error": message},
                    log,
                    error=message,
                )
            except Exception:
                # The agent's error is what the caller sees.
                logger.exception(f"Could not record the failure of run {run.id}")
            raise

        await self._finish(
            run.id,
            AgentRunStatus.succeeded,
            {"type": AgentEventType.run_succeeded.value, "agentId": agent.id},
            log,
            summary=_result_summary(result),
        )
        logger.info(f"Run {run.id} of agent '{agent.id}' succeeded")
        return RunAgentResult(run_id=run.id, result=result)

    async def _finish(
        self,
        run_id: str,
        status: AgentRunStatus,
        event: AgentEventPayload,
        log: EventLogger,
        *,
        summary: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """Store the terminal status, then append its event.

        The event is only appended by the call that moved the run out of
        ``running``. Once the status is stored, a failure to append the event
        is logged and does not change the run's outcome.
        """
        if not await self._deps.runs.finish(run_id, status=status, summary=summary, error=error):
            logger.warning(f"Run {run_id} was already finished; not recording '{status.value}'")
            return
        try:
            await log(event)
        except Exception:
            logger.exception(f"Run {run_id} is {status.value} but its terminal event could not be stored")
