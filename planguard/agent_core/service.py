from __future__ import annotations

"""High-level orchestration service for agent requests.

``AgentService`` provides an application-friendly API for answering a goal
without needing to manually wire the planner, guardrails and executor.

Workflow
--------

``run``:

1. Records the goal in memory as a user message.
2. Builds a fresh ``PlanningContext`` and applies the rule engine.
3. Asks the ``Planner`` for a plan and checks its tool references.
4. Validates the plan against the guardrail registry.
5. Executes the plan and records the final response in memory, unless a
   response step of the plan already wrote the same text.

A plan rejected in steps 3-4 raises and never reaches the executor.

``AgentService`` is intentionally thin: it delegates execution semantics to
the executor and policy to the guardrails.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Optional

from .guardrails.registry import GuardrailRegistry
from .memory.store import MemoryStore
from .planning.planner import DEFAULT_SYSTEM_PROMPT, Planner
from .rules.context import PlanningContext
from .rules.engine import RuleEngine
from .runtime.engine import PlanExecutor
from .runtime.models import CancelSignal
from .schemas.domain import ExecutionResult, Message, StepKind
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def _already_recorded(result: ExecutionResult) -> bool:
    # The executor writes every response step to memory as it runs.
    return any(
        r.kind == StepKind.response and r.output == result.final_response for r in result.step_results
    )


@dataclass(frozen=True)
class AgentServiceDeps:
    """Dependency bundle for ``AgentService``.

    This allows applications and tests to inject:

    - the planner (and through it the model provider),
    - the tool, guardrail and rule registries,
    - the executor and the memory store it shares with the service.
    """

    planner: Planner
    tools: ToolRegistry
    guardrails: GuardrailRegistry
    rules: RuleEngine
    executor: PlanExecutor
    memory: MemoryStore


class AgentService:
    """Orchestrate planning, guardrails and execution for a single goal."""

    def __init__(self, *, deps: AgentServiceDeps) -> None:
        self._deps = deps

    @property
    def deps(self) -> AgentServiceDeps:
        return self._deps

    async def _remember(self, message: Message) -> None:
        maybe_awaitable = self._deps.memory.add_message(message)
        if inspect.isawaitable(maybe_awaitable):
            await maybe_awaitable

    async def run(
        self,
        goal: str,
        base_system_prompt: Optional[str] = None,
        *,
        cancel_signal: Optional[CancelSignal] = None,
    ) -> ExecutionResult:
        """Plan, check and execute ``goal``.

        Raises
        ------
        ProviderError
            The model provider failed.
        PlanParseError
            The model answer is not a valid plan.
        UnknownToolError
            The plan references an unregistered tool.
        GuardrailViolation
            A guardrail rejected the plan.
        """
        await self._remember(Message.user(goal))

        context = PlanningContext(system_prompt=base_system_prompt or DEFAULT_SYSTEM_PROMPT)
        self._deps.rules.apply_all(context)

        plan = await self._deps.planner.create_plan(goal, self._deps.tools.list_tools(), context)
        self._deps.planner.validate_plan(plan, self._deps.tools)
        self._deps.guardrails.validate_all(plan)

        result = await self._deps.executor.execute_plan(plan, cancel_signal=cancel_signal)
        if result.final_response and not _already_recorded(result):
            await self._remember(Message.assistant(result.final_response))

        logger.info(f"Request finished with outcome '{result.outcome.value}'")
        return result
