"""Core agent orchestration: planning, guardrails, rules and execution.

This package contains the "engine room" of planguard.

Design overview
---------------

A request flows through four strictly separated stages:

- Rules (``agent_core.rules``) shape the ``PlanningContext`` (system prompt
  and constraints) before the model is asked for a plan.
- The ``Planner`` (``agent_core.planning``) asks the model provider for a JSON
  plan and parses it into an immutable ``Plan`` of three step kinds:

  - ``ToolInvocation``: side-effecting call of a registered tool.
  - ``ReasoningNote``: recorded thought, no side effects.
  - ``FinalResponse``: the answer text for the user.

- Guardrails (``agent_core.guardrails``) validate the whole plan, fail-fast
  and two-phase, before anything executes.
- The ``PlanExecutor`` (``agent_core.runtime``) runs the admitted plan with
  LangGraph, one step at a time, writing every outcome to memory.

Typical usage
-------------

Most applications should use ``agent_core.factory.build_agent_service`` and
call ``AgentService.run(goal)``.
"""

from .errors import (
    AgentCoreError,
    GuardrailViolation,
    PlanParseError,
    ProviderError,
    ProviderErrorKind,
    ToolExecutionError,
    UnknownToolError,
)
from .planning import FinalResponse, Plan, Planner, ReasoningNote, ToolInvocation, parse_plan
from .schemas.domain import ExecutionOutcome, ExecutionResult, Message, Role, StepKind, StepResult

__all__ = [
    "AgentCoreError",
    "ExecutionOutcome",
    "ExecutionResult",
    "FinalResponse",
    "GuardrailViolation",
    "Message",
    "Plan",
    "PlanParseError",
    "Planner",
    "ProviderError",
    "ProviderErrorKind",
    "ReasoningNote",
    "Role",
    "StepKind",
    "StepResult",
    "ToolExecutionError",
    "ToolInvocation",
    "UnknownToolError",
    "parse_plan",
]
