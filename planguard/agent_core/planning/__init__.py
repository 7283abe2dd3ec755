"""Planning components.

 The planning subsystem is responsible for producing a ``Plan`` from a user
 goal. A plan is an ordered list of tagged steps defined in
 ``planguard.agent_core.planning.steps``:

 - ``ToolInvocation``: run a named tool with structured parameters.
 - ``ReasoningNote``: a recorded thought with no side effects.
 - ``FinalResponse``: the answer returned to the user.

 The planner itself does not execute tools; it only emits plans that are
 checked by guardrails and then consumed by
 ``planguard.agent_core.runtime.PlanExecutor``.
 """

from .planner import DEFAULT_SYSTEM_PROMPT, Planner
from .steps import FinalResponse, Plan, PlanStep, ReasoningNote, ToolInvocation, parse_plan

__all__ = [
    "DEFAULT_SYSTEM_PROMPT",
    "FinalResponse",
    "Plan",
    "PlanStep",
    "Planner",
    "ReasoningNote",
    "ToolInvocation",
    "parse_plan",
]
