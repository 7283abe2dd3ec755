"""LangGraph-based execution runtime for validated plans.

The runtime takes a ``Plan`` that already passed planning validation and the
guardrail registry and executes it one step at a time:

- ``ToolInvocation`` steps are resolved in the tool registry and executed.
- ``ReasoningNote`` and ``FinalResponse`` steps are recorded without side
  effects.

The main entry point is ``PlanExecutor``. Its collaborators are injected via
``ExecutorDeps``.
"""

from .engine import PlanExecutor, render_output, synthesize_response
from .models import CancelSignal, ExecutorDeps

__all__ = [
    "CancelSignal",
    "ExecutorDeps",
    "PlanExecutor",
    "render_output",
    "synthesize_response",
]
