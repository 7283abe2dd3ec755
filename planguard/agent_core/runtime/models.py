from __future__ import annotations

"""Runtime dependency bundle and LangGraph state types.

The executor is designed to be dependency-injected.

- ``ExecutorDeps`` collects the registries and collaborators the executor needs.
- ``_GraphState`` is the mutable state passed between LangGraph nodes.
"""

from dataclasses import dataclass
from typing import List, NotRequired, Optional, Protocol, Required, TypedDict

from ..memory.store import MemoryStore
from ..planning.steps import Plan
from ..schemas.domain import StepResult
from ..tools.registry import ToolRegistry


class CancelSignal(Protocol):
    """Cooperative cancellation flag, e.g. ``asyncio.Event`` or ``threading.Event``."""

    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class ExecutorDeps:
    """Dependency bundle for ``PlanExecutor``.

    This object is typically constructed by application wiring code and passed
    into the executor (or ``AgentService``). It holds:

    - the tool registry used to resolve ``ToolInvocation`` steps,
    - the memory store receiving every step outcome,
    - an optional default cancellation signal.
    """

    tools: ToolRegistry
    memory: MemoryStore

    cancel_signal: Optional[CancelSignal] = None


class _GraphState(TypedDict):
    """Mutable LangGraph state for a single ``execute_plan`` call.

    Required keys:

    - ``plan``: the plan being executed.
    - ``idx``: index of the next step to run.
    - ``step_results``: results gathered so far, in plan order.
    - ``final_response``: text set by the last ``FinalResponse`` step, if any.

    Optional keys:

    - ``cancel_signal``: checked before every step.
    - ``_had_failure``: a tool failed while continuing on errors.
    - ``_finished`` / ``_terminal_status``: used to terminate the graph.
    """

    plan: Required[Plan]
    idx: Required[int]
    step_results: Required[List[StepResult]]
    final_response: Required[Optional[str]]
    cancel_signal: NotRequired[Optional[CancelSignal]]
    _had_failure: NotRequired[bool]
    _finished: NotRequired[bool]
    _terminal_status: NotRequired[str]
