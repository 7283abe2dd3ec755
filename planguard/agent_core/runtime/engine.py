from __future__ import annotations

"""LangGraph plan executor.

``PlanExecutor`` runs a plan that has already passed planning validation and
the guardrail registry.

Execution model
--------------

- The executor runs a LangGraph state machine over a mutable ``_GraphState``.
- Each iteration of the ``execute`` node runs exactly one plan step at index
  ``idx``, so a cancellation signal is observed between any two steps.
- Every step outcome is written to memory as an assistant message before the
  next step starts.

Step kinds
----------

- ``ToolInvocation``: resolved in the tool registry and executed. A missing
  tool, a ``ToolExecutionError`` or a result that is not JSON-compatible
  fails the step.
- ``ReasoningNote``: recorded as-is, no side effects.
- ``FinalResponse``: sets the run's final response. Later steps still run.

Terminal outcomes
-----------------

- ``success``: every step ran and succeeded.
- ``failed``: a tool step failed and ``continue_on_tool_error`` is off; the
  remaining steps are skipped.
- ``partial_failure``: a tool step failed while ``continue_on_tool_error`` is
  on; every step still ran.
- ``cancelled``: the signal was set before a step started.

When the last step is not a ``FinalResponse`` and the run did not fail or get
cancelled, the final response is synthesized from tool outputs and reasoning
notes, in plan order, one per line.
"""

import copy
import inspect
import json
import logging
from typing import List, Optional

from langgraph.graph import END, StateGraph
from pydantic import JsonValue, ValidationError

from ..errors import ToolExecutionError
from ..planning.steps import FinalResponse, Plan, PlanStep, ReasoningNote, ToolInvocation
from ..schemas.domain import ExecutionOutcome, ExecutionResult, Message, StepKind, StepResult
from ..tools.base import ToolInfo
from .models import CancelSignal, ExecutorDeps, _GraphState

logger = logging.getLogger(__name__)

# start, finish and the ``execute`` pass that detects the end of the plan, with slack
_GRAPH_OVERHEAD_STEPS = 10


def render_output(value: JsonValue) -> str:
    """Render a step output as text; strings pass through, the rest is JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def synthesize_response(step_results: List[StepResult]) -> str:
    """Join successful tool outputs and reasoning notes, one per line."""
    parts = [
        render_output(r.output)
        for r in step_results
        if r.success and r.kind in (StepKind.tool_call, StepKind.reasoning)
    ]
    return "\n".join(parts)


class PlanExecutor:
    """Execute a validated plan step by step.

    The executor owns no policy: it trusts that the plan was admitted by the
    guardrails and delegates actual work to the tools registered in
    ``ExecutorDeps.tools``.
    """

    def __init__(self, *, deps: ExecutorDeps, continue_on_tool_error: bool = False) -> None:
        """
        Initialize the PlanExecutor.

        Args:
            deps: The runtime dependencies (tool registry, memory, cancel signal).
            continue_on_tool_error: Keep running the remaining steps after a
                tool failure and report ``partial_failure`` instead of ``failed``.
        """
        self._deps = deps
        self._continue_on_tool_error = continue_on_tool_error
        self._cancel_signal: Optional[CancelSignal] = deps.cancel_signal
        self._graph = self._build_graph()

    @property
    def continue_on_tool_error(self) -> bool:
        return self._continue_on_tool_error

    def _build_graph(self):
        """Build and compile the LangGraph state machine."""
        g: StateGraph = StateGraph(_GraphState)
        g.add_node("start", self._node_start)
        g.add_node("execute", self._node_execute_next)
        g.add_node("finish", self._node_finish)

        g.set_entry_point("start")
        g.add_edge("start", "execute")

        g.add_conditional_edges(
            "execute",
            self._route_after_execute,
            {
                "finish": "finish",
                "continue": "execute",
            },
        )
        g.add_edge("finish", END)
        return g.compile()

    def list_tools(self) -> List[ToolInfo]:
        """Describe every registered tool, sorted by name."""
        return [ToolInfo.from_tool(t) for t in self._deps.tools.list_tools()]

    async def execute_plan(self, plan: Plan, *, cancel_signal: Optional[CancelSignal] = None) -> ExecutionResult:
        """Run every step of ``plan`` and report the outcome.

        Args:
            plan: A plan that already passed validation and guardrails.
            cancel_signal: Overrides the signal given in ``ExecutorDeps`` for
                this call only.

        Returns:
            The terminal outcome with one ``StepResult`` per step that ran.
        """
        signal = cancel_signal if cancel_signal is not None else self._cancel_signal
        state: _GraphState = {
            "plan": plan,
            "idx": 0,
            "step_results": [],
            "final_response": None,
            "cancel_signal": signal,
        }
        logger.info(f"Executing plan with {len(plan.steps)} steps")
        final = await self._graph.ainvoke(
            state,
            config={"recursion_limit": len(plan.steps) + _GRAPH_OVERHEAD_STEPS},
        )

        outcome = ExecutionOutcome(final.get("_terminal_status") or ExecutionOutcome.success.value)
        result = ExecutionResult(
            outcome=outcome,
            final_response=final.get("final_response") or "",
            step_results=tuple(final.get("step_results") or ()),
        )
        logger.info(f"Plan finished with outcome '{outcome.value}' after {len(result.step_results)} steps")
        return result

    async def _node_start(self, state: _GraphState) -> _GraphState:
        """Graph entry node. Currently a no-op."""
        return state

    async def _node_execute_next(self, state: _GraphState) -> _GraphState:
        """Execute the next plan step.

        This node is responsible for:

        - detecting terminal conditions (end of plan, cancellation),
        - executing the step at ``idx``,
        - writing the step outcome to memory.
        """
        plan = state["plan"]
        idx = int(state.get("idx") or 0)
        if idx >= len(plan.steps):
            state["_finished"] = True
            state["_terminal_status"] = (
                ExecutionOutcome.partial_failure.value if state.get("_had_failure") else ExecutionOutcome.success.value
            )
            return state

        signal = state.get("cancel_signal")
        if signal is not None and signal.is_set():
            logger.info(f"Cancellation requested before step {idx}")
            state["_finished"] = True
            state["_terminal_status"] = ExecutionOutcome.cancelled.value
            return state

        step = plan.steps[idx]
        result = await self._run_step(idx, step)
        state["step_results"].append(result)
        if isinstance(step, FinalResponse):
            state["final_response"] = step.text

        await self._remember(result)

        if not result.success:
            if self._continue_on_tool_error:
                state["_had_failure"] = True
            else:
                state["_finished"] = True
                state["_terminal_status"] = ExecutionOutcome.failed.value
                return state

        state["idx"] = idx + 1
        return state

    async def _run_step(self, idx: int, step: PlanStep) -> StepResult:
        if isinstance(step, ToolInvocation):
            return await self._run_tool(idx, step)
        if isinstance(step, ReasoningNote):
            logger.debug(f"Step {idx}: reasoning")
            return StepResult(index=idx, kind=StepKind.reasoning, success=True, output=step.text)
        if isinstance(step, FinalResponse):
            logger.debug(f"Step {idx}: final response")
            return StepResult(index=idx, kind=StepKind.response, success=True, output=step.text)
        raise TypeError(f"unsupported plan step: {type(step).__name__}")

    async def _run_tool(self, idx: int, step: ToolInvocation) -> StepResult:
        tool = self._deps.tools.get(step.tool_name)
        if tool is None:
            logger.warning(f"Step {idx}: tool '{step.tool_name}' is not registered")
            return StepResult(
                index=idx,
                kind=StepKind.tool_call,
                success=False,
                error=f"Tool not found: {step.tool_name}",
                tool_name=step.tool_name,
            )

        logger.debug(f"Step {idx}: calling tool '{step.tool_name}'")
        try:
            # tools get their own copy so the plan stays unchanged
            output = await tool.execute(copy.deepcopy(step.parameters))
        except ToolExecutionError as e:
            logger.warning(f"Step {idx}: tool '{step.tool_name}' failed: {e.reason}")
            return StepResult(
                index=idx,
                kind=StepKind.tool_call,
                success=False,
                error=e.reason,
                tool_name=step.tool_name,
            )

        try:
            return StepResult(index=idx, kind=StepKind.tool_call, success=True, output=output, tool_name=step.tool_name)
        except ValidationError:
            logger.warning(f"Step {idx}: tool '{step.tool_name}' returned a non-JSON value of type {type(output).__name__}")
            return StepResult(
                index=idx,
                kind=StepKind.tool_call,
                success=False,
                error=f"Tool returned a non-JSON value: {type(output).__name__}",
                tool_name=step.tool_name,
            )

    async def _remember(self, result: StepResult) -> None:
        if result.kind == StepKind.tool_call:
            if result.success:
                content = f"[{result.tool_name}] {render_output(result.output)}"
            else:
                content = f"[{result.tool_name}] error: {result.error}"
        else:
            content = render_output(result.output)

        maybe_awaitable = self._deps.memory.add_message(Message.assistant(content))
        if inspect.isawaitable(maybe_awaitable):
            await maybe_awaitable

    async def _node_finish(self, state: _GraphState) -> _GraphState:
        """Finish node.

        Synthesizes the final response when the plan did not end with one.
        """
        status = str(state.get("_terminal_status") or ExecutionOutcome.success.value)
        plan = state["plan"]
        if status not in (ExecutionOutcome.failed.value, ExecutionOutcome.cancelled.value) and not plan.ends_with_response:
            state["final_response"] = synthesize_response(state["step_results"])
        return state

    def _route_after_execute(self, state: _GraphState) -> str:
        """Route to finish/continue after executing a step."""
        if state.get("_finished"):
            return "finish"
        return "continue"
