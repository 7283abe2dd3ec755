from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pytest

from planguard.agent_core.errors import ToolExecutionError
from planguard.agent_core.memory import InMemoryStore
from planguard.agent_core.planning import FinalResponse, Plan, ReasoningNote, ToolInvocation
from planguard.agent_core.runtime import ExecutorDeps, PlanExecutor, synthesize_response
from planguard.agent_core.schemas.domain import ExecutionOutcome, Message, Role, StepKind
from planguard.agent_core.tools import ToolRegistry


@dataclass
class _FakeTool:
    name: str
    result: Any = None
    fail_with: Optional[str] = None
    on_call: Optional[Callable[[], None]] = None
    description: str = "fake tool"
    parameters_schema: Dict[str, Any] = field(default_factory=dict)
    calls: List[Any] = field(default_factory=list)

    async def execute(self, parameters: Any) -> Any:
        self.calls.append(parameters)
        if self.on_call is not None:
            self.on_call()
        if self.fail_with is not None:
            raise ToolExecutionError(self.name, self.fail_with)
        return self.result


class _AsyncMemory:
    def __init__(self) -> None:
        self.messages: List[Message] = []

    async def add_message(self, message: Message) -> None:
        await asyncio.sleep(0)
        self.messages.append(message)

    def get_recent(self, limit: int) -> List[Message]:
        return self.messages[-limit:]

    def clear(self) -> None:
        self.messages.clear()


def _executor(*tools: _FakeTool, memory=None, continue_on_tool_error: bool = False, cancel_signal=None):
    registry = ToolRegistry()
    for tool in tools:
        registry.register(tool)
    memory = memory if memory is not None else InMemoryStore()
    deps = ExecutorDeps(tools=registry, memory=memory, cancel_signal=cancel_signal)
    return PlanExecutor(deps=deps, continue_on_tool_error=continue_on_tool_error), memory


def _call(name: str, **params) -> ToolInvocation:
    return ToolInvocation(tool_name=name, parameters=params)


@pytest.mark.asyncio
async def test_calculator_example_runs_to_success() -> None:
    calc = _FakeTool("calculator", result=4)
    executor, memory = _executor(calc)
    plan = Plan(steps=(_call("calculator", op="add", a=2, b=2), FinalResponse(text="2+2 is 4")))

    result = await executor.execute_plan(plan)

    assert result.outcome == ExecutionOutcome.success
    assert result.success is True
    assert result.final_response == "2+2 is 4"
    assert [(r.success, r.output) for r in result.step_results] == [(True, 4), (True, "2+2 is 4")]
    assert result.step_results[0].kind == StepKind.tool_call
    assert result.step_results[0].tool_name == "calculator"
    assert calc.calls == [{"op": "add", "a": 2, "b": 2}]
    assert [m.content for m in memory.get_recent(10)] == ["[calculator] 4", "2+2 is 4"]
    assert all(m.role == Role.assistant for m in memory.get_recent(10))


@pytest.mark.asyncio
async def test_every_step_yields_one_result_in_order() -> None:
    executor, _ = _executor(_FakeTool("a", result="x"), _FakeTool("b", result={"k": 1}))
    plan = Plan(
        steps=(
            ReasoningNote(text="start"),
            _call("a"),
            _call("b"),
            ReasoningNote(text="middle"),
            FinalResponse(text="done"),
        )
    )

    result = await executor.execute_plan(plan)

    assert result.outcome == ExecutionOutcome.success
    assert [r.index for r in result.step_results] == [0, 1, 2, 3, 4]
    assert [r.kind for r in result.step_results] == [
        StepKind.reasoning,
        StepKind.tool_call,
        StepKind.tool_call,
        StepKind.reasoning,
        StepKind.response,
    ]


@pytest.mark.asyncio
async def test_final_response_is_synthesized_when_plan_does_not_end_with_one() -> None:
    executor, _ = _executor(_FakeTool("lookup", result={"b": 2, "a": 1}))
    plan = Plan(steps=(ReasoningNote(text="Looking it up"), _call("lookup"), ReasoningNote(text="Found it")))

    result = await executor.execute_plan(plan)

    assert result.final_response == 'Looking it up\n{"a": 1, "b": 2}\nFound it'


@pytest.mark.asyncio
async def test_synthesized_response_is_deterministic() -> None:
    plan = Plan(steps=(_call("lookup"), ReasoningNote(text="note")))

    first, _ = _executor(_FakeTool("lookup", result={"z": [1, 2], "a": "é"}))
    second, _ = _executor(_FakeTool("lookup", result={"a": "é", "z": [1, 2]}))

    out_1 = (await first.execute_plan(plan)).final_response
    out_2 = (await second.execute_plan(plan)).final_response

    assert out_1.encode("utf-8") == out_2.encode("utf-8")


@pytest.mark.asyncio
async def test_mid_plan_response_does_not_stop_execution() -> None:
    tool = _FakeTool("after", result="later")
    executor, _ = _executor(tool)
    plan = Plan(steps=(FinalResponse(text="early answer"), _call("after")))

    result = await executor.execute_plan(plan)

    assert len(tool.calls) == 1
    assert result.outcome == ExecutionOutcome.success
    assert result.final_response == "later"


@pytest.mark.asyncio
async def test_last_of_several_responses_wins() -> None:
    executor, _ = _executor()
    plan = Plan(steps=(FinalResponse(text="draft"), FinalResponse(text="final")))

    result = await executor.execute_plan(plan)

    assert result.final_response == "final"


@pytest.mark.asyncio
async def test_tool_failure_stops_the_plan() -> None:
    broken = _FakeTool("broken", fail_with="disk on fire")
    never = _FakeTool("never", result="nope")
    executor, memory = _executor(broken, never)
    plan = Plan(steps=(ReasoningNote(text="go"), _call("broken"), _call("never"), FinalResponse(text="done")))

    result = await executor.execute_plan(plan)

    assert result.outcome == ExecutionOutcome.failed
    assert len(result.step_results) == 2
    failed = result.failed_step
    assert failed is not None
    assert (failed.index, failed.tool_name, failed.error) == (1, "broken", "disk on fire")
    assert never.calls == []
    assert result.final_response == ""
    assert memory.get_recent(10)[-1].content == "[broken] error: disk on fire"


@pytest.mark.asyncio
async def test_unregistered_tool_fails_the_step() -> None:
    executor, _ = _executor()
    plan = Plan(steps=(_call("ghost"), FinalResponse(text="done")))

    result = await executor.execute_plan(plan)

    assert result.outcome == ExecutionOutcome.failed
    assert result.step_results[0].error == "Tool not found: ghost"


@pytest.mark.asyncio
async def test_continue_on_tool_error_reports_partial_failure() -> None:
    ok = _FakeTool("ok", result="fine")
    executor, _ = _executor(_FakeTool("broken", fail_with="boom"), ok, continue_on_tool_error=True)
    plan = Plan(steps=(_call("broken"), _call("ok"), ReasoningNote(text="wrap up")))

    result = await executor.execute_plan(plan)

    assert result.outcome == ExecutionOutcome.partial_failure
    assert [r.success for r in result.step_results] == [False, True, True]
    assert len(ok.calls) == 1
    assert result.final_response == "fine\nwrap up"


@pytest.mark.asyncio
@pytest.mark.parametrize("k", [1, 2, 3, 4])
async def test_cancellation_before_step_k_keeps_earlier_results(k: int) -> None:
    signal = threading.Event()
    calls = {"n": 0}

    def _maybe_cancel() -> None:
        calls["n"] += 1
        if calls["n"] == k - 1:
            signal.set()

    if k == 1:
        signal.set()

    tool = _FakeTool("work", result="done", on_call=_maybe_cancel)
    executor, _ = _executor(tool)
    plan = Plan(steps=tuple(_call("work") for _ in range(4)))

    result = await executor.execute_plan(plan, cancel_signal=signal)

    assert result.outcome == ExecutionOutcome.cancelled
    assert len(result.step_results) == k - 1
    assert len(tool.calls) == k - 1
    assert result.final_response == ""


@pytest.mark.asyncio
async def test_cancel_signal_from_deps_is_used_by_default() -> None:
    signal = asyncio.Event()
    signal.set()
    executor, _ = _executor(_FakeTool("work"), cancel_signal=signal)

    result = await executor.execute_plan(Plan(steps=(_call("work"),)))

    assert result.outcome == ExecutionOutcome.cancelled
    assert result.step_results == ()


@pytest.mark.asyncio
async def test_async_memory_store_is_awaited() -> None:
    memory = _AsyncMemory()
    executor, _ = _executor(_FakeTool("t", result=[1, 2]), memory=memory)

    await executor.execute_plan(Plan(steps=(_call("t"), ReasoningNote(text="r"))))

    assert [m.content for m in memory.messages] == ["[t] [1, 2]", "r"]


@pytest.mark.asyncio
async def test_next_tool_starts_after_previous_step_is_in_memory() -> None:
    memory = _AsyncMemory()
    seen_by_second: List[List[str]] = []
    first = _FakeTool("first", result="a-out")
    second = _FakeTool(
        "second",
        result="b-out",
        on_call=lambda: seen_by_second.append([m.content for m in memory.messages]),
    )
    executor, _ = _executor(first, second, memory=memory)

    await executor.execute_plan(Plan(steps=(ReasoningNote(text="plan"), _call("first"), _call("second"))))

    assert seen_by_second == [["plan", "[first] a-out"]]


@pytest.mark.asyncio
async def test_non_json_tool_result_fails_the_step() -> None:
    executor, memory = _executor(_FakeTool("odd", result=object()), _FakeTool("after", result=1))

    result = await executor.execute_plan(Plan(steps=(_call("odd"), _call("after"))))

    assert result.outcome == ExecutionOutcome.failed
    assert len(result.step_results) == 1
    assert result.step_results[0].success is False
    assert result.step_results[0].error == "Tool returned a non-JSON value: object"
    assert [m.content for m in memory.get_recent(10)] == ["[odd] error: Tool returned a non-JSON value: object"]


@pytest.mark.asyncio
async def test_tool_cannot_mutate_the_plan() -> None:
    class _Mutating(_FakeTool):
        async def execute(self, parameters: Any) -> Any:
            parameters["injected"] = True
            return "ok"

    executor, _ = _executor(_Mutating("m"))
    plan = Plan(steps=(_call("m", a=1),))

    await executor.execute_plan(plan)

    assert plan.steps[0].parameters == {"a": 1}


@pytest.mark.asyncio
async def test_unexpected_tool_exception_propagates() -> None:
    class _Crashing(_FakeTool):
        async def execute(self, parameters: Any) -> Any:
            raise RuntimeError("bug in tool")

    executor, _ = _executor(_Crashing("c"))

    with pytest.raises(RuntimeError, match="bug in tool"):
        await executor.execute_plan(Plan(steps=(_call("c"),)))


@pytest.mark.asyncio
async def test_long_plans_do_not_hit_graph_recursion_limit() -> None:
    executor, _ = _executor(_FakeTool("t", result=1))
    plan = Plan(steps=tuple(_call("t") for _ in range(60)))

    result = await executor.execute_plan(plan)

    assert result.outcome == ExecutionOutcome.success
    assert len(result.step_results) == 60


def test_list_tools_describes_registry() -> None:
    executor, _ = _executor(_FakeTool("b"), _FakeTool("a"))

    assert [t.name for t in executor.list_tools()] == ["a", "b"]


def test_synthesize_response_skips_failed_steps_and_responses() -> None:
    from planguard.agent_core.schemas.domain import StepResult

    results = [
        StepResult(index=0, kind=StepKind.tool_call, success=False, error="x", tool_name="t"),
        StepResult(index=1, kind=StepKind.tool_call, success=True, output=3.5, tool_name="t"),
        StepResult(index=2, kind=StepKind.response, success=True, output="ignored"),
        StepResult(index=3, kind=StepKind.reasoning, success=True, output="kept"),
    ]

    assert synthesize_response(results) == "3.5\nkept"
