from __future__ import annotations

import pytest

from planguard.agent_core.errors import GuardrailViolation
from planguard.agent_core.guardrails import GuardrailRegistry, RateLimitGuardrail
from planguard.agent_core.planning import FinalResponse, Plan, ReasoningNote, ToolInvocation


class _FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _plan(tool_calls: int) -> Plan:
    steps = [ToolInvocation(tool_name="calculator", parameters={}) for _ in range(tool_calls)]
    return Plan(steps=(*steps, ReasoningNote(text="thinking"), FinalResponse(text="done")))


def test_count_tool_calls_ignores_other_steps() -> None:
    assert RateLimitGuardrail.count_tool_calls(_plan(3)) == 3
    assert RateLimitGuardrail.count_tool_calls(Plan(steps=(FinalResponse(text="hi"),))) == 0


def test_plan_over_the_limit_is_rejected_and_counter_unchanged() -> None:
    limiter = RateLimitGuardrail(max_calls=2, window_seconds=60)
    registry = GuardrailRegistry()
    registry.register(limiter)

    with pytest.raises(GuardrailViolation) as exc_info:
        registry.validate_all(_plan(3))

    assert "Rate limit exceeded" in exc_info.value.detail
    assert limiter.current_call_count() == 0


def test_validate_alone_never_records_calls() -> None:
    limiter = RateLimitGuardrail(max_calls=10)

    limiter.validate(_plan(3))
    limiter.validate(_plan(3))

    assert limiter.current_call_count() == 0


def test_commit_records_one_call_per_invocation() -> None:
    limiter = RateLimitGuardrail(max_calls=10)
    registry = GuardrailRegistry()
    registry.register(limiter)

    registry.validate_all(_plan(3))
    registry.validate_all(_plan(4))

    assert limiter.current_call_count() == 7
    with pytest.raises(GuardrailViolation):
        registry.validate_all(_plan(4))
    assert limiter.current_call_count() == 7


def test_plan_exactly_at_the_limit_is_accepted() -> None:
    limiter = RateLimitGuardrail(max_calls=3)
    registry = GuardrailRegistry()
    registry.register(limiter)

    registry.validate_all(_plan(3))

    assert limiter.current_call_count() == 3


def test_calls_expire_after_the_window() -> None:
    clock = _FakeClock()
    limiter = RateLimitGuardrail(max_calls=2, window_seconds=60, clock=clock)
    registry = GuardrailRegistry()
    registry.register(limiter)

    registry.validate_all(_plan(2))
    clock.now += 30
    with pytest.raises(GuardrailViolation):
        registry.validate_all(_plan(1))

    clock.now += 30
    registry.validate_all(_plan(2))
    assert limiter.current_call_count() == 2


def test_zero_limit_only_admits_plans_without_tools() -> None:
    limiter = RateLimitGuardrail(max_calls=0)

    limiter.validate(Plan(steps=(FinalResponse(text="hi"),)))
    with pytest.raises(GuardrailViolation):
        limiter.validate(_plan(1))


@pytest.mark.parametrize(
    "max_calls, window",
    [
        (-1, 60.0),
        (5, 0.0),
        (5, -1.0),
    ],
)
def test_invalid_configuration_is_rejected(max_calls: int, window: float) -> None:
    with pytest.raises(ValueError):
        RateLimitGuardrail(max_calls=max_calls, window_seconds=window)
