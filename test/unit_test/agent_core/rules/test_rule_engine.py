from __future__ import annotations

from dataclasses import dataclass
from typing import List

import pytest

from planguard.agent_core.rules import (
    PlanningContext,
    ResponseLengthRule,
    RuleEngine,
    Tone,
    ToneRule,
)


@dataclass
class _RecordingRule:
    name: str
    priority: int
    log: List[str]

    def apply(self, context: PlanningContext) -> None:
        self.log.append(self.name)
        context.set_metadata("last_rule", self.name)


def test_rules_apply_in_ascending_priority() -> None:
    log: List[str] = []
    engine = RuleEngine()
    engine.add_rule(_RecordingRule("late", 100, log))
    engine.add_rule(_RecordingRule("early", 10, log))
    engine.add_rule(_RecordingRule("middle", 50, log))

    engine.apply_all(PlanningContext())

    assert log == ["early", "middle", "late"]


def test_equal_priorities_keep_registration_order() -> None:
    log: List[str] = []
    engine = RuleEngine()
    for name in ("a", "b", "c"):
        engine.add_rule(_RecordingRule(name, 5, log))

    ctx = PlanningContext()
    engine.apply_all(ctx)

    assert log == ["a", "b", "c"]
    assert ctx.get_metadata("last_rule") == "c"
    assert len(engine) == 3


def test_empty_engine_leaves_context_untouched() -> None:
    ctx = PlanningContext(system_prompt="base")

    RuleEngine().apply_all(ctx)

    assert ctx == PlanningContext(system_prompt="base")


@pytest.mark.parametrize(
    "tone, expected",
    [
        (Tone.formal, "formal, professional tone"),
        (Tone.casual, "casual, conversational tone"),
        (Tone.technical, "technical tone with precise terminology"),
    ],
)
def test_tone_rule_appends_guidance(tone: Tone, expected: str) -> None:
    ctx = PlanningContext(system_prompt="base")

    ToneRule(tone).apply(ctx)

    assert ctx.system_prompt.startswith("base\n\n")
    assert expected in ctx.system_prompt


def test_response_length_rule_adds_constraint() -> None:
    ctx = PlanningContext()

    ResponseLengthRule(max_words=120).apply(ctx)

    assert ctx.constraints == ["Keep responses under 120 words"]


def test_builtin_rule_priorities_order_tone_before_length() -> None:
    engine = RuleEngine()
    engine.add_rule(ResponseLengthRule(max_words=30))
    engine.add_rule(ToneRule(Tone.casual))
    ctx = PlanningContext(system_prompt="base")

    engine.apply_all(ctx)

    assert ToneRule(Tone.casual).priority < ResponseLengthRule(max_words=30).priority
    assert "casual" in ctx.system_prompt
    assert ctx.constraints == ["Keep responses under 30 words"]


def test_planning_context_metadata_roundtrip() -> None:
    ctx = PlanningContext()

    ctx.set_metadata("user", "alice")

    assert ctx.get_metadata("user") == "alice"
    assert ctx.get_metadata("missing") is None
