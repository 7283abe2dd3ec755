from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .context import PlanningContext
from .engine import Rule


class Tone(str, Enum):
    formal = "formal"
    casual = "casual"
    technical = "technical"


_TONE_GUIDANCE = {
    Tone.formal: "Use a formal, professional tone. Be polite and respectful.",
    Tone.casual: "Use a casual, conversational tone. Be friendly and approachable.",
    Tone.technical: "Use a technical tone with precise terminology. Be accurate and detailed.",
}


@dataclass(frozen=True)
class ToneRule(Rule):
    """Append tone guidance to the system prompt."""

    tone: Tone
    name: str = "tone"
    priority: int = 50

    def apply(self, context: PlanningContext) -> None:
        context.system_prompt += "\n\n" + _TONE_GUIDANCE[Tone(self.tone)]


@dataclass(frozen=True)
class ResponseLengthRule(Rule):
    """Constrain the length of the final response."""

    max_words: int
    name: str = "response_length"
    priority: int = 100

    def apply(self, context: PlanningContext) -> None:
        context.add_constraint(f"Keep responses under {self.max_words} words")
