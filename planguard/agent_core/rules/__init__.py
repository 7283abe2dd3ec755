"""Planning rules.

Rules mutate a ``PlanningContext`` (system prompt, constraints, metadata)
before the planner composes its prompt. ``RuleEngine`` applies them in
ascending priority order.
"""

from .builtin import ResponseLengthRule, Tone, ToneRule
from .context import PlanningContext
from .engine import Rule, RuleEngine

__all__ = [
    "PlanningContext",
    "ResponseLengthRule",
    "Rule",
    "RuleEngine",
    "Tone",
    "ToneRule",
]
