from __future__ import annotations

"""Rule protocol and rule engine.

Rules shape the ``PlanningContext`` before the planner builds its prompt.
They run in ascending ``priority`` (lower values first); rules sharing a
priority keep their registration order.
"""

import logging
from typing import List, Protocol

from .context import PlanningContext

logger = logging.getLogger(__name__)


class Rule(Protocol):
    """Protocol for planning rules."""

    name: str
    priority: int

    def apply(self, context: PlanningContext) -> None: ...


class RuleEngine:
    """Ordered collection of rules applied to a planning context."""

    def __init__(self) -> None:
        self._rules: List[Rule] = []

    def add_rule(self, rule: Rule) -> None:
        self._rules.append(rule)

    def apply_all(self, context: PlanningContext) -> None:
        """Apply every registered rule to ``context`` in priority order."""
        # sorted() is stable, which keeps registration order within a priority.
        for rule in sorted(self._rules, key=lambda r: r.priority):
            logger.debug(f"Applying rule '{rule.name}' (priority={rule.priority})")
            rule.apply(context)

    def __len__(self) -> int:
        return len(self._rules)
