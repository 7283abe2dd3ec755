from __future__ import annotations

"""Guardrail registry.

``GuardrailRegistry.validate_all`` is the gate between planning and
execution. It runs in two phases inside a single critical section:

1. check: every guardrail validates the plan in registration order; the first
   violation is raised and no later guardrail runs;
2. commit: only when all guardrails passed, guardrails that keep accounting
   state (see ``CommittingGuardrail``) record the admitted plan.

The lock makes concurrent ``validate_all`` calls on a shared registry
mutually exclusive, so a budget can never be admitted twice. A guardrail
shared between registries re-checks its own state in ``commit`` and may still
reject the plan there.
"""

import logging
import threading
from typing import List

from ..errors import GuardrailViolation
from ..planning.steps import Plan
from .base import CommittingGuardrail, Guardrail

logger = logging.getLogger(__name__)


class GuardrailRegistry:
    """Ordered set of guardrails validated before any plan executes."""

    def __init__(self) -> None:
        self._guardrails: List[Guardrail] = []
        self._lock = threading.Lock()

    def register(self, guardrail: Guardrail) -> None:
        with self._lock:
            self._guardrails.append(guardrail)

    @property
    def names(self) -> List[str]:
        return [g.name for g in self._guardrails]

    def validate_all(self, plan: Plan) -> None:
        """Validate ``plan`` against every guardrail.

        Raises:
            GuardrailViolation: The first violation found; nothing is
                committed in that case.
        """
        with self._lock:
            for guardrail in self._guardrails:
                try:
                    guardrail.validate(plan)
                except GuardrailViolation as violation:
                    logger.warning(f"Plan rejected by guardrail '{violation.guardrail_name}': {violation.detail}")
                    raise

            for guardrail in self._guardrails:
                if isinstance(guardrail, CommittingGuardrail):
                    try:
                        guardrail.commit(plan)
                    except GuardrailViolation as violation:
                        logger.warning(f"Plan rejected at commit by guardrail '{violation.guardrail_name}': {violation.detail}")
                        raise

        logger.debug(f"Plan passed {len(self._guardrails)} guardrails")

    def __len__(self) -> int:
        return len(self._guardrails)
