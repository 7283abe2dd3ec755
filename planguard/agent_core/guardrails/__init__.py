"""Guardrails: plan-level policy checks run before execution.

The guardrail layer is the gate between planning and execution. It is
intentionally separate from the planner and the executor so that:

- policy is enforced on the whole plan before any side effect happens,
- a rejected plan reports exactly one actionable violation,
- accounting guardrails are only charged for plans that are admitted.

Components
----------

- ``GuardrailRegistry``: ordered, fail-fast, two-phase validation.
- ``FilePathGuardrail``: confine path parameters to allowed directories.
- ``RateLimitGuardrail``: cap tool calls per sliding time window.
"""

from .base import CommittingGuardrail, Guardrail
from .file_path import FilePathGuardrail
from .rate_limit import RateLimitGuardrail
from .registry import GuardrailRegistry

__all__ = [
    "CommittingGuardrail",
    "FilePathGuardrail",
    "Guardrail",
    "GuardrailRegistry",
    "RateLimitGuardrail",
]
