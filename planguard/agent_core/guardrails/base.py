from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..planning.steps import Plan


class Guardrail(Protocol):
    """Protocol for plan-level policy checks.

    ``validate`` must not mutate any state; it raises ``GuardrailViolation``
    to reject the plan.
    """

    name: str

    def validate(self, plan: Plan) -> None: ...


@runtime_checkable
class CommittingGuardrail(Guardrail, Protocol):
    """Guardrail that keeps accounting state.

    ``commit`` is only called after every registered guardrail accepted the
    plan, so a rejected plan never changes the guardrail's state. It may raise
    ``GuardrailViolation`` itself when its state is shared with another
    registry and the plan no longer fits; it must then record nothing.
    """

    def commit(self, plan: Plan) -> None: ...
