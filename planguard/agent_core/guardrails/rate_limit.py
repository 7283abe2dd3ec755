from __future__ import annotations

"""Sliding-window rate limit over tool invocations.

The guardrail keeps the timestamps of tool calls admitted in the current
window. Admission is two-phase:

- ``validate`` prunes expired timestamps and checks whether the plan's tool
  calls fit in the remaining budget. It never records anything.
- ``commit`` records one timestamp per tool call. ``GuardrailRegistry`` calls
  it only after every guardrail accepted the plan.

The history is guarded by its own lock and ``commit`` re-checks the budget
before recording, so one instance can be shared by several registries.
"""

import threading
import time
from collections import deque
from typing import Callable, Deque

from ..errors import GuardrailViolation
from ..planning.steps import Plan
from .base import CommittingGuardrail


class RateLimitGuardrail(CommittingGuardrail):
    """Reject plans whose tool calls would exceed ``max_calls`` per window."""

    def __init__(
        self,
        max_calls: int,
        window_seconds: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        name: str = "rate_limit",
    ) -> None:
        if max_calls < 0:
            raise ValueError("max_calls must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self.name = name
        self._clock = clock
        self._history: Deque[float] = deque()
        self._lock = threading.Lock()

    @staticmethod
    def count_tool_calls(plan: Plan) -> int:
        return sum(1 for _ in plan.tool_invocations())

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._history and self._history[0] <= cutoff:
            self._history.popleft()

    def current_call_count(self) -> int:
        """Number of committed calls inside the current window."""
        with self._lock:
            self._prune(self._clock())
            return len(self._history)

    def _violation(self, requested: int, current: int) -> GuardrailViolation:
        return GuardrailViolation(
            self.name,
            f"Rate limit exceeded: plan contains {requested} tool calls, but only "
            f"{max(self.max_calls - current, 0)} calls remaining in the current window "
            f"(limit: {self.max_calls} per {self.window_seconds:g}s, current: {current})",
        )

    def validate(self, plan: Plan) -> None:
        """
        Check the plan's tool calls against the remaining budget.

        Raises:
            GuardrailViolation: If admitting the plan would exceed the limit.
        """
        requested = self.count_tool_calls(plan)
        with self._lock:
            self._prune(self._clock())
            current = len(self._history)

        if current + requested > self.max_calls:
            raise self._violation(requested, current)

    def commit(self, plan: Plan) -> None:
        """Record the plan's tool calls in the current window.

        The budget is checked again under the same lock as the write, since
        another registry sharing this instance may have committed since
        ``validate``.

        Raises:
            GuardrailViolation: If the budget no longer fits the plan.
        """
        requested = self.count_tool_calls(plan)
        with self._lock:
            now = self._clock()
            self._prune(now)
            current = len(self._history)
            if current + requested > self.max_calls:
                raise self._violation(requested, current)
            self._history.extend([now] * requested)
