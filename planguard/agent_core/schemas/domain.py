from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from pydantic import Field, JsonValue

from .base import BaseSchema, FrozenSchema


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    system = "system"
    user = "user"
    assistant = "assistant"


class StepKind(str, Enum):
    tool_call = "tool_call"
    reasoning = "reasoning"
    response = "response"


class ExecutionOutcome(str, Enum):
    success = "success"
    partial_failure = "partial_failure"
    failed = "failed"
    cancelled = "cancelled"


class Message(BaseSchema):
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=_utc_now)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.system, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.user, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.assistant, content=content)


class StepResult(FrozenSchema):
    """Outcome of a single executed plan step."""

    index: int
    kind: StepKind
    success: bool
    output: JsonValue = None
    error: Optional[str] = None
    tool_name: Optional[str] = None


class ExecutionResult(FrozenSchema):
    """Outcome of one ``execute_plan`` call.

    ``step_results`` holds one entry per attempted step, in plan order. When a
    tool fails, its entry carries the error so callers can tell which step
    failed and why.
    """

    outcome: ExecutionOutcome
    final_response: str = ""
    step_results: Tuple[StepResult, ...] = ()

    @property
    def success(self) -> bool:
        return self.outcome == ExecutionOutcome.success

    @property
    def failed_step(self) -> Optional[StepResult]:
        for result in self.step_results:
            if not result.success:
                return result
        return None
