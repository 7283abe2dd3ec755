"""Schemas and DTOs for the agent core."""

from .domain import (
    ExecutionOutcome,
    ExecutionResult,
    Message,
    Role,
    StepKind,
    StepResult,
)

__all__ = [
    "ExecutionOutcome",
    "ExecutionResult",
    "Message",
    "Role",
    "StepKind",
    "StepResult",
]
