"""Error taxonomy for the agent core.

Every failure the core can report has its own exception type so callers can
tell a malformed model answer from a policy rejection or a broken tool:

- ``PlanParseError``: the model output could not be turned into a ``Plan``.
- ``UnknownToolError``: a plan references a tool the registry does not know.
- ``GuardrailViolation``: a guardrail rejected the plan before execution.
- ``ToolExecutionError``: a tool failed while the executor was running it.
- ``ProviderError``: the model provider failed; propagated unmodified.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class AgentCoreError(Exception):
    """Base class for all agent core errors."""


class PlanParseError(AgentCoreError, ValueError):
    """Raised when raw model output cannot be parsed into a valid plan."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"failed to parse plan: {reason}")


class UnknownToolError(AgentCoreError, LookupError):
    """Raised when a plan references a tool that is not registered."""

    def __init__(self, tool_name: str, available: Iterable[str] = ()) -> None:
        self.tool_name = tool_name
        self.available = tuple(sorted(available))
        listing = ", ".join(self.available) if self.available else "<none>"
        super().__init__(f"plan references unknown tool '{tool_name}'. Available tools: {listing}")


class GuardrailViolation(AgentCoreError):
    """Raised when a guardrail rejects a plan."""

    def __init__(self, guardrail_name: str, detail: str) -> None:
        self.guardrail_name = guardrail_name
        self.detail = detail
        super().__init__(f"guardrail '{guardrail_name}' rejected plan: {detail}")


class ToolExecutionError(AgentCoreError):
    """Raised by tools to report a failed invocation."""

    def __init__(self, tool_name: str, reason: str) -> None:
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"tool execution failed: {tool_name} - {reason}")


class ProviderErrorKind(str, Enum):
    network = "network"
    auth = "auth"
    rate_limit = "rate_limit"
    invalid_response = "invalid_response"


class ProviderError(AgentCoreError):
    """Raised by model providers. The planner never retries or wraps it."""

    def __init__(self, kind: ProviderErrorKind, message: str) -> None:
        self.kind = ProviderErrorKind(kind)
        self.message = message
        super().__init__(f"model provider error ({self.kind.value}): {message}")
