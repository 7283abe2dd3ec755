from __future__ import annotations

"""Tool protocol and catalog data models.

A tool is the concrete execution unit for ``ToolInvocation`` steps.

The executor resolves ``ToolInvocation.tool_name`` through a ``ToolRegistry``
and awaits ``Tool.execute`` with the step's parameters.

Tools should:

- return JSON-compatible values,
- raise ``ToolExecutionError`` for expected failures (bad input, missing
  resources),
- avoid performing policy decisions themselves (guardrails run before the
  plan is executed).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol

from pydantic import JsonValue


@dataclass(frozen=True)
class ToolInfo:
    """Description of a tool as presented to the model."""

    name: str
    description: str
    parameters_schema: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_tool(cls, tool: "Tool") -> "ToolInfo":
        return cls(
            name=tool.name,
            description=tool.description,
            parameters_schema=dict(tool.parameters_schema),
        )


class Tool(Protocol):
    """Protocol for tool implementations."""

    name: str
    description: str
    parameters_schema: Dict[str, Any]

    async def execute(self, parameters: JsonValue) -> JsonValue: ...
