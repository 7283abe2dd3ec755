from __future__ import annotations

"""Tool registry.

The registry maps a tool name to an executable tool implementation.

The planner reads the catalog from it to describe tools to the model and to
check plan references; the executor uses it to resolve ``ToolInvocation``
steps into concrete implementations.
"""

from typing import Dict, List, Optional, Set

from .base import Tool, ToolInfo


class ToolRegistry:
    """
    In-memory mapping of tool names to implementations.

    Notes:
        - ``register`` overwrites any existing mapping for the tool name.
        - ``get`` returns ``None`` if the tool is missing.
    """

    def __init__(self) -> None:
        """Initialize an empty tool registry."""
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool implementation.

        Args:
            tool: The tool instance to register. It must expose a ``name`` attribute.
        """
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        """
        Retrieve a registered tool by name.

        Args:
            name: The tool name.

        Returns:
            The tool implementation, or ``None`` if no tool has that name.
        """
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def list_names(self) -> Set[str]:
        return set(self._tools)

    def list_tools(self) -> List[ToolInfo]:
        """Return the tool catalog sorted by name so prompts are stable."""
        return [ToolInfo.from_tool(self._tools[name]) for name in sorted(self._tools)]

    def __len__(self) -> int:
        return len(self._tools)
