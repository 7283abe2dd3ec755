"""Tool registry and built-in tools.

 A *tool* is the execution unit for ``ToolInvocation`` steps.

 - The planner describes registered tools to the model via ``ToolInfo``.
 - The planner checks that every ``ToolInvocation`` names a registered tool.
 - The executor resolves the tool by name and awaits ``execute(parameters)``.

 This package exports:

 - ``Tool``: protocol for async tool execution.
 - ``ToolRegistry``: name -> tool implementation mapping.
 - ``ToolInfo``: catalog entry (name, description, parameter schema).
 - ``Calculator`` / ``FileReader``: built-in tools.
 """

from .base import Tool, ToolInfo
from .builtin import Calculator, FileReader
from .registry import ToolRegistry

__all__ = [
    "Calculator",
    "FileReader",
    "Tool",
    "ToolInfo",
    "ToolRegistry",
]
