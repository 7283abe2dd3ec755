from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from pydantic import JsonValue

from ..errors import ToolExecutionError
from .base import Tool

logger = logging.getLogger(__name__)


def _calculator_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "operation": {
                "type": "string",
                "enum": ["add", "subtract", "multiply", "divide"],
                "description": "The arithmetic operation to perform",
            },
            "a": {"type": "number", "description": "The first operand"},
            "b": {"type": "number", "description": "The second operand"},
        },
        "required": ["operation", "a", "b"],
    }


def _file_reader_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "file_path": {"type": "string", "description": "Path of the text file to read"},
            "encoding": {"type": "string", "description": "File encoding (default: utf-8)"},
        },
        "required": ["file_path"],
    }


def _as_mapping(tool_name: str, parameters: JsonValue) -> Dict[str, Any]:
    if not isinstance(parameters, dict):
        raise ToolExecutionError(tool_name, "parameters must be an object")
    return parameters


def _number(tool_name: str, params: Dict[str, Any], key: str) -> float | int:
    value = params.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ToolExecutionError(tool_name, f"Missing or invalid '{key}' parameter")
    return value


@dataclass(frozen=True)
class Calculator(Tool):
    """
    Tool performing basic arithmetic.

    Accepts the operation under ``operation`` (alias: ``op``) and two numeric
    operands ``a`` and ``b``.
    """

    name: str = "calculator"
    description: str = "Performs arithmetic operations (add, subtract, multiply, divide)"
    parameters_schema: Dict[str, Any] = field(default_factory=_calculator_schema)

    async def execute(self, parameters: JsonValue) -> JsonValue:
        """
        Evaluate the requested operation.

        Returns:
            ``{"result": ..., "operation": ..., "a": ..., "b": ...}``

        Raises:
            ToolExecutionError: On missing/invalid parameters, unknown
                operations, or division by zero.
        """
        params = _as_mapping(self.name, parameters)
        operation = params.get("operation") or params.get("op")
        if not isinstance(operation, str):
            raise ToolExecutionError(self.name, "Missing or invalid 'operation' parameter")
        a = _number(self.name, params, "a")
        b = _number(self.name, params, "b")

        if operation == "add":
            result = a + b
        elif operation == "subtract":
            result = a - b
        elif operation == "multiply":
            result = a * b
        elif operation == "divide":
            if b == 0:
                raise ToolExecutionError(self.name, "Division by zero")
            result = a / b
        else:
            raise ToolExecutionError(self.name, f"Unknown operation: {operation}")

        return {"result": result, "operation": operation, "a": a, "b": b}


@dataclass(frozen=True)
class FileReader(Tool):
    """
    Tool reading a text file from the local filesystem.

    Path checks are not done here; pair this tool with ``FilePathGuardrail``.
    """

    name: str = "file_reader"
    description: str = "Reads the text content of a file"
    parameters_schema: Dict[str, Any] = field(default_factory=_file_reader_schema)

    async def execute(self, parameters: JsonValue) -> JsonValue:
        """
        Read the file named by ``file_path``.

        Returns:
            ``{"file_path": ..., "content": ..., "size_bytes": ...}``

        Raises:
            ToolExecutionError: If the path is missing, does not exist, is not
                a regular file, or cannot be decoded.
        """
        params = _as_mapping(self.name, parameters)
        raw_path = params.get("file_path") or params.get("path")
        if not isinstance(raw_path, str) or not raw_path:
            raise ToolExecutionError(self.name, "Missing or invalid 'file_path' parameter")
        encoding = str(params.get("encoding") or "utf-8")

        file_path = Path(raw_path)
        if not file_path.exists():
            raise ToolExecutionError(self.name, f"File not found: {file_path}")
        if not file_path.is_file():
            raise ToolExecutionError(self.name, f"Path is not a file: {file_path}")

        try:
            content = file_path.read_text(encoding=encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise ToolExecutionError(self.name, f"Encoding error reading {file_path}: {e}") from e
        except OSError as e:
            raise ToolExecutionError(self.name, f"Could not read {file_path}: {e}") from e

        size_bytes = file_path.stat().st_size
        logger.info(f"Successfully read file: {file_path} ({size_bytes} bytes)")
        return {"file_path": str(file_path), "content": content, "size_bytes": size_bytes}
