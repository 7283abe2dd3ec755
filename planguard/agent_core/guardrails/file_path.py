from __future__ import annotations

import os
from typing import Any, FrozenSet, Iterable, Iterator, Optional, Tuple

from ..errors import GuardrailViolation
from ..planning.steps import Plan, ToolInvocation
from .base import Guardrail

_PATH_KEYS = frozenset({"path", "file", "filename", "directory", "dir"})
_PATH_SUFFIXES = ("_path", "_dir")


def is_path_key(key: str) -> bool:
    """Return True for parameter names that conventionally carry a filesystem path."""
    lowered = key.lower()
    return lowered in _PATH_KEYS or lowered.endswith(_PATH_SUFFIXES)


def normalize_path(path: str) -> str:
    """Make ``path`` absolute and collapse ``.``/``..`` segments.

    Symlinks are not resolved.
    """
    return os.path.normpath(os.path.abspath(path))


def _is_within(target: str, directory: str) -> bool:
    try:
        return os.path.commonpath([target, directory]) == directory
    except ValueError:
        # Different drives on Windows.
        return False


class FilePathGuardrail(Guardrail):
    """
    Reject tool invocations touching paths outside the allowed directories.

    Every path-shaped parameter (``path``, ``file``, ``filename``,
    ``directory``, ``dir``, or any key ending in ``_path``/``_dir``) of a
    ``ToolInvocation`` is normalized and must lie within one of
    ``allowed_directories``.

    When ``tool_names`` is given, only those tools are checked and each of
    their invocations must carry at least one path parameter.

    Limitations:
        Symlinks are not resolved; a link inside an allowed directory may
        point elsewhere.
    """

    def __init__(
        self,
        allowed_directories: Iterable[str],
        tool_names: Optional[Iterable[str]] = None,
        name: str = "file_path",
    ) -> None:
        self.allowed_directories: Tuple[str, ...] = tuple(normalize_path(str(d)) for d in allowed_directories)
        self.tool_names: Optional[FrozenSet[str]] = frozenset(tool_names) if tool_names is not None else None
        self.name = name

    def _paths(self, invocation: ToolInvocation) -> Iterator[Tuple[str, Any]]:
        params = invocation.parameters
        if not isinstance(params, dict):
            return
        for key, value in params.items():
            if is_path_key(key):
                yield key, value

    def is_allowed(self, path: str) -> bool:
        target = normalize_path(path)
        return any(_is_within(target, allowed) for allowed in self.allowed_directories)

    def validate(self, plan: Plan) -> None:
        """
        Check every path parameter of the plan's tool invocations.

        Raises:
            GuardrailViolation: For the first path outside the allowed
                directories, a non-string path value, or (with ``tool_names``)
                a checked invocation without any path parameter.
        """
        for invocation in plan.tool_invocations():
            if self.tool_names is not None and invocation.tool_name not in self.tool_names:
                continue

            found = False
            for key, value in self._paths(invocation):
                found = True
                values = value if isinstance(value, list) else [value]
                for item in values:
                    if not isinstance(item, str):
                        raise GuardrailViolation(
                            self.name, f"{invocation.tool_name} parameter '{key}' must be a string path"
                        )
                    if not self.is_allowed(item):
                        raise GuardrailViolation(
                            self.name,
                            f"File path not allowed: {item} (normalized: {normalize_path(item)}). "
                            f"Allowed directories: {list(self.allowed_directories)}",
                        )

            if not found and self.tool_names is not None:
                raise GuardrailViolation(self.name, f"{invocation.tool_name} tool call missing a path parameter")
