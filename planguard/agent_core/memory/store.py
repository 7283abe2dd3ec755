from __future__ import annotations

"""Conversational memory.

The executor writes every step outcome to a ``MemoryStore`` before moving on
to the next step; the agent service writes the user goal and the final
response. Storage internals (persistence, token budgeting) belong to the
store implementation, not to the core.
"""

from collections import deque
from typing import Deque, List, Optional, Protocol

from ..schemas.domain import Message


class MemoryStore(Protocol):
    """Protocol for conversational memory backends."""

    def add_message(self, message: Message) -> None: ...

    def get_recent(self, limit: int) -> List[Message]: ...

    def clear(self) -> None: ...


class InMemoryStore:
    """
    Process-local memory store.

    Keeps messages in insertion order. When ``max_messages`` is set, the
    oldest messages are dropped once the limit is exceeded.
    """

    def __init__(self, max_messages: Optional[int] = None) -> None:
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be >= 1")
        self._messages: Deque[Message] = deque(maxlen=max_messages)

    def add_message(self, message: Message) -> None:
        self._messages.append(message)

    def get_recent(self, limit: int) -> List[Message]:
        """Return up to ``limit`` most recent messages, oldest first."""
        if limit <= 0:
            return []
        return list(self._messages)[-limit:]

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
