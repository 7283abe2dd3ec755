"""Conversational memory stores."""

from .store import InMemoryStore, MemoryStore

__all__ = [
    "InMemoryStore",
    "MemoryStore",
]
