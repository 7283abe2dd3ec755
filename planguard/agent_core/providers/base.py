from __future__ import annotations

from typing import Protocol, Sequence

from ..schemas.domain import Message


class ModelProvider(Protocol):
    """Protocol for language model providers.

    ``send_message`` receives the ordered conversation and returns the raw
    text answer. Failures are raised as ``ProviderError``; retry and backoff
    are the provider's own concern.
    """

    async def send_message(self, messages: Sequence[Message]) -> str: ...
