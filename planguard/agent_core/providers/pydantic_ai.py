"""Pydantic AI model provider adapter.

This module adapts a Pydantic AI model to the ``ModelProvider`` protocol used
by the planner. The model can be a Pydantic AI model instance (including the
``TestModel``/``FunctionModel`` test doubles) or a ``"provider:model"`` string
such as ``"openai:gpt-4o"``.

Message mapping:

- ``system`` messages are joined into the agent system prompt,
- earlier ``user``/``assistant`` turns become the message history,
- the final ``user`` message is the prompt.

Pydantic AI and transport failures are translated into ``ProviderError``.
"""

from typing import Any, List, Optional, Sequence

import httpx
from pydantic_ai import Agent
from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)

from planguard.core.logging_config import get_logger

from ..errors import ProviderError, ProviderErrorKind
from ..schemas.domain import Message, Role
from .base import ModelProvider

logger = get_logger(__name__)


def _kind_for_status(status_code: int) -> ProviderErrorKind:
    if status_code in (401, 403):
        return ProviderErrorKind.auth
    if status_code == 429:
        return ProviderErrorKind.rate_limit
    return ProviderErrorKind.network


class PydanticAIModelProvider(ModelProvider):
    """Adapter exposing a Pydantic AI model as a ``ModelProvider``.

    Attributes:
        _model: The Pydantic AI model instance or model name string
        _model_settings: Optional model settings forwarded on every run
    """

    def __init__(self, model: Any, *, model_settings: Optional[dict] = None) -> None:
        """Initialize the adapter.

        Args:
            model: Pydantic AI model instance or ``"provider:model"`` string
            model_settings: Optional settings (temperature, max_tokens, ...)
        """
        self._model = model
        self._model_settings = model_settings

    def _split_messages(self, messages: Sequence[Message]) -> tuple[str, List[ModelMessage], str]:
        """Split the conversation into system prompt, history and prompt."""
        system_text = "\n\n".join(m.content for m in messages if m.role == Role.system)
        turns = [m for m in messages if m.role != Role.system]
        if not turns or turns[-1].role != Role.user:
            raise ValueError("conversation must end with a user message")

        history: List[ModelMessage] = []
        for turn in turns[:-1]:
            if turn.role == Role.user:
                history.append(ModelRequest(parts=[UserPromptPart(content=turn.content)]))
            else:
                history.append(ModelResponse(parts=[TextPart(content=turn.content)]))

        # Pydantic AI only injects the agent system prompt into a fresh conversation.
        if history and system_text:
            first = history[0]
            if isinstance(first, ModelRequest):
                history[0] = ModelRequest(parts=[SystemPromptPart(content=system_text), *first.parts])
            else:
                history.insert(0, ModelRequest(parts=[SystemPromptPart(content=system_text)]))

        return system_text, history, turns[-1].content

    async def send_message(self, messages: Sequence[Message]) -> str:
        """Send the conversation to the model and return its text answer.

        Raises:
            ProviderError: On authentication, rate limit, transport or
                malformed-response failures.
        """
        system_text, history, prompt = self._split_messages(messages)

        agent_kwargs: dict[str, Any] = {"output_type": str}
        if system_text:
            agent_kwargs["system_prompt"] = system_text
        if self._model_settings:
            agent_kwargs["model_settings"] = dict(self._model_settings)
        agent: Agent = Agent(self._model, **agent_kwargs)

        logger.debug(f"Sending {len(messages)} messages to model (history={len(history)})")
        try:
            result = await agent.run(prompt, message_history=history or None)
        except ModelHTTPError as e:
            kind = _kind_for_status(e.status_code)
            logger.warning(f"Model HTTP error {e.status_code}: {kind.value}")
            raise ProviderError(kind, str(e)) from e
        except UnexpectedModelBehavior as e:
            raise ProviderError(ProviderErrorKind.invalid_response, str(e)) from e
        except (httpx.TransportError, OSError) as e:
            raise ProviderError(ProviderErrorKind.network, str(e)) from e

        output = result.output
        if not isinstance(output, str):
            raise ProviderError(ProviderErrorKind.invalid_response, f"expected text output, got {type(output).__name__}")
        return output
