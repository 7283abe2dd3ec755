from __future__ import annotations

"""Convenience factories for wiring the agent core.

This module contains small helpers to build the default tool registry, the
guardrail and rule registries described by ``Settings``, and a ready-to-use
``AgentService``.

The intent is to keep application wiring and tests concise, while still
allowing advanced deployments to provide their own registries, providers and
memory stores.
"""

from typing import Any, Optional

from planguard.core.config import Settings

from .guardrails.file_path import FilePathGuardrail
from .guardrails.rate_limit import RateLimitGuardrail
from .guardrails.registry import GuardrailRegistry
from .memory.store import InMemoryStore, MemoryStore
from .planning.planner import Planner
from .providers.pydantic_ai import PydanticAIModelProvider
from .rules.builtin import ResponseLengthRule, Tone, ToneRule
from .rules.engine import RuleEngine
from .runtime.engine import PlanExecutor
from .runtime.models import CancelSignal, ExecutorDeps
from .service import AgentService, AgentServiceDeps
from .tools.builtin import Calculator, FileReader
from .tools.registry import ToolRegistry


def build_default_tool_registry() -> ToolRegistry:
    """Build the default ``ToolRegistry``.

    The default registry includes the built-in tools shipped with the
    package (calculator and file reader).
    """
    reg = ToolRegistry()
    reg.register(Calculator())
    reg.register(FileReader())
    return reg


def build_guardrails(settings: Settings) -> GuardrailRegistry:
    """Build a ``GuardrailRegistry`` from the guardrail settings.

    The file path guardrail is always registered. Without
    ``allowed_directories`` it denies every path of the file tools
    (``file_reader`` unless ``file_tools`` says otherwise), so the default
    ``FileReader`` cannot read anything until directories are configured.

    The file path guardrail is registered before the rate limit so that a
    plan rejected for its paths never consumes rate budget.
    """
    cfg = settings.guardrails
    reg = GuardrailRegistry()
    if cfg.allowed_directories is not None:
        reg.register(FilePathGuardrail(cfg.allowed_directories, tool_names=cfg.file_tools))
    else:
        reg.register(FilePathGuardrail([], tool_names=cfg.file_tools or [FileReader.name]))
    if cfg.max_tool_calls is not None:
        reg.register(RateLimitGuardrail(cfg.max_tool_calls, cfg.rate_window_seconds))
    return reg


def build_rule_engine(settings: Settings) -> RuleEngine:
    """Build a ``RuleEngine`` from the rule settings."""
    cfg = settings.rules
    engine = RuleEngine()
    if cfg.tone is not None:
        engine.add_rule(ToneRule(Tone(cfg.tone)))
    if cfg.max_response_words is not None:
        engine.add_rule(ResponseLengthRule(cfg.max_response_words))
    return engine


def build_agent_service(
    provider: Optional[Any] = None,
    settings: Optional[Settings] = None,
    tools: Optional[ToolRegistry] = None,
    memory: Optional[MemoryStore] = None,
    cancel_signal: Optional[CancelSignal] = None,
) -> AgentService:
    """Wire an ``AgentService``.

    ``provider`` may be a ``ModelProvider``, a pydantic-ai model instance or
    a ``"provider:model"`` string. When omitted, ``settings.model`` is used.
    """
    settings = settings if settings is not None else Settings()
    tools = tools if tools is not None else build_default_tool_registry()
    memory = memory if memory is not None else InMemoryStore()

    if provider is None:
        provider = PydanticAIModelProvider(settings.model)
    elif not callable(getattr(provider, "send_message", None)):
        provider = PydanticAIModelProvider(provider)

    executor = PlanExecutor(
        deps=ExecutorDeps(tools=tools, memory=memory, cancel_signal=cancel_signal),
        continue_on_tool_error=settings.executor.continue_on_tool_error,
    )
    deps = AgentServiceDeps(
        planner=Planner(provider),
        tools=tools,
        guardrails=build_guardrails(settings),
        rules=build_rule_engine(settings),
        executor=executor,
        memory=memory,
    )
    return AgentService(deps=deps)
