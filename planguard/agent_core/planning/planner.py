from __future__ import annotations

"""Plan generation from a natural-language goal.

Responsibilities
----------------

- Compose one prompt from the planning context, the tool catalog and the goal.
- Call the model provider exactly once and parse its answer into a ``Plan``.
- Check that every ``ToolInvocation`` names a tool in the catalog.

The planner is intentionally constrained:

- It does not execute tools.
- It does not retry: retry/backoff belongs to the model provider.
- It does not judge plan quality, only structure and tool references.
"""

import json
import logging
from typing import Collection, Optional, Protocol, Sequence, Set, Union

from ..errors import UnknownToolError
from ..providers.base import ModelProvider
from ..rules.context import PlanningContext
from ..schemas.domain import Message
from ..tools.base import ToolInfo
from .steps import Plan, parse_plan

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are an AI planning assistant. Your job is to break down user goals into executable steps."
)

_OUTPUT_FORMAT = """You must respond with a valid JSON object following this exact format:

{
  "reasoning": "Your explanation of the plan",
  "steps": [
    {"type": "tool_call", "tool_name": "tool_name", "parameters": {...}},
    {"type": "reasoning", "text": "explanation"},
    {"type": "response", "text": "final response to user"}
  ]
}"""

_GUIDELINES = """Guidelines:
1. Break complex goals into simple, sequential steps
2. Use tool_call steps to invoke tools with proper parameters
3. Use reasoning steps to explain your thought process
4. End with a response step that answers the user's question
5. Ensure all tool names match exactly the available tools
6. Validate that parameters match the tool's schema"""


class ToolCatalog(Protocol):
    def list_names(self) -> Set[str]: ...


class Planner:
    """Planner that turns a goal into a validated-structure ``Plan``.

    The returned plan is suitable for guardrail validation and then for
    ``PlanExecutor.execute_plan``.
    """

    def __init__(self, provider: ModelProvider) -> None:
        """
        Initialize the planner.

        Args:
            provider: The model provider used to generate plans.
        """
        self._provider = provider

    def build_system_prompt(self, context: PlanningContext, available_tools: Sequence[ToolInfo]) -> str:
        """Compose the planning system prompt.

        The prompt holds, in order: the context system prompt, the JSON output
        format, the tool catalog, the guidelines, and the context constraints.
        """
        sections = [context.system_prompt.strip() or DEFAULT_SYSTEM_PROMPT, _OUTPUT_FORMAT]

        if not available_tools:
            sections.append("No tools are available. You can only use reasoning and response steps.")
        else:
            lines = ["Available tools:", ""]
            for tool in available_tools:
                lines.append(f"- **{tool.name}**: {tool.description}")
                lines.append(f"  Parameters schema: {json.dumps(tool.parameters_schema, indent=2)}")
                lines.append("")
            sections.append("\n".join(lines).rstrip())

        sections.append(_GUIDELINES)

        if context.constraints:
            sections.append("Constraints:\n" + "\n".join(f"- {c}" for c in context.constraints))

        sections.append("Remember: Respond ONLY with valid JSON. Do not include any other text.")
        return "\n\n".join(sections)

    async def create_plan(
        self,
        goal: str,
        available_tools: Sequence[ToolInfo],
        context: Optional[PlanningContext] = None,
    ) -> Plan:
        """Generate a plan for ``goal``.

        Parameters
        ----------
        goal:
            The user goal or request.
        available_tools:
            Catalog of tools the plan may use.
        context:
            Planning context already shaped by the rule engine. A default
            context is used when omitted.

        Returns
        -------
        Plan
            The parsed plan.

        Raises
        ------
        ProviderError
            Propagated unmodified from the model provider.
        PlanParseError
            If the model answer cannot be parsed into a plan.
        """
        ctx = context if context is not None else PlanningContext(system_prompt=DEFAULT_SYSTEM_PROMPT)
        messages = [
            Message.system(self.build_system_prompt(ctx, available_tools)),
            Message.user(goal),
        ]

        logger.debug(f"Requesting plan for goal ({len(goal)} chars) with {len(available_tools)} tools")
        raw = await self._provider.send_message(messages)
        plan = parse_plan(raw)
        logger.info(f"Created plan with {len(plan.steps)} steps")
        return plan

    def validate_plan(self, plan: Plan, tool_catalog: Union[ToolCatalog, Collection[str]]) -> None:
        """Check that every tool invocation names a known tool.

        Args:
            plan: The plan to check.
            tool_catalog: A registry exposing ``list_names()`` or a collection of tool names.

        Raises:
            UnknownToolError: For the first invocation naming an unknown tool.
        """
        list_names = getattr(tool_catalog, "list_names", None)
        names = set(list_names()) if callable(list_names) else set(tool_catalog)

        for invocation in plan.tool_invocations():
            if invocation.tool_name not in names:
                logger.warning(f"Plan references unknown tool '{invocation.tool_name}'")
                raise UnknownToolError(invocation.tool_name, names)
