from __future__ import annotations

"""Plan model and the model-output parser.

A plan is an ordered, non-empty sequence of tagged steps:

- ``ToolInvocation`` (``type="tool_call"``): run a named tool with parameters.
- ``ReasoningNote`` (``type="reasoning"``): record a thought, no side effects.
- ``FinalResponse`` (``type="response"``): the answer returned to the user.

``parse_plan`` is the only place raw model text becomes a ``Plan``. It is
tolerant about what surrounds the JSON object (prose, Markdown fences) and
strict about the object itself: any schema problem fails the whole parse.
"""

import logging
from typing import Annotated, Iterator, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue, ValidationError, field_validator

from ..errors import PlanParseError

logger = logging.getLogger(__name__)


class _PlanSchema(BaseModel):
    # Models decorate their output with extra keys; those are dropped, never kept.
    model_config = ConfigDict(frozen=True, extra="ignore")


class ToolInvocation(_PlanSchema):
    type: Literal["tool_call"] = "tool_call"
    tool_name: str
    parameters: JsonValue = Field(default_factory=dict)

    @field_validator("tool_name")
    @classmethod
    def _tool_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("tool_name must be a non-empty string")
        return value


class ReasoningNote(_PlanSchema):
    type: Literal["reasoning"] = "reasoning"
    text: str


class FinalResponse(_PlanSchema):
    type: Literal["response"] = "response"
    text: str


PlanStep = Annotated[Union[ToolInvocation, ReasoningNote, FinalResponse], Field(discriminator="type")]


class Plan(_PlanSchema):
    """Immutable, ordered list of steps produced for one goal."""

    steps: Tuple[PlanStep, ...] = Field(..., min_length=1)
    reasoning: str = ""

    def tool_invocations(self) -> Iterator[ToolInvocation]:
        for step in self.steps:
            if isinstance(step, ToolInvocation):
                yield step

    @property
    def ends_with_response(self) -> bool:
        return isinstance(self.steps[-1], FinalResponse)


def extract_json(raw_text: str) -> str:
    """Return the JSON object embedded in ``raw_text``.

    Text already starting with ``{`` is returned as-is (trimmed). Otherwise the
    span from the first ``{`` to the last ``}`` is returned, which drops
    leading/trailing prose and Markdown code fences.
    """
    trimmed = raw_text.strip()
    if trimmed.startswith("{"):
        return trimmed

    start = trimmed.find("{")
    end = trimmed.rfind("}")
    if start != -1 and end > start:
        return trimmed[start : end + 1]

    raise PlanParseError("could not find a JSON object in model response")


def _describe(exc: ValidationError) -> str:
    problems = []
    empty_steps = False
    for err in exc.errors():
        loc = tuple(err.get("loc") or ())
        if err.get("type") == "json_invalid":
            return f"invalid JSON: {err.get('msg')}"
        # Invalid steps are dropped before the length check, so ``too_short``
        # also shows up next to per-step errors; only report it on its own.
        if err.get("type") == "too_short" and loc == ("steps",):
            empty_steps = True
            continue
        where = ".".join(str(part) for part in loc) or "<root>"
        problems.append(f"{where}: {err.get('msg')}")
    if not problems and empty_steps:
        return "plan contains no steps"
    return "; ".join(problems)


def parse_plan(raw_text: str) -> Plan:
    """Parse raw model output into a ``Plan``.

    Raises:
        PlanParseError: If no JSON object can be found, the JSON is invalid,
            required fields are missing, a step has an unknown type, a
            ``tool_name`` is blank, or the step list is empty.
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise PlanParseError("model response is empty")

    candidate = extract_json(raw_text)
    try:
        plan = Plan.model_validate_json(candidate)
    except ValidationError as exc:
        reason = _describe(exc)
        logger.debug(f"Plan parse failed: {reason}")
        raise PlanParseError(reason) from exc

    logger.debug(f"Parsed plan with {len(plan.steps)} steps")
    return plan
