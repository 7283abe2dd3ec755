"""Language model providers consumed by the planner."""

from .base import ModelProvider
from .pydantic_ai import PydanticAIModelProvider

__all__ = [
    "ModelProvider",
    "PydanticAIModelProvider",
]
