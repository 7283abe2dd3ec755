from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PlanningContext:
    """Mutable scratch state that rules shape before planning.

    A fresh context is created for every planning call; rules mutate it in
    place and it is discarded once the planning prompt has been built.
    """

    system_prompt: str = ""
    constraints: List[str] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_constraint(self, constraint: str) -> None:
        self.constraints.append(constraint)

    def set_metadata(self, key: str, value: str) -> None:
        self.metadata[key] = value

    def get_metadata(self, key: str) -> Optional[str]:
        return self.metadata.get(key)
