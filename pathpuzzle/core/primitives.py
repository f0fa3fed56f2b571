from __future__ import annotations
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field


class Pos(BaseModel):
    """Grid coordinate (0-based, row first)."""
    model_config = ConfigDict(frozen=True)

    row: int
    col: int

    @property
    def coord(self) -> tuple[int, int]:
        return (self.row, self.col)


class Explanation(BaseModel):
    """Detailed reasoning for the UI (which checks ran, intermediate values, outcome)."""
    ok: bool
    steps: List[Dict[str, Any]] = Field(default_factory=list)
    outcome: Dict[str, Any] = Field(default_factory=dict)
