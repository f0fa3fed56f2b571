from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Union

from pydantic import BaseModel, Field

from ..core.primitives import Pos
from .enums import ActionLogResult, Direction
from .level import GridCells
from .pieces import PieceDefinition
from .session import CellDirections, PlaySession

# ----- Actions (discriminated union) -----


class PlaceAction(BaseModel):
    kind: Literal["place"] = "place"
    piece: str
    to: Pos
    # set when the piece is dragged from another cell rather than the gallery
    source: Pos | None = None


class RemoveAction(BaseModel):
    kind: Literal["remove"] = "remove"
    at: Pos


class RotateAction(BaseModel):
    kind: Literal["rotate"] = "rotate"
    at: Pos
    clockwise: bool = True


Action = Union[PlaceAction, RemoveAction, RotateAction]


# ----- Path checks -----


class CheckPathRequest(BaseModel):
    grid: GridCells
    cell_directions: list[CellDirections] = Field(default_factory=list)
    trace: bool = False


class CheckPathResponse(BaseModel):
    found: bool
    path: list[Pos]
    message: str
    trace: list[dict[str, Any]] | None = None


class VerifyPathRequest(BaseModel):
    grid: GridCells
    path: list[Pos]
    cell_directions: list[CellDirections] = Field(default_factory=list)


class RotateRequest(BaseModel):
    openings: list[Direction]
    clockwise: bool = True


class RotateResponse(BaseModel):
    openings: list[Direction]


class PieceListResponse(BaseModel):
    pieces: list[PieceDefinition]


# ----- Sessions -----


class CreateSessionRequest(BaseModel):
    level_id: int | None = None
    custom_level_id: int | None = None


class SessionView(BaseModel):
    id: str
    session: PlaySession


class EvaluateResponse(BaseModel):
    legal: bool
    explanation: str


class ApplyActionRequest(BaseModel):
    action: Action = Field(discriminator="kind")


class ApplyActionResponse(BaseModel):
    applied: bool
    explanation: str
    session: SessionView


# ----- Action Log -----


class ActionLogEntry(BaseModel):
    ts: datetime = Field(default_factory=datetime.now)
    session_id: str
    action: Action = Field(discriminator="kind")
    result: ActionLogResult = ActionLogResult.APPLIED
    message: str | None = None


class ActionLogResponse(BaseModel):
    entries: list[ActionLogEntry]
