from pydantic import BaseModel, ConfigDict, field_serializer

from .enums import Direction, PieceKind

DIRECTION_ORDER = (Direction.N, Direction.S, Direction.E, Direction.W)


class PieceDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    kind: PieceKind
    openings: frozenset[Direction] = frozenset()
    rotatable: bool = False

    @property
    def omnidirectional(self) -> bool:
        # start/end always connect in whichever direction the grid requires
        return self.kind in (PieceKind.START, PieceKind.END)

    @property
    def passable(self) -> bool:
        return self.kind in (PieceKind.START, PieceKind.END, PieceKind.PATH)

    @field_serializer("openings")
    def _ser_openings(self, openings: frozenset[Direction]) -> list[str]:
        return [d.value for d in DIRECTION_ORDER if d in openings]
