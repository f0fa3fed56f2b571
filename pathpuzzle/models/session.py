from collections.abc import Iterable

from pydantic import BaseModel, Field

from ..core.primitives import Pos
from .enums import Coord, Direction
from .level import GridCells, Level


class CellDirections(BaseModel):
    """Rotated openings of the piece placed at (row, col)."""

    row: int
    col: int
    openings: list[Direction]


def overrides_of(cds: Iterable[CellDirections]) -> dict[Coord, frozenset[Direction]]:
    """Resolver override map keyed by (row, col)."""
    return {(cd.row, cd.col): frozenset(cd.openings) for cd in cds}


class PlaySession(BaseModel):
    id: str
    level: Level
    grid: GridCells
    cell_directions: list[CellDirections] = Field(default_factory=list)
    solved: bool = False
    last_path: list[Pos] = Field(default_factory=list)

    def overrides(self) -> dict[Coord, frozenset[Direction]]:
        return overrides_of(self.cell_directions)

    def set_override(self, p: Pos, openings: list[Direction] | None) -> None:
        self.cell_directions = [
            cd for cd in self.cell_directions if (cd.row, cd.col) != (p.row, p.col)
        ]
        if openings is not None:
            self.cell_directions.append(CellDirections(row=p.row, col=p.col, openings=openings))

    def in_bounds(self, p: Pos) -> bool:
        return 0 <= p.row < len(self.grid) and 0 <= p.col < len(self.grid[p.row])

    def piece_at(self, p: Pos) -> str | None:
        return self.grid[p.row][p.col]
