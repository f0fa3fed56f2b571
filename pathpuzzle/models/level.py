from pydantic import BaseModel, Field

from ..core.primitives import Pos
from .enums import Difficulty

GridCells = list[list[str | None]]  # grid[row][col]


class Level(BaseModel):
    id: int | None = None
    name: str
    description: str = ""
    difficulty: Difficulty = Difficulty.EASY
    board_image: str = "/Board-lvl1.png"
    grid: GridCells
    locked_cells: list[Pos] = Field(default_factory=list)
    available_pieces: list[str] = Field(default_factory=list)
    published: bool = False

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    def is_locked(self, p: Pos) -> bool:
        return p in self.locked_cells
