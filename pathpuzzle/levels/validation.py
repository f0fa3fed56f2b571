from __future__ import annotations

from typing import Any

from ..core.primitives import Pos
from ..engine.systems.catalog import lookup
from ..models.enums import Difficulty
from ..models.level import GridCells, Level

DEFAULT_ROWS = 3
DEFAULT_COLS = 5


def create_grid(rows: int, cols: int, initial: GridCells | None = None) -> GridCells:
    """A rows x cols grid of empty cells, copying whatever part of ``initial`` fits."""
    grid: GridCells = [[None] * cols for _ in range(rows)]
    for r, row in enumerate((initial or [])[:rows]):
        for c, key in enumerate((row or [])[:cols]):
            grid[r][c] = key
    return grid


def generate_locked_cells(grid: GridCells) -> list[Pos]:
    return [
        Pos(row=r, col=c)
        for r, row in enumerate(grid)
        for c, key in enumerate(row)
        if key is not None
    ]


def _field(data: dict[str, Any], snake: str, camel: str) -> Any:
    return data[snake] if snake in data else data.get(camel)


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_level(data: Any) -> list[str]:
    """Collect structural problems of a raw level payload; [] means valid."""
    if not isinstance(data, dict):
        return ["Level payload is not an object"]
    errors: list[str] = []

    name = data.get("name")
    if not name:
        errors.append("Level name is missing")
    elif not isinstance(name, str):
        errors.append("Level name is not a string")
    for key in ("description", "board_image", "boardImage"):
        if data.get(key) is not None and not isinstance(data[key], str):
            errors.append(f"Level {key} is not a string")

    difficulty = data.get("difficulty")
    if not difficulty:
        errors.append("Level difficulty is missing")
    elif not isinstance(difficulty, str) or difficulty not in {d.value for d in Difficulty}:
        errors.append(f"Unknown difficulty: {difficulty}")

    grid = data.get("grid")
    if grid is None:
        errors.append("Level grid is missing")
    elif not isinstance(grid, list):
        errors.append("Level grid is not an array")
    elif len(grid) == 0:
        errors.append("Level grid is empty")
    elif not all(isinstance(row, list) for row in grid):
        errors.append("Level grid rows are not arrays")
    else:
        for r, row in enumerate(grid):
            for c, key in enumerate(row):
                if key is None:
                    continue
                if not isinstance(key, str):
                    errors.append(f"Cell [{r},{c}] is not a piece key")
                elif lookup(key) is None:
                    errors.append(f"Unknown piece {key!r} at [{r},{c}]")

    locked = _field(data, "locked_cells", "lockedCells")
    if locked is None:
        errors.append("Level lockedCells is missing")
    elif not isinstance(locked, list):
        errors.append("Level lockedCells is not an array")
    elif isinstance(grid, list) and grid and all(isinstance(row, list) for row in grid):
        for cell in locked:
            if not (isinstance(cell, dict) and _is_index(cell.get("row")) and _is_index(cell.get("col"))):
                errors.append(f"Malformed locked cell: {cell!r}")
                continue
            r, c = cell["row"], cell["col"]
            if not (0 <= r < len(grid) and 0 <= c < len(grid[r])):
                errors.append(f"Locked cell [{r},{c}] is out of bounds")

    available = _field(data, "available_pieces", "availablePieces")
    if available is None:
        errors.append("Level availablePieces is missing")
    elif not isinstance(available, list):
        errors.append("Level availablePieces is not an array")
    elif not all(isinstance(key, str) for key in available):
        errors.append("Level availablePieces entries are not piece keys")

    return errors


def ensure_valid_level(data: Any) -> Level:
    """Build a Level from a possibly incomplete payload, filling defaults for missing parts."""
    data = data if isinstance(data, dict) else {}
    grid = data.get("grid")
    if not (isinstance(grid, list) and grid and isinstance(grid[0], list)):
        grid = create_grid(DEFAULT_ROWS, DEFAULT_COLS)
    locked = _field(data, "locked_cells", "lockedCells")
    available = _field(data, "available_pieces", "availablePieces")
    return Level(
        id=data.get("id") or 0,
        name=data.get("name") or "Niveau sans nom",
        description=data.get("description") or "",
        difficulty=data.get("difficulty") or Difficulty.EASY,
        board_image=_field(data, "board_image", "boardImage") or "/Board-lvl1.png",
        grid=grid,
        locked_cells=locked if isinstance(locked, list) else [],
        available_pieces=available if isinstance(available, list) else [],
    )
