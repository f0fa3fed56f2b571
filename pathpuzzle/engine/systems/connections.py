from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from ...core.primitives import Explanation, Pos
from ...models.enums import Coord, Direction
from ...models.pieces import DIRECTION_ORDER
from .catalog import can_connect, lookup
from .pathfinding import effective_openings, in_bounds, neighbor

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence


class Connection(BaseModel):
    source: Pos
    source_piece: str
    target: Pos
    target_piece: str
    direction: Direction
    valid: bool


def connection_report(
    grid: Sequence[Sequence[str | None]],
    cell_directions: Mapping[Coord, Iterable[Direction]] | None = None,
) -> list[Connection]:
    """Every pair of adjacent known pieces, in both directions, with whether they join."""
    overrides = cell_directions or {}
    out: list[Connection] = []
    for r, row in enumerate(grid):
        for c, key in enumerate(row):
            src = lookup(key)
            if src is None:
                continue
            src_dirs = effective_openings(grid, overrides, (r, c))
            for d in DIRECTION_ORDER:
                nb = neighbor((r, c), d)
                if not in_bounds(grid, nb):
                    continue
                dst = lookup(grid[nb[0]][nb[1]])
                if dst is None:
                    continue
                dst_dirs = effective_openings(grid, overrides, nb)
                out.append(
                    Connection(
                        source=Pos(row=r, col=c),
                        source_piece=src.key,
                        target=Pos(row=nb[0], col=nb[1]),
                        target_piece=dst.key,
                        direction=d,
                        valid=can_connect(src, dst, d, src_dirs, dst_dirs),
                    )
                )
    return out


def step_direction(a: Pos, b: Pos) -> Direction | None:
    """Direction leading from ``a`` to the orthogonally adjacent ``b``."""
    dr, dc = b.row - a.row, b.col - a.col
    if abs(dr) + abs(dc) != 1:
        return None
    if dr == -1:
        return Direction.N
    if dr == 1:
        return Direction.S
    return Direction.E if dc == 1 else Direction.W


def verify_path(
    grid: Sequence[Sequence[str | None]],
    path: Sequence[Pos],
    cell_directions: Mapping[Coord, Iterable[Direction]] | None = None,
) -> Explanation:
    """Check a hand-written path segment by segment; stops at the first broken link."""
    overrides = cell_directions or {}
    if len(path) < 2:
        return Explanation(ok=False, outcome={"reason": "path needs at least two cells"})

    steps: list[dict] = []
    for i, (cur, nxt) in enumerate(zip(path, path[1:])):
        step = {"segment": i, "from": cur.model_dump(), "to": nxt.model_dump()}
        steps.append(step)

        d = step_direction(cur, nxt)
        if d is None:
            step["ok"] = False
            return Explanation(ok=False, steps=steps, outcome={"failed_segment": i, "reason": "cells are not adjacent"})
        step["direction"] = d.value

        if not (in_bounds(grid, cur.coord) and in_bounds(grid, nxt.coord)):
            step["ok"] = False
            return Explanation(ok=False, steps=steps, outcome={"failed_segment": i, "reason": "out of bounds"})

        src = lookup(grid[cur.row][cur.col])
        dst = lookup(grid[nxt.row][nxt.col])
        if src is None or dst is None:
            step["ok"] = False
            return Explanation(ok=False, steps=steps, outcome={"failed_segment": i, "reason": "empty or unknown cell"})

        src_dirs = effective_openings(grid, overrides, cur.coord)
        dst_dirs = effective_openings(grid, overrides, nxt.coord)
        ok = can_connect(src, dst, d, src_dirs, dst_dirs)
        step.update(pieces=[src.key, dst.key], ok=ok)
        if not ok:
            return Explanation(ok=False, steps=steps, outcome={"failed_segment": i, "reason": "pieces do not connect"})

    return Explanation(ok=True, steps=steps, outcome={"length": len(path)})
