from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...core.primitives import Pos
from ...models.enums import Coord, Direction, PieceKind
from ...models.pieces import DIRECTION_ORDER
from .catalog import ALL_DIRECTIONS, OFFSETS, lookup, opposite_of

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence


@dataclass
class SearchStep:
    event: str
    pos: Coord | None = None
    direction: Direction | None = None
    neighbor: Coord | None = None
    reason: str | None = None


def in_bounds(grid: Sequence[Sequence[str | None]], c: Coord) -> bool:
    r, col = c
    return 0 <= r < len(grid) and 0 <= col < len(grid[r])


def neighbor(c: Coord, d: Direction) -> Coord:
    dr, dc = OFFSETS[d]
    return (c[0] + dr, c[1] + dc)


def locate_endpoints(
    grid: Sequence[Sequence[str | None]],
) -> tuple[Coord | None, Coord | None]:
    start: Coord | None = None
    end: Coord | None = None
    for r, row in enumerate(grid):
        for c, key in enumerate(row):
            piece = lookup(key)
            if piece is None:
                continue
            if start is None and piece.kind is PieceKind.START:
                start = (r, c)
            elif end is None and piece.kind is PieceKind.END:
                end = (r, c)
    return start, end


def effective_openings(
    grid: Sequence[Sequence[str | None]],
    overrides: Mapping[Coord, Iterable[Direction]],
    c: Coord,
) -> frozenset[Direction] | None:
    """Openings of the piece at ``c``: its override if any, else the catalog default."""
    piece = lookup(grid[c[0]][c[1]])
    if piece is None:
        return None
    if c in overrides:
        return frozenset(overrides[c])
    return piece.openings


def _rebuild(parent: dict[Coord, Coord], start: Coord, end: Coord) -> list[Pos]:
    out = [end]
    cur = end
    while cur != start:
        cur = parent[cur]
        out.append(cur)
    out.reverse()
    return [Pos(row=r, col=c) for r, c in out]


def resolve_path(
    grid: Sequence[Sequence[str | None]],
    cell_directions: Mapping[Coord, Iterable[Direction]] | None = None,
    *,
    trace: Callable[[SearchStep], None] | None = None,
) -> list[Pos]:
    """Ordered cells from the start piece to the end piece, or [] when unreachable.

    Breadth-first over (cell, entry direction). A cell is visited at most once
    whatever direction it is entered from, and a piece never exits through the
    side it was entered by. Start/end pieces count as open on every side.
    Only in-bounds cells enter the visited set, so the search expands at most
    one node per grid cell.
    """

    def emit(event: str, **kw) -> None:
        if trace is not None:
            trace(SearchStep(event=event, **kw))

    overrides = cell_directions or {}
    start, end = locate_endpoints(grid)
    if start is None or end is None:
        emit("missing_endpoint", reason="no start" if start is None else "no end")
        return []

    emit("start", pos=start)
    frontier: deque[tuple[Coord, Direction | None]] = deque([(start, None)])
    seen: set[Coord] = {start}
    parent: dict[Coord, Coord] = {}

    while frontier:
        cur, entry = frontier.popleft()
        emit("visit", pos=cur, direction=entry)
        if cur == end:
            emit("found", pos=cur)
            return _rebuild(parent, start, end)

        piece = lookup(grid[cur[0]][cur[1]])
        if piece is None:
            emit("prune", pos=cur, reason="unknown piece")
            continue
        if piece.omnidirectional:
            openings = ALL_DIRECTIONS
        else:
            openings = effective_openings(grid, overrides, cur) or frozenset()
        exits = openings if entry is None else openings - {entry}

        for d in DIRECTION_ORDER:
            if d not in exits:
                continue
            nb = neighbor(cur, d)
            if not in_bounds(grid, nb):
                emit("reject", pos=cur, direction=d, neighbor=nb, reason="out of bounds")
                continue
            if nb in seen:
                emit("reject", pos=cur, direction=d, neighbor=nb, reason="visited")
                continue
            key = grid[nb[0]][nb[1]]
            if not key:
                emit("reject", pos=cur, direction=d, neighbor=nb, reason="empty")
                continue
            nb_piece = lookup(key)
            if nb_piece is None:
                emit("reject", pos=cur, direction=d, neighbor=nb, reason="unknown piece")
                continue
            if not nb_piece.passable:
                emit("reject", pos=cur, direction=d, neighbor=nb, reason=nb_piece.kind.value)
                continue
            back = opposite_of(d)
            if not nb_piece.omnidirectional:
                nb_openings = effective_openings(grid, overrides, nb) or frozenset()
                if back not in nb_openings:
                    emit("reject", pos=cur, direction=d, neighbor=nb, reason="no facing opening")
                    continue
            seen.add(nb)
            parent[nb] = cur
            frontier.append((nb, back))
            emit("enqueue", pos=cur, direction=d, neighbor=nb)

    emit("exhausted")
    return []
