from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from ...models.enums import Direction, PieceKind
from ...models.pieces import DIRECTION_ORDER, PieceDefinition

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

ALL_DIRECTIONS: frozenset[Direction] = frozenset(DIRECTION_ORDER)

# (row, col) offsets
OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
}

_OPPOSITE = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}

_CLOCKWISE = {
    Direction.N: Direction.E,
    Direction.E: Direction.S,
    Direction.S: Direction.W,
    Direction.W: Direction.N,
}

_COUNTER_CLOCKWISE = {after: before for before, after in _CLOCKWISE.items()}

_PREFIXES: tuple[tuple[str, PieceKind], ...] = (
    ("debut_", PieceKind.START),
    ("fin_", PieceKind.END),
    ("puzzle_", PieceKind.PATH),
    ("obstacle_", PieceKind.OBSTACLE),
    ("deco_", PieceKind.DECORATION),
)


def kind_of(key: str | None) -> PieceKind | None:
    if not key:
        return None
    for prefix, kind in _PREFIXES:
        if key.startswith(prefix):
            return kind
    return None


def is_start(key: str | None) -> bool:
    return kind_of(key) is PieceKind.START


def is_end(key: str | None) -> bool:
    return kind_of(key) is PieceKind.END


def _piece(key: str, name: str, openings: str = "") -> PieceDefinition:
    kind = kind_of(key)
    if kind is None:
        raise ValueError(f"Piece key without a known prefix: {key}")
    return PieceDefinition(
        key=key,
        name=name,
        kind=kind,
        openings=frozenset(Direction(c) for c in openings),
        rotatable=kind is PieceKind.PATH,
    )


_DEFINITIONS = (
    # start (Little Red Riding Hood) and end (the house) open on every side
    _piece("debut_1", "Départ", "NSEW"),
    _piece("fin_1", "Arrivée", "NSEW"),
    _piece("fin_2", "Maison", "NSEW"),
    # straight pieces
    _piece("puzzle_1", "Chemin horizontal", "EW"),
    _piece("puzzle_2", "Chemin Sud-West", "SW"),
    # turns
    _piece("puzzle_3", "Virage Sud-West", "SW"),
    _piece("puzzle_4", "Virage Nord-Ouest", "EW"),
    _piece("puzzle_5", "Virage Sud-Est", "SW"),
    _piece("puzzle_6", "Virage Sud-Ouest", "EW"),
    # junctions: drawn as crossings, declared with two openings only
    _piece("puzzle_7", "Carrefour en T", "EW"),
    _piece("puzzle_8", "Carrefour en croix", "EW"),
    _piece("obstacle_1", "Rocher"),
    _piece("obstacle_2", "Arbre"),
    _piece("obstacle_3", "Buisson"),
    _piece("obstacle_4", "Souche"),
)

PIECES: Mapping[str, PieceDefinition] = MappingProxyType(
    {p.key: p for p in _DEFINITIONS}
)


def lookup(key: str | None) -> PieceDefinition | None:
    """Catalog entry for ``key``; None for an empty or unknown key."""
    if not key:
        return None
    return PIECES.get(key)


def all_pieces(kind: PieceKind | None = None) -> list[PieceDefinition]:
    return [p for p in PIECES.values() if kind is None or p.kind is kind]


def opposite_of(direction: Direction) -> Direction:
    return _OPPOSITE[direction]


def rotate_clockwise(openings: Iterable[Direction]) -> frozenset[Direction]:
    return frozenset(_CLOCKWISE[d] for d in openings)


def rotate_counter_clockwise(openings: Iterable[Direction]) -> frozenset[Direction]:
    return frozenset(_COUNTER_CLOCKWISE[d] for d in openings)


def ordered(openings: Iterable[Direction]) -> list[Direction]:
    present = set(openings)
    return [d for d in DIRECTION_ORDER if d in present]


def can_connect(
    src: PieceDefinition | None,
    dst: PieceDefinition | None,
    direction: Direction,
    src_openings: Iterable[Direction] | None = None,
    dst_openings: Iterable[Direction] | None = None,
) -> bool:
    """Whether a step from ``src`` towards ``direction`` lands in ``dst``.

    Start and end pieces are treated as open on every side, so only the other
    piece of the pair has to face them. Rotated instances pass their effective
    openings explicitly; otherwise the catalog openings are used.
    """
    if src is None or dst is None:
        return False
    if not (src.passable and dst.passable):
        return False
    if src.omnidirectional and dst.omnidirectional:
        return True
    src_dirs = frozenset(src.openings if src_openings is None else src_openings)
    dst_dirs = frozenset(dst.openings if dst_openings is None else dst_openings)
    back = opposite_of(direction)
    if src.omnidirectional:
        return back in dst_dirs
    if dst.omnidirectional:
        return direction in src_dirs
    return direction in src_dirs and back in dst_dirs
