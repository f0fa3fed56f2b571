import pytest
from pydantic import ValidationError

from pathpuzzle.engine.systems.catalog import (
    ALL_DIRECTIONS,
    PIECES,
    can_connect,
    is_end,
    is_start,
    kind_of,
    lookup,
    opposite_of,
    ordered,
    rotate_clockwise,
    rotate_counter_clockwise,
)
from pathpuzzle.models.enums import Direction, PieceKind

N, S, E, W = Direction.N, Direction.S, Direction.E, Direction.W


def test_lookup_known_and_unknown_keys():
    p = lookup("puzzle_3")
    assert p is not None
    assert p.kind is PieceKind.PATH
    assert p.openings == {S, W}
    assert lookup("puzzle_99") is None
    assert lookup("") is None
    assert lookup(None) is None


def test_kind_follows_key_prefix():
    assert kind_of("debut_1") is PieceKind.START
    assert kind_of("fin_2") is PieceKind.END
    assert kind_of("puzzle_8") is PieceKind.PATH
    assert kind_of("obstacle_4") is PieceKind.OBSTACLE
    assert kind_of("deco_flower") is PieceKind.DECORATION
    assert kind_of("character") is None
    assert is_start("debut_1") and not is_start("fin_1")
    assert is_end("fin_1") and is_end("fin_2") and not is_end(None)


def test_every_entry_is_complete():
    for key, p in PIECES.items():
        assert p.key == key
        assert p.kind is kind_of(key)
        assert p.rotatable == (p.kind is PieceKind.PATH)
        if p.kind in (PieceKind.START, PieceKind.END):
            assert p.openings == ALL_DIRECTIONS
        elif p.kind is PieceKind.PATH:
            assert len(p.openings) == 2
        else:
            assert p.openings == frozenset()


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        PIECES["puzzle_9"] = PIECES["puzzle_1"]  # type: ignore[index]
    with pytest.raises(ValidationError):
        PIECES["puzzle_1"].rotatable = False  # type: ignore[misc]


def test_opposite_is_an_involution():
    assert opposite_of(N) is S and opposite_of(E) is W
    for d in Direction:
        assert opposite_of(opposite_of(d)) is d
        assert opposite_of(d) is not d


def test_rotations():
    assert rotate_clockwise({N}) == {E}
    assert rotate_clockwise({E, W}) == {N, S}
    assert rotate_counter_clockwise({N}) == {W}
    assert rotate_counter_clockwise({S, W}) == {E, S}
    for p in PIECES.values():
        dirs = p.openings
        for _ in range(4):
            dirs = rotate_clockwise(dirs)
        assert dirs == p.openings
        assert rotate_counter_clockwise(rotate_clockwise(p.openings)) == p.openings


def test_openings_serialize_in_canonical_order():
    assert ordered({W, N, E}) == [N, E, W]
    dumped = lookup("debut_1").model_dump(mode="json")
    assert dumped["openings"] == ["N", "S", "E", "W"]
    assert dumped["kind"] == "start"


def test_can_connect_rules():
    start, end = lookup("debut_1"), lookup("fin_1")
    horiz, turn = lookup("puzzle_1"), lookup("puzzle_3")
    assert can_connect(start, end, N)
    assert can_connect(start, horiz, E)
    assert not can_connect(start, horiz, S)
    assert can_connect(horiz, end, E)
    assert not can_connect(horiz, end, N)
    assert can_connect(horiz, turn, E)  # turn opens W
    assert not can_connect(turn, horiz, S)
    assert can_connect(turn, horiz, S, dst_openings={N, S})
    assert not can_connect(start, lookup("obstacle_1"), E)
    assert not can_connect(start, None, E)
