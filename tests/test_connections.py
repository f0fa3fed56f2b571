from pathpuzzle.core.primitives import Pos
from pathpuzzle.engine.systems.connections import (
    connection_report,
    step_direction,
    verify_path,
)
from pathpuzzle.models.enums import Direction


def _p(r, c):
    return Pos(row=r, col=c)


def test_report_lists_both_directions_of_each_pair():
    report = connection_report([["debut_1", "puzzle_1", "fin_1"]])
    assert len(report) == 4
    assert all(c.valid for c in report)
    first = report[0]
    assert (first.source, first.target, first.direction) == (_p(0, 0), _p(0, 1), Direction.E)


def test_report_marks_obstacles_and_mismatches_invalid():
    report = connection_report([["debut_1", "obstacle_1"], ["puzzle_1", None]])
    by_pair = {(c.source_piece, c.target_piece): c.valid for c in report}
    assert by_pair[("debut_1", "obstacle_1")] is False
    assert by_pair[("obstacle_1", "debut_1")] is False
    # puzzle_1 opens E/W only, so nothing joins vertically
    assert by_pair[("debut_1", "puzzle_1")] is False
    assert by_pair[("puzzle_1", "debut_1")] is False


def test_report_uses_overrides():
    grid = [["debut_1"], ["puzzle_1"]]
    report = connection_report(grid, {(1, 0): {Direction.N, Direction.S}})
    assert all(c.valid for c in report)


def test_step_direction():
    assert step_direction(_p(1, 1), _p(0, 1)) is Direction.N
    assert step_direction(_p(1, 1), _p(2, 1)) is Direction.S
    assert step_direction(_p(1, 1), _p(1, 2)) is Direction.E
    assert step_direction(_p(1, 1), _p(1, 0)) is Direction.W
    assert step_direction(_p(1, 1), _p(2, 2)) is None
    assert step_direction(_p(1, 1), _p(1, 1)) is None


def test_verify_valid_path():
    grid = [["debut_1", "puzzle_1", "fin_1"]]
    ex = verify_path(grid, [_p(0, 0), _p(0, 1), _p(0, 2)])
    assert ex.ok
    assert len(ex.steps) == 2
    assert ex.outcome == {"length": 3}


def test_verify_rejects_broken_paths():
    grid = [["debut_1", "puzzle_1", "fin_1"], [None, "puzzle_1", None]]
    assert not verify_path(grid, [_p(0, 0)]).ok

    jump = verify_path(grid, [_p(0, 0), _p(0, 2)])
    assert not jump.ok and jump.outcome["reason"] == "cells are not adjacent"

    empty = verify_path(grid, [_p(0, 0), _p(1, 0)])
    assert not empty.ok and empty.outcome["reason"] == "empty or unknown cell"

    mismatch = verify_path(grid, [_p(0, 0), _p(0, 1), _p(1, 1)])
    assert not mismatch.ok
    assert mismatch.outcome == {"failed_segment": 1, "reason": "pieces do not connect"}
    assert mismatch.steps[0]["ok"] is True

    outside = verify_path(grid, [_p(0, 2), _p(0, 3)])
    assert not outside.ok and outside.outcome["reason"] == "out of bounds"
