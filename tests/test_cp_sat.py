import pytest

pytest.importorskip("ortools")

from restrictions import Restrictions
from solver.cp_sat import build_options, try_tile
from solver.shapes import ShapeKind


def test_build_options_counts_in_bounds_placements():
    assert [k for k, _ in build_options(4, 1)] == [ShapeKind.I]
    assert [k for k, _ in build_options(2, 2)] == [ShapeKind.O]
    # 19 fixed tetrominoes, each fits somewhere in a 4x4 board
    assert {k for k, _ in build_options(4, 4)} == set(ShapeKind)


def test_build_options_drops_placements_splitting_a_restriction():
    r = Restrictions([((0, 0), (1, 0))])
    assert build_options(2, 2, r) == []


def test_try_tile_two_by_two():
    ok, placed, reason = try_tile(2, 2, max_seconds=5.0)
    assert ok, reason
    assert placed == [(ShapeKind.O, ((0, 0), (1, 0), (0, 1), (1, 1)))]


def test_try_tile_rejects_bad_area_without_solving():
    ok, placed, reason = try_tile(3, 2)
    assert not ok
    assert placed == []
    assert reason.startswith("Proven infeasible")


def test_try_tile_four_by_two_has_touching_twins_in_every_cover():
    ok, _, reason = try_tile(4, 2, max_seconds=5.0)
    assert not ok
    assert reason.startswith("Proven infeasible")


def test_try_tile_merge_case_matches_backtracking():
    r = Restrictions([
        ((0, 0), (1, 0)),
        ((2, 0), (3, 0)),
        ((0, 1), (1, 1)),
        ((2, 1), (3, 1)),
        ((1, 2), (2, 2)),
    ])
    ok, placed, reason = try_tile(4, 3, r, max_seconds=5.0)
    assert ok, reason
    assert [(k, cells[0]) for k, cells in placed] == [
        (ShapeKind.L, (0, 0)),
        (ShapeKind.O, (1, 0)),
        (ShapeKind.J, (3, 0)),
    ]
