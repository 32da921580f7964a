import pytest

cp_sat = pytest.importorskip("solver.cp_sat")

from restrictions import Restrictions
from solver.grid import Grid
from solver.orchestrator import _placed_from_cells, check_tiling
from solver.search import TilingSolver

try_tile = cp_sat.try_tile

GRIDS = [(4, 1), (1, 4), (2, 2), (3, 3), (4, 2), (2, 4), (4, 3), (3, 4), (4, 4)]

RESTRICTION_SETS = [
    [],
    [((0, 0), (1, 0))],
    [((0, 0), (0, 1))],
    [((0, 0), (1, 0)), ((1, 1), (1, 2))],
    [((0, 0), (1, 0)), ((2, 0), (3, 0)), ((0, 1), (1, 1)), ((2, 1), (3, 1)), ((1, 2), (2, 2))],
    [((1, 0), (1, 1)), ((0, 1), (1, 1)), ((2, 2), (3, 2))],
]


def _fits(pairs, width, height):
    grid = Grid(width, height)
    return all(grid.in_bounds(*a) and grid.in_bounds(*b) for a, b in pairs)


CASES = [
    (w, h, pairs)
    for w, h in GRIDS
    for pairs in RESTRICTION_SETS
    if _fits(pairs, w, h)
]


@pytest.mark.parametrize("width,height,pairs", CASES)
def test_backtracking_and_cp_sat_agree(width, height, pairs):
    restrictions = Restrictions(pairs)
    solver = TilingSolver(Grid(width, height), restrictions)
    found = solver.run()

    ok, _placed, reason = try_tile(width, height, restrictions, max_seconds=10.0)
    assert reason != "Stopped before solution (timebox)"
    assert found == ok

    if found:
        pieces = _placed_from_cells([tuple(p.coords()) for p in solver.pieces()])
        assert check_tiling(width, height, pieces, restrictions) == []
