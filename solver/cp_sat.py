# Exact-cover CP-SAT model of the tiling problem
from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

from ortools.sat.python import cp_model as _cp

from config import CFG
from restrictions import Restrictions
from solver.shapes import ShapeKind

Coord = Tuple[int, int]
# (kind, covered cells in scan order)
Option = Tuple[ShapeKind, Tuple[Coord, ...]]

# ---------------- helpers ----------------

def build_options(W: int, H: int, restrictions: Optional[Restrictions] = None) -> List[Option]:
    """Every in-bounds tetromino placement that splits no restricted pair."""
    restrictions = restrictions if restrictions is not None else Restrictions()
    options: List[Option] = []
    for kind in ShapeKind:
        for offsets in kind.placements:
            min_dx = min(dx for dx, _ in offsets)
            max_dx = max(dx for dx, _ in offsets)
            max_dy = max(dy for _, dy in offsets)
            for ay in range(H - max_dy):
                for ax in range(-min_dx, W - max_dx):
                    cells = tuple((ax + dx, ay + dy) for dx, dy in offsets)
                    if _splits_restriction(cells, restrictions):
                        continue
                    options.append((kind, cells))
    return options


def _splits_restriction(cells: Tuple[Coord, ...], restrictions: Restrictions) -> bool:
    for i, a in enumerate(cells):
        for b in cells[i + 1:]:
            if restrictions.is_restricted(a, b):
                return True
    return False


def _neighbors(cell: Coord, W: int, H: int) -> List[Coord]:
    x, y = cell
    out = []
    for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
        nx, ny = x + dx, y + dy
        if 0 <= nx < W and 0 <= ny < H:
            out.append((nx, ny))
    return out


def try_tile(
    W: int,
    H: int,
    restrictions: Optional[Restrictions] = None,
    max_seconds: Optional[float] = None,
) -> Tuple[bool, List[Option], Optional[str]]:
    """Exact cover by tetrominoes; no two same-kind pieces may share an edge.

    Returns (ok, placements, reason). Placements come back sorted by their
    first cell in scan order, the order the backtracking engine numbers its
    pieces in.
    """
    try:
        W = int(W)
        H = int(H)
    except Exception:
        return False, [], "Bad grid: W/H must be integers"
    if W <= 0 or H <= 0:
        return False, [], "Bad grid: W/H must be positive"
    if (W * H) % 4 != 0:
        return False, [], "Proven infeasible under current constraints"

    options = build_options(W, H, restrictions)

    m = _cp.CpModel()
    p = [m.NewBoolVar(f"p_{k}") for k in range(len(options))]

    cell_to_vars: Dict[Coord, List[int]] = defaultdict(list)
    for k, (_kind, cells) in enumerate(options):
        for c in cells:
            cell_to_vars[c].append(k)

    # --- exact cover ---
    for y in range(H):
        for x in range(W):
            here = cell_to_vars.get((x, y))
            if not here:
                return False, [], "Proven infeasible under current constraints"
            m.AddExactlyOne([p[k] for k in here])

    # --- same kind may not touch ---
    seen_pairs: Set[Tuple[int, int]] = set()
    for k, (kind, cells) in enumerate(options):
        own = set(cells)
        for c in cells:
            for n in _neighbors(c, W, H):
                if n in own:
                    continue
                for j in cell_to_vars.get(n, ()):
                    if j <= k or options[j][0] is not kind:
                        continue
                    if own.intersection(options[j][1]):
                        continue  # overlap already excluded by the cover
                    if (k, j) in seen_pairs:
                        continue
                    seen_pairs.add((k, j))
                    m.AddBoolOr([p[k].Not(), p[j].Not()])

    solver = _cp.CpSolver()
    seconds = float(max_seconds) if max_seconds is not None else float(getattr(CFG, "CP_SAT_SECONDS", 60.0))
    solver.parameters.max_time_in_seconds = max(0.01, seconds)
    solver.parameters.num_search_workers = max(1, int(getattr(CFG, "CP_SAT_WORKERS", 1)))
    solver.parameters.log_search_progress = False

    res = solver.Solve(m)

    if res in (_cp.OPTIMAL, _cp.FEASIBLE):
        placed = [options[k] for k in range(len(options)) if solver.BooleanValue(p[k])]
        placed.sort(key=lambda opt: (opt[1][0][1], opt[1][0][0]))
        return True, placed, None
    if res == _cp.INFEASIBLE:
        return False, [], "Proven infeasible under current constraints"
    if res == _cp.MODEL_INVALID:
        return False, [], "Model invalid (configuration error)"
    return False, [], "Stopped before solution (timebox)"


__all__ = ["build_options", "try_tile"]
