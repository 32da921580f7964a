# Orchestrator: picks an engine, applies the deadline, reports progress
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Tuple

from config import CFG, ENGINES
from models import PlacedPiece, SolveResult
from progress import (
    set_engine, set_grid, set_status, set_search_position, set_counters,
    set_elapsed, set_done, start_timer, log_run_detail,
)
from restrictions import Restrictions
from solver.errors import InvariantViolation
from solver.grid import Cell, Grid
from solver.piece import piece_from_coords
from solver.search import TilingSolver

REASON_UNSOLVABLE = "No tiling satisfies the constraints"
REASON_TIMEBOX = "Stopped before solution (timebox)"


# ---------- helpers ----------

def _resolve_time_limit(time_limit: Optional[float]) -> Optional[float]:
    if time_limit is None:
        time_limit = getattr(CFG, "TIME_LIMIT", 0.0)
    try:
        seconds = float(time_limit)
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None


def _progress_hook(grid: Grid):
    total = max(1, len(grid))

    def _publish(engine: TilingSolver, cell: Cell) -> None:
        pct = 100.0 * grid.index_of(cell) / total
        set_search_position(cell.x, cell.y, engine.nodes, engine.backtracks, pct)

    return _publish


def check_tiling(width: int, height: int, pieces: List[PlacedPiece], restrictions: Optional[Restrictions] = None) -> List[str]:
    """Independent audit of a finished tiling; returns human-readable problems."""
    restrictions = restrictions if restrictions is not None else Restrictions()
    problems: List[str] = []
    owner: Dict[Tuple[int, int], PlacedPiece] = {}

    for p in pieces:
        if len(p.cells) != 4:
            problems.append(f"piece #{p.number} has {len(p.cells)} cells")
        for c in p.cells:
            if not (0 <= c[0] < width and 0 <= c[1] < height):
                problems.append(f"piece #{p.number} leaves the grid at {c}")
            elif c in owner:
                problems.append(f"cell {c} is covered by #{owner[c].number} and #{p.number}")
            else:
                owner[c] = p
        for i, a in enumerate(p.cells):
            for b in p.cells[i + 1:]:
                if restrictions.is_restricted(a, b):
                    problems.append(f"piece #{p.number} joins restricted cells {a} and {b}")

    for y in range(height):
        for x in range(width):
            if (x, y) not in owner:
                problems.append(f"cell {(x, y)} is not covered")

    for (x, y), p in owner.items():
        for n in ((x + 1, y), (x, y + 1)):
            other = owner.get(n)
            if other is not None and other is not p and other.kind == p.kind:
                problems.append(f"pieces #{p.number} and #{other.number} are both {p.kind} and touch")
    return problems


def _placed_from_cells(groups: List[Tuple[Tuple[int, int], ...]]) -> List[PlacedPiece]:
    placed: List[PlacedPiece] = []
    for number, cells in enumerate(groups):
        piece = piece_from_coords(cells)
        kind = piece.shape.name if piece.is_complete else "?"
        placed.append(PlacedPiece(number, kind, tuple(piece.coords())))
    return placed


# ---------- engines ----------

def _run_backtrack(width: int, height: int, restrictions: Restrictions, seconds: Optional[float]) -> SolveResult:
    grid = Grid.create(width, height)
    deadline = time.time() + seconds if seconds else None
    engine = TilingSolver(
        grid,
        restrictions,
        deadline=deadline,
        progress_every=int(getattr(CFG, "PROGRESS_EVERY", 0)),
        progress_hook=_progress_hook(grid),
    )
    t0 = time.time()
    ok = engine.run()
    elapsed = time.time() - t0

    pieces: List[PlacedPiece] = []
    if ok:
        pieces = _placed_from_cells([tuple(p.coords()) for p in engine.pieces()])

    reason = None
    if not ok:
        reason = REASON_TIMEBOX if engine.timed_out else REASON_UNSOLVABLE
    return SolveResult(
        ok=ok,
        width=width,
        height=height,
        engine="backtrack",
        pieces=pieces,
        elapsed_sec=elapsed,
        nodes=engine.nodes,
        backtracks=engine.backtracks,
        timed_out=engine.timed_out,
        reason=reason,
    )


def _run_cp_sat(width: int, height: int, restrictions: Restrictions, seconds: Optional[float]) -> SolveResult:
    from solver.cp_sat import try_tile  # ortools is only loaded when asked for

    t0 = time.time()
    ok, placed, reason = try_tile(width, height, restrictions, max_seconds=seconds)
    elapsed = time.time() - t0

    pieces = _placed_from_cells([cells for _kind, cells in placed]) if ok else []
    timed_out = (not ok) and reason == REASON_TIMEBOX
    if not ok and reason and reason.startswith("Proven infeasible"):
        reason = REASON_UNSOLVABLE
    return SolveResult(
        ok=ok,
        width=width,
        height=height,
        engine="cp-sat",
        pieces=pieces,
        elapsed_sec=elapsed,
        timed_out=timed_out,
        reason=reason,
    )


_ENGINE_RUNNERS = {
    "backtrack": _run_backtrack,
    "cp-sat": _run_cp_sat,
}


# ---------- public entrypoint ----------

def solve_grid(
    width: int,
    height: int,
    restrictions: Optional[Restrictions] = None,
    *,
    engine: Optional[str] = None,
    time_limit: Optional[float] = None,
    cross_check: Optional[bool] = None,
) -> SolveResult:
    """Tile a ``width`` × ``height`` grid and publish progress along the way.

    ``engine`` defaults to ``CFG.ENGINE``. With ``cross_check`` the other
    engine is run too and its verdict is stored in ``result.meta``.
    Grid-size problems raise ``ValueError``; an unsolvable grid is a normal
    result with ``ok=False``.
    """
    restrictions = restrictions if restrictions is not None else Restrictions()
    engine_name = (engine or getattr(CFG, "ENGINE", "backtrack") or "backtrack").strip().lower()
    if engine_name not in ENGINES:
        raise ValueError(f"unknown engine {engine_name!r}; expected one of {', '.join(ENGINES)}")

    width = int(width)
    height = int(height)
    if width <= 0 or height <= 0:
        raise ValueError(f"grid dimensions must be positive, got {width} × {height}")
    max_cells = int(getattr(CFG, "MAX_CELLS", 0))
    if max_cells > 0 and width * height > max_cells:
        raise ValueError(f"{width} × {height} grid exceeds the {max_cells}-cell limit")
    if cross_check is None:
        cross_check = bool(getattr(CFG, "CROSS_CHECK", False))
    seconds = _resolve_time_limit(time_limit)

    set_engine(engine_name)
    set_grid(width, height)
    set_status("Solving")
    start_timer()
    log_run_detail(
        "Run setup",
        engine=engine_name,
        width=width,
        height=height,
        restrictions=len(restrictions),
        time_limit=seconds,
    )

    result = _ENGINE_RUNNERS[engine_name](width, height, restrictions, seconds)

    if result.ok:
        problems = check_tiling(width, height, result.pieces, restrictions)
        result.meta["problems"] = problems
        if problems:
            detail = "; ".join(problems)
            log_run_detail("Tiling audit failed", engine=engine_name, problems=detail)
            set_status("Error")
            set_done(reason=f"{engine_name} produced an invalid tiling")
            raise InvariantViolation(f"{engine_name} produced an invalid tiling: {detail}")

    if cross_check:
        other_name = "cp-sat" if engine_name == "backtrack" else "backtrack"
        other = _ENGINE_RUNNERS[other_name](width, height, restrictions, seconds)
        decided = not (result.timed_out or other.timed_out)
        agrees: Optional[bool] = (result.ok == other.ok) if decided else None
        result.meta["cross_check"] = {
            "engine": other_name,
            "ok": other.ok,
            "reason": other.reason,
            "agrees": agrees,
        }
        log_run_detail("Cross-check", engine=other_name, ok=other.ok, agrees=agrees)

    set_counters(result.nodes, result.backtracks)
    set_elapsed(result.elapsed_sec)
    set_done(result.ok, reason=result.reason or f"{len(result.pieces)} pieces")
    log_run_detail(
        "Run result",
        engine=engine_name,
        ok=result.ok,
        nodes=result.nodes,
        backtracks=result.backtracks,
        elapsed=f"{result.elapsed_sec:.3f}s",
        reason=result.reason,
    )
    return result


def result_summary(result: SolveResult) -> Dict[str, Any]:
    counts: Dict[str, int] = {}
    for p in result.pieces:
        counts[p.kind] = counts.get(p.kind, 0) + 1
    return {"pieces": len(result.pieces), "by_kind": dict(sorted(counts.items()))}


__all__ = ["solve_grid", "check_tiling", "result_summary", "REASON_UNSOLVABLE", "REASON_TIMEBOX"]
