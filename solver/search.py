# solver/search.py — depth-first tiler with exact undo
"""
Backtracking search that assigns every cell of the grid to a tetromino.

Cells are visited left to right, top to bottom. Each cell can

  * start a new piece,
  * join the piece of the cell to its left,
  * join the piece of the cell above it,
  * join both, merging the left and upper pieces into one.

Every trial is recorded in a :class:`~solver.transition.Transition` so the
branch can be undone exactly when it fails further down.

Pieces move through three lifecycle sets::

    unfinished  (1-3 cells)
        |
    unverified  (4 cells, some neighbours not settled yet)
        |
    verified    (4 cells, every neighbour complete and of another kind)

Verified pieces are never inspected again.
"""
from __future__ import annotations

import sys
import time
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from config import CFG
from restrictions import Restrictions
from solver.errors import InvariantViolation
from solver.grid import Cell, Grid
from solver.piece import CELLS_PER_PIECE, Piece
from solver.transition import Transition

ProgressHook = Callable[["TilingSolver", Cell], None]


class TilingSolver:
    def __init__(
        self,
        grid: Grid,
        restrictions: Optional[Restrictions] = None,
        *,
        deadline: Optional[float] = None,
        progress_every: int = 0,
        progress_hook: Optional[ProgressHook] = None,
    ):
        self.grid = grid
        self.restrictions = restrictions if restrictions is not None else Restrictions()
        self.unfinished: Set[Piece] = set()
        self.unverified: Set[Piece] = set()
        self.verified: Set[Piece] = set()

        self.deadline = deadline
        self.timed_out = False
        self.nodes = 0
        self.backtracks = 0
        self._progress_every = max(0, int(progress_every))
        self._progress_hook = progress_hook

    # ---------- entry points ----------

    def run(self, *, headroom: Optional[int] = None) -> bool:
        """Solve from the first cell; one interpreter frame is used per cell."""
        if headroom is None:
            headroom = int(getattr(CFG, "RECURSION_HEADROOM", 200))
        needed = len(self.grid) + max(0, headroom)
        if sys.getrecursionlimit() < needed:
            sys.setrecursionlimit(needed)
        return self.solve(self.grid.first)

    def solve(self, cell: Optional[Cell]) -> bool:
        # reached past the last cell: solved iff nothing is left half-built
        if cell is None:
            return not self.unfinished

        if self._deadline_exceeded():
            return False
        self.nodes += 1
        if self._progress_hook is not None and self._progress_every and self.nodes % self._progress_every == 0:
            self._progress_hook(self, cell)

        next_cell = self.grid.next(cell)
        for pieces in self.candidates(cell):
            transition = Transition()
            self.add_to_piece(cell, pieces, transition)

            if self.verify_pieces(transition) and self.solve(next_cell):
                return True

            self.revert_transition(transition)
            self.backtracks += 1

        return False

    # ---------- candidate generation ----------

    def candidates(self, cell: Cell) -> List[Sequence[Piece]]:
        """Pieces ``cell`` may join, in the fixed order the search tries them."""
        left = self.grid.left(cell)
        up = self.grid.up(cell)
        left_ok = self.is_valid_association(cell, left)
        up_ok = self.is_valid_association(cell, up)

        options: List[Sequence[Piece]] = [(Piece(),)]
        if left_ok:
            options.append((left.piece,))
        if up_ok and not (left_ok and up.piece is left.piece):
            options.append((up.piece,))
        if left_ok and up_ok and up.piece is not left.piece:
            if (
                left.piece.count + up.piece.count < CELLS_PER_PIECE
                and not self._pieces_conflict(left.piece, up.piece)
            ):
                options.append((left.piece, up.piece))
        return options

    def is_valid_association(self, cell: Cell, candidate: Optional[Cell]) -> bool:
        """Whether ``cell`` may be added to the piece that owns ``candidate``."""
        if candidate is None:
            return False
        piece = candidate.piece
        if piece is None:
            raise InvariantViolation(f"{candidate!r} was visited but has no piece")
        if piece.is_complete:
            return False
        return not any(self.restrictions.is_restricted(cell.coord, member.coord) for member in piece.cells)

    def _pieces_conflict(self, a: Piece, b: Piece) -> bool:
        # merging would put every member of a and b into one piece
        return any(self.restrictions.is_restricted(m.coord, n.coord) for m in a.cells for n in b.cells)

    # ---------- apply / verify / revert ----------

    def add_to_piece(self, cell: Cell, pieces: Sequence[Piece], transition: Transition) -> None:
        """Attach ``cell`` to ``pieces[0]``, absorbing any further pieces into it."""
        if not pieces:
            raise InvariantViolation("add_to_piece needs at least one piece")

        piece = pieces[0]
        piece.add(cell)
        transition.cell = cell

        for merge_piece in pieces[1:]:
            if merge_piece not in self.unfinished:
                raise InvariantViolation(f"cannot merge untracked {merge_piece!r}")
            self.unfinished.remove(merge_piece)
            transition.old_unfinished.append(merge_piece)

            moved = list(merge_piece.cells)
            for moved_cell in moved:
                merge_piece.remove(moved_cell)
                piece.add(moved_cell)
            transition.merged_pieces[merge_piece] = moved

        if piece.is_complete:
            # a brand new piece cannot be complete after one step
            if piece not in self.unfinished:
                raise InvariantViolation(f"{piece!r} completed without being tracked")
            self.unfinished.remove(piece)
            transition.old_unfinished.append(piece)
            self.unverified.add(piece)
            transition.new_unverified.append(piece)
        elif piece not in self.unfinished:
            self.unfinished.add(piece)
            transition.new_unfinished.append(piece)

    def verify_pieces(self, transition: Transition) -> bool:
        """Check constraints and promote settled pieces to ``verified``.

        An unverified piece ends in one of three states:
          * a complete neighbour has the same kind -> the whole step fails
          * every neighbour is complete and of another kind -> verified
          * otherwise (unfinished or unowned neighbour) -> stays unverified
        Nothing is promoted unless the whole step passes.
        """
        for piece in self.unfinished:
            if not piece.can_be_completed(self.grid):
                return False

        promoted: List[Piece] = []
        for piece in self.unverified:
            settled = True
            for neighbor in piece.adjacent_cells(self.grid):
                other = neighbor.piece
                if other is None or not other.is_complete:
                    settled = False
                elif other.shape is piece.shape:
                    return False
            if settled:
                promoted.append(piece)

        for piece in promoted:
            self.unverified.remove(piece)
            transition.old_unverified.append(piece)
            self.verified.add(piece)
            transition.new_verified.append(piece)
        return True

    def revert_transition(self, transition: Transition) -> None:
        cell = transition.cell
        if cell is None or cell.piece is None:
            raise InvariantViolation("transition has no attached cell to revert")
        piece = cell.piece
        piece.remove(cell)

        for merge_piece, moved in transition.merged_pieces.items():
            for moved_cell in moved:
                piece.remove(moved_cell)
                merge_piece.add(moved_cell)

        # undo in reverse order: promotions from verify_pieces first,
        # then the lifecycle moves made by add_to_piece
        for p in transition.new_verified:
            if p not in self.verified:
                raise InvariantViolation(f"{p!r} missing from verified")
            self.verified.remove(p)
        for p in transition.old_unverified:
            if p in self.unverified:
                raise InvariantViolation(f"{p!r} already back in unverified")
            self.unverified.add(p)

        for tracked, added in (
            (self.unverified, transition.new_unverified),
            (self.unfinished, transition.new_unfinished),
        ):
            for p in added:
                if p not in tracked:
                    raise InvariantViolation(f"{p!r} missing from the set it was added to")
                tracked.remove(p)
        for p in transition.old_unfinished:
            if p in self.unfinished:
                raise InvariantViolation(f"{p!r} already back in unfinished")
            self.unfinished.add(p)

    # ---------- results ----------

    def pieces(self) -> List[Piece]:
        """Distinct owning pieces in scan order of their first cell."""
        seen: Dict[Piece, None] = {}
        for cell in self.grid:
            if cell.piece is not None:
                seen.setdefault(cell.piece, None)
        return list(seen)

    def snapshot(self) -> Tuple[Tuple[Optional[Piece], ...], Tuple[Tuple[Cell, ...], ...], FrozenSet[Piece], FrozenSet[Piece], FrozenSet[Piece]]:
        """Full ownership and lifecycle state, for comparing before/after a trial."""
        owners = tuple(self.grid.owners())
        members = tuple(p.cells if p is not None else () for p in owners)
        return owners, members, frozenset(self.unfinished), frozenset(self.unverified), frozenset(self.verified)

    def _deadline_exceeded(self) -> bool:
        if self.deadline is None:
            return False
        if time.time() >= self.deadline:
            self.timed_out = True
            return True
        return False


__all__ = ["TilingSolver", "ProgressHook"]
