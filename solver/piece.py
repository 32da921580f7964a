# Tetromino pieces: membership, translation and reachability
from __future__ import annotations

import itertools
from typing import Iterable, List, Set, Tuple

from solver.errors import InvariantViolation
from solver.grid import Cell, Coord, Grid

CELLS_PER_PIECE = 4

_UIDS = itertools.count()


class Piece:
    """Up to four cells destined to become one placed tetromino.

    Members are kept in scan order (y, then x) so two complete pieces can be
    compared cell by cell. The shape kind is classified lazily and cached
    until membership changes again.
    """

    def __init__(self, *cells: Cell):
        self.uid = next(_UIDS)
        self._cells: List[Cell] = []
        self._shape = None
        for cell in cells:
            self.add(cell)

    # ---------- membership ----------

    def add(self, cell: Cell) -> None:
        if self.is_complete:
            raise InvariantViolation(f"cannot add {cell!r}: piece #{self.uid} already has {CELLS_PER_PIECE} cells")
        if cell in self._cells:
            raise InvariantViolation(f"{cell!r} is already part of piece #{self.uid}")
        if cell.piece is not None:
            raise InvariantViolation(f"{cell!r} is owned by another piece")

        self._cells.append(cell)
        self._cells.sort(key=lambda c: c.sort_key)
        self._shape = None
        cell.piece = self

    def remove(self, cell: Cell) -> None:
        if cell not in self._cells:
            raise InvariantViolation(f"{cell!r} is not part of piece #{self.uid}")
        if cell.piece is not self:
            raise InvariantViolation(f"{cell!r} thinks it belongs to a different piece")

        self._cells.remove(cell)
        self._shape = None
        cell.piece = None

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    @property
    def count(self) -> int:
        return len(self._cells)

    @property
    def is_complete(self) -> bool:
        return len(self._cells) == CELLS_PER_PIECE

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._cells

    def coords(self) -> List[Coord]:
        return [c.coord for c in self._cells]

    # ---------- geometry ----------

    @property
    def shape(self):
        """Shape kind of the complete piece (see :mod:`solver.shapes`)."""
        if not self.is_complete:
            raise InvariantViolation(f"piece #{self.uid} has {self.count} cells; only complete pieces have a shape")
        if self._shape is None:
            from solver.shapes import classify
            self._shape = classify(self)
        return self._shape

    def is_translation_of(self, other: "Piece") -> bool:
        """True when both pieces have the same layout shifted by one vector."""
        if not (self.is_complete and other.is_complete):
            raise InvariantViolation("translation check needs two complete pieces")

        first, other_first = self._cells[0], other._cells[0]
        dx = first.x - other_first.x
        dy = first.y - other_first.y
        for mine, theirs in zip(self._cells[1:], other._cells[1:]):
            if mine.x - theirs.x != dx or mine.y - theirs.y != dy:
                return False
        return True

    def can_be_completed(self, grid: Grid) -> bool:
        # Cells are visited in scan order, so an unfinished piece can only
        # still grow through an unowned cell to the right of or below it.
        if self.is_complete:
            raise InvariantViolation(f"piece #{self.uid} is already complete")
        for cell in self._cells:
            right = grid.right(cell)
            if right is not None and right.piece is None:
                return True
            down = grid.down(cell)
            if down is not None and down.piece is None:
                return True
        return False

    def adjacent_cells(self, grid: Grid) -> Set[Cell]:
        """Neighbouring cells not owned by this piece, unowned cells included."""
        out: Set[Cell] = set()
        for cell in self._cells:
            for neighbor in grid.adjacent(cell):
                if neighbor.piece is not self:
                    out.add(neighbor)
        return out

    def adjacent_pieces(self, grid: Grid) -> Set["Piece"]:
        return {c.piece for c in self.adjacent_cells(grid) if c.piece is not None}

    def __repr__(self) -> str:
        shape = self._shape.name if self._shape is not None else "?"
        coords = " ".join(f"({x},{y})" for x, y in self.coords())
        return f"Piece(#{self.uid} shape={shape} cells=[{coords}])"


def piece_from_coords(coords: Iterable[Coord]) -> Piece:
    """Build a free-standing piece from raw coordinates (cells outside any grid)."""
    return Piece(*(Cell(x, y) for x, y in coords))


__all__ = ["CELLS_PER_PIECE", "Piece", "piece_from_coords"]
