from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

Coord = Tuple[int, int]


class Cell:
    """A unit square of the grid.

    Coordinates never change; ``piece`` is the back-reference to the owning
    piece and is only written by :class:`solver.piece.Piece`.
    """

    __slots__ = ("x", "y", "piece")

    def __init__(self, x: int, y: int):
        self.x = int(x)
        self.y = int(y)
        self.piece = None

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    @property
    def sort_key(self) -> Tuple[int, int]:
        # rows first, then columns: the scan order
        return (self.y, self.x)

    def __lt__(self, other: "Cell") -> bool:
        return self.sort_key < other.sort_key

    def __repr__(self) -> str:
        owner = "-" if self.piece is None else f"#{self.piece.uid}"
        return f"Cell({self.x},{self.y} piece={owner})"


class Grid:
    """Row-major flat array of cells with bounded neighbour lookups."""

    def __init__(self, width: int, height: int):
        try:
            width = int(width)
            height = int(height)
        except (TypeError, ValueError):
            raise ValueError(f"grid dimensions must be integers, got {width!r} × {height!r}")
        if width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width} × {height}")
        self.width = width
        self.height = height
        self._cells: List[Cell] = [Cell(x, y) for y in range(height) for x in range(width)]

    @classmethod
    def create(cls, width: int, height: int) -> "Grid":
        return cls(width, height)

    # ---------- lookups ----------

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    @property
    def first(self) -> Cell:
        return self._cells[0]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x},{y}) is outside a {self.width} × {self.height} grid")
        return self._cells[y * self.width + x]

    def index_of(self, cell: Cell) -> int:
        return cell.y * self.width + cell.x

    def left(self, cell: Cell) -> Optional[Cell]:
        return None if cell.x == 0 else self._cells[self.index_of(cell) - 1]

    def right(self, cell: Cell) -> Optional[Cell]:
        return None if cell.x == self.width - 1 else self._cells[self.index_of(cell) + 1]

    def up(self, cell: Cell) -> Optional[Cell]:
        return None if cell.y == 0 else self._cells[self.index_of(cell) - self.width]

    def down(self, cell: Cell) -> Optional[Cell]:
        return None if cell.y == self.height - 1 else self._cells[self.index_of(cell) + self.width]

    def next(self, cell: Cell) -> Optional[Cell]:
        """Cell after ``cell`` reading left to right, top to bottom."""
        idx = self.index_of(cell) + 1
        return self._cells[idx] if idx < len(self._cells) else None

    def adjacent(self, cell: Cell) -> List[Cell]:
        out: List[Cell] = []
        for neighbor in (self.left(cell), self.right(cell), self.up(cell), self.down(cell)):
            if neighbor is not None:
                out.append(neighbor)
        return out

    @staticmethod
    def are_adjacent(a: Coord, b: Coord) -> bool:
        return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1

    # ---------- ownership snapshots ----------

    def owners(self) -> List[object]:
        """Owning piece for every cell in scan order (``None`` when unowned)."""
        return [c.piece for c in self._cells]

    def __repr__(self) -> str:
        return f"Grid({self.width} × {self.height})"


__all__ = ["Cell", "Coord", "Grid"]
