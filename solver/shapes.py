# solver/shapes.py — the seven tetromino kinds and how to recognise them
from __future__ import annotations

from enum import Enum
from typing import List, Sequence, Tuple

from solver.errors import InvariantViolation
from solver.grid import Coord
from solver.piece import Piece, piece_from_coords

Placement = Tuple[Coord, ...]

_ROTATIONS = (
    lambda x, y: (-y, x),   # 90
    lambda x, y: (-x, -y),  # 180
    lambda x, y: (y, -x),   # 270
)


def _all_rotations(seed: Piece) -> List[Piece]:
    """Distinct 90° rotations of ``seed`` about the origin (seed included)."""
    first = seed.cells[0]
    if (first.x, first.y) != (0, 0):
        raise InvariantViolation(f"seed {seed!r} must start at (0,0)")

    rotations = [seed]
    for rotate in _ROTATIONS:
        rotated = piece_from_coords(rotate(c.x, c.y) for c in seed.cells)
        if not any(rotated.is_translation_of(kept) for kept in rotations):
            rotations.append(rotated)
    return rotations


def _normalized(piece: Piece) -> Placement:
    ox, oy = piece.cells[0].x, piece.cells[0].y
    return tuple((c.x - ox, c.y - oy) for c in piece.cells)


class ShapeKind(Enum):
    #  x
    #  x x
    #  x
    T = (4, ((0, 0), (0, 1), (1, 1), (0, 2)))
    #  x
    #  x
    #  x x
    L = (4, ((0, 0), (0, 1), (0, 2), (1, 2)))
    #  x x x
    #      x
    J = (4, ((0, 0), (1, 0), (2, 0), (2, 1)))
    #  x
    #  x x
    #    x
    S = (2, ((0, 0), (0, 1), (1, 1), (1, 2)))
    #  x x
    #    x x
    Z = (2, ((0, 0), (1, 0), (1, 1), (2, 1)))
    #  x
    #  x
    #  x
    #  x
    I = (2, ((0, 0), (0, 1), (0, 2), (0, 3)))
    #  x x
    #  x x
    O = (1, ((0, 0), (1, 0), (0, 1), (1, 1)))

    def __init__(self, expected_rotations: int, seed: Sequence[Coord]):
        self.expected_rotations = expected_rotations
        self._samples = _all_rotations(piece_from_coords(seed))

        if len(self._samples) != expected_rotations:
            raise InvariantViolation(
                f"{self.name}: expected {expected_rotations} rotations, built {len(self._samples)}"
            )
        for i, a in enumerate(self._samples):
            for b in self._samples[i + 1:]:
                if a.is_translation_of(b):
                    raise InvariantViolation(f"{self.name}: duplicate rotation {a!r}")

    @property
    def placements(self) -> Tuple[Placement, ...]:
        """Distinct rotations as scan-ordered offsets from their first cell."""
        return tuple(_normalized(p) for p in self._samples)

    def matches(self, piece: Piece) -> bool:
        return any(piece.is_translation_of(sample) for sample in self._samples)


def classify(piece: Piece) -> ShapeKind:
    if not piece.is_complete:
        raise InvariantViolation(f"cannot classify incomplete {piece!r}")
    for kind in ShapeKind:
        if kind.matches(piece):
            return kind
    # every connected tetromino matches a kind; anything else is a search bug
    raise InvariantViolation(f"{piece!r} does not match any tetromino")


__all__ = ["Placement", "ShapeKind", "classify"]
