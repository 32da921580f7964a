# solver/transition.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from solver.grid import Cell
from solver.piece import Piece


@dataclass
class Transition:
    """Everything one candidate changed, so the search can put it back.

    ``merged_pieces`` maps each absorbed piece to the exact cells that moved
    out of it; the ``old_*``/``new_*`` lists are the lifecycle-set deltas.
    """

    cell: Optional[Cell] = None
    merged_pieces: Dict[Piece, List[Cell]] = field(default_factory=dict)
    old_unfinished: List[Piece] = field(default_factory=list)
    old_unverified: List[Piece] = field(default_factory=list)
    new_unfinished: List[Piece] = field(default_factory=list)
    new_unverified: List[Piece] = field(default_factory=list)
    new_verified: List[Piece] = field(default_factory=list)

    @property
    def is_merge(self) -> bool:
        return bool(self.merged_pieces)


__all__ = ["Transition"]
