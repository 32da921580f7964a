from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

Coord = Tuple[int, int]


@dataclass(frozen=True)
class PlacedPiece:
    number: int
    kind: str
    cells: Tuple[Coord, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "kind": self.kind,
            "cells": [list(c) for c in self.cells],
        }


@dataclass
class SolveResult:
    ok: bool
    width: int
    height: int
    engine: str
    pieces: List[PlacedPiece] = field(default_factory=list)
    elapsed_sec: float = 0.0
    nodes: int = 0
    backtracks: int = 0
    timed_out: bool = False
    reason: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def elapsed_str(self) -> str:
        return f"{int(self.elapsed_sec // 60)}m {self.elapsed_sec % 60:.3f}s"

    def owner_grid(self) -> List[List[Optional[int]]]:
        """Piece number per cell, indexed ``[y][x]``; ``None`` where uncovered."""
        rows: List[List[Optional[int]]] = [[None] * self.width for _ in range(self.height)]
        for p in self.pieces:
            for x, y in p.cells:
                rows[y][x] = p.number
        return rows

    def kind_of(self, x: int, y: int) -> Optional[str]:
        for p in self.pieces:
            if (x, y) in p.cells:
                return p.kind
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "width": self.width,
            "height": self.height,
            "engine": self.engine,
            "pieces": [p.to_dict() for p in self.pieces],
            "elapsed": round(self.elapsed_sec, 6),
            "elapsed_str": self.elapsed_str,
            "nodes": self.nodes,
            "backtracks": self.backtracks,
            "timed_out": self.timed_out,
            "reason": self.reason,
        }
