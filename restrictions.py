# restrictions.py: forbidden pairings and the restriction file parser
from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from solver.grid import Grid

Coord = Tuple[int, int]

# "x1,y1 x2,y2" with optional whitespace around the commas
_PAIR_RE = re.compile(
    r"^\s*(?P<x1>-?\d+)\s*,\s*(?P<y1>-?\d+)\s+(?P<x2>-?\d+)\s*,\s*(?P<y2>-?\d+)\s*$"
)


class RestrictionParseError(ValueError):
    def __init__(self, line_no: int, line: str, problem: str):
        self.line_no = line_no
        self.line = line
        self.problem = problem
        super().__init__(f"line {line_no}: {problem}: {line.strip()!r}")


class Restrictions:
    """Symmetric relation of cell pairs that may never share a piece."""

    def __init__(self, pairs: Optional[Iterable[Tuple[Coord, Coord]]] = None):
        self._by_cell: Dict[Coord, Set[Coord]] = {}
        for a, b in pairs or ():
            self.add(a, b)

    def add(self, a: Coord, b: Coord) -> None:
        a = (int(a[0]), int(a[1]))
        b = (int(b[0]), int(b[1]))
        self._by_cell.setdefault(a, set()).add(b)
        self._by_cell.setdefault(b, set()).add(a)

    def is_restricted(self, a: Coord, b: Coord) -> bool:
        partners = self._by_cell.get(a)
        return partners is not None and b in partners

    def partners(self, a: Coord) -> Set[Coord]:
        return set(self._by_cell.get(a, ()))

    def pairs(self) -> List[Tuple[Coord, Coord]]:
        """Each restricted pair once, smaller coordinate (scan order) first."""
        out: Set[Tuple[Coord, Coord]] = set()
        for a, partners in self._by_cell.items():
            for b in partners:
                lo, hi = sorted((a, b), key=lambda c: (c[1], c[0]))
                out.add((lo, hi))
        return sorted(out, key=lambda p: (p[0][1], p[0][0], p[1][1], p[1][0]))

    def __iter__(self) -> Iterator[Tuple[Coord, Coord]]:
        return iter(self.pairs())

    def __len__(self) -> int:
        return len(self.pairs())

    def __bool__(self) -> bool:
        return bool(self._by_cell)

    def __repr__(self) -> str:
        return f"Restrictions({len(self)} pairs)"


def parse_restrictions(text: str, width: int, height: int) -> Restrictions:
    """Parse restriction lines (``x1,y1 x2,y2``) for a ``width`` × ``height`` grid.

    Blank lines and ``#`` comments are skipped. Every pair must be in bounds
    and share an edge.
    """
    out = Restrictions()
    for line_no, raw in enumerate((text or "").splitlines(), start=1):
        line = raw.split("#", 1)[0]
        if not line.strip():
            continue
        m = _PAIR_RE.match(line)
        if not m:
            raise RestrictionParseError(line_no, raw, "expected 'x1,y1 x2,y2'")
        a = (int(m.group("x1")), int(m.group("y1")))
        b = (int(m.group("x2")), int(m.group("y2")))
        for x, y in (a, b):
            if not (0 <= x < width and 0 <= y < height):
                raise RestrictionParseError(line_no, raw, f"({x},{y}) is outside the {width} × {height} grid")
        if not Grid.are_adjacent(a, b):
            raise RestrictionParseError(line_no, raw, "cells are not adjacent")
        out.add(a, b)
    return out


def load_restrictions(path: str, width: int, height: int) -> Restrictions:
    with open(path, "rb") as fh:
        data = fh.read()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_no = data.count(b"\n", 0, e.start) + 1
        bad_line = data.split(b"\n")[line_no - 1].decode("utf-8", "replace")
        raise RestrictionParseError(line_no, bad_line, "not valid UTF-8") from e
    return parse_restrictions(text, width, height)


def format_restrictions(restrictions: Restrictions) -> str:
    return "".join(f"{a[0]},{a[1]} {b[0]},{b[1]}\n" for a, b in restrictions.pairs())


__all__ = [
    "Restrictions",
    "RestrictionParseError",
    "parse_restrictions",
    "load_restrictions",
    "format_restrictions",
]
