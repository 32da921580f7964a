from typing import Dict, List, Optional, Tuple

from models import SolveResult

_OUTSIDE = object()

# fill colour per tetromino kind
KIND_COLORS: Dict[str, str] = {
    "T": "rgb(170,90,200)",
    "L": "rgb(230,150,50)",
    "J": "rgb(60,110,210)",
    "S": "rgb(90,190,90)",
    "Z": "rgb(210,70,70)",
    "I": "rgb(70,190,210)",
    "O": "rgb(230,210,60)",
}

# (up, down, left, right) -> box-drawing corner
_CORNERS: Dict[Tuple[bool, bool, bool, bool], str] = {
    (False, False, False, False): " ",
    (True, True, False, False): "│",
    (False, False, True, True): "─",
    (False, True, False, True): "┌",
    (False, True, True, False): "┐",
    (True, False, False, True): "└",
    (True, False, True, False): "┘",
    (True, True, False, True): "├",
    (True, True, True, False): "┤",
    (False, True, True, True): "┬",
    (True, False, True, True): "┴",
    (True, True, True, True): "┼",
    (True, False, False, False): "╵",
    (False, True, False, False): "╷",
    (False, False, True, False): "╴",
    (False, False, False, True): "╶",
}


def _owner_at(owners: List[List[Optional[int]]], x: int, y: int):
    if y < 0 or y >= len(owners) or x < 0 or x >= len(owners[0]):
        return _OUTSIDE
    return owners[y][x]


def render_text(result: SolveResult) -> str:
    """Box-drawing picture of the tiling: piece numbers inside, borders between pieces."""
    owners = result.owner_grid()
    W, H = result.width, result.height
    numbers = [n for row in owners for n in row if n is not None]
    cell_w = max(2, len(str(max(numbers)))) + 2 if numbers else 4

    def h_edge(x: int, j: int) -> bool:
        # border on row-line j above cell (x, j)
        if not (0 <= x < W):
            return False
        return _owner_at(owners, x, j - 1) != _owner_at(owners, x, j)

    def v_edge(i: int, y: int) -> bool:
        # border on column-line i left of cell (i, y)
        if not (0 <= y < H):
            return False
        return _owner_at(owners, i - 1, y) != _owner_at(owners, i, y)

    lines: List[str] = []
    for j in range(H + 1):
        parts: List[str] = []
        for i in range(W + 1):
            key = (v_edge(i, j - 1), v_edge(i, j), h_edge(i - 1, j), h_edge(i, j))
            parts.append(_CORNERS[key])
            if i < W:
                parts.append(("─" if h_edge(i, j) else " ") * cell_w)
        lines.append("".join(parts).rstrip())
        if j == H:
            break
        parts = []
        for i in range(W + 1):
            parts.append("│" if v_edge(i, j) else " ")
            if i < W:
                n = owners[j][i]
                label = "" if n is None else str(n)
                parts.append(label.center(cell_w))
        lines.append("".join(parts).rstrip())
    return "\n".join(lines) + "\n"


def render_result(result: SolveResult, scale: int = 40):
    """SVG of the tiling coloured by kind, plus an HTML legend."""
    W, H = result.width, result.height
    owners = result.owner_grid()
    svg_w = W * scale + 2
    svg_h = H * scale + 2

    kinds: Dict[Tuple[int, int], str] = {}
    for p in result.pieces:
        for c in p.cells:
            kinds[c] = p.kind

    cells = []
    for y in range(H):
        for x in range(W):
            kind = kinds.get((x, y))
            fill = KIND_COLORS.get(kind, "white") if kind else "white"
            cells.append(
                f'<rect x="{x * scale + 1}" y="{y * scale + 1}" width="{scale}" height="{scale}" '
                f'fill="{fill}" stroke="rgba(0,0,0,0.15)" stroke-width="1"/>'
            )

    borders = []
    for y in range(H):
        for x in range(W):
            here = owners[y][x]
            if x + 1 < W and owners[y][x + 1] != here:
                X = (x + 1) * scale + 1
                borders.append(f'<line x1="{X}" y1="{y * scale + 1}" x2="{X}" y2="{(y + 1) * scale + 1}" stroke="black" stroke-width="3"/>')
            if y + 1 < H and owners[y + 1][x] != here:
                Y = (y + 1) * scale + 1
                borders.append(f'<line x1="{x * scale + 1}" y1="{Y}" x2="{(x + 1) * scale + 1}" y2="{Y}" stroke="black" stroke-width="3"/>')

    labels = []
    for p in result.pieces:
        x, y = p.cells[0]
        labels.append(
            f'<text x="{x * scale + 5}" y="{y * scale + 17}" font-size="12" fill="black">{p.number} {p.kind}</text>'
        )

    frame = f'<rect x="1" y="1" width="{svg_w - 2}" height="{svg_h - 2}" fill="none" stroke="black" stroke-width="3"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(cells)}{"".join(borders)}{"".join(labels)}{frame}</svg>'
    )

    used = sorted({p.kind for p in result.pieces})
    legend = "".join(
        f"<li><span class='swatch' style='background:{KIND_COLORS.get(k, 'white')}'></span>{k}</li>" for k in used
    )
    return svg, legend
