"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Optional

from config import CFG
from models import SolveResult


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_solution(result: SolveResult, base_dir: str) -> str:
    """Write one line per piece (number, kind, cells) to the configured text file."""

    path = _resolve_output_path(base_dir, CFG.SOLUTION_OUT, "solution.txt")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"# grid {result.width}x{result.height} engine={result.engine}\n")
        if not result.ok:
            f.write("No solution\n")
            if result.reason:
                f.write(f"# {result.reason}\n")
        else:
            for p in result.pieces:
                cells = " ".join(f"({x},{y})" for x, y in p.cells)
                f.write(f"#{p.number} {p.kind} {cells}\n")
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str, grid_label: Optional[str] = None) -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    heading = "Layout View" if not grid_label else f"Layout View: {grid_label}"
    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>Layout View</title>
<style>.swatch{{display:inline-block;width:1em;height:1em;margin-right:.4em;vertical-align:middle}}</style></head>
<body class='container'>
<h1>{heading}</h1>
<section class='card'><div class='gridwrap'>{svg}</div></section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_solution", "write_layout_view_html"]
