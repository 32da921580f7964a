# cli.py — command-line entry point: tetromino-tiler WIDTH HEIGHT RESTRICTIONS_FILE
from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from config import CFG, ENGINES
from io_files import write_layout_view_html, write_solution
from progress import reset as progress_reset
from render import render_result, render_text
from restrictions import RestrictionParseError, load_restrictions
from solver.orchestrator import solve_grid

EXIT_SOLVED = 0
EXIT_UNSOLVABLE = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tetromino-tiler",
        description="Tile a rectangular grid with tetrominoes so that no two touching pieces share a shape.",
    )
    parser.add_argument("width", type=int, help="grid width in cells")
    parser.add_argument("height", type=int, help="grid height in cells")
    parser.add_argument("restrictions", help="file of 'x1,y1 x2,y2' pairs that must not share a piece")
    parser.add_argument("--engine", choices=ENGINES, default=None,
                        help=f"search engine (default: {CFG.ENGINE})")
    parser.add_argument("--time-limit", type=float, default=None, metavar="S",
                        help="give up after S seconds (0 = no limit)")
    parser.add_argument("--svg", default=None, metavar="PATH",
                        help="also write an HTML page with the SVG drawing to PATH")
    parser.add_argument("--out", default=None, metavar="PATH",
                        help="also write the piece list to PATH")
    parser.add_argument("--cross-check", action="store_true",
                        help="run the other engine as well and compare verdicts")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        restrictions = load_restrictions(args.restrictions, args.width, args.height)
    except OSError as e:
        print(f"cannot read restrictions: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except RestrictionParseError as e:
        print(f"bad restrictions file {args.restrictions}: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    progress_reset()
    try:
        result = solve_grid(
            args.width,
            args.height,
            restrictions,
            engine=args.engine,
            time_limit=args.time_limit,
            cross_check=args.cross_check or None,
        )
    except ValueError as e:
        print(f"bad grid: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    print(f"solutionExists: {str(result.ok).lower()}")
    print(f"Time taken: {result.elapsed_str}")
    if result.ok:
        print(render_text(result))
    elif result.reason:
        print(result.reason)

    check = result.meta.get("cross_check")
    if check is not None:
        print(f"cross-check ({check['engine']}): ok={check['ok']} agrees={check['agrees']}")

    cwd = os.getcwd()
    if args.out:
        CFG.SOLUTION_OUT = args.out
        print(f"wrote {write_solution(result, cwd)}")
    if args.svg and result.ok:
        CFG.LAYOUT_HTML = args.svg
        svg, legend = render_result(result)
        print(f"wrote {write_layout_view_html(svg, legend, cwd, grid_label=f'{result.width} × {result.height}')}")

    return EXIT_SOLVED if result.ok else EXIT_UNSOLVABLE


if __name__ == "__main__":
    sys.exit(main())
