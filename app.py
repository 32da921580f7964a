# app.py — web front end: post a grid + restrictions, get the tiling back
from __future__ import annotations
import os
from typing import Any, Dict, List, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify, url_for

from config import CFG
from io_files import write_solution, write_layout_view_html
from models import SolveResult
from progress import (
    reset as progress_reset,
    as_json as progress_json,
    set_status, set_done, set_result_url,
)
from render import render_result, render_text
from restrictions import RestrictionParseError, format_restrictions, parse_restrictions
from solver.orchestrator import result_summary, solve_grid

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_SOLUTION_FULL_PATH, SOLUTION_DIR, SOLUTION_FILENAME = _resolve_output_paths(
    CFG.SOLUTION_OUT, "solution.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "layout_view.html"
)

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "reason": "No run yet.",
    "width": 0,
    "height": 0,
    "engine": "",
    "pieces": [],
    "summary": {"pieces": 0, "by_kind": {}},
    "elapsed_str": "0s",
    "text": "",
    "svg": "",
    "legend": "",
    "restrictions": "",
    "solution_filename": SOLUTION_FILENAME,
    "layout_filename": LAYOUT_FILENAME,
}

app = Flask(__name__, static_folder=".", template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return send_from_directory(BASE_DIR, "solve_form.html")


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)

    for source in (request.form, request.args):
        for k, v in source.to_dict(flat=False).items():
            merged.setdefault(k, v)

    return merged


def _first(like: Dict[str, Any], key: str, default: Any = None) -> Any:
    value = like.get(key, default)
    if isinstance(value, (list, tuple)):
        return value[0] if value else default
    return value


def _restrictions_text(like: Dict[str, Any]) -> str:
    raw = like.get("restrictions")
    if raw is None:
        return ""
    # JSON callers may send [[[x1, y1], [x2, y2]], ...] instead of text
    if isinstance(raw, list) and raw and isinstance(raw[0], (list, tuple)):
        lines: List[str] = []
        for pair in raw:
            (x1, y1), (x2, y2) = pair
            lines.append(f"{x1},{y1} {x2},{y2}")
        return "\n".join(lines)
    return str(_first(like, "restrictions", "") or "")


def _parse_request(like: Dict[str, Any]):
    try:
        width = int(_first(like, "width"))
        height = int(_first(like, "height"))
    except (TypeError, ValueError):
        raise ValueError("width and height must be integers")
    restrictions = parse_restrictions(_restrictions_text(like), width, height)
    engine = _first(like, "engine") or None
    time_limit = _first(like, "time_limit")
    return width, height, restrictions, engine, (float(time_limit) if time_limit not in (None, "") else None)


def _bad_request(reason: str):
    set_status("Error")
    set_done(False, reason=reason)
    LAST_RESULT.update({"ok": False, "reason": reason, "text": "", "svg": "", "legend": "", "pieces": []})
    return jsonify({"ok": False, "reason": reason}), 400


def _publish(result: SolveResult, restrictions_text: str) -> Dict[str, Any]:
    text = render_text(result) if result.ok else ""
    svg, legend = render_result(result) if result.ok else ("", "")

    solution_path = write_solution(result, BASE_DIR)
    layout_name = LAYOUT_FILENAME
    if result.ok:
        layout_path = write_layout_view_html(svg, legend, BASE_DIR, grid_label=f"{result.width} × {result.height}")
        layout_name = os.path.basename(layout_path) or LAYOUT_FILENAME

    payload = result.to_dict()
    payload.update({
        "summary": result_summary(result),
        "text": text,
        "svg": svg,
        "legend": legend,
        "restrictions": restrictions_text,
        "cross_check": result.meta.get("cross_check"),
        "solution_filename": os.path.basename(solution_path) or SOLUTION_FILENAME,
        "layout_filename": layout_name,
    })
    return payload


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()

    like = _merge_like_mapping()
    try:
        width, height, restrictions, engine, time_limit = _parse_request(like)
    except RestrictionParseError as e:
        return _bad_request(f"Bad restrictions: {e}")
    except ValueError as e:
        return _bad_request(f"Bad grid: {e}")

    try:
        result = solve_grid(width, height, restrictions, engine=engine, time_limit=time_limit)
    except ValueError as e:
        return _bad_request(f"Bad grid: {e}")

    payload = _publish(result, format_restrictions(restrictions))
    LAST_RESULT.update(payload)
    set_result_url(url_for("result_latest"))
    return jsonify(payload)


@app.route("/download/solution")
def download_solution():
    return send_from_directory(SOLUTION_DIR, SOLUTION_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
