from __future__ import annotations

import json
import logging
import os
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _state_file_path() -> Path:
    configured = os.environ.get("PROGRESS_STATE_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "progress_state.json"


STATE_FILE = _state_file_path()
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.run_log")
    if logger.handlers:
        return logger

    log_path = Path(__file__).resolve().parent / "logs" / "solver_runs.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except Exception:
        # No log file (read-only checkout, etc.); progress tracking carries on.
        logger.handlers.clear()
    return logger


RUN_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(RUN_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    try:
        return f"{float(seconds):.2f}s"
    except Exception:
        return None


def _emit_log(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    try:
        if extras:
            RUN_LOGGER.info("%s | %s", event, " ".join(extras))
        else:
            RUN_LOGGER.info("%s", event)
    except Exception:
        # Logging failures must never bubble back to the solver.
        pass


def log_run_detail(event: str, **fields: Any) -> None:
    """Free-form run log line (``event | key=value ...``)."""
    _emit_log(event, **fields)


LOG_STATE: Dict[str, Any] = {
    "run_start": None,
    "grid": "",
    "engine": "",
}


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, ensure_ascii=False, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        try:
            _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
        except OSError:
            _LAST_STATE_MTIME = time.time()
    except Exception:
        # Persistence must never break a running search.
        pass


def _load_persisted_locked(force: bool = False) -> None:
    global _LAST_STATE_MTIME
    try:
        stat = STATE_FILE.stat()
    except FileNotFoundError:
        return
    except OSError:
        return
    if not force and stat.st_mtime <= _LAST_STATE_MTIME:
        return
    try:
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except Exception:
        return
    if not isinstance(data, dict):
        return
    for key in PROGRESS.keys():
        if key in data:
            PROGRESS[key] = data[key]
    _LAST_STATE_MTIME = stat.st_mtime


# Single source of truth for /progress
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Unsolvable | Error
    "engine": "",              # backtrack | cp-sat
    "grid": "",                # e.g. "4 × 3"
    "cell": "",                # current search cell, e.g. "(2,1)"
    "nodes": 0,                # search nodes visited
    "backtracks": 0,           # reverted trials
    "percent": 0.0,            # scan position of the current cell, 0..100
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",             # optional note
    "done": False,             # run completed
    "ok": None,                # solution found, if known
    "result_url": "",          # optional navigation target
    "run_id": 0,               # monotonically increasing identifier
}

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()

def _fmt_elapsed(seconds: float) -> str:
    seconds = max(0.0, float(seconds))
    if seconds < 60:
        return f"{int(seconds)}s"
    m, s = divmod(int(seconds), 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"

def reset() -> None:
    with PROGRESS_LOCK:
        try:
            current_run_id = int(PROGRESS.get("run_id", 0))
        except Exception:
            current_run_id = 0
        PROGRESS.update({
            "status": "Idle",
            "engine": "",
            "grid": "",
            "cell": "",
            "nodes": 0,
            "backtracks": 0,
            "percent": 0.0,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "result_url": "",
            "run_id": current_run_id + 1,
        })
        LOG_STATE.update({"run_start": None, "grid": "", "engine": ""})
        _emit_log("Progress reset", run_id=PROGRESS["run_id"])
        _persist_locked()

def start_timer() -> None:
    with PROGRESS_LOCK:
        now = _now()
        PROGRESS["elapsed_start"] = now
        PROGRESS["elapsed"] = 0.0
        LOG_STATE["run_start"] = now
        _emit_log("Run started", engine=LOG_STATE.get("engine"), grid=LOG_STATE.get("grid"))
        _persist_locked()

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = _now() - float(t0)

# ------------------------------
# Setters (tolerant)
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _persist_locked()

def set_engine(v: Any) -> None:
    with PROGRESS_LOCK:
        engine = "" if v is None else str(v)
        PROGRESS["engine"] = engine
        LOG_STATE["engine"] = engine
        _persist_locked()

def set_grid(width: Any, height: Any) -> None:
    try:
        label = f"{int(width)} × {int(height)}"
    except Exception:
        label = ""
    with PROGRESS_LOCK:
        PROGRESS["grid"] = label
        LOG_STATE["grid"] = label
        _persist_locked()

def set_search_position(x: Any, y: Any, nodes: Any, backtracks: Any, percent: Any) -> None:
    """Publish where the search currently is; called every few thousand nodes."""
    try:
        pct = max(0.0, min(100.0, float(percent)))
    except Exception:
        pct = 0.0
    with PROGRESS_LOCK:
        PROGRESS["cell"] = f"({x},{y})"
        PROGRESS["nodes"] = max(0, int(nodes))
        PROGRESS["backtracks"] = max(0, int(backtracks))
        PROGRESS["percent"] = pct
        _touch_elapsed_locked()
        _persist_locked()

def set_elapsed(seconds: Any) -> None:
    try:
        f = float(seconds)
    except Exception:
        f = 0.0
    with PROGRESS_LOCK:
        PROGRESS["elapsed"] = max(0.0, f)
        _persist_locked()

def set_counters(nodes: Any, backtracks: Any) -> None:
    """Final node and backtrack totals, published once the search returns."""
    with PROGRESS_LOCK:
        PROGRESS["nodes"] = max(0, int(nodes))
        PROGRESS["backtracks"] = max(0, int(backtracks))
        _persist_locked()

def set_result_url(url: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["result_url"] = "" if url is None else str(url)
        _persist_locked()

def set_done(ok: Any = None, *, reason: Any = None) -> None:
    """Mark the run complete.

    ``ok`` decides the final status (``Solved``/``Unsolvable``); when omitted
    the status is left as-is, or set to ``Solved`` if nothing was recorded.
    ``reason`` is surfaced through the ``message`` field.
    """

    final_status: Optional[str] = None
    ok_flag: Optional[bool] = None
    if ok is not None:
        ok_flag = bool(ok)
        final_status = "Solved" if ok_flag else "Unsolvable"

    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        now = _now()
        if final_status is not None:
            PROGRESS["status"] = final_status
        elif PROGRESS.get("status") in ("", "Idle", None):
            PROGRESS["status"] = "Solved"
            ok_flag = True
        PROGRESS["percent"] = 100.0
        if reason is not None:
            PROGRESS["message"] = str(reason)
        PROGRESS["done"] = True
        if ok_flag is not None:
            PROGRESS["ok"] = ok_flag
        run_start = LOG_STATE.get("run_start")
        if isinstance(run_start, (int, float)):
            total = max(0.0, now - float(run_start))
        else:
            total = None
        LOG_STATE["run_start"] = None
        _emit_log(
            "Run finished",
            status=PROGRESS.get("status"),
            ok=PROGRESS.get("ok"),
            engine=PROGRESS.get("engine"),
            grid=PROGRESS.get("grid"),
            nodes=PROGRESS.get("nodes"),
            backtracks=PROGRESS.get("backtracks"),
            duration=_fmt_seconds(total),
            message=PROGRESS.get("message"),
        )
        _persist_locked()

# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        _touch_elapsed_locked()
        return {
            "status": PROGRESS["status"],
            "engine": PROGRESS["engine"],
            "grid": PROGRESS["grid"],
            "cell": PROGRESS["cell"],
            "nodes": PROGRESS["nodes"],
            "backtracks": PROGRESS["backtracks"],
            "percent": PROGRESS["percent"],
            "elapsed": PROGRESS["elapsed"],
            "elapsed_str": _fmt_elapsed(PROGRESS["elapsed"]),
            "message": PROGRESS["message"],
            "done": PROGRESS["done"],
            "ok": PROGRESS["ok"],
            "result_url": PROGRESS["result_url"],
            "run_id": PROGRESS["run_id"],
        }

def as_json() -> Dict[str, Any]:
    # Alias used by /progress
    return snapshot()


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
