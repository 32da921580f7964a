# config.py
import os

# ======= Search limits =======
# 0 disables the deadline; otherwise a solve gives up (reports failure) after
# this many seconds.
TIME_LIMIT          = float(os.getenv("TT_TIME_LIMIT", "0"))
MAX_CELLS           = int(os.getenv("TT_MAX_CELLS", "4096"))
RECURSION_HEADROOM  = int(os.getenv("TT_RECURSION_HEADROOM", "200"))

# ======= Progress publishing =======
PROGRESS_EVERY      = int(os.getenv("TT_PROGRESS_EVERY", "5000"))

# ======= Engine selection =======
ENGINE              = os.getenv("TT_ENGINE", "backtrack")   # backtrack | cp-sat
CROSS_CHECK         = int(os.getenv("TT_CROSS_CHECK", "0")) != 0

# ======= CP-SAT knobs =======
CP_SAT_WORKERS      = int(os.getenv("TT_CP_SAT_WORKERS", "1"))
CP_SAT_SECONDS      = float(os.getenv("TT_CP_SAT_SECONDS", "60"))

# ======= Output names =======
SOLUTION_OUT = os.getenv("TT_SOLUTION_OUT", "solution.txt")
LAYOUT_HTML  = os.getenv("TT_LAYOUT_HTML", "layout_view.html")

class CFG:
    TIME_LIMIT         = TIME_LIMIT
    MAX_CELLS          = MAX_CELLS
    RECURSION_HEADROOM = RECURSION_HEADROOM

    PROGRESS_EVERY = PROGRESS_EVERY

    ENGINE      = ENGINE
    CROSS_CHECK = CROSS_CHECK

    CP_SAT_WORKERS = CP_SAT_WORKERS
    CP_SAT_SECONDS = CP_SAT_SECONDS

    SOLUTION_OUT = SOLUTION_OUT
    LAYOUT_HTML  = LAYOUT_HTML

ENGINES = ("backtrack", "cp-sat")

__all__ = ["CFG", "ENGINES"]
