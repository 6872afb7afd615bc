# config.py
import os

# ======= Solver board window =======
# Half-width of the dense occupancy board used by the hole search.  Boards
# grow past this when a shape's extent needs more room.
BOARD_MIN_OFFSET     = int(os.getenv("OH_BOARD_MIN_OFFSET", "32"))

# ======= Enumeration =======
ENUM_PROGRESS_EVERY  = int(os.getenv("OH_ENUM_PROGRESS_EVERY", "1000000"))

# ======= Solver selection =======
# board | rotation | translation | cp_sat
SOLVER_VARIANT       = os.getenv("OH_SOLVER_VARIANT", "board").strip().lower()

# ======= Worker / survey knobs =======
WORKERS              = int(os.getenv("OH_WORKERS", "1"))
CHUNK_SIZE           = int(os.getenv("OH_CHUNK_SIZE", "256"))

# ======= CP-SAT cross-check =======
CP_SAT_SECONDS       = float(os.getenv("OH_CP_SAT_SECONDS", "10"))
CP_SAT_WORKERS       = int(os.getenv("OH_CP_SAT_WORKERS", "1"))

# ======= Attempt log =======
# Empty means logs/solver_attempts.log next to the sources.
PROGRESS_LOG_FILE    = os.getenv("PROGRESS_LOG_FILE", "")

class CFG:
    BOARD_MIN_OFFSET    = BOARD_MIN_OFFSET
    ENUM_PROGRESS_EVERY = ENUM_PROGRESS_EVERY

    SOLVER_VARIANT = SOLVER_VARIANT

    WORKERS    = WORKERS
    CHUNK_SIZE = CHUNK_SIZE

    CP_SAT_SECONDS = CP_SAT_SECONDS
    CP_SAT_WORKERS = CP_SAT_WORKERS

    PROGRESS_LOG_FILE = PROGRESS_LOG_FILE

__all__ = ["CFG"]
