# solver/cp_isolate.py
import multiprocessing as mp
from typing import List, Optional, Sequence, Tuple
import traceback

from models import Cell, Placement

# Worker must be top-level (picklable on Windows spawn)
def _solve_worker(q, shape: List[Cell], max_seconds: float):
    try:
        from solver.cp_sat import try_surround_cp_sat  # import inside child
        ok, placements, reason = try_surround_cp_sat(shape, max_seconds)
        q.put(("ok", ok, placements, reason))
    except MemoryError:
        q.put(("err", False, [], "Child ran out of memory"))
    except Exception as e:
        q.put(("exc", False, [], f"{e}\n{traceback.format_exc()}"))

def run_cp_sat_isolated(shape: Sequence[Cell], max_seconds: float) -> Tuple[bool, List[Placement], Optional[str], Optional[str]]:
    """
    Returns (ok, placements, reason, crash_note).
    crash_note is non-empty only if the child crashed/was killed/timed out.
    """
    ctx = mp.get_context("spawn")  # safest on Windows
    q = ctx.Queue()
    p = ctx.Process(target=_solve_worker, args=(q, [tuple(c) for c in shape], float(max_seconds)))
    p.daemon = True
    p.start()

    # Allow a small buffer beyond model time for interpreter start-up / teardown
    timeout = float(max_seconds) + 5.0
    try:
        tag, ok, placements, reason = q.get(timeout=timeout)
    except Exception:
        tag = None

    if tag is None:
        if p.is_alive():
            p.terminate()
            p.join(2.0)
            return False, [], "Stopped before solution (timebox)", "killed: timeout"
        p.join(2.0)
        if p.exitcode not in (0, None):
            return False, [], f"Stopped before solution (child exit {p.exitcode})", "child crashed"
        return False, [], "No result from child process", "no-result"

    p.join(2.0)
    if tag == "ok":
        return ok, placements, reason, None
    return False, [], reason, None
