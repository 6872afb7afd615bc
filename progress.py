# progress.py: in-process survey progress plus the attempt log
from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

from config import CFG

PROGRESS_LOCK = threading.Lock()

_FIELDS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Error
    "phase": "",               # enumerate | solve | dedupe
    "phase_total": "",
    "attempt": "",             # e.g. "8-ominoes"
    "percent": 0.0,
    "shapes_total": 0,
    "shapes_checked": 0,
    "failures": 0,
    "elapsed_start": None,
    "elapsed": 0.0,
    "message": "",
    "done": False,
    "ok": None,
}

PROGRESS: Dict[str, Any] = dict(_FIELDS, run_id=0)

# start times of the open phase / attempt, for the durations in the log
_TIMERS: Dict[str, Optional[float]] = {"run": None, "phase": None, "attempt": None}


# ---------------- attempt log ----------------

def _log_path() -> Path:
    configured = getattr(CFG, "PROGRESS_LOG_FILE", "")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "solver_attempts.log"


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("omino.attempt_log")
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    logger.propagate = False
    try:
        path = _log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        # no writable log location: keep a handler-less logger
        return logger
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    return logger


ATTEMPT_LOGGER = _init_logger()


def log_attempt_detail(event: str, **fields: Any) -> None:
    """Write one ``event | key=value ...`` line to the attempt log.

    Empty values are dropped.  Logging errors are left to the handler's
    ``handleError``.
    """

    extras = " ".join(f"{k}={v}" for k, v in fields.items() if v is not None and v != "")
    if extras:
        ATTEMPT_LOGGER.info("%s | %s", event, extras)
    else:
        ATTEMPT_LOGGER.info("%s", event)


def _since(key: str, now: float) -> Optional[str]:
    start = _TIMERS.get(key)
    if start is None:
        return None
    return f"{max(0.0, now - start):.2f}s"


def _switch_locked(key: str, value: str) -> None:
    # close the open phase/attempt and open the next one, logging both ends
    previous = PROGRESS[key]
    PROGRESS[key] = value
    if value == previous:
        return
    now = time.time()
    label = key.capitalize()
    if previous:
        log_attempt_detail(f"{label} finished", **{key: previous}, duration=_since(key, now))
    _TIMERS[key] = now if value else None
    if value:
        log_attempt_detail(f"{label} started", **{key: value})


# ---------------- run lifecycle ----------------

def reset() -> None:
    with PROGRESS_LOCK:
        run_id = int(PROGRESS.get("run_id") or 0) + 1
        PROGRESS.clear()
        PROGRESS.update(_FIELDS, run_id=run_id)
        _TIMERS.update(run=None, phase=None, attempt=None)
    log_attempt_detail("Progress reset", run_id=run_id)


def start_timer() -> None:
    now = time.time()
    with PROGRESS_LOCK:
        PROGRESS["elapsed_start"] = now
        PROGRESS["elapsed"] = 0.0
        _TIMERS["run"] = now
    log_attempt_detail("Run timer started")


def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = time.time() - float(t0)


def set_done(ok: Any = None, *, reason: Any = None, message: Any = None) -> None:
    """Mark the run complete.

    ``ok`` picks ``"Solved"`` or ``"Error"``; left out, a run still marked
    Idle or Solving counts as solved.  ``message`` wins over ``reason``.
    """

    note = message if message is not None else reason
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        if ok is not None:
            PROGRESS["ok"] = bool(ok)
            PROGRESS["status"] = "Solved" if ok else "Error"
        elif PROGRESS["status"] in ("Idle", "Solving"):
            PROGRESS["ok"] = True
            PROGRESS["status"] = "Solved"
        if note is not None:
            PROGRESS["message"] = str(note)
        PROGRESS["percent"] = 100.0
        PROGRESS["done"] = True
        _switch_locked("attempt", "")
        _switch_locked("phase", "")
        summary = dict(
            status=PROGRESS["status"],
            ok=PROGRESS["ok"],
            duration=_since("run", time.time()),
            shapes=PROGRESS["shapes_total"],
            failures=PROGRESS["failures"],
            message=PROGRESS["message"],
        )
        _TIMERS["run"] = None
    log_attempt_detail("Run finished", **summary)


# ---------------- setters ----------------

def _set(key: str, value: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS[key] = value


def set_status(v: Any) -> None:
    _set("status", str(v))


def set_phase(v: Any) -> None:
    with PROGRESS_LOCK:
        _switch_locked("phase", "" if v is None else str(v))


def set_phase_total(v: Any) -> None:
    _set("phase_total", "" if v is None else str(v))


def set_attempt(v: Any) -> None:
    with PROGRESS_LOCK:
        _switch_locked("attempt", "" if v is None else str(v))


def set_message(msg: Any) -> None:
    _set("message", "" if msg is None else str(msg))


def set_progress_pct(pct: Any) -> None:
    try:
        value = float(pct)
    except (TypeError, ValueError):
        value = 0.0
    with PROGRESS_LOCK:
        PROGRESS["percent"] = max(0.0, min(100.0, value))
        _touch_elapsed_locked()


def set_counts(*, total: Any = None, checked: Any = None, failures: Any = None) -> None:
    """Update whichever shape counters are given; negatives clamp to 0."""

    updates = {"shapes_total": total, "shapes_checked": checked, "failures": failures}
    with PROGRESS_LOCK:
        for key, value in updates.items():
            if value is not None:
                PROGRESS[key] = max(0, int(value))


# ---------------- snapshots ----------------

def _fmt_elapsed(seconds: float) -> str:
    seconds = int(max(0.0, float(seconds)))
    if seconds < 60:
        return f"{seconds}s"
    m, s = divmod(seconds, 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"


def snapshot() -> Dict[str, Any]:
    """Copy of the progress state, without the raw timer start."""

    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        snap = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
    snap["elapsed_str"] = _fmt_elapsed(snap["elapsed"])
    return snap
