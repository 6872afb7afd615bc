# Orchestrator: enumerate → hole check → rotational dedupe, one size at a time
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import multiprocessing as mp

from config import CFG
from dedupe import deduplicate_by_rotation
from enumeration import Polyomino, iter_polyominoes
from progress import (
    set_status, set_phase, set_phase_total, set_attempt, set_progress_pct,
    set_counts, set_done, start_timer, reset, log_attempt_detail,
)
from solver.arrangement import resolve_variant, surrounds_hole


# ---------- helpers ----------

@dataclass
class SurveyResult:
    size: int
    variant: str
    total: int
    failures: List[Polyomino] = field(default_factory=list)
    unique_failures: List[Polyomino] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def label(self) -> str:
        return f"{self.size}-ominoes"


def _chunked(items: Sequence[Polyomino], chunk_size: int) -> List[List[Polyomino]]:
    step = max(1, int(chunk_size))
    return [list(items[i:i + step]) for i in range(0, len(items), step)]


def _check_chunk(task: Tuple[str, List[Polyomino]]) -> List[bool]:
    # top-level so spawn workers can unpickle it
    variant, chunk = task
    return [surrounds_hole(shape, variant) for shape in chunk]


def _pct(done: int, total: int) -> float:
    if total <= 0:
        return 100.0
    return 100.0 * float(done) / float(total)


def _check_shapes(
    shapes: Sequence[Polyomino],
    variant: str,
    *,
    workers: int,
    chunk_size: int,
) -> List[Polyomino]:
    """Return the shapes that cannot surround the hole, in input order."""

    failures: List[Polyomino] = []
    chunks = _chunked(shapes, chunk_size)
    checked = 0

    def _record(chunk: List[Polyomino], flags: List[bool]) -> None:
        nonlocal checked
        failures.extend(shape for shape, ok in zip(chunk, flags) if not ok)
        checked += len(chunk)
        set_counts(checked=checked, failures=len(failures))
        set_progress_pct(_pct(checked, len(shapes)))

    # cp_sat spawns a child per shape, which daemonic pool workers cannot do
    if workers <= 1 or len(chunks) <= 1 or variant == "cp_sat":
        for chunk in chunks:
            _record(chunk, _check_chunk((variant, chunk)))
        return failures

    ctx = mp.get_context("spawn")
    with ctx.Pool(processes=workers) as pool:
        tasks = [(variant, chunk) for chunk in chunks]
        for chunk, flags in zip(chunks, pool.imap(_check_chunk, tasks)):
            _record(chunk, flags)
    return failures


# ---------- public ----------

def survey_size(
    size: int,
    *,
    variant: Optional[str] = None,
    workers: Optional[int] = None,
    chunk_size: Optional[int] = None,
) -> SurveyResult:
    """Enumerate ``size``-ominoes and collect those that cannot surround the hole.

    The failures are also reduced to one representative per rotation class.
    With ``workers > 1`` shapes are checked on a spawn-context process pool;
    the result matches the serial run.
    """

    t0 = time.time()
    variant_name = resolve_variant(variant)
    workers = max(1, int(workers if workers is not None else getattr(CFG, "WORKERS", 1)))
    chunk_size = max(1, int(chunk_size if chunk_size is not None else getattr(CFG, "CHUNK_SIZE", 256)))
    result = SurveyResult(size=int(size), variant=variant_name, total=0)

    try:
        set_status("Solving")
        set_attempt(result.label)

        set_phase("enumerate")
        set_progress_pct(0.0)
        shapes = list(iter_polyominoes(size))
        result.total = len(shapes)
        set_counts(total=result.total, checked=0, failures=0)

        set_phase("solve")
        set_phase_total(result.total)
        result.failures = _check_shapes(shapes, variant_name, workers=workers, chunk_size=chunk_size)

        set_phase("dedupe")
        set_phase_total(len(result.failures))
        result.unique_failures = deduplicate_by_rotation(result.failures)
    except Exception as e:
        set_status("Error")
        log_attempt_detail("Survey failed", size=size, variant=variant_name, error=f"{type(e).__name__}: {e}")
        raise

    result.elapsed = time.time() - t0
    log_attempt_detail(
        "Survey finished",
        size=result.size,
        variant=result.variant,
        workers=workers,
        total=result.total,
        failures=len(result.failures),
        unique_failures=len(result.unique_failures),
        elapsed=f"{result.elapsed:.2f}s",
    )
    return result


def survey_sizes(sizes: Iterable[int], **kwargs) -> List[SurveyResult]:
    """Run :func:`survey_size` for each size as one tracked run."""

    reset()
    start_timer()
    results: List[SurveyResult] = []
    try:
        for size in sizes:
            results.append(survey_size(size, **kwargs))
    except Exception as e:
        set_done(False, reason=f"{type(e).__name__}: {e}")
        raise
    set_done(True, message=", ".join(
        f"{r.label}: {len(r.failures)} failing, {len(r.unique_failures)} unique" for r in results
    ))
    return results


__all__ = ["SurveyResult", "survey_size", "survey_sizes"]
