import time
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple
from ortools.sat.python import cp_model as _cp

from config import CFG
from geometry import iter_perimeter, rotate_omino, translate_omino, translation_of_a_to_b
from models import Cell, Placement, Rotation
from solver.board import HOLE, HOLE_EDGES

# ---------------- helpers ----------------

def build_candidates(shape: Sequence[Cell]) -> List[Placement]:
    """Every distinct copy of ``shape`` that sits one of its edges on a hole face.

    A copy covering a hole neighbour without covering the hole must expose
    the covering cell's face towards the hole, so these are the only copies
    an arrangement can use.  Copies with identical cell sets (from symmetric
    shapes) are kept once.
    """

    seen: Dict[FrozenSet[Cell], Placement] = {}
    for rotation in Rotation:
        omino = rotate_omino(shape, rotation)
        perimeter = iter_perimeter(omino)
        for target in HOLE_EDGES:
            for src in perimeter:
                if src.dir != target.dir:
                    continue
                translation = translation_of_a_to_b(src.cell, target.cell)
                moved = tuple(translate_omino(omino, translation))
                key = frozenset(moved)
                if key in seen:
                    continue
                seen[key] = Placement(rotation, translation, moved, src, target)
    return list(seen.values())


# ---------------- main solve ----------------
def try_surround_cp_sat(
    shape: Sequence[Cell],
    max_seconds: Optional[float] = None,
) -> Tuple[bool, List[Placement], Optional[str]]:
    """Pick pairwise-disjoint candidate copies covering all four hole neighbours.

    Returns ``(ok, placements, reason)``; ``reason`` is ``None`` on success.
    """

    t0 = time.time()
    if max_seconds is None:
        max_seconds = float(getattr(CFG, "CP_SAT_SECONDS", 10.0))

    cells = [tuple(c) for c in shape]
    if not cells:
        return False, [], "Bad shape: no cells"

    candidates = build_candidates(cells)
    meta: Dict[str, object] = {"candidates": len(candidates)}

    model = _cp.CpModel()
    use = [model.NewBoolVar(f"use_{i}") for i in range(len(candidates))]

    covering: Dict[Cell, List[int]] = {}
    for i, cand in enumerate(candidates):
        for cell in cand.cells:
            covering.setdefault(cell, []).append(i)

    if HOLE in covering:
        # alignment onto a hole face never covers the hole
        raise RuntimeError("candidate generation covered the hole")

    for target in HOLE_EDGES:
        idxs = covering.get(target.cell, [])
        if not idxs:
            meta["elapsed"] = time.time() - t0
            setattr(try_surround_cp_sat, "last_meta", meta)
            return False, [], "Proven infeasible"
        model.AddBoolOr([use[i] for i in idxs])

    for cell, idxs in covering.items():
        if len(idxs) > 1:
            model.AddAtMostOne([use[i] for i in idxs])

    model.Minimize(sum(use))

    solver = _cp.CpSolver()
    solver.parameters.max_time_in_seconds = max(0.01, float(max_seconds))
    solver.parameters.num_search_workers = max(1, int(getattr(CFG, "CP_SAT_WORKERS", 1)))
    status = solver.Solve(model)

    meta["status"] = solver.StatusName(status)
    meta["elapsed"] = time.time() - t0
    setattr(try_surround_cp_sat, "last_meta", meta)

    if status in (_cp.OPTIMAL, _cp.FEASIBLE):
        chosen = [candidates[i] for i in range(len(candidates)) if solver.Value(use[i])]
        # report in hole-face order, the way the searches build witnesses
        order = {edge: k for k, edge in enumerate(HOLE_EDGES)}
        chosen.sort(key=lambda p: order[p.target])
        return True, chosen, None
    if status == _cp.INFEASIBLE:
        return False, [], "Proven infeasible"
    return False, [], "Stopped before solution (timebox)"
