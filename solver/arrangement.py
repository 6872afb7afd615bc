"""Search for rotated/translated copies of a polyomino surrounding a 1x1 hole.

The hole is fixed at the origin.  Its four neighbours are resolved in the
order N, E, S, W: the first uncovered neighbour is always the next one to
cover, and a copy can only cover the neighbour in direction ``D`` through one
of its perimeter edges facing ``flip(D)``, translated so that edge's cell lands
on the neighbour.  That alignment also keeps every copy off the hole itself.

Any valid arrangement replays in this fixed order, so the search is complete.
Four flavours share that idea:

* :func:`find_arrangement_translation`: one orientation, explicit stack of
  configurations, sorted-merge overlap test.
* :func:`find_arrangement`: all four rotations, explicit stack, sorted merge.
* :func:`find_arrangement_board`: all four rotations, recursive DFS on a
  dense :class:`~solver.board.Board` with add/undo; tried after the bounding
  box corner shortcut.
* ``"cp_sat"``: the same decision posed to OR-Tools (see :mod:`solver.cp_sat`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import CFG
from geometry import (
    bounding_box,
    iter_perimeter,
    normalize_omino,
    translate_omino,
    translation_of_a_to_b,
    validate_polyomino,
)
from models import Cell, Dir, Edge, Placement, Rotation
from solver.board import HOLE_EDGES, Board

VARIANTS = ("board", "rotation", "translation", "cp_sat")

# ---------------- overlap tests ----------------

def _is_sorted(cells: Sequence[Cell]) -> bool:
    return all(cells[i] <= cells[i + 1] for i in range(len(cells) - 1))


def merge_pts(pts: Sequence[Cell], new_pts: Sequence[Cell]) -> Optional[List[Cell]]:
    """Sorted union of two sorted cell lists, or ``None`` if they share a cell."""

    if not _is_sorted(pts) or not _is_sorted(new_pts):
        raise ValueError("merge_pts requires both cell lists to be sorted")

    out: List[Cell] = []
    i = j = 0
    while i < len(pts) and j < len(new_pts):
        a = pts[i]
        b = new_pts[j]
        if a == b:
            return None
        if a < b:
            out.append(a)
            i += 1
        else:
            out.append(b)
            j += 1
    out.extend(pts[i:])
    out.extend(new_pts[j:])
    return out


def merge_pts_slow(pts: Sequence[Cell], new_pts: Sequence[Cell]) -> Optional[List[Cell]]:
    """Set-based variant of :func:`merge_pts`; the union is not sorted."""

    existing = set(pts)
    if any(pt in existing for pt in new_pts):
        return None
    return list(new_pts) + list(pts)


def next_edge_to_cover(pts: Iterable[Cell]) -> Optional[Edge]:
    occupied = set(pts)
    for edge in HOLE_EDGES:
        if edge.cell not in occupied:
            return edge
    return None


def translate_a_to_b(shape: Sequence[Cell], a: Cell, b: Cell) -> Tuple[List[Cell], Cell]:
    translation = translation_of_a_to_b(a, b)
    return translate_omino(shape, translation), translation


def _edges_by_dir(perimeter: Iterable[Edge]) -> Dict[Dir, List[Edge]]:
    grouped: Dict[Dir, List[Edge]] = {d: [] for d in Dir}
    for edge in perimeter:
        grouped[edge.dir].append(edge)
    return grouped


# ---------------- translation-only stack search ----------------

@dataclass
class ConfigurationTranslation:
    pts: List[Cell] = field(default_factory=list)  # sorted
    placements: List[Placement] = field(default_factory=list)


def add_translation_children(
    shape: Sequence[Cell],
    perimeter: Dict[Dir, List[Edge]],
    stack: List[ConfigurationTranslation],
    config: ConfigurationTranslation,
) -> Optional[List[Placement]]:
    """Push the children of ``config``; return a finished witness if one appears."""

    target = next_edge_to_cover(config.pts)
    for src in perimeter[target.dir]:
        moved, translation = translate_a_to_b(shape, src.cell, target.cell)
        merged = merge_pts(config.pts, moved)
        if merged is None:
            continue
        placements = config.placements + [
            Placement(Rotation.IDENTITY, translation, tuple(moved), src, target)
        ]
        if next_edge_to_cover(merged) is None:
            return placements
        stack.append(ConfigurationTranslation(merged, placements))
    return None


def find_arrangement_translation(shape: Iterable[Cell]) -> Optional[List[Placement]]:
    """Surround the hole with translated copies of ``shape`` only.

    Answers the narrower question of whether the shape works without turning
    it; a ``None`` here says nothing about the rotated case.
    """

    cells = sorted(validate_polyomino(shape))
    perimeter = _edges_by_dir(iter_perimeter(cells))

    nodes = 0
    stack = [ConfigurationTranslation()]
    while stack:
        config = stack.pop()
        nodes += 1
        found = add_translation_children(cells, perimeter, stack, config)
        if found is not None:
            setattr(find_arrangement_translation, "last_stats", {"nodes": nodes, "solved": True})
            return found
    setattr(find_arrangement_translation, "last_stats", {"nodes": nodes, "solved": False})
    return None


# ---------------- rotation + translation stack search ----------------

@dataclass
class Configuration:
    pts: List[Cell] = field(default_factory=list)  # sorted
    placements: List[Placement] = field(default_factory=list)


@dataclass
class Orientation:
    rotation: Rotation
    cells: List[Cell]  # sorted
    edges: Dict[Dir, List[Edge]]


def _orientations(cells: Sequence[Cell]) -> List[Orientation]:
    """The distinct rotations of ``cells`` with their perimeters grouped by dir.

    A rotation that is only a translate of an earlier one offers exactly the
    same aligned copies, so it is skipped.
    """

    out: List[Orientation] = []
    seen = set()
    for rotation in Rotation:
        # translation preserves sort order, so each rotation is sorted once here
        rotated = sorted(rotation.apply(cell) for cell in cells)
        key = normalize_omino(rotated)
        if key in seen:
            continue
        seen.add(key)
        out.append(Orientation(rotation, rotated, _edges_by_dir(iter_perimeter(rotated))))
    return out


def add_tr_children(
    orientations: Sequence[Orientation],
    stack: List[Configuration],
    config: Configuration,
) -> Optional[List[Placement]]:
    target = next_edge_to_cover(config.pts)
    for orientation in orientations:
        for src in orientation.edges[target.dir]:
            moved, translation = translate_a_to_b(orientation.cells, src.cell, target.cell)
            merged = merge_pts(config.pts, moved)
            if merged is None:
                continue
            placement = Placement(orientation.rotation, translation, tuple(moved), src, target)
            placements = config.placements + [placement]
            if next_edge_to_cover(merged) is None:
                return placements
            stack.append(Configuration(merged, placements))
    return None


def find_arrangement(shape: Iterable[Cell]) -> Optional[List[Placement]]:
    """Surround the hole with rotated and translated copies of ``shape``."""

    orientations = _orientations(validate_polyomino(shape))

    nodes = 0
    stack = [Configuration()]
    while stack:
        config = stack.pop()
        nodes += 1
        found = add_tr_children(orientations, stack, config)
        if found is not None:
            setattr(find_arrangement, "last_stats", {"nodes": nodes, "solved": True})
            return found
    setattr(find_arrangement, "last_stats", {"nodes": nodes, "solved": False})
    return None


# ---------------- corner shortcut ----------------

def has_corner_arrangement(shape: Sequence[Cell]) -> bool:
    """True when some cell sits on a corner of the shape's bounding box."""

    min_x, max_x, min_y, max_y = bounding_box(shape)
    for x, y in shape:
        if x in (min_x, max_x) and y in (min_y, max_y):
            return True
    return False


def corner_arrangement(shape: Sequence[Cell]) -> Optional[List[Placement]]:
    """Build the four-copy pinwheel witness for a shape with a corner cell.

    The shape is turned until its corner cell is the bottom-left corner of its
    bounding box, then placed with that cell on the hole's north neighbour so
    the copy lies in ``x >= 0, y >= 1``.  The three quarter-turns of that copy
    about the hole fill the other three quadrants.
    """

    for base in Rotation:
        rotated = [base.apply(cell) for cell in shape]
        min_x, _, min_y, _ = bounding_box(rotated)
        corner = (min_x, min_y)
        if corner not in set(rotated):
            continue
        anchor = translation_of_a_to_b(corner, HOLE_EDGES[0].cell)
        seated = translate_omino(rotated, anchor)
        placements: List[Placement] = []
        for turn in Rotation:
            placements.append(
                Placement(
                    rotation=base.compose(turn),
                    translation=turn.apply(anchor),
                    cells=tuple(turn.apply(cell) for cell in seated),
                    source=Edge(turn.apply(corner), Dir.S.rotated(turn)),
                    target=HOLE_EDGES[turn],
                )
            )
        return placements
    return None


# ---------------- board-backed recursive search ----------------

def _covers_board(
    orientations: Sequence[Orientation],
    board: Board,
    placements: List[Placement],
    stats: Dict[str, int],
) -> bool:
    target = board.next_edge_to_cover()
    if target is None:
        return True
    stats["nodes"] += 1

    for orientation in orientations:
        for src in orientation.edges[target.dir]:
            translation = translation_of_a_to_b(src.cell, target.cell)
            moved = translate_omino(orientation.cells, translation)
            stats["tried"] += 1
            if not board.add(moved):
                continue
            placements.append(Placement(orientation.rotation, translation, tuple(moved), src, target))
            if _covers_board(orientations, board, placements, stats):
                return True
            placements.pop()
            board.undo(moved)
    return False


def find_arrangement_board(shape: Iterable[Cell]) -> Optional[List[Placement]]:
    """Board-backed search, preceded by the bounding-box corner shortcut."""

    cells = validate_polyomino(shape)

    pinwheel = corner_arrangement(cells)
    if pinwheel is not None:
        setattr(find_arrangement_board, "last_stats", {"nodes": 0, "tried": 0, "solved_via": "corner"})
        return pinwheel

    orientations = _orientations(cells)
    board = Board.for_shape(cells)
    placements: List[Placement] = []
    stats = {"nodes": 0, "tried": 0}

    solved = _covers_board(orientations, board, placements, stats)
    stats_out: Dict[str, object] = dict(stats)
    stats_out["solved_via"] = "search" if solved else None
    setattr(find_arrangement_board, "last_stats", stats_out)
    return placements if solved else None


def has_arrangement_board(shape: Iterable[Cell]) -> bool:
    cells = validate_polyomino(shape)
    if has_corner_arrangement(cells):
        return True
    return find_arrangement_board(cells) is not None


# ---------------- public entry points ----------------

def resolve_variant(variant: Optional[str]) -> str:
    name = (variant or getattr(CFG, "SOLVER_VARIANT", "board") or "board").strip().lower()
    if name not in VARIANTS:
        raise ValueError(f"unknown solver variant {name!r}; expected one of {', '.join(VARIANTS)}")
    return name


def find_surrounding(shape: Iterable[Cell], variant: Optional[str] = None) -> Optional[List[Placement]]:
    """Return placements surrounding the hole, or ``None`` when none exist.

    ``variant`` defaults to ``CFG.SOLVER_VARIANT``.  The CP-SAT variant runs in
    a spawned child limited to ``CFG.CP_SAT_SECONDS`` and raises
    ``RuntimeError`` if it stops, crashes or times out before proving either
    answer.
    """

    name = resolve_variant(variant)
    if name == "board":
        return find_arrangement_board(shape)
    if name == "rotation":
        return find_arrangement(shape)
    if name == "translation":
        return find_arrangement_translation(shape)

    from solver.cp_isolate import run_cp_sat_isolated

    seconds = float(getattr(CFG, "CP_SAT_SECONDS", 10.0))
    ok, placements, reason, crash_note = run_cp_sat_isolated(validate_polyomino(shape), seconds)
    if ok:
        return placements
    if reason == "Proven infeasible":
        return None
    detail = f"{reason} ({crash_note})" if crash_note else reason
    raise RuntimeError(f"CP-SAT gave no answer: {detail}")


def surrounds_hole(shape: Iterable[Cell], variant: Optional[str] = None) -> bool:
    name = resolve_variant(variant)
    if name == "board":
        return has_arrangement_board(shape)
    return find_surrounding(shape, name) is not None


__all__ = [
    "VARIANTS",
    "resolve_variant",
    "merge_pts",
    "merge_pts_slow",
    "next_edge_to_cover",
    "find_arrangement_translation",
    "find_arrangement",
    "has_corner_arrangement",
    "corner_arrangement",
    "find_arrangement_board",
    "has_arrangement_board",
    "find_surrounding",
    "surrounds_hole",
]
