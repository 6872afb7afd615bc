# geometry.py: rotation, translation and perimeter helpers on free cells
from __future__ import annotations

from collections import deque
from typing import Iterable, List, Sequence, Set, Tuple

from models import Cell, Dir, Edge, InvalidPolyominoError, Rotation

_DIRS = (Dir.N, Dir.E, Dir.S, Dir.W)


# ---------------- point algebra ----------------

def sum_points(p: Cell, q: Cell) -> Cell:
    return (p[0] + q[0], p[1] + q[1])


def invert_point(p: Cell) -> Cell:
    return (-p[0], -p[1])


def offset_in_dir(cell: Cell, d: Dir) -> Cell:
    return sum_points(cell, d.offset)


def translation_of_a_to_b(a: Cell, b: Cell) -> Cell:
    return (b[0] - a[0], b[1] - a[1])


def neighbors(cell: Cell) -> List[Cell]:
    x, y = cell
    return [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]


def neighbors_with_directions(cell: Cell) -> List[Tuple[Cell, Dir]]:
    return [(offset_in_dir(cell, d), d) for d in _DIRS]


def all_neighbors(shape: Iterable[Cell]) -> Set[Cell]:
    out: Set[Cell] = set()
    for cell in shape:
        out.update(neighbors(cell))
    return out


# ---------------- rotations / reflections ----------------

def rotate_0(cell: Cell) -> Cell:
    return Rotation.IDENTITY.apply(cell)


def rotate_cw(cell: Cell) -> Cell:
    return Rotation.CW.apply(cell)


def rotate_180(cell: Cell) -> Cell:
    return Rotation.HALF.apply(cell)


def rotate_ccw(cell: Cell) -> Cell:
    return Rotation.CCW.apply(cell)


def mirror_x_axis(cell: Cell) -> Cell:
    return (cell[0], -cell[1])


def mirror_y_axis(cell: Cell) -> Cell:
    return (-cell[0], cell[1])


def rotate_omino(shape: Iterable[Cell], amount: int) -> List[Cell]:
    """Rotate every cell ``amount`` clockwise quarter turns (0..3)."""

    if not 0 <= int(amount) <= 3:
        raise ValueError(f"rotation amount must be 0..3, got {amount!r}")
    rotation = Rotation(int(amount))
    return [rotation.apply(cell) for cell in shape]


def translate_omino(shape: Iterable[Cell], translation: Cell) -> List[Cell]:
    dx, dy = translation
    return [(x + dx, y + dy) for x, y in shape]


# ---------------- perimeter ----------------

def iter_perimeter(shape: Sequence[Cell]) -> List[Edge]:
    """Return every (cell, dir) whose neighbour in ``dir`` is not in ``shape``.

    Membership goes through a set, so the resulting edge set does not depend on
    the order of ``shape``.
    """

    occupied = set(shape)
    out: List[Edge] = []
    for cell in shape:
        for neighbor, d in neighbors_with_directions(cell):
            if neighbor not in occupied:
                out.append(Edge(cell, d))
    return out


def iter_perimeter_slow(shape: Sequence[Cell]) -> List[Edge]:
    """Sort-merge formulation of :func:`iter_perimeter`.

    Every (neighbour, edge) candidate is sorted by neighbour and walked
    alongside the sorted cells; candidates whose neighbour is a cell are
    dropped.
    """

    cells = sorted(shape)
    candidates = sorted(
        ((neighbor, Edge(cell, d)) for cell in cells for neighbor, d in neighbors_with_directions(cell)),
        key=lambda pair: pair[0],
    )

    out: List[Edge] = []
    i = j = 0
    while i < len(cells) and j < len(candidates):
        neighbor, edge = candidates[j]
        if neighbor == cells[i]:
            j += 1
        elif neighbor < cells[i]:
            out.append(edge)
            j += 1
        else:
            i += 1
    out.extend(edge for _, edge in candidates[j:])
    return out


def rotate_omino_edge(shape: Iterable[Cell], edge: Edge, target_dir: Dir) -> Tuple[List[Cell], Cell]:
    """Rotate ``shape`` so that ``edge`` faces ``target_dir``.

    Returns the rotated cells and where the edge's cell ended up.  The edge's
    new direction is ``target_dir`` by construction.
    """

    rotation = Rotation((int(target_dir) - int(edge.dir)) % 4)
    return [rotation.apply(cell) for cell in shape], rotation.apply(edge.cell)


def align_perim(shape: Iterable[Cell], src: Edge, target: Edge) -> List[Cell]:
    rotated, tracked = rotate_omino_edge(shape, src, target.dir)
    return translate_omino(rotated, translation_of_a_to_b(tracked, target.cell))


# ---------------- normalization / equivalence ----------------

def _yx_key(cell: Cell) -> Tuple[int, int]:
    return (cell[1], cell[0])


def normalize_omino(shape: Iterable[Cell]) -> Tuple[Cell, ...]:
    """Translate so the (y, x)-smallest cell sits at the origin, then sort."""

    cells = list(shape)
    anchor = min(cells, key=_yx_key)
    return tuple(sorted(translate_omino(cells, invert_point(anchor))))


def rotational_equivalence(shape: Iterable[Cell], other: Iterable[Cell]) -> bool:
    target = normalize_omino(shape)
    other_cells = list(other)
    if len(other_cells) != len(target):
        return False
    return any(
        normalize_omino(rotation.apply(cell) for cell in other_cells) == target
        for rotation in Rotation
    )


# ---------------- validation ----------------

def bounding_box(shape: Iterable[Cell]) -> Tuple[int, int, int, int]:
    """Return (min_x, max_x, min_y, max_y)."""

    cells = list(shape)
    xs = [x for x, _ in cells]
    ys = [y for _, y in cells]
    return min(xs), max(xs), min(ys), max(ys)


def is_connected(shape: Iterable[Cell]) -> bool:
    cells = set(shape)
    if not cells:
        return False
    start = next(iter(cells))
    seen = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for neighbor in neighbors(cell):
            if neighbor in cells and neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return len(seen) == len(cells)


def _is_coord(v) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(v, int) and not isinstance(v, bool)


def validate_polyomino(shape: Iterable[Cell]) -> List[Cell]:
    """Return ``shape`` as a list of int cells or raise InvalidPolyominoError.

    Coordinates must already be ints; floats are rejected rather than
    truncated.
    """

    try:
        pairs = [tuple(cell) for cell in shape]
    except TypeError as e:
        raise InvalidPolyominoError(f"cells must be (x, y) integer pairs: {e}") from e
    for pair in pairs:
        if len(pair) != 2 or not all(_is_coord(v) for v in pair):
            raise InvalidPolyominoError(f"cells must be (x, y) integer pairs, got {pair!r}")
    cells: List[Cell] = [(pair[0], pair[1]) for pair in pairs]
    if not cells:
        raise InvalidPolyominoError("polyomino has no cells")
    if len(set(cells)) != len(cells):
        raise InvalidPolyominoError("polyomino has duplicate cells")
    if not is_connected(cells):
        raise InvalidPolyominoError("polyomino cells are not edge-connected")
    return cells
