# enumeration.py: fixed polyomino generation (Redelmeier)
from __future__ import annotations

from typing import Iterator, List, Set, Tuple

from config import CFG
from geometry import all_neighbors, normalize_omino
from models import Cell, TileState
from progress import log_attempt_detail

Polyomino = Tuple[Cell, ...]


class Grid:
    """Tile states for one enumeration run.

    Cells are grid-local: ``x`` in ``[-size, size]``, ``y`` in ``[0, size]``.
    The cells left of the origin on the bottom row are BORDER, which confines
    every grown shape to the half plane where the origin is its (y, x)-smallest
    cell.
    """

    def __init__(self, size: int):
        self.span = int(size)
        self.width = 2 * self.span + 1
        self.height = self.span + 1
        self.states: List[TileState] = [TileState.FREE] * (self.width * self.height)
        for x in range(-self.span, 0):
            self.set_pos((x, 0), TileState.BORDER)

    def _index(self, cell: Cell) -> int:
        x, y = cell
        if not (-self.span <= x <= self.span and 0 <= y <= self.span):
            raise IndexError(f"cell {cell} outside enumeration grid of span {self.span}")
        return (x + self.span) * self.height + y

    def get_pos(self, cell: Cell) -> TileState:
        return self.states[self._index(cell)]

    def set_pos(self, cell: Cell, state: TileState) -> None:
        self.states[self._index(cell)] = state

    def get_neighbors(self, cell: Cell) -> List[Cell]:
        x, y = cell
        out: List[Cell] = []
        if y < self.span:
            out.append((x, y + 1))
        if y > 0:
            out.append((x, y - 1))
        if x < self.span:
            out.append((x + 1, y))
        if x > -self.span:
            out.append((x - 1, y))
        return out


def _grow(grid: Grid, untried: List[Cell], occupied: List[Cell], size: int) -> Iterator[Polyomino]:
    # Pops from the end of ``untried``; a popped cell goes back to REACHABLE,
    # never FREE, so sibling branches cannot choose it again.
    while untried:
        next_cell = untried.pop()
        grid.set_pos(next_cell, TileState.OCCUPIED)
        occupied.append(next_cell)

        if len(occupied) == size:
            yield tuple(occupied)
        else:
            free_neighbors = [n for n in grid.get_neighbors(next_cell) if grid.get_pos(n) is TileState.FREE]
            reachable = list(untried)
            for neighbor in free_neighbors:
                reachable.append(neighbor)
                grid.set_pos(neighbor, TileState.REACHABLE)
            yield from _grow(grid, reachable, occupied, size)
            for neighbor in free_neighbors:
                grid.set_pos(neighbor, TileState.FREE)

        occupied.pop()
        grid.set_pos(next_cell, TileState.REACHABLE)


def iter_polyominoes(size: int) -> Iterator[Polyomino]:
    """Yield every fixed polyomino with ``size`` cells exactly once.

    Shapes are tuples of grid-local cells containing the origin as their
    (y, x)-smallest cell.  The order is deterministic.  The generator owns its
    grid, so abandoning it early is safe but a new call starts from scratch.
    """

    size = int(size)
    if size < 1:
        raise ValueError(f"polyomino size must be >= 1, got {size}")

    grid = Grid(size)
    origin = (0, 0)
    grid.set_pos(origin, TileState.REACHABLE)

    every = max(1, int(getattr(CFG, "ENUM_PROGRESS_EVERY", 1000000)))
    emitted = 0
    for shape in _grow(grid, [origin], [], size):
        emitted += 1
        if emitted % every == 0:
            log_attempt_detail("Enumeration progress", size=size, emitted=emitted)
        yield shape

    log_attempt_detail("Enumeration finished", size=size, emitted=emitted)


def enumerate_polyominoes(size: int) -> List[Polyomino]:
    return list(iter_polyominoes(size))


def count_polyominoes(size: int) -> int:
    return sum(1 for _ in iter_polyominoes(size))


def enumerate_polyominoes_naive(size: int) -> Set[Polyomino]:
    """Grow every (size-1)-omino by one neighbour cell and normalize.

    Much slower than :func:`iter_polyominoes`; kept as an independent
    cross-check for small sizes.
    """

    size = int(size)
    if size < 1:
        raise ValueError(f"polyomino size must be >= 1, got {size}")

    layer: Set[Polyomino] = {((0, 0),)}
    for _ in range(size - 1):
        grown: Set[Polyomino] = set()
        for shape in layer:
            members = set(shape)
            for neighbor in all_neighbors(shape):
                if neighbor in members:
                    continue
                grown.add(normalize_omino(shape + (neighbor,)))
        layer = grown
    return layer
