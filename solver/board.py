# solver/board.py: dense occupancy window for the hole search
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from config import CFG
from geometry import bounding_box, offset_in_dir
from models import Cell, Dir, Edge

HOLE: Cell = (0, 0)

# The four faces of the hole, in resolution order.  Each entry names the
# neighbouring cell and the direction that faces back into the hole.
HOLE_EDGES = tuple(Edge(offset_in_dir(HOLE, d), d.flip()) for d in (Dir.N, Dir.E, Dir.S, Dir.W))


class Board:
    """Square occupancy table addressed by ``coordinate + offset``.

    ``add`` tests every cell before marking any of them, so a rejected
    placement leaves the board untouched.  ``undo`` must be called with exactly
    the cells of a previous successful ``add``.
    """

    def __init__(self, offset: int):
        offset = int(offset)
        if offset < 1:
            raise ValueError(f"board offset must be positive, got {offset}")
        self.offset = offset
        self.side = 2 * offset
        self.cells = bytearray(self.side * self.side)

    @classmethod
    def for_shape(cls, shape: Sequence[Cell]) -> "Board":
        """Size a board for every copy of ``shape`` aligned onto the hole."""

        min_x, max_x, min_y, max_y = bounding_box(shape)
        # A copy touching a hole neighbour reaches at most one span past it,
        # in any rotation.
        reach = max(max_x - min_x, max_y - min_y) + 2
        return cls(max(int(getattr(CFG, "BOARD_MIN_OFFSET", 32)), reach + 1))

    def _index(self, cell: Cell) -> int:
        x = cell[0] + self.offset
        y = cell[1] + self.offset
        if not (0 <= x < self.side and 0 <= y < self.side):
            raise IndexError(f"cell {cell} outside board window of offset {self.offset}")
        return x * self.side + y

    def contains(self, cell: Cell) -> bool:
        return bool(self.cells[self._index(cell)])

    def add(self, cells: Sequence[Cell]) -> bool:
        indices = [self._index(cell) for cell in cells]
        grid = self.cells
        for idx in indices:
            if grid[idx]:
                return False
        for idx in indices:
            grid[idx] = 1
        return True

    def add_always(self, cells: Iterable[Cell]) -> None:
        for cell in cells:
            self.cells[self._index(cell)] = 1

    def undo(self, cells: Iterable[Cell]) -> None:
        for cell in cells:
            idx = self._index(cell)
            if not self.cells[idx]:
                raise RuntimeError(f"undo of unoccupied cell {cell}")
            self.cells[idx] = 0

    def occupied_count(self) -> int:
        return sum(self.cells)

    def next_edge_to_cover(self) -> Optional[Edge]:
        for edge in HOLE_EDGES:
            if not self.contains(edge.cell):
                return edge
        return None
