from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple

Cell = Tuple[int, int]  # (x, y)


class InvalidPolyominoError(ValueError):
    """Raised when a cell collection is not a usable polyomino."""


class Dir(IntEnum):
    # clockwise order; value is the number of quarter turns from N
    N = 0
    E = 1
    S = 2
    W = 3

    @property
    def offset(self) -> Cell:
        return _DIR_OFFSETS[self]

    def flip(self) -> "Dir":
        return Dir((self + 2) % 4)

    def rotated(self, quarter_turns: int) -> "Dir":
        return Dir((self + quarter_turns) % 4)


_DIR_OFFSETS = {
    Dir.N: (0, 1),
    Dir.E: (1, 0),
    Dir.S: (0, -1),
    Dir.W: (-1, 0),
}


class Rotation(IntEnum):
    """Quarter-turn rotations about the origin, counted clockwise."""

    IDENTITY = 0
    CW = 1
    HALF = 2
    CCW = 3

    def apply(self, cell: Cell) -> Cell:
        x, y = cell
        if self is Rotation.IDENTITY:
            return (x, y)
        if self is Rotation.CW:
            return (y, -x)
        if self is Rotation.HALF:
            return (-x, -y)
        return (-y, x)

    def compose(self, other: "Rotation") -> "Rotation":
        return Rotation((self + other) % 4)

    def inverse(self) -> "Rotation":
        return Rotation((4 - self) % 4)


class TileState(Enum):
    BORDER = "B"
    FREE = "."
    REACHABLE = "r"
    OCCUPIED = "#"


@dataclass(frozen=True, order=True)
class Edge:
    """A boundary segment: ``cell`` has no member neighbour towards ``dir``."""

    cell: Cell
    dir: Dir

    def flip(self) -> "Edge":
        dx, dy = self.dir.offset
        return Edge((self.cell[0] + dx, self.cell[1] + dy), self.dir.flip())


@dataclass(frozen=True)
class Placement:
    rotation: Rotation
    translation: Cell
    cells: Tuple[Cell, ...]
    source: Edge
    target: Edge
