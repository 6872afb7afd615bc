from typing import List, Sequence, TypeVar

from geometry import rotational_equivalence
from models import Cell

S = TypeVar("S", bound=Sequence[Cell])


def deduplicate_by_rotation(polyominoes: Sequence[S]) -> List[S]:
    """Keep the first shape of every rotation class, in input order.

    Each shape is compared against the representatives kept so far, which is
    quadratic in the number of classes; the lists fed in here (solver
    failures) are short.
    """

    out: List[S] = []
    for shape in polyominoes:
        if not any(rotational_equivalence(kept, shape) for kept in out):
            out.append(shape)
    return out


__all__ = ["deduplicate_by_rotation"]
