import pytest

cp_sat = pytest.importorskip("solver.cp_sat")

from enumeration import iter_polyominoes
from geometry import mirror_x_axis, mirror_y_axis, rotate_omino, translate_omino
from solver.arrangement import find_surrounding, surrounds_hole
from solver.board import HOLE, HOLE_EDGES
from solver.cp_isolate import run_cp_sat_isolated


def unarrangeable25():
    base = [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3), (2, 3), (1, 0), (2, 0), (3, 0), (3, 1)]
    out = set()
    for pt in base:
        out.update((pt, mirror_x_axis(pt), mirror_y_axis(pt), mirror_x_axis(mirror_y_axis(pt))))
    return sorted(out)


def _check_witness(shape, placements):
    covered = set()
    for p in placements:
        expected = translate_omino(rotate_omino(shape, p.rotation), p.translation)
        assert sorted(p.cells) == sorted(expected)
        assert covered.isdisjoint(p.cells)
        covered.update(p.cells)
    assert HOLE not in covered
    assert all(edge.cell in covered for edge in HOLE_EDGES)


def test_monomino_uses_four_copies():
    ok, placements, reason = cp_sat.try_surround_cp_sat([(0, 0)], max_seconds=5)
    assert ok is True
    assert reason is None
    assert len(placements) == 4
    assert [p.target for p in placements] == list(HOLE_EDGES)
    _check_witness([(0, 0)], placements)


def test_candidates_never_cover_the_hole():
    for shape in iter_polyominoes(4):
        candidates = cp_sat.build_candidates(shape)
        assert candidates
        assert all(HOLE not in p.cells for p in candidates)
        assert len({frozenset(p.cells) for p in candidates}) == len(candidates)


def test_symmetric_shape_candidates_are_deduplicated():
    # the monomino has one distinct copy per hole face
    assert len(cp_sat.build_candidates([(0, 0)])) == 4


def test_unarrangeable25_is_proven_infeasible():
    ok, placements, reason = cp_sat.try_surround_cp_sat(unarrangeable25(), max_seconds=30)
    assert ok is False
    assert placements == []
    assert reason == "Proven infeasible"
    assert getattr(cp_sat.try_surround_cp_sat, "last_meta", {}).get("candidates", 0) > 0


@pytest.mark.parametrize("size", [3, 4])
def test_agrees_with_board_search(size):
    for shape in iter_polyominoes(size):
        ok, placements, reason = cp_sat.try_surround_cp_sat(shape, max_seconds=5)
        assert ok == surrounds_hole(shape, "board"), (shape, reason)
        if ok:
            _check_witness(shape, placements)


def test_find_surrounding_dispatches_to_cp_sat():
    plus = [(0, 0), (1, 0), (-1, 0), (0, 1), (0, -1)]
    placements = find_surrounding(plus, "cp_sat")
    _check_witness(plus, placements)
    assert surrounds_hole(unarrangeable25(), "cp_sat") is False


def test_isolated_runner_returns_child_result():
    ok, placements, reason, crash_note = run_cp_sat_isolated([(0, 0), (1, 0)], 5)
    assert ok is True
    assert reason is None
    assert crash_note is None
    _check_witness([(0, 0), (1, 0)], placements)
