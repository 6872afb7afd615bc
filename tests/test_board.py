import pytest

from models import Dir, Edge
from solver.board import HOLE_EDGES, Board


def test_hole_edges_face_the_origin_in_clockwise_order():
    assert HOLE_EDGES == (
        Edge((0, 1), Dir.S),
        Edge((1, 0), Dir.W),
        Edge((0, -1), Dir.N),
        Edge((-1, 0), Dir.E),
    )


def test_add_rejects_overlap_without_marking_anything():
    board = Board(8)
    assert board.add([(0, 1), (1, 1)])
    assert not board.add([(2, 2), (1, 1)])
    assert not board.contains((2, 2))
    assert board.occupied_count() == 2


def test_undo_restores_exact_prior_state():
    board = Board(8)
    board.add([(0, 1)])
    before = bytes(board.cells)
    piece = [(1, 0), (2, 0), (2, -1)]
    assert board.add(piece)
    board.undo(piece)
    assert bytes(board.cells) == before


def test_undo_of_unmarked_cell_fails_fast():
    board = Board(4)
    with pytest.raises(RuntimeError):
        board.undo([(0, 0)])


def test_cells_outside_window_fail_fast():
    board = Board(4)
    with pytest.raises(IndexError):
        board.add([(4, 0)])
    with pytest.raises(IndexError):
        board.contains((0, -5))
    assert board.add([(-4, 3)])


def test_next_edge_to_cover_walks_n_e_s_w():
    board = Board(4)
    assert board.next_edge_to_cover() == HOLE_EDGES[0]
    board.add_always([(0, 1)])
    assert board.next_edge_to_cover() == HOLE_EDGES[1]
    board.add_always([(-1, 0), (0, -1)])
    assert board.next_edge_to_cover() == HOLE_EDGES[1]
    board.add_always([(1, 0)])
    assert board.next_edge_to_cover() is None


def test_board_for_shape_grows_past_minimum(monkeypatch):
    import solver.board as board_module

    monkeypatch.setattr(board_module.CFG, "BOARD_MIN_OFFSET", 2, raising=False)
    bar = [(x, 0) for x in range(10)]
    board = Board.for_shape(bar)
    assert board.offset >= 12
    assert board.add([(x, 1) for x in range(-10, 1)])


def test_board_rejects_non_positive_offset():
    with pytest.raises(ValueError):
        Board(0)
