from dedupe import deduplicate_by_rotation
from geometry import rotate_omino, translate_omino

L_TETROMINO = [(0, 0), (0, 1), (0, 2), (1, 0)]
J_TETROMINO = [(0, 0), (0, 1), (0, 2), (-1, 0)]
S_TETROMINO = [(0, 0), (1, 0), (1, 1), (2, 1)]


def test_rotated_copy_collapses_to_first_seen():
    turned = rotate_omino(L_TETROMINO, 1)
    assert deduplicate_by_rotation([L_TETROMINO, turned]) == [L_TETROMINO]
    assert deduplicate_by_rotation([turned, L_TETROMINO]) == [turned]


def test_translated_copy_is_a_duplicate():
    moved = translate_omino(rotate_omino(S_TETROMINO, 2), (7, -3))
    assert deduplicate_by_rotation([S_TETROMINO, moved]) == [S_TETROMINO]


def test_mirror_images_stay_distinct():
    assert deduplicate_by_rotation([L_TETROMINO, J_TETROMINO]) == [L_TETROMINO, J_TETROMINO]


def test_input_order_kept_across_classes():
    shapes = [
        S_TETROMINO,
        L_TETROMINO,
        rotate_omino(S_TETROMINO, 1),
        J_TETROMINO,
        rotate_omino(L_TETROMINO, 3),
    ]
    assert deduplicate_by_rotation(shapes) == [S_TETROMINO, L_TETROMINO, J_TETROMINO]


def test_empty_input():
    assert deduplicate_by_rotation([]) == []
