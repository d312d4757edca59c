from __future__ import annotations

from collections import Counter
import random

import numpy as np
import pytest

from wastedris.shapes import (
    PIECE_SIZE,
    Piece,
    build_shape,
    generate_piece,
    random_color,
    rotate_left,
    rotate_right,
    silhouette,
)


class ScriptedRandom:
    """Random source replaying fixed draws."""

    def __init__(self, floats=(), ints=()) -> None:
        self.floats = list(floats)
        self.ints = list(ints)

    def random(self) -> float:
        return self.floats.pop(0)

    def randrange(self, stop: int) -> int:
        value = self.ints.pop(0)
        assert 0 <= value < stop
        return value


I_SHAPE = ((0, 0), (1, 0), (2, 0), (3, 0))
O_SHAPE = ((0, 0), (0, 1), (1, 0), (1, 1))
T_SHAPE = ((0, 1), (1, 0), (1, 1), (2, 1))
S_SHAPE = ((0, 1), (0, 2), (1, 0), (1, 1))
Z_SHAPE = ((0, 0), (0, 1), (1, 1), (1, 2))
J_SHAPE = ((0, 1), (1, 1), (2, 0), (2, 1))
L_SHAPE = ((0, 0), (0, 1), (1, 1), (2, 1))


def test_color_draw_skips_white():
    colors = [random_color(ScriptedRandom(ints=[v])) for v in range(12)]
    assert colors == [1, 2, 3, 4, 5, 6, 11, 12, 13, 14, 15, 16]


def test_generated_colors_are_uniform():
    rng = random.Random(1234)
    trials = 12000
    counts = Counter(generate_piece(rng).color for _ in range(trials))
    assert 7 not in counts
    assert 17 not in counts
    assert set(counts) == {1, 2, 3, 4, 5, 6, 11, 12, 13, 14, 15, 16}
    for count in counts.values():
        assert count / trials == pytest.approx(1 / 12, abs=0.012)


@pytest.mark.parametrize(
    "draws, expected",
    [
        ([0.1, 0.1], I_SHAPE),
        ([0.1, 0.2], T_SHAPE),
        ([0.1, 0.5], S_SHAPE),
        ([0.1, 0.9], J_SHAPE),
        ([0.5, 0.1], I_SHAPE),
        ([0.5, 0.2], T_SHAPE),
        ([0.5, 0.5], Z_SHAPE),
        ([0.5, 0.9], L_SHAPE),
        ([0.9], O_SHAPE),
    ],
)
def test_branches_build_tetrominoes(draws, expected):
    cells = build_shape(3, ScriptedRandom(floats=draws))
    assert silhouette(cells) == expected
    assert set(np.unique(cells)) == {0, 3}


def test_unmodified_square_sits_in_the_middle():
    cells = build_shape(5, ScriptedRandom(floats=[0.95]))
    expected = np.zeros((PIECE_SIZE, PIECE_SIZE), dtype=np.uint8)
    expected[1:3, 1:3] = 5
    assert np.array_equal(cells, expected)


def test_silhouettes_are_equally_likely():
    rng = random.Random(99)
    trials = 14000
    counts = Counter(silhouette(build_shape(1, rng)) for _ in range(trials))
    assert set(counts) == {I_SHAPE, O_SHAPE, T_SHAPE, S_SHAPE, Z_SHAPE, J_SHAPE, L_SHAPE}
    for count in counts.values():
        assert count / trials == pytest.approx(1 / 7, abs=0.015)


def test_generated_pieces_have_four_blocks_of_one_colour():
    rng = random.Random(5)
    for _ in range(200):
        piece = generate_piece(rng)
        assert len(piece.local_blocks()) == 4
        assert len(set(np.unique(piece.cells)) - {0}) == 1
        assert (piece.x, piece.y) == (0, 0)


def test_rotate_right_and_left_move_cells():
    cells = np.zeros((PIECE_SIZE, PIECE_SIZE), dtype=np.uint8)
    cells[0, 1] = 3
    right = rotate_right(cells)
    left = rotate_left(cells)
    assert right[1, 3] == 3 and np.count_nonzero(right) == 1
    assert left[2, 0] == 3 and np.count_nonzero(left) == 1
    # The input is never modified.
    assert cells[0, 1] == 3 and np.count_nonzero(cells) == 1


def test_rotation_is_reversible():
    rng = random.Random(3)
    for _ in range(100):
        cells = generate_piece(rng).cells
        assert np.array_equal(rotate_left(rotate_right(cells)), cells)
        assert np.array_equal(rotate_right(rotate_left(cells)), cells)
        assert np.array_equal(rotate_right(rotate_right(rotate_right(rotate_right(cells)))), cells)


def test_piece_blocks_follow_anchor():
    cells = np.zeros((PIECE_SIZE, PIECE_SIZE), dtype=np.uint8)
    cells[2, 1] = 4
    piece = Piece(cells, x=5, y=-3)
    assert piece.blocks() == [(6, -1)]
    piece.move(-1, 2)
    assert piece.blocks() == [(5, 1)]
    clone = piece.copy()
    clone.rotate()
    assert piece.blocks() == [(5, 1)]
