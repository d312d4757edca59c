"""Piece definitions and random piece generation.

Every piece lives in a fixed 4x4 box of colour indices.  A zero entry is an
empty cell; any other entry is the piece's colour.  Shapes are not looked up
from a table but grown out of a 2x2 square by a couple of random edits, which
gives each of the seven tetromino silhouettes a 1/7 chance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple
import random

import numpy as np
from numpy.typing import NDArray


PIECE_SIZE = 4

EMPTY = 0
# Base colours: red, green, yellow, blue, magenta, cyan, white.
BASE_COLORS = tuple(range(1, 8))
# Bright variants of the base colours.
BRIGHT_COLORS = tuple(range(11, 18))
LEGAL_COLORS = frozenset((EMPTY,) + BASE_COLORS + BRIGHT_COLORS)

Matrix = NDArray[np.uint8]


def empty_matrix() -> Matrix:
    """Return a zeroed 4x4 piece matrix."""

    return np.zeros((PIECE_SIZE, PIECE_SIZE), dtype=np.uint8)


def rotate_right(cells: Matrix) -> Matrix:
    """Return ``cells`` rotated 90 degrees clockwise.

    Local cell ``(i, j)`` moves to ``(j, N-1-i)``.  A new array is returned;
    the input is left untouched.
    """

    return np.rot90(cells, k=-1).copy()


def rotate_left(cells: Matrix) -> Matrix:
    """Return ``cells`` rotated 90 degrees counter-clockwise.

    Local cell ``(i, j)`` moves to ``(N-1-j, i)``.
    """

    return np.rot90(cells, k=1).copy()


def rotated(cells: Matrix, clockwise: bool) -> Matrix:
    return rotate_right(cells) if clockwise else rotate_left(cells)


def random_color(rng: random.Random) -> int:
    """Draw a colour uniformly from the twelve non-white colours."""

    value = rng.randrange(12)
    if value < 6:
        return value + 1
    return value + 5


def build_shape(color: int, rng: random.Random) -> Matrix:
    """Grow an unrotated piece of ``color`` out of a 2x2 square.

    The first draw picks one of three branches (3/7, 3/7, 1/7) and the second
    draw edits the shape further inside the first two branches.  Up to
    translation the outcome is one of I, T, S, Z, J, L or O, each with
    probability 1/7.
    """

    cells = empty_matrix()
    cells[1:3, 1:3] = color

    p_val = rng.random()
    if p_val < 3.0 / 7.0:
        cells[1, 1] = EMPTY
        cells[0, 2] = color
        p_val = rng.random()
        if p_val < 1.0 / 6.0:
            cells[2, 1] = EMPTY
            cells[3, 2] = color
        elif p_val < 2.0 / 6.0:
            cells[1, 1] = color
            cells[2, 1] = EMPTY
        elif p_val < 2.0 / 3.0:
            cells[0, 2] = EMPTY
            cells[1, 3] = color
    elif p_val < 6.0 / 7.0:
        cells[2, 1] = EMPTY
        cells[3, 2] = color
        p_val = rng.random()
        if p_val < 1.0 / 6.0:
            cells[1, 1] = EMPTY
            cells[0, 2] = color
        elif p_val < 2.0 / 6.0:
            cells[1, 1] = EMPTY
            cells[2, 1] = color
        elif p_val < 2.0 / 3.0:
            cells[3, 2] = EMPTY
            cells[2, 3] = color
    return cells


def random_orientation(cells: Matrix, rng: random.Random) -> Matrix:
    """Turn ``cells`` left, right, half way round or not at all (1/4 each)."""

    p_val = rng.random()
    if p_val < 1.0 / 4.0:
        return rotate_left(cells)
    if p_val < 2.0 / 4.0:
        return rotate_right(cells)
    if p_val < 3.0 / 4.0:
        return rotate_left(rotate_left(cells))
    return cells


@dataclass
class Piece:
    """A 4x4 box of colour cells anchored at grid column ``x``, row ``y``.

    ``y`` may be negative while the piece is still above the visible grid.
    """

    cells: Matrix = field(default_factory=empty_matrix)
    x: int = 0
    y: int = 0

    def copy(self) -> "Piece":
        return Piece(self.cells.copy(), self.x, self.y)

    def move(self, dx: int, dy: int) -> None:
        """Shift the anchor by ``dx`` columns and ``dy`` rows."""

        self.x += dx
        self.y += dy

    def rotate(self, clockwise: bool = True) -> None:
        """Rotate the piece in place around its box; the anchor stays put."""

        self.cells = rotated(self.cells, clockwise)

    @property
    def color(self) -> int:
        occupied = self.cells[self.cells != EMPTY]
        return int(occupied[0]) if occupied.size else EMPTY

    def local_blocks(self) -> List[Tuple[int, int]]:
        """Return ``(row, col)`` offsets of the occupied cells inside the box."""

        rows, cols = np.nonzero(self.cells)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def blocks(self) -> List[Tuple[int, int]]:
        """Return the grid ``(x, y)`` coordinates of the occupied cells."""

        return [(self.x + c, self.y + r) for r, c in self.local_blocks()]


def generate_piece(rng: random.Random) -> Piece:
    """Return a fresh random piece with a random colour and orientation.

    The anchor is left at the origin; callers place the piece when it is
    promoted to the active piece.
    """

    color = random_color(rng)
    cells = random_orientation(build_shape(color, rng), rng)
    return Piece(cells)


def silhouette(cells: Matrix) -> Tuple[Tuple[int, int], ...]:
    """Return the occupied cells of ``cells`` translated to the origin."""

    rows, cols = np.nonzero(cells)
    if rows.size == 0:
        return ()
    top, left = int(rows.min()), int(cols.min())
    return tuple(sorted((int(r) - top, int(c) - left) for r, c in zip(rows, cols)))
