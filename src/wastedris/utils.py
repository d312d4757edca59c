"""Movement and rotation rules."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .board import Board, Grid
from .shapes import Matrix, Piece, rotated


def _fits(board: Board, cells: Matrix, x: int, y: int) -> bool:
    rows, cols = np.nonzero(cells)
    for row, col in zip(rows, cols):
        if board.is_occupied(x + int(col), y + int(row)):
            return False
    return True


def can_move(board: Board, piece: Piece, dx: int, dy: int) -> bool:
    """Return ``True`` if ``piece`` can move by ``dx`` and ``dy`` on ``board``.

    Every block must stay inside the walls, above the floor and off locked
    cells.  Blocks above the ceiling are allowed.
    """

    return _fits(board, piece.cells, piece.x + dx, piece.y + dy)


def can_rotate(board: Board, piece: Piece, clockwise: bool) -> bool:
    """Return ``True`` if ``piece`` can turn in place.

    The rotated shape is tested at the current anchor only; a rotation that
    would collide is refused rather than nudged sideways.
    """

    return _fits(board, rotated(piece.cells, clockwise), piece.x, piece.y)


def compose_grid(board: Board, active: Optional[Piece] = None) -> Grid:
    """Return a copy of the board grid with the active piece overlaid.

    Blocks of the active piece that are still above the grid are left out.
    """

    grid = board.grid.copy()
    if active is not None:
        for (x, y), (row, col) in zip(active.blocks(), active.local_blocks()):
            if 0 <= x < board.width and 0 <= y < board.height:
                grid[y, x] = active.cells[row, col]
    return grid
