"""Board representation for the playfield."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .shapes import EMPTY, LEGAL_COLORS, Piece


# Dimensions of the playfield in cells.
ROWS = 13
COLS = 11

Grid = NDArray[np.uint8]


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((ROWS, COLS), dtype=np.uint8)


class Board:
    """Grid of locked cells, indexed ``grid[row, col]``.

    The board knows nothing about the falling piece.  Coordinates in the public
    queries follow the screen: ``x`` is the column and ``y`` the row, with row
    ``0`` at the top.
    """

    width: int = COLS
    height: int = ROWS

    def __init__(self) -> None:
        self.grid: Grid = create_empty_grid()

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
            ValueError: If ``value`` is not a legal colour index.
        """
        if value not in LEGAL_COLORS:
            raise ValueError(f"Illegal colour index: {value}")
        if 0 <= row < self.height and 0 <= col < self.width:
            self.grid[row, col] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def is_occupied(self, x: int, y: int) -> bool:
        """Return ``True`` if a block may not occupy column ``x``, row ``y``.

        The walls and the floor count as occupied.  The ceiling does not: any
        ``y < 0`` inside the walls is free, which lets pieces spawn above the
        grid.
        """

        if x < 0 or x >= self.width or y >= self.height:
            return True
        if y < 0:
            return False
        return bool(self.grid[y, x] != EMPTY)

    def lock_piece(self, piece: Piece) -> None:
        """Write the piece's blocks into the grid.

        No collision test is made here; callers check legality beforehand.

        Raises:
            IndexError: If any block lies outside the grid.
        """

        blocks = piece.blocks()
        for x, y in blocks:
            if not (0 <= x < self.width and 0 <= y < self.height):
                raise IndexError("Block out of bounds")
        for (x, y), (row, col) in zip(blocks, piece.local_blocks()):
            self.grid[y, x] = piece.cells[row, col]

    def clear_full_rows(self) -> int:
        """Clear completed rows and return how many were removed.

        Rows are scanned from the floor upwards.  When a row is removed the
        rows above slide down by one, so the same index is tested again before
        moving on.
        """

        cleared = 0
        row = self.height - 1
        while row >= 0:
            if np.all(self.grid[row] != EMPTY):
                self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0] = EMPTY
                cleared += 1
            else:
                row -= 1
        return cleared
