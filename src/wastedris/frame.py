"""Render diffs handed to front-ends.

The engine never draws.  After each state change it composes the board with
the active piece, compares the result with what it handed out last time and
packs the differing cells into a :class:`Frame`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional

import numpy as np

from .board import ROWS, COLS, Grid
from .controls import Command
from .game_state import GameState, Status
from .shapes import Matrix, empty_matrix
from .utils import compose_grid


class CellChange(NamedTuple):
    """A cell whose colour changed; ``color == 0`` means erase."""

    x: int
    y: int
    color: int


@dataclass(frozen=True, eq=False)
class Frame:
    changes: List[CellChange]
    composite: Grid
    preview: Matrix
    clear_count: int
    status: Status
    # ``None`` for gravity updates.
    reason: Optional[Command] = None


class FrameBuffer:
    """Remembers the last composite handed out and diffs against it."""

    def __init__(self) -> None:
        self.shadow: Grid = np.zeros((ROWS, COLS), dtype=np.uint8)

    def reset(self) -> None:
        self.shadow[:] = 0

    def refresh(self, state: GameState, reason: Optional[Command] = None) -> Frame:
        """Return the frame for ``state`` and remember it as the new baseline."""

        canvas = compose_grid(state.board, state.active)
        rows, cols = np.nonzero(canvas != self.shadow)
        changes = [
            CellChange(int(c), int(r), int(canvas[r, c])) for r, c in zip(rows, cols)
        ]
        self.shadow = canvas
        preview = state.upcoming.cells.copy() if state.upcoming is not None else empty_matrix()
        return Frame(
            changes=changes,
            composite=canvas.copy(),
            preview=preview,
            clear_count=state.clear_count,
            status=state.status,
            reason=reason,
        )
