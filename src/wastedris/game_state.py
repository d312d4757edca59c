"""High level game state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging
import random

from .board import Board
from .controls import MOVES, Command
from .shapes import PIECE_SIZE, Piece, generate_piece
from .utils import can_move, can_rotate


LOGGER = logging.getLogger(__name__)


class Status(Enum):
    STOPPED = 0
    RUNNING = 1


@dataclass
class GameState:
    """Mutable state for one game session.

    The state is not thread-safe on its own; :class:`wastedris.session.Session`
    serialises every call into it.
    """

    rng: random.Random = field(default_factory=random.Random)
    board: Board = field(default_factory=Board)
    active: Optional[Piece] = None
    upcoming: Optional[Piece] = None
    status: Status = Status.STOPPED
    clear_count: int = 0

    @property
    def running(self) -> bool:
        return self.status is Status.RUNNING

    def spawn_piece(self) -> Piece:
        """Promote the upcoming piece and queue a freshly generated one.

        The new active piece starts horizontally centred with its whole box
        above the grid.
        """

        piece = self.upcoming if self.upcoming is not None else generate_piece(self.rng)
        piece.x = (self.board.width - PIECE_SIZE) // 2
        piece.y = -PIECE_SIZE
        self.active = piece
        self.upcoming = generate_piece(self.rng)
        return piece

    def reset_game(self) -> None:
        """Reset the entire game state for a new game."""

        self.board = Board()
        self.clear_count = 0
        self.active = None
        self.upcoming = None
        self.status = Status.RUNNING
        self.spawn_piece()

    def gravity_step(self) -> Status:
        """Drop the active piece one row, locking it when it cannot fall.

        A piece that cannot fall while its anchor is still above the grid means
        the spawn point is blocked and the game is over.
        """

        if not self.running or self.active is None:
            return self.status
        if can_move(self.board, self.active, 0, 1):
            self.active.move(0, 1)
        elif self.active.y < 0:
            self.status = Status.STOPPED
            LOGGER.info("Game over after %d clearing locks", self.clear_count)
        else:
            self.board.lock_piece(self.active)
            self.spawn_piece()
            cleared = self.board.clear_full_rows()
            if cleared:
                self.clear_count += 1
                LOGGER.debug("Cleared %d row(s), clear count %d", cleared, self.clear_count)
        return self.status

    def apply(self, command: Optional[Command]) -> Status:
        """Apply one player command and return the resulting status.

        Illegal moves and rotations leave the piece untouched.  Commands sent
        to a stopped game are ignored.
        """

        if not self.running or self.active is None or command is None:
            return self.status
        if command is Command.ABORT:
            self.status = Status.STOPPED
            LOGGER.info("Game aborted")
        elif command in MOVES:
            dx, dy = MOVES[command]
            if can_move(self.board, self.active, dx, dy):
                self.active.move(dx, dy)
        else:
            clockwise = command is Command.ROTATE_CW
            if can_rotate(self.board, self.active, clockwise):
                self.active.rotate(clockwise)
        return self.status
