"""Falling-block puzzle engine with a threaded gravity loop."""

from .board import Board, COLS, ROWS
from .controls import Command, parse_symbol
from .frame import CellChange, Frame, FrameBuffer
from .game_state import GameState, Status
from .session import Engine, Session
from .shapes import Piece, generate_piece, rotate_left, rotate_right
from .utils import can_move, can_rotate, compose_grid

__all__ = [
    "Board",
    "ROWS",
    "COLS",
    "Command",
    "parse_symbol",
    "CellChange",
    "Frame",
    "FrameBuffer",
    "GameState",
    "Status",
    "Engine",
    "Session",
    "Piece",
    "generate_piece",
    "rotate_left",
    "rotate_right",
    "can_move",
    "can_rotate",
    "compose_grid",
]
