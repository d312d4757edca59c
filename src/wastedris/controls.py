"""Command symbols understood by the engine."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class Command(str, Enum):
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    SOFT_DROP = "soft_drop"
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"
    ABORT = "abort"


# Ctrl-D, the end-of-input character of a terminal.
END_OF_INPUT = "\x04"

# Arrow keys arrive as ``ESC [ A..D``; only the final byte matters here.
KEYMAP: Dict[str, Command] = {
    "C": Command.MOVE_RIGHT,
    "D": Command.MOVE_LEFT,
    "B": Command.SOFT_DROP,
    " ": Command.ROTATE_CW,
    "x": Command.ROTATE_CW,
    "z": Command.ROTATE_CCW,
    END_OF_INPUT: Command.ABORT,
}

# (dx, dy) for the translating commands.
MOVES = {
    Command.MOVE_LEFT: (-1, 0),
    Command.MOVE_RIGHT: (1, 0),
    Command.SOFT_DROP: (0, 1),
}


def parse_symbol(symbol: str) -> Optional[Command]:
    """Return the command bound to ``symbol`` or ``None`` if it is unbound."""

    return KEYMAP.get(symbol)
