"""ANSI terminal front-end.

Cells are drawn as 4x3 character boxes.  The renderer only ever touches the
cells listed in a frame's diff, plus the NEXT preview and the message box.
"""

from __future__ import annotations

from typing import List, Optional, TextIO
import logging
import os
import sys
import threading

from .board import COLS, ROWS
from .controls import END_OF_INPUT, Command
from .frame import Frame
from .game_state import Status
from .shapes import PIECE_SIZE


LOGGER = logging.getLogger(__name__)

ESC = "\x1b"

# Top-left corner of the playfield on screen, 1-indexed.
START_X = 4
START_Y = 4
# Size of one cell in characters.
CELL_W = 4
CELL_H = 3

NEXT_X = START_X + COLS * CELL_W + 2
NEXT_Y = START_Y
NEXT_W = PIECE_SIZE * CELL_W
NEXT_H = PIECE_SIZE * CELL_H

MESSAGE_X = NEXT_X
MESSAGE_Y = NEXT_Y + NEXT_H + 2
MESSAGE_W = NEXT_W
MESSAGE_H = START_Y + ROWS * CELL_H - MESSAGE_Y

SCREEN_W = NEXT_X + NEXT_W + 1
SCREEN_H = START_Y + ROWS * CELL_H + 3

BLOCK = "▮"


def move_cursor(x: int, y: int) -> str:
    return f"{ESC}[{y};{x}H"


def color_code(color: int) -> str:
    """Return the SGR sequence for a colour index (0 resets)."""

    if 1 <= color <= 7:
        return f"{ESC}[{30 + color}m"
    if 11 <= color <= 17:
        return f"{ESC}[{80 + color}m"
    return f"{ESC}[0m"


RESET = color_code(0)
CYAN = color_code(6)
MAGENTA = color_code(5)
BRIGHT_RED = color_code(11)
CLEAR_SCREEN = f"{ESC}[0;0H{ESC}[2J"
CURSOR_OFF = f"{ESC}[?25l"
CURSOR_ON = f"{ESC}[?25h"


def draw_rect(x1: int, y1: int, x2: int, y2: int, horizontal="-", vertical="|", corner="+") -> str:
    parts = []
    for y in (y1, y2):
        parts.append(move_cursor(x1, y) + corner + horizontal * (x2 - x1 - 1) + corner)
    for y in range(y1 + 1, y2):
        parts.append(move_cursor(x1, y) + vertical)
        parts.append(move_cursor(x2, y) + vertical)
    return "".join(parts)


def draw_cell(left: int, top: int, color: int) -> str:
    """Return the escape string painting one cell box, or blanking it."""

    right = left + CELL_W - 1
    bottom = top + CELL_H - 1
    if color == 0:
        blank = " " * CELL_W
        return RESET + "".join(move_cursor(left, y) + blank for y in range(top, bottom + 1))
    fill = "".join(
        move_cursor(left + 1, y) + BLOCK * (CELL_W - 2) for y in range(top + 1, bottom)
    )
    return color_code(color) + fill + draw_rect(left, top, right, bottom)


def message_lines(clear_count: int) -> List[tuple[int, str]]:
    """Return ``(line, text)`` pairs for the message box."""

    lines: List[tuple[int, str]] = []
    if clear_count == 1:
        lines += [(1, "YOU WASTED"), (2, "YOUR TIME")]
    elif clear_count == 2:
        lines.append((3, "AGAIN"))
    elif clear_count > 2:
        lines.append((3, f"{clear_count} TIMES"))
    if clear_count > 10:
        lines += [(5, "It's time"), (6, "to regret")]
    return lines


def background() -> str:
    title_x = NEXT_X + CELL_W * 2 - 2
    return "".join(
        [
            CLEAR_SCREEN,
            CURSOR_OFF,
            CYAN,
            draw_rect(START_X - 1, START_Y - 1, START_X + CELL_W * COLS, START_Y + CELL_H * ROWS),
            draw_rect(NEXT_X - 1, NEXT_Y - 1, NEXT_X + NEXT_W, NEXT_Y + NEXT_H),
            move_cursor(title_x, NEXT_Y - 1) + "NEXT",
            draw_rect(MESSAGE_X - 1, MESSAGE_Y - 1, MESSAGE_X + MESSAGE_W, MESSAGE_Y + MESSAGE_H),
            RESET,
        ]
    )


def game_over_banner() -> str:
    x = SCREEN_W // 2 - 6
    y = SCREEN_H // 2
    rows = ["#############", "#           #", "# GAME OVER #", "#           #", "#############"]
    body = "".join(move_cursor(x, y - 2 + i) + row for i, row in enumerate(rows))
    return BRIGHT_RED + body + RESET + move_cursor(1, 1) + "press any button."


class TerminalRenderer:
    """Renderer writing ANSI escapes to ``stream``.

    ``draw`` only appends to an in-memory buffer; ``flush`` writes it out.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self._buffer: List[str] = []
        self._buffer_lock = threading.Lock()
        self._clear_count = -1
        self._started = False

    def draw(self, frame: Frame) -> None:
        parts: List[str] = []
        if not self._started:
            parts.append(background())
            self._started = True
        for x, y, color in frame.changes:
            parts.append(draw_cell(START_X + CELL_W * x, START_Y + CELL_H * y, color))
        for row in range(PIECE_SIZE):
            for col in range(PIECE_SIZE):
                color = int(frame.preview[row, col])
                parts.append(draw_cell(NEXT_X + CELL_W * col, NEXT_Y + CELL_H * row, color))
        if frame.clear_count != self._clear_count:
            self._clear_count = frame.clear_count
            parts.append(self._message(frame.clear_count))
        if frame.status is Status.STOPPED and frame.reason is not Command.ABORT:
            parts.append(game_over_banner())
        parts.append(RESET)
        with self._buffer_lock:
            self._buffer.extend(parts)

    def _message(self, clear_count: int) -> str:
        blank = " " * MESSAGE_W
        parts = [move_cursor(MESSAGE_X, y) + blank for y in range(MESSAGE_Y, MESSAGE_Y + MESSAGE_H)]
        parts.append(MAGENTA)
        for line, text in message_lines(clear_count):
            parts.append(move_cursor(MESSAGE_X + 1, MESSAGE_Y + line) + text)
        return "".join(parts)

    def flush(self) -> None:
        with self._buffer_lock:
            pending = "".join(self._buffer)
            self._buffer.clear()
            if pending:
                self.stream.write(pending)
            self.stream.flush()

    def close(self) -> None:
        """Restore the screen after the game."""

        self.flush()
        self.stream.write(CLEAR_SCREEN + CURSOR_ON + move_cursor(1, 1))
        self.stream.write("\n           go back to work now\n\n")
        self.stream.flush()


class RawInput:
    """Unbuffered, unechoed keyboard input from a terminal.

    Use as a context manager; the terminal mode is restored on exit.  When
    ``fd`` is not a terminal the mode is left alone and bytes are read as they
    come.
    """

    def __init__(self, fd: Optional[int] = None) -> None:
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved = None

    def __enter__(self) -> "RawInput":
        if not os.isatty(self.fd):
            LOGGER.warning("Input is not a terminal")
            return self
        import termios

        self._saved = termios.tcgetattr(self.fd)
        mode = termios.tcgetattr(self.fd)
        mode[3] &= ~(termios.ICANON | termios.ECHO)
        mode[6][termios.VMIN] = 1
        mode[6][termios.VTIME] = 0
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, mode)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._saved is not None:
            import termios

            termios.tcsetattr(self.fd, termios.TCSANOW, self._saved)
            self._saved = None

    def next_command(self) -> str:
        """Block until one character is available and return it.

        End of file reads as Ctrl-D so the game loop ends.
        """

        data = os.read(self.fd, 1)
        if not data:
            return END_OF_INPUT
        return data.decode("latin-1")


def run(seed: Optional[int] = None) -> Status:
    """Play one game in the current terminal."""

    from .session import Session

    renderer = TerminalRenderer()
    try:
        with RawInput() as source, Session(renderer, seed=seed) as session:
            session.start()
            return session.play(source)
    finally:
        renderer.close()
