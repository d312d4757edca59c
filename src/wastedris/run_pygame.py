"""Simple pygame front-end for the engine.

pygame must be driven from the main thread, so the renderer handed to the
session only queues frames.  The main loop drains the queue, paints the most
recent frame and turns key presses into command symbols.
"""

from __future__ import annotations

from typing import Dict, Optional
import logging
import queue

import pygame

from .board import COLS, ROWS
from .controls import END_OF_INPUT
from .frame import Frame
from .game_state import Status
from .session import Session
from .shapes import PIECE_SIZE

# Size of a single board cell in pixels
CELL_SIZE = 30
# Frames per second to run the game loop at
FPS = 60
# Width of the side panel holding the preview and the clear count
PANEL_CELLS = PIECE_SIZE + 2

LOGGER = logging.getLogger(__name__)

_BASE_RGB = {
    1: (170, 0, 0),
    2: (0, 170, 0),
    3: (170, 170, 0),
    4: (0, 0, 170),
    5: (170, 0, 170),
    6: (0, 170, 170),
    7: (170, 170, 170),
}

# Mapping from the integer stored in the board grid to a colour
CELL_COLORS = {0: (0, 0, 0)}
for value, (r, g, b) in _BASE_RGB.items():
    CELL_COLORS[value] = (r, g, b)
    CELL_COLORS[value + 10] = (min(255, r + 85), min(255, g + 85), min(255, b + 85))

KEY_SYMBOLS: Dict[int, str] = {
    pygame.K_LEFT: "D",
    pygame.K_RIGHT: "C",
    pygame.K_DOWN: "B",
    pygame.K_UP: "x",
    pygame.K_SPACE: " ",
    pygame.K_x: "x",
    pygame.K_z: "z",
    pygame.K_ESCAPE: END_OF_INPUT,
}


def symbol_for_key(key: int) -> Optional[str]:
    """Return the command symbol for a pygame key code, if any."""

    return KEY_SYMBOLS.get(key)


class PygameRenderer:
    """Renderer that hands frames to the main thread through a queue."""

    def __init__(self) -> None:
        self.frames: "queue.Queue[Frame]" = queue.Queue()

    def draw(self, frame: Frame) -> None:
        self.frames.put_nowait(frame)

    def flush(self) -> None:
        pass

    def latest(self) -> Optional[Frame]:
        """Drain the queue and return the newest frame, if any arrived."""

        frame = None
        while True:
            try:
                frame = self.frames.get_nowait()
            except queue.Empty:
                return frame


def _draw_cell(screen: pygame.Surface, x: int, y: int, value: int) -> None:
    rect = pygame.Rect(x * CELL_SIZE, y * CELL_SIZE, CELL_SIZE, CELL_SIZE)
    pygame.draw.rect(screen, CELL_COLORS[value], rect)
    pygame.draw.rect(screen, (50, 50, 50), rect, 1)


def draw_frame(screen: pygame.Surface, frame: Frame) -> None:
    """Render the board, the preview and the clear count."""

    screen.fill((0, 0, 0))
    for y in range(ROWS):
        for x in range(COLS):
            _draw_cell(screen, x, y, int(frame.composite[y, x]))
    for row in range(PIECE_SIZE):
        for col in range(PIECE_SIZE):
            _draw_cell(screen, COLS + 1 + col, 1 + row, int(frame.preview[row, col]))
    status = "Game over - " if frame.status is Status.STOPPED else ""
    pygame.display.set_caption(f"wastedris - {status}Clears: {frame.clear_count}")


def run(seed: Optional[int] = None) -> Status:
    """Open a window and play one game."""

    pygame.init()
    screen = pygame.display.set_mode(((COLS + PANEL_CELLS) * CELL_SIZE, ROWS * CELL_SIZE))
    pygame.display.set_caption("wastedris")
    clock = pygame.time.Clock()
    renderer = PygameRenderer()
    session = Session(renderer, seed=seed)
    try:
        session.start()
        open_window = True
        while open_window:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    session.submit(END_OF_INPUT)
                    open_window = False
                elif event.type == pygame.KEYDOWN:
                    if not session.running:
                        # Any key dismisses the final screen.
                        open_window = False
                        continue
                    symbol = symbol_for_key(event.key)
                    if symbol is not None:
                        session.submit(symbol)
            frame = renderer.latest()
            if frame is not None:
                draw_frame(screen, frame)
                pygame.display.flip()
            clock.tick(FPS)
    finally:
        session.stop()
        pygame.quit()
    LOGGER.info("Window closed")
    return session.status
