from __future__ import annotations

import io
import logging
import os
import random

from wastedris.controls import END_OF_INPUT, Command
from wastedris.frame import FrameBuffer
from wastedris.game_state import GameState, Status
from wastedris.terminal import (
    BLOCK,
    RawInput,
    TerminalRenderer,
    color_code,
    draw_cell,
    message_lines,
)


def _frame(**changes):
    state = GameState(rng=random.Random(0))
    state.reset_game()
    for key, value in changes.items():
        setattr(state, key, value)
    return FrameBuffer().refresh(state)


def test_colour_codes():
    assert color_code(1) == "\x1b[31m"
    assert color_code(7) == "\x1b[37m"
    assert color_code(11) == "\x1b[91m"
    assert color_code(17) == "\x1b[97m"
    assert color_code(0) == "\x1b[0m"


def test_draw_cell_fills_or_blanks_a_box():
    painted = draw_cell(4, 4, 2)
    assert painted.startswith(color_code(2))
    assert BLOCK * 2 in painted
    assert "+--+" in painted
    blank = draw_cell(4, 4, 0)
    assert BLOCK not in blank
    assert blank.count("    ") == 3


def test_messages_follow_clear_count():
    assert message_lines(0) == []
    assert message_lines(1) == [(1, "YOU WASTED"), (2, "YOUR TIME")]
    assert message_lines(2) == [(3, "AGAIN")]
    assert message_lines(5) == [(3, "5 TIMES")]
    assert message_lines(11) == [(3, "11 TIMES"), (5, "It's time"), (6, "to regret")]


def test_renderer_buffers_until_flush():
    stream = io.StringIO()
    renderer = TerminalRenderer(stream)
    renderer.draw(_frame())
    assert stream.getvalue() == ""
    renderer.flush()
    output = stream.getvalue()
    assert "NEXT" in output
    assert "GAME OVER" not in output


def test_renderer_draws_background_once():
    stream = io.StringIO()
    renderer = TerminalRenderer(stream)
    renderer.draw(_frame())
    renderer.draw(_frame(clear_count=3))
    renderer.flush()
    output = stream.getvalue()
    assert output.count("NEXT") == 1
    assert "3 TIMES" in output


def test_game_over_banner_only_after_gravity_stop():
    stream = io.StringIO()
    renderer = TerminalRenderer(stream)
    renderer.draw(_frame(status=Status.STOPPED))
    renderer.flush()
    assert "GAME OVER" in stream.getvalue()

    stream = io.StringIO()
    renderer = TerminalRenderer(stream)
    state = GameState(rng=random.Random(0))
    state.reset_game()
    state.apply(Command.ABORT)
    renderer.draw(FrameBuffer().refresh(state, Command.ABORT))
    renderer.flush()
    assert "GAME OVER" not in stream.getvalue()


def test_close_restores_screen():
    stream = io.StringIO()
    renderer = TerminalRenderer(stream)
    renderer.close()
    assert "go back to work now" in stream.getvalue()
    assert "\x1b[?25h" in stream.getvalue()


def test_raw_input_reads_single_characters_from_a_pipe(caplog):
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, b"Cz")
        os.close(write_fd)
        with caplog.at_level(logging.WARNING, logger="wastedris.terminal"):
            with RawInput(read_fd) as source:
                assert source.next_command() == "C"
                assert source.next_command() == "z"
                assert source.next_command() == END_OF_INPUT
        assert "not a terminal" in caplog.text
    finally:
        os.close(read_fd)
