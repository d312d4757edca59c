"""Threaded game session.

A :class:`Session` owns one :class:`~wastedris.game_state.GameState` and a
gravity thread.  The thread wakes every ``base_interval`` seconds and bumps a
tick counter; only when the counter wraps to zero does the piece actually
fall.  Keeping the base interval short lets the thread notice a stop request
quickly while the fall speed is set by ``gravity_period``.

Player commands arrive from whichever thread calls :meth:`Session.submit`.
Commands and gravity steps run under the same lock, together with the frame
diff handed to the renderer, so neither ever sees a half-applied update.
Sleeping and the renderer's ``flush`` happen outside the lock.
"""

from __future__ import annotations

from typing import Callable, Optional
import logging
import random
import threading
import time

from .controls import Command, parse_symbol
from .frame import Frame, FrameBuffer
from .game_state import GameState, Status


LOGGER = logging.getLogger(__name__)

# Seconds between gravity thread wake-ups.
BASE_INTERVAL = 0.005
# Wake-ups per gravity step.
GRAVITY_PERIOD = 100


class NullRenderer:
    """Renderer that discards every frame."""

    def draw(self, frame: Frame) -> None:
        pass

    def flush(self) -> None:
        pass


class Session:
    """One game, from :meth:`start` until :meth:`stop` or game over.

    ``renderer`` must provide ``draw(frame)``, called with the lock held, and
    ``flush()``, called after the lock is released.  ``draw`` should only
    buffer output.
    """

    def __init__(
        self,
        renderer=None,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        base_interval: float = BASE_INTERVAL,
        gravity_period: int = GRAVITY_PERIOD,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if gravity_period < 1:
            raise ValueError("gravity_period must be at least 1")
        self.renderer = renderer if renderer is not None else NullRenderer()
        self.state = GameState(rng=rng if rng is not None else random.Random(seed))
        self.base_interval = base_interval
        self.gravity_period = gravity_period
        self.tick_count = 0
        self._sleep = sleep
        self._lock = threading.Lock()
        self._frames = FrameBuffer()
        self._thread: Optional[threading.Thread] = None
        self._started = False

    @property
    def status(self) -> Status:
        return self.state.status

    @property
    def running(self) -> bool:
        # Unlocked read; only good enough to decide whether to keep looping.
        return self.state.running

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _publish(self, reason: Optional[Command]) -> None:
        self.renderer.draw(self._frames.refresh(self.state, reason))

    def start(self, *, threaded: bool = True) -> "Session":
        """Reset the game and, unless ``threaded`` is false, start gravity.

        With ``threaded=False`` nothing falls until :meth:`tick` is called,
        which lets tests drive the clock themselves.
        """

        if self._started:
            raise RuntimeError("Session already started")
        self._started = True
        with self._lock:
            self.state.reset_game()
            self.tick_count = 0
            self._frames.reset()
            self._publish(None)
        self.renderer.flush()
        if threaded:
            self._thread = threading.Thread(
                target=self._gravity_loop, name="wastedris-gravity", daemon=True
            )
            self._thread.start()
        LOGGER.info("Session started")
        return self

    def tick(self) -> Status:
        """Run one base interval of gravity work and return the status."""

        with self._lock:
            if not self.state.running:
                return self.state.status
            stepped = self.tick_count == 0
            if stepped:
                self.state.gravity_step()
                self._publish(None)
            self.tick_count = (self.tick_count + 1) % self.gravity_period
            status = self.state.status
        if stepped:
            self.renderer.flush()
        return status

    def _gravity_loop(self) -> None:
        while self.running:
            self.tick()
            self._sleep(self.base_interval)
        LOGGER.debug("Gravity thread exiting")

    def submit(self, symbol: str) -> Status:
        """Apply the command bound to ``symbol`` and return the status.

        Unbound symbols and anything sent after the game stopped are ignored.
        """

        command = parse_symbol(symbol)
        with self._lock:
            if not self.state.running or command is None:
                return self.state.status
            self.state.apply(command)
            self._publish(command)
            status = self.state.status
        self.renderer.flush()
        return status

    def stop(self) -> None:
        """Stop the game and wait for the gravity thread to finish."""

        with self._lock:
            if self.state.running:
                self.state.status = Status.STOPPED
                LOGGER.info("Session stopped")
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
            self._thread = None

    def play(self, source) -> Status:
        """Feed symbols from ``source.next_command()`` until the game stops."""

        while self.running:
            self.submit(source.next_command())
        return self.status


class Engine:
    """Hands out sessions, keeping at most one alive at a time."""

    def __init__(self, renderer=None, **session_options) -> None:
        self.renderer = renderer
        self.session_options = session_options
        self.session: Optional[Session] = None

    def start(self) -> Session:
        """Tear down any current session and start a fresh one."""

        if self.session is not None:
            self.session.stop()
        self.session = Session(self.renderer, **self.session_options)
        return self.session.start()

    def stop(self, session: Optional[Session] = None) -> None:
        session = session if session is not None else self.session
        if session is None:
            return
        session.stop()
        if session is self.session:
            self.session = None

    def submit_command(self, session: Session, symbol: str) -> Status:
        return session.submit(symbol)
