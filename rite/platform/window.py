"""
Main application window for Rite.
Uses pygame to create a display and drive the emulation main loop.

Each 60 Hz tick the window:

1. Polls input events and forwards them to the keypad.
2. Executes ``speed`` instructions.
3. Decrements the delay and sound timers once.
4. Renders the framebuffer to the display.

Typical usage::

    from rite.platform.window import Window

    machine = MachineFactory.create("pong.ch8")
    window = Window(machine, scale=10)
    window.run()
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import pygame

from rite.core.errors import EmulationError
from rite.core.machine import Machine
from rite.core.types import TIMER_HZ
from rite.platform.input_handler import InputHandler
from rite.shell.frame_renderer import FrameRenderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE: str = "Rite - CHIP-8"

# Minimum / maximum allowed display scale factors.
_MIN_SCALE: int = 1
_MAX_SCALE: int = 20

DEFAULT_SCALE: int = 10
DEFAULT_SPEED: int = 10


class Window:
    """Pygame window that owns the emulation main loop.

    Parameters
    ----------
    machine:
        A machine with a program loaded.
    scale:
        Integer scale factor applied to the 64x32 display.
    speed:
        Instructions executed per 60 Hz tick.
    """

    def __init__(
        self,
        machine: Machine,
        scale: int = DEFAULT_SCALE,
        *,
        speed: int = DEFAULT_SPEED,
    ) -> None:
        # ---- basic state -------------------------------------------------
        self._machine = machine
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._speed: int = max(1, speed)
        self._running: bool = False
        self._paused: bool = False
        self._error: Optional[EmulationError] = None

        fb = machine.frame_buffer
        self._display_width: int = fb.width * self._scale
        self._display_height: int = fb.height * self._scale

        # ---- init pygame display -----------------------------------------
        if not pygame.get_init():
            pygame.init()

        self._screen: pygame.Surface = pygame.display.set_mode(
            (self._display_width, self._display_height),
            pygame.RESIZABLE,
        )
        pygame.display.set_caption(_WINDOW_TITLE)

        self._clock: pygame.time.Clock = pygame.time.Clock()

        # ---- subsystems --------------------------------------------------
        self._frame_renderer: FrameRenderer = FrameRenderer(machine)
        self._input: InputHandler = InputHandler(machine)

        # ---- performance counters ----------------------------------------
        self._frame_count: int = 0
        self._fps_update_time: float = 0.0
        self._fps_display: float = 0.0

        logger.info(
            "Window: %dx%d display (scale=%d, %d instructions/tick)",
            self._display_width,
            self._display_height,
            self._scale,
            self._speed,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def error(self) -> Optional[EmulationError]:
        """The error that halted emulation, if any."""
        return self._error

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Enter the main emulation loop.

        Blocks until the user closes the window or presses Escape.  An
        :class:`EmulationError` halts emulation but leaves the window open
        on the last frame.
        """
        self._running = True
        self._fps_update_time = time.monotonic()
        self._frame_count = 0

        logger.info("Entering main loop (target %d fps)", TIMER_HZ)

        try:
            while self._running:
                self._tick()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self._shutdown()

    # ------------------------------------------------------------------
    # Per-frame tick
    # ------------------------------------------------------------------

    def _tick(self) -> None:
        """Execute one iteration of the main loop."""
        # ---- input -------------------------------------------------------
        self._input.poll()
        if self._input.quit_requested:
            self._running = False
            return
        if self._input.take_pause_toggle():
            self._paused = not self._paused
            logger.info("Paused" if self._paused else "Resumed")
            if self._error is None:
                pygame.display.set_caption(
                    f"{_WINDOW_TITLE}  [paused]" if self._paused else _WINDOW_TITLE
                )

        # ---- emulation ---------------------------------------------------
        if not self._paused and self._error is None:
            self._emulate_tick()

        # ---- video -------------------------------------------------------
        surface = self._frame_renderer.render()
        current_size = self._screen.get_size()
        scaled = pygame.transform.scale(surface, current_size)
        self._screen.blit(scaled, (0, 0))
        pygame.display.flip()

        # ---- timing ------------------------------------------------------
        self._clock.tick(TIMER_HZ)
        self._update_fps()

    def _emulate_tick(self) -> None:
        """Run one tick's worth of instructions, then count the timers down."""
        try:
            self._machine.run(self._speed)
        except EmulationError as exc:
            self._error = exc
            logger.error("Emulation halted: %s", exc)
            pygame.display.set_caption(f"{_WINDOW_TITLE}  [halted]")
            return
        self._machine.decrement_delay()
        self._machine.decrement_sound()

    # ------------------------------------------------------------------
    # FPS tracking
    # ------------------------------------------------------------------

    def _update_fps(self) -> None:
        """Update the displayed FPS counter roughly once per second."""
        self._frame_count += 1
        now = time.monotonic()
        elapsed = now - self._fps_update_time
        if elapsed >= 1.0:
            self._fps_display = self._frame_count / elapsed
            self._frame_count = 0
            self._fps_update_time = now
            if self._error is None and not self._paused:
                pygame.display.set_caption(
                    f"{_WINDOW_TITLE}  [{self._fps_display:.1f} fps]"
                )

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def _shutdown(self) -> None:
        """Clean up pygame."""
        logger.info("Shutting down")
        pygame.quit()
