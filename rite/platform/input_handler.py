"""
Input handler for Rite.
Maps keyboard keys to the emulated hexadecimal keypad.

Keyboard layout
---------------

The left-hand block of a QWERTY keyboard stands in for the keypad::

    Keyboard        Keypad
    1 2 3 4         1 2 3 C
    Q W E R         4 5 6 D
    A S D F         7 8 9 E
    Z X C V         A 0 B F

Escape quits, P toggles pause.
"""

from __future__ import annotations

import logging

import pygame

from rite.core.types import Key

logger = logging.getLogger(__name__)


_KEY_MAP: dict[int, Key] = {
    pygame.K_1: Key.K1,
    pygame.K_2: Key.K2,
    pygame.K_3: Key.K3,
    pygame.K_4: Key.KC,
    pygame.K_q: Key.K4,
    pygame.K_w: Key.K5,
    pygame.K_e: Key.K6,
    pygame.K_r: Key.KD,
    pygame.K_a: Key.K7,
    pygame.K_s: Key.K8,
    pygame.K_d: Key.K9,
    pygame.K_f: Key.KE,
    pygame.K_z: Key.KA,
    pygame.K_x: Key.K0,
    pygame.K_c: Key.KB,
    pygame.K_v: Key.KF,
}


class InputHandler:
    """Translates pygame keyboard events into keypad presses.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected interface:
        ``set_key(key: int, down: bool)`` and ``clear_keys()``.
    """

    def __init__(self, machine: object) -> None:
        self._machine = machine
        self._quit_requested: bool = False
        self._pause_toggled: bool = False

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def quit_requested(self) -> bool:
        """``True`` if the user pressed Escape or closed the window."""
        return self._quit_requested

    def take_pause_toggle(self) -> bool:
        """Return ``True`` once for every press of the pause key."""
        toggled = self._pause_toggled
        self._pause_toggled = False
        return toggled

    def poll(self) -> None:
        """Pump the pygame event queue and process all pending events.

        This should be called once at the top of each frame.
        """
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process a single pygame event."""
        if event.type == pygame.QUIT:
            self._quit_requested = True
        elif event.type == pygame.KEYDOWN:
            self._on_key(event.key, down=True)
        elif event.type == pygame.KEYUP:
            self._on_key(event.key, down=False)
        elif event.type == pygame.WINDOWFOCUSLOST:
            # Key-up events are lost while unfocused.
            self.clear_all()

    def clear_all(self) -> None:
        """Release all keypad keys."""
        self._machine.clear_keys()  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Keyboard handlers
    # ------------------------------------------------------------------

    def _on_key(self, key: int, *, down: bool) -> None:
        if down and key == pygame.K_ESCAPE:
            self._quit_requested = True
            return

        if down and key == pygame.K_p:
            self._pause_toggled = True
            return

        pad_key = _KEY_MAP.get(key)
        if pad_key is None:
            return

        logger.debug("Keypad %X %s", pad_key, "down" if down else "up")
        self._machine.set_key(int(pad_key), down)  # type: ignore[attr-defined]
