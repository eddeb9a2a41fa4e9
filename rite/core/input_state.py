"""
InputState - the 16-key hexadecimal keypad.

Host code writes key events with :meth:`InputState.raise_input`; the
interpreter samples them with :meth:`InputState.is_pressed` while executing
the ``EX9E``, ``EXA1`` and ``FX0A`` instructions.
"""

from __future__ import annotations

from typing import List, Optional

from rite.core.types import KEY_COUNT


class InputState:
    """Pressed / released state of each keypad key.

    Keys are addressed by their keypad index 0x0-0xF (see
    :class:`~rite.core.types.Key`).
    """

    def __init__(self) -> None:
        self._keys: List[bool] = [False] * KEY_COUNT

    # ------------------------------------------------------------------
    # Host-side input event injection
    # ------------------------------------------------------------------

    def raise_input(self, key: int, down: bool) -> None:
        """Record a press (``down=True``) or release of *key*.

        Raises:
            IndexError: If *key* is not a keypad index.
        """
        if not 0 <= key < KEY_COUNT:
            raise IndexError(f"key index {key} out of range [0, {KEY_COUNT})")
        self._keys[key] = bool(down)

    def clear_all_input(self) -> None:
        """Release every key."""
        for i in range(KEY_COUNT):
            self._keys[i] = False

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def is_pressed(self, key: int) -> bool:
        """Return ``True`` if *key* is held.  Indices outside the keypad
        read as released."""
        if not 0 <= key < KEY_COUNT:
            return False
        return self._keys[key]

    def first_pressed(self) -> Optional[int]:
        """Return the lowest held key index, or ``None`` if none is held."""
        for i, down in enumerate(self._keys):
            if down:
                return i
        return None

    def pressed_keys(self) -> List[int]:
        """Indices of every held key, in ascending order."""
        return [i for i, down in enumerate(self._keys) if down]

    def __repr__(self) -> str:
        held = ",".join(f"{k:X}" for k in self.pressed_keys())
        return f"InputState(pressed=[{held}])"
