"""
Frame renderer for Rite.
Converts the machine's on/off FrameBuffer into an RGB pygame Surface.

The core stores one byte per pixel (0 or 1).  A two-entry numpy colour
look-up table turns the whole buffer into RGB in one indexing operation,
which is then blitted with :mod:`pygame.surfarray`.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import pygame

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

DEFAULT_OFF_COLOUR: RGB = (0x00, 0x00, 0x00)
DEFAULT_ON_COLOUR: RGB = (0xFF, 0xFF, 0xFF)


class FrameRenderer:
    """Render a machine's display into a :class:`pygame.Surface`.

    Parameters
    ----------
    machine:
        Anything with a ``frame_buffer`` attribute exposing ``width``,
        ``height`` and a row-major ``video_buffer``.
    off_colour, on_colour:
        RGB colours for unlit and lit pixels.
    """

    def __init__(
        self,
        machine: object,
        off_colour: RGB = DEFAULT_OFF_COLOUR,
        on_colour: RGB = DEFAULT_ON_COLOUR,
    ) -> None:
        self._machine = machine
        fb = machine.frame_buffer  # type: ignore[attr-defined]

        self._width: int = fb.width
        self._height: int = fb.height

        self._lut = np.zeros((2, 3), dtype=np.uint8)
        self.set_colours(off_colour, on_colour)

        # Create the output surface (RGB, no alpha needed).
        self._surface: pygame.Surface = pygame.Surface((self._width, self._height))

        logger.info("FrameRenderer: %dx%d", self._width, self._height)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def surface(self) -> pygame.Surface:
        """The internal pygame Surface (updated on each :meth:`render` call)."""
        return self._surface

    def set_colours(self, off_colour: RGB, on_colour: RGB) -> None:
        """Replace the two display colours."""
        self._lut[0] = off_colour
        self._lut[1] = on_colour

    def to_rgb(self) -> np.ndarray:
        """Return the current frame as a ``(height, width, 3)`` uint8 array."""
        fb = self._machine.frame_buffer  # type: ignore[attr-defined]
        # Wrap the video buffer in a numpy array (no copy) and reshape.
        raw = np.frombuffer(fb.video_buffer, dtype=np.uint8)
        frame = raw.reshape((self._height, self._width))
        return self._lut[frame]

    def render(self) -> pygame.Surface:
        """Render the current frame and return the surface.

        The same :class:`pygame.Surface` object is reused each frame.
        """
        rgb = self.to_rgb()
        # pygame surfarray expects (W, H, 3) -- transpose width and height.
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        return self._surface
