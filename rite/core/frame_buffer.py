"""
FrameBuffer -- the 64x32 monochrome display for Rite.

The display is one byte per pixel, 0 (off) or 1 (on), laid out row-major:
``video_buffer[y * width + x]``.  Keeping it a flat :class:`bytearray`
lets the renderer wrap it in a numpy array without copying.
"""

from __future__ import annotations

from typing import List

from rite.core.types import DISPLAY_HEIGHT, DISPLAY_WIDTH


class FrameBuffer:
    """Holds the on/off state of every display pixel.

    Parameters
    ----------
    width:
        Horizontal pixel count.  64 for CHIP-8.
    height:
        Vertical pixel count.  32 for CHIP-8.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        if height <= 0:
            raise ValueError(f"height must be positive, got {height}")

        self.width: int = width
        self.height: int = height

        self._video_buffer_size: int = width * height
        self.video_buffer: bytearray = bytearray(self._video_buffer_size)

    # ------------------------------------------------------------------
    # Video helpers
    # ------------------------------------------------------------------

    @property
    def video_buffer_size(self) -> int:
        """Total number of pixels in the video buffer."""
        return self._video_buffer_size

    def read_pixel(self, x: int, y: int) -> bool:
        """Return ``True`` if the pixel at (*x*, *y*) is on.

        Raises:
            IndexError: If the coordinates fall outside the display.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) out of range {self.width}x{self.height}")
        return self.video_buffer[y * self.width + x] != 0

    def write_pixel(self, x: int, y: int, on: bool) -> None:
        """Set the pixel at (*x*, *y*) on or off."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) out of range {self.width}x{self.height}")
        self.video_buffer[y * self.width + x] = 1 if on else 0

    def xor_pixel(self, x: int, y: int) -> bool:
        """Flip the pixel at (*x*, *y*).

        Returns:
            ``True`` if the pixel was on and has been turned off (a
            collision), ``False`` otherwise.
        """
        offset = y * self.width + x
        was_on = self.video_buffer[offset] != 0
        self.video_buffer[offset] ^= 1
        return was_on

    def pixels(self) -> List[bool]:
        """Return the whole display as a row-major list of booleans."""
        return [b != 0 for b in self.video_buffer]

    def lit_count(self) -> int:
        """Number of pixels currently on."""
        return sum(self.video_buffer)

    # ------------------------------------------------------------------
    # Buffer management
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Turn every pixel off."""
        self.video_buffer[:] = bytes(self._video_buffer_size)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __getitem__(self, index: int) -> bool:
        return self.video_buffer[index] != 0

    def __len__(self) -> int:
        return self._video_buffer_size

    def __repr__(self) -> str:
        return (
            f"FrameBuffer("
            f"width={self.width}, "
            f"height={self.height}, "
            f"lit={self.lit_count()})"
        )
