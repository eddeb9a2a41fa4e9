"""
ROM loading service for Rite.

CHIP-8 ROMs are raw program images with no header: the file contents are
copied verbatim to address ``0x200``.  This module reads them from disk,
checks that they fit, and produces a short description for ``--info``.
"""

from __future__ import annotations

import os

from rite.core.errors import LoadingError
from rite.core.opcodes import disassemble
from rite.core.types import MAX_PROGRAM_SIZE, PROGRAM_START


# Extensions commonly used for CHIP-8 program images.
_ROM_EXTENSIONS: frozenset[str] = frozenset({".ch8", ".c8", ".rom", ".bin"})


class RomBytesService:
    """Static utility for loading ROM files."""

    @staticmethod
    def read(path: str) -> bytes:
        """Read the program image at *path*.

        Raises:
            FileNotFoundError: If *path* does not exist.
            LoadingError: If the image does not fit in program memory.
            OSError: On general I/O failure.
        """
        with open(path, "rb") as fh:
            data = fh.read()
        RomBytesService.validate(data)
        return data

    @staticmethod
    def validate(data: bytes) -> None:
        """Raise :class:`LoadingError` unless *data* fits at ``0x200``."""
        if len(data) > MAX_PROGRAM_SIZE:
            raise LoadingError(
                f"ROM is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} fit"
            )

    @staticmethod
    def has_rom_extension(path: str) -> bool:
        """``True`` if *path* ends in a recognised ROM extension."""
        return os.path.splitext(path)[1].lower() in _ROM_EXTENSIONS

    @staticmethod
    def describe(path: str) -> dict[str, str]:
        """Return a human-readable description of a ROM file.

        Returns a dict with keys: ``title``, ``rom_size``, ``free_bytes``,
        ``entry``.
        """
        with open(path, "rb") as fh:
            data = fh.read()

        if len(data) >= 2:
            first = (data[0] << 8) | data[1]
            entry = f"${PROGRAM_START:03X}: {first:04X}  {disassemble(first)}"
        else:
            entry = "(empty)"

        return {
            "title": os.path.splitext(os.path.basename(path))[0],
            "rom_size": str(len(data)),
            "free_bytes": str(MAX_PROGRAM_SIZE - len(data)),
            "entry": entry,
        }
