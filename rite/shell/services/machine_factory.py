"""
Machine creation factory for Rite.

Creates a ready-to-run :class:`~rite.core.machine.Machine` from a ROM file
path and optional quirk overrides.

Typical usage::

    machine = MachineFactory.create("pong.ch8")
    machine = MachineFactory.create("game.ch8", quirks=Quirks(shift_uses_vy=True))
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from rite.core.machine import Machine
from rite.core.types import Quirks
from rite.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class MachineFactory:
    """Create an emulated machine from a ROM file."""

    @staticmethod
    def create(rom_path: str, quirks: Optional[Quirks] = None) -> Machine:
        """Build and return a machine with the ROM loaded at ``0x200``.

        Parameters
        ----------
        rom_path:
            Filesystem path to the ROM image.
        quirks:
            Behaviour of the ambiguous instructions.  ``None`` uses the
            defaults.

        Raises
        ------
        FileNotFoundError
            If *rom_path* does not exist.
        LoadingError
            If the ROM does not fit in program memory.
        """
        rom_path = os.path.expanduser(rom_path)
        if not RomBytesService.has_rom_extension(rom_path):
            logger.warning("Unrecognised ROM extension: %s", rom_path)

        logger.info("Loading ROM: %s", rom_path)
        rom_bytes = RomBytesService.read(rom_path)

        machine = Machine(quirks=quirks)
        machine.load_program(rom_bytes)
        logger.info("Machine created: %r (quirks=%s)", machine, machine.quirks)
        return machine
