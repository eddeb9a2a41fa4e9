"""
Rite -- a CHIP-8 interpreter with a pygame front end.

Use :class:`~rite.core.machine.Machine` directly to run programs headless,
or :meth:`MachineFactory.create(rom_path) <rite.shell.services.machine_factory.MachineFactory.create>`
to build one from a ROM file.
"""

__version__ = "0.1.0"

from rite.core.errors import (
    EmulationError,
    LoadingError,
    StackOverflow,
    UnknownInstruction,
    VacantMemory,
)
from rite.core.machine import Machine
from rite.core.types import Key, Quirks

__all__ = [
    "EmulationError",
    "Key",
    "LoadingError",
    "Machine",
    "Quirks",
    "StackOverflow",
    "UnknownInstruction",
    "VacantMemory",
]
