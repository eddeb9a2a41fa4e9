"""
Exceptions raised by the Rite interpreter.

Every error is fatal to the running program: the emulated state is no longer
meaningfully interpretable once one is raised.  The host decides whether to
halt, log or start over with a fresh machine.
"""

from __future__ import annotations

from typing import Optional


class EmulationError(Exception):
    """Base class for all interpreter errors.

    Parameters
    ----------
    message:
        Human-readable description.
    address:
        Address of the offending instruction, when known.
    opcode:
        The 16-bit opcode being executed, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        address: Optional[int] = None,
        opcode: Optional[int] = None,
    ) -> None:
        self.address = address
        self.opcode = opcode
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        parts = []
        if self.address is not None:
            parts.append(f"at ${self.address:03X}")
        if self.opcode is not None:
            parts.append(f"opcode {self.opcode:04X}")
        if parts:
            return f"{message} ({', '.join(parts)})"
        return message


class StackOverflow(EmulationError):
    """A call was made with the 16-entry call stack already full."""


class LoadingError(EmulationError):
    """A program image could not be placed in memory."""


class VacantMemory(EmulationError):
    """Execution reached a null opcode or the end of memory."""


class UnknownInstruction(EmulationError):
    """The opcode matched no instruction pattern."""
