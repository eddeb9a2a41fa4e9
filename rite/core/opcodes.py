"""
Opcode field extraction and disassembly.

Every instruction is two bytes, big-endian.  The fields used by the
instruction set are::

    F X Y N       F = family (top nibble)
      |___|       X, Y = register indices, N = low nibble
      NNN         NN = low byte, NNN = low 12 bits

Mnemonics follow Cowgod's technical reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict


@dataclass(frozen=True)
class Decoded:
    """The six fields of a 16-bit opcode."""

    opcode: int
    family: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(opcode: int) -> Decoded:
    """Split *opcode* into its instruction fields."""
    opcode &= 0xFFFF
    return Decoded(
        opcode=opcode,
        family=opcode >> 12,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & 0xFFF,
    )


# ---------------------------------------------------------------------------
# Disassembly tables
# ---------------------------------------------------------------------------

_FAMILY_8: Dict[int, str] = {
    0x0: "LD",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

_FAMILY_F: Dict[int, Callable[[int], str]] = {
    0x07: lambda x: f"LD V{x:X}, DT",
    0x0A: lambda x: f"LD V{x:X}, K",
    0x15: lambda x: f"LD DT, V{x:X}",
    0x18: lambda x: f"LD ST, V{x:X}",
    0x1E: lambda x: f"ADD I, V{x:X}",
    0x29: lambda x: f"LD F, V{x:X}",
    0x33: lambda x: f"LD B, V{x:X}",
    0x55: lambda x: f"LD [I], V{x:X}",
    0x65: lambda x: f"LD V{x:X}, [I]",
}


def disassemble(opcode: int) -> str:
    """Return a one-line mnemonic for *opcode*.

    Opcodes that do not decode to an instruction render as a ``DW``
    data word, so this never raises.
    """
    d = decode(opcode)
    f, x, y, n, nn, nnn = d.family, d.x, d.y, d.n, d.nn, d.nnn

    if f == 0x0:
        if d.opcode == 0x00E0:
            return "CLS"
        if d.opcode == 0x00EE:
            return "RET"
    elif f == 0x1:
        return f"JP ${nnn:03X}"
    elif f == 0x2:
        return f"CALL ${nnn:03X}"
    elif f == 0x3:
        return f"SE V{x:X}, #{nn:02X}"
    elif f == 0x4:
        return f"SNE V{x:X}, #{nn:02X}"
    elif f == 0x5 and n == 0:
        return f"SE V{x:X}, V{y:X}"
    elif f == 0x6:
        return f"LD V{x:X}, #{nn:02X}"
    elif f == 0x7:
        return f"ADD V{x:X}, #{nn:02X}"
    elif f == 0x8 and n in _FAMILY_8:
        return f"{_FAMILY_8[n]} V{x:X}, V{y:X}"
    elif f == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    elif f == 0xA:
        return f"LD I, ${nnn:03X}"
    elif f == 0xB:
        return f"JP V0, ${nnn:03X}"
    elif f == 0xC:
        return f"RND V{x:X}, #{nn:02X}"
    elif f == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    elif f == 0xE:
        if nn == 0x9E:
            return f"SKP V{x:X}"
        if nn == 0xA1:
            return f"SKNP V{x:X}"
    elif f == 0xF and nn in _FAMILY_F:
        return _FAMILY_F[nn](x)

    return f"DW #{d.opcode:04X}"
