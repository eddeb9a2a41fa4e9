"""
Core constants, enumerations and configuration types for Rite.

Memory map
----------

===========  ===========================================
Range        Contents
===========  ===========================================
0x000-0x1FF  Reserved for the interpreter (font at 0x050)
0x200-0xFFF  Program image and program data
===========  ===========================================
"""

from dataclasses import dataclass
from enum import IntEnum


MEMORY_SIZE: int = 4096
PROGRAM_START: int = 0x200
MAX_PROGRAM_SIZE: int = MEMORY_SIZE - PROGRAM_START

FONT_START: int = 0x050
FONT_GLYPH_SIZE: int = 5

REGISTER_COUNT: int = 16
FLAG_REGISTER: int = 0xF
STACK_DEPTH: int = 16

DISPLAY_WIDTH: int = 64
DISPLAY_HEIGHT: int = 32

KEY_COUNT: int = 16

# Timers count down at 60 Hz on the original hardware.
TIMER_HZ: int = 60


class Key(IntEnum):
    """Keys of the hexadecimal keypad, valued by their keypad index.

    Physical layout::

        1 2 3 C
        4 5 6 D
        7 8 9 E
        A 0 B F
    """
    K0 = 0x0
    K1 = 0x1
    K2 = 0x2
    K3 = 0x3
    K4 = 0x4
    K5 = 0x5
    K6 = 0x6
    K7 = 0x7
    K8 = 0x8
    K9 = 0x9
    KA = 0xA
    KB = 0xB
    KC = 0xC
    KD = 0xD
    KE = 0xE
    KF = 0xF


@dataclass(frozen=True)
class Quirks:
    """Behaviour switches for the two ambiguous instruction families.

    Attributes:
        shift_uses_vy: ``8XY6`` / ``8XYE`` copy VY into VX before shifting
            (original COSMAC VIP interpreter).
        jump_uses_vx: ``BNNN`` adds VX (X being the top nibble of NNN)
            instead of V0 (CHIP-48 / SUPER-CHIP interpreters).
    """
    shift_uses_vy: bool = False
    jump_uses_vx: bool = False
