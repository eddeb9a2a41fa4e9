"""
Machine -- the CHIP-8 interpreter and the state it mutates.

A :class:`Machine` is an exclusively-owned context object: the host creates
one per session, loads a program image into it once, and then drives it by
calling :meth:`Machine.step` some number of times per 60 Hz tick, followed by
:meth:`Machine.decrement_delay` and :meth:`Machine.decrement_sound`.

Key behaviours:

* The program counter is advanced past an instruction *before* it executes,
  so jumps, calls and skips all act on the advanced value.
* ``VF`` doubles as the flag output of arithmetic, shift and draw
  instructions and is always the last register written by an instruction.
* ``8XY6`` / ``8XYE`` shift VX in place and ``BNNN`` offsets by V0, unless
  the corresponding :class:`~rite.core.types.Quirks` switch is set.
* ``DXYN`` wraps only its starting coordinate; sprites are clipped at the
  right and bottom edges.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Iterable, List, NoReturn, Optional, Union

from rite.core.errors import LoadingError, StackOverflow, UnknownInstruction, VacantMemory
from rite.core.font import FONT_END, FONT_SET, glyph_address
from rite.core.frame_buffer import FrameBuffer
from rite.core.input_state import InputState
from rite.core.opcodes import Decoded, decode, disassemble
from rite.core.types import (
    FLAG_REGISTER,
    FONT_START,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    REGISTER_COUNT,
    STACK_DEPTH,
    Quirks,
)

logger = logging.getLogger(__name__)

_ADDRESS_MASK: int = MEMORY_SIZE - 1


class Machine:
    """CHIP-8 interpreter.

    Parameters
    ----------
    quirks:
        Behaviour of the ambiguous ``8XY6`` / ``8XYE`` and ``BNNN``
        instructions.  Defaults to :class:`Quirks` with every switch off.
    rng:
        Random source for ``CXNN``.  A private :class:`random.Random` is
        created when omitted.
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        quirks: Optional[Quirks] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.quirks: Quirks = quirks if quirks is not None else Quirks()
        self._rng: random.Random = rng if rng is not None else random.Random()

        # Memory, with the font in the reserved area.
        self.memory: bytearray = bytearray(MEMORY_SIZE)
        self.memory[FONT_START:FONT_END] = FONT_SET

        # Registers
        self.pc: int = PROGRAM_START   # 16-bit program counter
        self.i: int = 0x000            # 16-bit index register
        self.v: bytearray = bytearray(REGISTER_COUNT)  # V0-VF
        self.stack: List[int] = []

        # Timers
        self.delay_timer: int = 0
        self.sound_timer: int = 0

        # Output / input
        self.frame_buffer: FrameBuffer = FrameBuffer()
        self.input_state: InputState = InputState()

        self.cycle_count: int = 0
        self._program_loaded: bool = False

        # Dispatch on the top nibble; sub-dispatch happens inside the
        # family handlers.
        self._family_table: List[Callable[[Decoded], None]] = self._build_family_table()

    # ------------------------------------------------------------------
    # Program loading
    # ------------------------------------------------------------------

    def load_program(self, data: Union[bytes, bytearray, Iterable[int]]) -> None:
        """Copy a program image into memory starting at ``0x200``.

        The size check happens before any byte is written, so a failed load
        leaves memory untouched.

        Raises:
            LoadingError: If the image exceeds the 3584 bytes available, or
                a program has already been loaded into this machine.
        """
        if self._program_loaded:
            raise LoadingError("a program is already loaded; create a new Machine to reload")

        image = bytes(data)
        if len(image) > MAX_PROGRAM_SIZE:
            raise LoadingError(
                f"program image is {len(image)} bytes; at most {MAX_PROGRAM_SIZE} fit"
            )

        self.memory[PROGRAM_START:PROGRAM_START + len(image)] = image
        self._program_loaded = True
        logger.info(
            "Loaded %d-byte program at $%03X (%d bytes free)",
            len(image), PROGRAM_START, MAX_PROGRAM_SIZE - len(image),
        )

    @property
    def program_loaded(self) -> bool:
        return self._program_loaded

    # ------------------------------------------------------------------
    # Fetch / decode / execute
    # ------------------------------------------------------------------

    def step(self) -> None:
        """Execute exactly one instruction.

        Raises:
            VacantMemory: On the null opcode ``0000`` or a fetch past the
                end of memory.
            UnknownInstruction: If the opcode matches no instruction.
            StackOverflow: On a ``2NNN`` call with the stack full.
        """
        address = self.pc
        if address + 1 >= MEMORY_SIZE:
            raise VacantMemory("program counter ran off the end of memory", address=address)

        opcode = (self.memory[address] << 8) | self.memory[address + 1]
        self.pc = (address + 2) & 0xFFFF

        if opcode == 0x0000:
            raise VacantMemory("executed empty memory", address=address, opcode=opcode)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("$%03X  %04X  %s", address, opcode, disassemble(opcode))

        d = decode(opcode)
        self._family_table[d.family](d)
        self.cycle_count += 1

    def run(self, cycles: int) -> None:
        """Execute *cycles* instructions, stopping at the first error."""
        for _ in range(cycles):
            self.step()

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def decrement_delay(self) -> None:
        """Count the delay timer down by one, stopping at zero."""
        if self.delay_timer > 0:
            self.delay_timer -= 1

    def decrement_sound(self) -> None:
        """Count the sound timer down by one, stopping at zero."""
        if self.sound_timer > 0:
            self.sound_timer -= 1

    @property
    def sound_active(self) -> bool:
        """``True`` while the sound timer is running."""
        return self.sound_timer > 0

    # ------------------------------------------------------------------
    # Keypad
    # ------------------------------------------------------------------

    def set_key(self, key: int, down: bool) -> None:
        self.input_state.raise_input(key, down)

    def press_key(self, key: int) -> None:
        self.input_state.raise_input(key, True)

    def release_key(self, key: int) -> None:
        self.input_state.raise_input(key, False)

    def clear_keys(self) -> None:
        self.input_state.clear_all_input()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @property
    def pixels(self) -> List[bool]:
        """The 64x32 display as a row-major list of 2048 booleans."""
        return self.frame_buffer.pixels()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _skip(self) -> None:
        self.pc = (self.pc + 2) & 0xFFFF

    def _unknown(self, d: Decoded) -> NoReturn:
        raise UnknownInstruction(
            "unrecognised instruction",
            address=(self.pc - 2) & 0xFFFF,
            opcode=d.opcode,
        )

    def _read(self, addr: int) -> int:
        return self.memory[addr & _ADDRESS_MASK]

    def _write(self, addr: int, value: int) -> None:
        self.memory[addr & _ADDRESS_MASK] = value & 0xFF

    # ------------------------------------------------------------------
    # Family 0 -- screen and subroutine return
    # ------------------------------------------------------------------

    def _family_0(self, d: Decoded) -> None:
        if d.opcode == 0x00E0:
            self.i_cls()
        elif d.opcode == 0x00EE:
            self.i_ret()
        else:
            # 0NNN machine-code calls are not supported.
            self._unknown(d)

    def i_cls(self) -> None:
        """00E0 -- clear the display."""
        self.frame_buffer.clear()

    def i_ret(self) -> None:
        """00EE -- return from subroutine."""
        if self.stack:
            self.pc = self.stack.pop()
        else:
            logger.warning(
                "Return with empty call stack at $%03X; jumping to $000",
                (self.pc - 2) & 0xFFFF,
            )
            self.pc = 0x000

    # ------------------------------------------------------------------
    # Jumps, calls and skips
    # ------------------------------------------------------------------

    def _family_1(self, d: Decoded) -> None:
        """1NNN -- jump."""
        self.pc = d.nnn

    def _family_2(self, d: Decoded) -> None:
        """2NNN -- call subroutine."""
        if len(self.stack) >= STACK_DEPTH:
            raise StackOverflow(
                f"call depth exceeds {STACK_DEPTH}",
                address=(self.pc - 2) & 0xFFFF,
                opcode=d.opcode,
            )
        self.stack.append(self.pc)
        self.pc = d.nnn

    def _family_3(self, d: Decoded) -> None:
        """3XNN -- skip if VX == NN."""
        if self.v[d.x] == d.nn:
            self._skip()

    def _family_4(self, d: Decoded) -> None:
        """4XNN -- skip if VX != NN."""
        if self.v[d.x] != d.nn:
            self._skip()

    def _family_5(self, d: Decoded) -> None:
        """5XY0 -- skip if VX == VY."""
        if d.n != 0:
            self._unknown(d)
        if self.v[d.x] == self.v[d.y]:
            self._skip()

    def _family_9(self, d: Decoded) -> None:
        """9XY0 -- skip if VX != VY."""
        if d.n != 0:
            self._unknown(d)
        if self.v[d.x] != self.v[d.y]:
            self._skip()

    def _family_b(self, d: Decoded) -> None:
        """BNNN -- jump to NNN plus V0 (or VX with the jump quirk)."""
        reg = d.x if self.quirks.jump_uses_vx else 0
        self.pc = (d.nnn + self.v[reg]) & 0xFFFF

    # ------------------------------------------------------------------
    # Register loads and immediate arithmetic
    # ------------------------------------------------------------------

    def _family_6(self, d: Decoded) -> None:
        """6XNN -- VX = NN."""
        self.v[d.x] = d.nn

    def _family_7(self, d: Decoded) -> None:
        """7XNN -- VX += NN, no carry flag."""
        self.v[d.x] = (self.v[d.x] + d.nn) & 0xFF

    def _family_a(self, d: Decoded) -> None:
        """ANNN -- I = NNN."""
        self.i = d.nnn

    def _family_c(self, d: Decoded) -> None:
        """CXNN -- VX = random byte AND NN."""
        self.v[d.x] = self._rng.randrange(256) & d.nn

    # ------------------------------------------------------------------
    # Family 8 -- register-register ALU
    # ------------------------------------------------------------------

    def _family_8(self, d: Decoded) -> None:
        op = self._alu_table.get(d.n)
        if op is None:
            self._unknown(d)
        op(d.x, d.y)

    def i_ld_reg(self, x: int, y: int) -> None:
        self.v[x] = self.v[y]

    def i_or(self, x: int, y: int) -> None:
        self.v[x] |= self.v[y]

    def i_and(self, x: int, y: int) -> None:
        self.v[x] &= self.v[y]

    def i_xor(self, x: int, y: int) -> None:
        self.v[x] ^= self.v[y]

    def i_add(self, x: int, y: int) -> None:
        """8XY4 -- VX += VY, VF = carry."""
        total = self.v[x] + self.v[y]
        carry = 1 if total > 0xFF else 0
        self.v[x] = total & 0xFF
        self.v[FLAG_REGISTER] = carry

    def i_sub(self, x: int, y: int) -> None:
        """8XY5 -- VX -= VY, VF = NOT borrow."""
        vx, vy = self.v[x], self.v[y]
        no_borrow = 0 if vy > vx else 1
        self.v[x] = (vx - vy) & 0xFF
        self.v[FLAG_REGISTER] = no_borrow

    def i_subn(self, x: int, y: int) -> None:
        """8XY7 -- VX = VY - VX, VF = NOT borrow."""
        vx, vy = self.v[x], self.v[y]
        no_borrow = 0 if vx > vy else 1
        self.v[x] = (vy - vx) & 0xFF
        self.v[FLAG_REGISTER] = no_borrow

    def i_shr(self, x: int, y: int) -> None:
        """8XY6 -- VX >>= 1, VF = bit shifted out."""
        src = self.v[y] if self.quirks.shift_uses_vy else self.v[x]
        self.v[x] = src >> 1
        self.v[FLAG_REGISTER] = src & 0x01

    def i_shl(self, x: int, y: int) -> None:
        """8XYE -- VX <<= 1, VF = bit shifted out."""
        src = self.v[y] if self.quirks.shift_uses_vy else self.v[x]
        self.v[x] = (src << 1) & 0xFF
        self.v[FLAG_REGISTER] = (src >> 7) & 0x01

    # ------------------------------------------------------------------
    # Family D -- sprite drawing
    # ------------------------------------------------------------------

    def _family_d(self, d: Decoded) -> None:
        """DXYN -- draw an N-row sprite from memory[I] at (VX, VY).

        Only the starting position wraps; pixels past the right or bottom
        edge are clipped.  VF is set to 1 if any lit pixel was turned off.
        """
        fb = self.frame_buffer
        x0 = self.v[d.x] % fb.width
        y0 = self.v[d.y] % fb.height
        collision = 0

        for row in range(d.n):
            py = y0 + row
            if py >= fb.height:
                break
            sprite = self._read(self.i + row)
            for bit in range(8):
                px = x0 + bit
                if px >= fb.width:
                    break
                if sprite & (0x80 >> bit) and fb.xor_pixel(px, py):
                    collision = 1

        self.v[FLAG_REGISTER] = collision

    # ------------------------------------------------------------------
    # Family E -- keypad skips
    # ------------------------------------------------------------------

    def _family_e(self, d: Decoded) -> None:
        key = self.v[d.x]
        if d.nn == 0x9E:
            if self.input_state.is_pressed(key):
                self._skip()
        elif d.nn == 0xA1:
            # Register values past 0xF name no key: neither variant skips.
            if key <= 0xF and not self.input_state.is_pressed(key):
                self._skip()
        else:
            self._unknown(d)

    # ------------------------------------------------------------------
    # Family F -- timers, keypad wait, index and memory transfers
    # ------------------------------------------------------------------

    def _family_f(self, d: Decoded) -> None:
        op = self._misc_table.get(d.nn)
        if op is None:
            self._unknown(d)
        op(d.x)

    def i_ld_vx_dt(self, x: int) -> None:
        self.v[x] = self.delay_timer

    def i_ld_vx_k(self, x: int) -> None:
        """FX0A -- wait for a key; re-executes until one is held."""
        key = self.input_state.first_pressed()
        if key is None:
            self.pc = (self.pc - 2) & 0xFFFF
        else:
            self.v[x] = key

    def i_ld_dt_vx(self, x: int) -> None:
        self.delay_timer = self.v[x]

    def i_ld_st_vx(self, x: int) -> None:
        self.sound_timer = self.v[x]

    def i_add_i_vx(self, x: int) -> None:
        self.i = (self.i + self.v[x]) & 0xFFFF

    def i_ld_f_vx(self, x: int) -> None:
        self.i = glyph_address(self.v[x])

    def i_ld_b_vx(self, x: int) -> None:
        """FX33 -- store the decimal digits of VX at I, I+1, I+2."""
        value = self.v[x]
        self._write(self.i, value // 100)
        self._write(self.i + 1, (value // 10) % 10)
        self._write(self.i + 2, value % 10)

    def i_store_regs(self, x: int) -> None:
        """FX55 -- store V0..VX at I; I is left unchanged."""
        for r in range(x + 1):
            self._write(self.i + r, self.v[r])

    def i_load_regs(self, x: int) -> None:
        """FX65 -- load V0..VX from I; I is left unchanged."""
        for r in range(x + 1):
            self.v[r] = self._read(self.i + r)

    # ==================================================================
    # Dispatch tables
    # ==================================================================

    def _build_family_table(self) -> List[Callable[[Decoded], None]]:
        self._alu_table = {
            0x0: self.i_ld_reg,
            0x1: self.i_or,
            0x2: self.i_and,
            0x3: self.i_xor,
            0x4: self.i_add,
            0x5: self.i_sub,
            0x6: self.i_shr,
            0x7: self.i_subn,
            0xE: self.i_shl,
        }
        self._misc_table = {
            0x07: self.i_ld_vx_dt,
            0x0A: self.i_ld_vx_k,
            0x15: self.i_ld_dt_vx,
            0x18: self.i_ld_st_vx,
            0x1E: self.i_add_i_vx,
            0x29: self.i_ld_f_vx,
            0x33: self.i_ld_b_vx,
            0x55: self.i_store_regs,
            0x65: self.i_load_regs,
        }
        return [
            self._family_0, self._family_1, self._family_2, self._family_3,
            self._family_4, self._family_5, self._family_6, self._family_7,
            self._family_8, self._family_9, self._family_a, self._family_b,
            self._family_c, self._family_d, self._family_e, self._family_f,
        ]

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"pc=${self.pc:03X}, "
            f"i=${self.i:03X}, "
            f"sp={len(self.stack)}, "
            f"dt={self.delay_timer}, "
            f"st={self.sound_timer}, "
            f"cycles={self.cycle_count})"
        )
