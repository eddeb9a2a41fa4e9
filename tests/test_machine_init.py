"""Tests for Machine construction and program loading."""

import pytest

from conftest import words
from rite.core.errors import LoadingError, VacantMemory
from rite.core.font import FONT_SET
from rite.core.machine import Machine
from rite.core.types import MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START, Quirks


class TestMachineCreation:
    """Test the power-on state."""

    def test_registers_zeroed(self):
        """All registers, the index register and the timers start at zero."""
        m = Machine()
        assert list(m.v) == [0] * 16
        assert m.i == 0
        assert m.delay_timer == 0
        assert m.sound_timer == 0
        assert m.stack == []

    def test_pc_starts_at_program_area(self):
        """PC points at 0x200."""
        assert Machine().pc == 0x200

    def test_font_loaded(self):
        """The 80-byte font sits at 0x050-0x09F."""
        m = Machine()
        assert bytes(m.memory[0x050:0x0A0]) == FONT_SET
        assert len(FONT_SET) == 80
        assert m.memory[0x050:0x055] == bytearray([0xF0, 0x90, 0x90, 0x90, 0xF0])
        # Last row of the F glyph.
        assert m.memory[0x09F] == 0x80

    def test_rest_of_memory_zeroed(self):
        """Everything outside the font is zero."""
        m = Machine()
        assert len(m.memory) == MEMORY_SIZE
        assert not any(m.memory[:0x050])
        assert not any(m.memory[0x0A0:])

    def test_display_blank(self):
        """The framebuffer has 2048 unlit pixels."""
        pixels = Machine().pixels
        assert len(pixels) == 2048
        assert not any(pixels)

    def test_default_quirks(self):
        """Both quirk switches are off by default."""
        assert Machine().quirks == Quirks(shift_uses_vy=False, jump_uses_vx=False)

    def test_independent_machines(self):
        """Two machines share no state."""
        a, b = Machine(), Machine()
        a.v[3] = 9
        a.press_key(2)
        assert b.v[3] == 0
        assert not b.input_state.is_pressed(2)


class TestProgramLoading:
    """Test copying program images into memory."""

    def test_load_places_bytes_at_0x200(self):
        """Bytes land at consecutive addresses from 0x200."""
        m = Machine()
        m.load_program([0x12, 0x34, 0x56])
        assert m.memory[0x200:0x203] == bytearray([0x12, 0x34, 0x56])
        assert m.memory[0x203] == 0
        assert m.program_loaded

    def test_load_max_size_fills_memory(self):
        """A 3584-byte image fills memory exactly to 0xFFF."""
        m = Machine()
        image = bytes((n % 255) + 1 for n in range(MAX_PROGRAM_SIZE))
        m.load_program(image)
        assert bytes(m.memory[PROGRAM_START:]) == image
        assert m.memory[0xFFF] == image[-1]

    def test_load_too_large_fails(self):
        """A 3585-byte image raises LoadingError and writes nothing."""
        m = Machine()
        before = bytes(m.memory)
        with pytest.raises(LoadingError):
            m.load_program(b"\xAA" * (MAX_PROGRAM_SIZE + 1))
        assert bytes(m.memory) == before
        assert not m.program_loaded

    def test_second_load_fails(self):
        """Reloading requires a fresh machine."""
        m = Machine()
        m.load_program(b"\x00\xE0")
        with pytest.raises(LoadingError):
            m.load_program(b"\x12\x00")
        assert m.memory[0x200:0x202] == bytearray([0x00, 0xE0])

    def test_empty_program(self):
        """An empty image loads; executing it hits vacant memory."""
        m = Machine()
        m.load_program(b"")
        assert m.program_loaded
        with pytest.raises(VacantMemory):
            m.step()


class TestScenarios:
    """End-to-end programs."""

    def test_load_then_add(self):
        """6XNN then 7XNN leaves V0 == 15."""
        m = Machine()
        m.load_program([0x60, 0x0A, 0x70, 0x05])
        m.step()
        m.step()
        assert m.v[0] == 15
        assert m.pc == 0x204
        assert m.cycle_count == 2

    def test_countdown_loop(self):
        """A loop decrementing V1 from 3 to 0 terminates."""
        m = Machine()
        m.load_program(words(
            0x6103,  # 200: V1 = 3
            0x71FF,  # 202: V1 -= 1
            0x3100,  # 204: skip if V1 == 0
            0x1202,  # 206: jump 202
            0x1208,  # 208: halt loop
        ))
        m.run(1 + 3 * 3)
        assert m.v[1] == 0
        assert m.pc == 0x208
