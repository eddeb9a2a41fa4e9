"""Tests for keypad instructions, the keypad state and the timers."""

import pytest

from conftest import execute
from rite.core.input_state import InputState
from rite.core.types import Key


class TestKeySkips:
    """EX9E and EXA1."""

    def test_skip_if_pressed(self, machine):
        machine.v[2] = 0xA
        machine.press_key(Key.KA)
        execute(machine, 0xE29E)
        assert machine.pc == 0x204

    def test_no_skip_if_released(self, machine):
        machine.v[2] = 0xA
        execute(machine, 0xE29E)
        assert machine.pc == 0x202

    def test_skip_if_not_pressed(self, machine):
        machine.v[2] = 0x3
        execute(machine, 0xE2A1)
        assert machine.pc == 0x204

    def test_no_skip_if_not_pressed_but_held(self, machine):
        machine.v[2] = 0x3
        machine.press_key(3)
        execute(machine, 0xE2A1)
        assert machine.pc == 0x202

    @pytest.mark.parametrize("opcode", [0xE29E, 0xE2A1])
    def test_out_of_range_key_never_skips(self, machine, opcode):
        """A register value past 0xF names no key; neither variant skips."""
        machine.v[2] = 0x10
        machine.press_key(0)
        execute(machine, opcode)
        assert machine.pc == 0x202

    def test_release(self, machine):
        machine.v[0] = 5
        machine.press_key(5)
        machine.release_key(5)
        execute(machine, 0xE09E)
        assert machine.pc == 0x202


class TestWaitForKey:
    """FX0A."""

    def test_blocks_without_key(self, machine):
        """With no key held the instruction repeats."""
        execute(machine, 0xF30A)
        assert machine.pc == 0x200
        machine.step()
        assert machine.pc == 0x200

    def test_stores_key(self, machine):
        """The lowest held key is stored and execution moves on."""
        machine.press_key(0xC)
        machine.press_key(0x7)
        execute(machine, 0xF30A)
        assert machine.v[3] == 0x7
        assert machine.pc == 0x202


class TestInputState:
    """The keypad model used by the host."""

    def test_initially_released(self):
        state = InputState()
        assert state.pressed_keys() == []
        assert state.first_pressed() is None

    def test_raise_and_clear(self):
        state = InputState()
        state.raise_input(1, True)
        state.raise_input(0xF, True)
        assert state.pressed_keys() == [1, 0xF]
        state.clear_all_input()
        assert state.pressed_keys() == []

    def test_out_of_range_index_rejected(self, machine):
        """Injecting key 16 is a host programming error."""
        with pytest.raises(IndexError):
            machine.press_key(16)
        with pytest.raises(IndexError):
            machine.set_key(-1, True)

    def test_out_of_range_reads_released(self):
        assert InputState().is_pressed(0x20) is False

    def test_clear_keys(self, machine):
        machine.press_key(4)
        machine.clear_keys()
        assert not machine.input_state.is_pressed(4)


class TestTimers:
    """FX07, FX15, FX18 and host-side decrements."""

    def test_set_and_read_delay(self, machine):
        machine.v[1] = 30
        execute(machine, 0xF115)
        assert machine.delay_timer == 30
        machine.decrement_delay()
        execute(machine, 0xF207)
        assert machine.v[2] == 29

    def test_set_sound(self, machine):
        machine.v[1] = 2
        execute(machine, 0xF118)
        assert machine.sound_timer == 2
        assert machine.sound_active
        machine.decrement_sound()
        machine.decrement_sound()
        assert not machine.sound_active

    def test_decrement_stops_at_zero(self, machine):
        machine.decrement_delay()
        machine.decrement_sound()
        assert machine.delay_timer == 0
        assert machine.sound_timer == 0

    def test_timers_independent(self, machine):
        machine.delay_timer = 5
        machine.sound_timer = 9
        machine.decrement_delay()
        assert machine.delay_timer == 4
        assert machine.sound_timer == 9
