"""Tests for ROM loading, the machine factory and the command line."""

import pytest

from conftest import words
from rite.core.errors import LoadingError
from rite.core.types import MAX_PROGRAM_SIZE, Quirks
from rite.shell.services.machine_factory import MachineFactory
from rite.shell.services.rom_bytes_service import RomBytesService

import main


@pytest.fixture
def rom(tmp_path):
    """A small ROM that draws the digit 0 and then loops."""
    path = tmp_path / "zero.ch8"
    path.write_bytes(words(
        0xA050,  # I = glyph 0
        0xD015,  # draw at (V0, V1)
        0x1204,  # loop
    ))
    return path


class TestRomBytesService:
    """Reading ROM files."""

    def test_read(self, rom):
        assert RomBytesService.read(str(rom)) == rom.read_bytes()

    def test_read_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RomBytesService.read(str(tmp_path / "missing.ch8"))

    def test_read_too_large(self, tmp_path):
        path = tmp_path / "big.ch8"
        path.write_bytes(b"\x00" * (MAX_PROGRAM_SIZE + 1))
        with pytest.raises(LoadingError):
            RomBytesService.read(str(path))

    def test_extension(self):
        assert RomBytesService.has_rom_extension("pong.CH8")
        assert not RomBytesService.has_rom_extension("notes.txt")

    def test_describe(self, rom):
        info = RomBytesService.describe(str(rom))
        assert info["title"] == "zero"
        assert info["rom_size"] == "6"
        assert info["free_bytes"] == str(MAX_PROGRAM_SIZE - 6)
        assert "LD I, $050" in info["entry"]


class TestMachineFactory:
    """Creating machines from ROM files."""

    def test_create_and_run(self, rom):
        machine = MachineFactory.create(str(rom))
        assert machine.program_loaded
        machine.run(3)
        assert machine.pc == 0x204
        assert machine.frame_buffer.lit_count() == 14

    def test_quirks_passed_through(self, rom):
        quirks = Quirks(shift_uses_vy=True)
        assert MachineFactory.create(str(rom), quirks=quirks).quirks is quirks


class TestMain:
    """The command line entry point (headless modes only)."""

    def test_missing_rom(self, tmp_path, capsys):
        assert main.main([str(tmp_path / "nope.ch8")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_info(self, rom, capsys):
        assert main.main([str(rom), "--info"]) == 0
        out = capsys.readouterr().out
        assert "Rom Size" in out
        assert "zero" in out

    def test_debug_run(self, rom, capsys):
        assert main.main([str(rom), "--debug", "3"]) == 0
        out = capsys.readouterr().out
        assert "pc=$204" in out
        assert "14/2048 pixels lit" in out

    def test_debug_halts_on_error(self, tmp_path, capsys):
        path = tmp_path / "bad.ch8"
        path.write_bytes(words(0x5121))
        assert main.main([str(path), "--debug", "5"]) == 1
        assert "Halted" in capsys.readouterr().out

    def test_oversized_rom(self, tmp_path, capsys):
        path = tmp_path / "big.ch8"
        path.write_bytes(b"\x12\x00" * MAX_PROGRAM_SIZE)
        assert main.main([str(path)]) == 1
        assert "at most" in capsys.readouterr().err
