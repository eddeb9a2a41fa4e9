#!/usr/bin/env python3
"""
Rite -- CHIP-8 interpreter

Main entry point.  Parses command-line arguments, creates the machine from
a ROM file, and launches the pygame display window.

Usage examples::

    # Run a ROM
    python main.py roms/pong.ch8

    # Bigger window, faster CPU
    python main.py roms/pong.ch8 --scale 15 --speed 20

    # COSMAC VIP style shifts
    python main.py roms/game.ch8 --shift-quirk

    # List ROM metadata without launching
    python main.py roms/pong.ch8 --info

    # Run headless for 200 instructions and dump the machine state
    python main.py roms/pong.ch8 --debug 200
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

# ---------------------------------------------------------------------------
# Ensure the project root is on sys.path so that ``rite`` can be imported
# regardless of how the script is invoked.
# ---------------------------------------------------------------------------
_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from rite.core.errors import EmulationError, LoadingError
from rite.core.machine import Machine
from rite.core.opcodes import disassemble
from rite.core.types import Quirks
from rite.shell.services.machine_factory import MachineFactory
from rite.shell.services.rom_bytes_service import RomBytesService


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rite",
        description=(
            "Rite -- CHIP-8 interpreter.  "
            "Load a ROM file and play it in a pygame window."
        ),
    )

    parser.add_argument(
        "rom",
        help="Path to the ROM file (.ch8, .c8, .rom)",
    )

    # Display
    parser.add_argument(
        "--scale", "-s",
        type=int,
        default=10,
        help="Display scale factor (1-20).  Default: 10.",
    )

    # Pacing
    parser.add_argument(
        "--speed",
        type=int,
        default=10,
        help="Instructions executed per 60 Hz tick.  Default: 10.",
    )

    # Quirks
    parser.add_argument(
        "--shift-quirk",
        action="store_true",
        default=False,
        help="8XY6/8XYE copy VY into VX before shifting.",
    )
    parser.add_argument(
        "--jump-quirk",
        action="store_true",
        default=False,
        help="BNNN jumps to NNN + VX instead of NNN + V0.",
    )

    # Debugging / info
    parser.add_argument(
        "--info",
        action="store_true",
        default=False,
        help="Print ROM metadata and exit without launching the emulator.",
    )

    parser.add_argument(
        "--debug",
        type=int,
        default=None,
        metavar="N",
        help="Run N instructions without a window, print the machine state and exit.",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Info mode
# ---------------------------------------------------------------------------

def _print_rom_info(rom_path: str) -> int:
    """Print human-readable metadata for a ROM."""
    try:
        info = RomBytesService.describe(rom_path)
    except OSError as exc:
        print(f"Error reading ROM: {exc}", file=sys.stderr)
        return 1

    print("Rite ROM Information")
    print("=" * 40)
    for key, value in info.items():
        label = key.replace("_", " ").title()
        print(f"  {label:20s}: {value}")
    print("=" * 40)
    return 0


# ---------------------------------------------------------------------------
# Debug mode
# ---------------------------------------------------------------------------

def _run_debug(machine: Machine, cycles: int) -> int:
    """Run *cycles* instructions headless and print the machine state."""
    print("=" * 60)
    print("Rite Debug Diagnostics")
    print("=" * 60)

    status = 0
    try:
        machine.run(cycles)
    except EmulationError as exc:
        print(f"Halted: {exc}")
        status = 1

    print(f"Machine: {machine}")
    regs = " ".join(f"V{r:X}={machine.v[r]:02X}" for r in range(len(machine.v)))
    print(f"  Registers: {regs}")
    print(f"  Stack: {[f'${a:03X}' for a in machine.stack]}")
    if machine.pc + 1 < len(machine.memory):
        nxt = (machine.memory[machine.pc] << 8) | machine.memory[machine.pc + 1]
        print(f"  Next: ${machine.pc:03X}  {nxt:04X}  {disassemble(nxt)}")

    fb = machine.frame_buffer
    print(f"  Display: {fb.lit_count()}/{len(fb)} pixels lit")
    for y in range(fb.height):
        row = "".join("#" if fb[y * fb.width + x] else "." for x in range(fb.width))
        print(f"  {row}")

    print("=" * 60)
    return status


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` to use ``sys.argv``.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    logger = logging.getLogger("rite.main")

    # Validate the ROM path early.
    rom_path: str = os.path.expanduser(args.rom)
    if not os.path.isfile(rom_path):
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1

    # Info-only mode.
    if args.info:
        return _print_rom_info(rom_path)

    quirks = Quirks(shift_uses_vy=args.shift_quirk, jump_uses_vx=args.jump_quirk)

    # Create the emulated machine.
    try:
        machine = MachineFactory.create(rom_path, quirks=quirks)
    except (FileNotFoundError, LoadingError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.exception("Failed to create machine")
        print(f"Error creating machine: {exc}", file=sys.stderr)
        return 1

    # Debug mode: run headless and print diagnostics.
    if args.debug is not None:
        return _run_debug(machine, args.debug)

    # Deferred so --info and --debug work without a display.
    from rite.platform.window import Window

    logger.info("Starting emulation ...")
    window: Optional[Window] = None
    try:
        window = Window(machine, scale=args.scale, speed=args.speed)
        window.run()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        logger.exception("Fatal error during emulation")
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1

    if window is not None and window.error is not None:
        return 1

    logger.info("Exited cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
