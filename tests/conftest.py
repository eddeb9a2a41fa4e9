"""Shared fixtures for the Rite test suite."""

import os
import random
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

# pygame-based tests never open a real window.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from rite.core.machine import Machine


def words(*opcodes: int) -> bytes:
    """Encode opcodes as a big-endian program image."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


def execute(machine: Machine, *opcodes: int) -> None:
    """Place each opcode at the current PC and step once per opcode."""
    for op in opcodes:
        machine.memory[machine.pc] = op >> 8
        machine.memory[machine.pc + 1] = op & 0xFF
        machine.step()


@pytest.fixture
def machine() -> Machine:
    """A fresh machine with a seeded random source."""
    return Machine(rng=random.Random(1234))
