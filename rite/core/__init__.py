"""Interpreter core: machine state, instruction set and display."""
