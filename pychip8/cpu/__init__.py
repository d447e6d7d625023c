"""CPU package for the CHIP-8 emulator."""

from .core import (
    CPUError,
    CPUState,
    Interpreter,
    StackOverflowError,
    StackUnderflowError,
    UnimplementedOpcodeError,
)
from . import opcodes

__all__ = [
    "Interpreter",
    "CPUState",
    "CPUError",
    "UnimplementedOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "opcodes",
]
