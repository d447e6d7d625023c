"""Bus-related helpers for the CHIP-8 emulator."""

from .memory import Memory, MemoryError

__all__ = [
    "Memory",
    "MemoryError",
]
