"""Host input handling for the CHIP-8 emulator."""

from .keyboard import KEY_MAP_TEMPLATE, Keypad

__all__ = [
    "Keypad",
    "KEY_MAP_TEMPLATE",
]
