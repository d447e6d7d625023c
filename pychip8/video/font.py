"""Built-in 4x5 hexadecimal font stored at the bottom of interpreter memory."""

from __future__ import annotations

FONT_START = 0x000
GLYPH_BYTES = 5
GLYPH_COUNT = 16

FONT_SET = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)

FONT_SIZE = len(FONT_SET)


def glyph_address(digit: int) -> int:
    """Return the memory address of the glyph for ``digit``."""

    return FONT_START + (digit & 0x0F) * GLYPH_BYTES


def glyph(digit: int) -> bytes:
    """Return the five bitmap rows for hexadecimal ``digit``."""

    if not 0 <= digit < GLYPH_COUNT:
        raise ValueError(f"glyph index out of range: {digit}")
    offset = digit * GLYPH_BYTES
    return FONT_SET[offset : offset + GLYPH_BYTES]
