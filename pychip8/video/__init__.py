"""Video rendering helpers for the CHIP-8 emulator."""

from __future__ import annotations

from .font import FONT_SET, FONT_SIZE, FONT_START, GLYPH_BYTES, glyph, glyph_address
from .palette import MONOCHROME, PHOSPHOR, validate_palette
from .renderer import SCREEN_HEIGHT, SCREEN_WIDTH, RenderResult, Renderer

__all__ = [
    "FONT_SET",
    "FONT_SIZE",
    "FONT_START",
    "GLYPH_BYTES",
    "glyph",
    "glyph_address",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PHOSPHOR",
    "validate_palette",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
