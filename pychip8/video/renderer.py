"""Framebuffer to RGB conversion for the CHIP-8 display."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .palette import MONOCHROME, RGBColor, validate_palette

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32


@dataclass
class RenderResult:
    """RGB image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        """Wrap the RGB bytes in a ``pygame.Surface``."""

        import pygame  # type: ignore

        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Expand the 64x32 boolean framebuffer into scaled RGB pixels."""

    def __init__(
        self,
        palette: Sequence[RGBColor] = MONOCHROME,
        *,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
    ) -> None:
        background, foreground = validate_palette(palette)
        self._off = bytes(background)
        self._on = bytes(foreground)
        self._width = width
        self._height = height

    def render(self, display: Sequence[bool], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        expected = self._width * self._height
        if len(display) != expected:
            raise ValueError(f"display must contain {expected} pixels, got {len(display)}")

        out_width = self._width * scale
        buffer = bytearray()
        for y in range(self._height):
            row = bytearray()
            base = y * self._width
            for x in range(self._width):
                colour = self._on if display[base + x] else self._off
                row += colour * scale
            buffer += bytes(row) * scale

        return RenderResult(out_width, self._height * scale, bytes(buffer))
