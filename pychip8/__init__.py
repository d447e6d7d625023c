"""Python CHIP-8 emulator.

``pychip8.cpu`` holds the interpreter core; the remaining subpackages are
the host side: keypad, ROM loading, rendering, audio and the pygame window
used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
