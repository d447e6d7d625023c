"""Raw binary ROM loader for CHIP-8 programs."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.cpu.core import MAX_PROGRAM_SIZE
from pychip8.utils import debug_enabled, debug_log

from .program import ProgramImage


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be loaded into interpreter memory."""


def load_rom(stream: BinaryIO, name: str = "") -> ProgramImage:
    """Read a ROM image from ``stream`` and validate its size."""

    # Read one byte past the limit so oversized images are detected.
    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if not data:
        raise RomFormatError("ROM image is empty")
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomFormatError(f"ROM image exceeds {MAX_PROGRAM_SIZE} bytes")
    if len(data) % 2 and debug_enabled("loader"):
        debug_log("loader", "rom=%s has odd length %d", name or "<stream>", len(data))
    return ProgramImage(bytes(data), name)


def load_rom_from_path(path: Path) -> ProgramImage:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, path.stem)
