"""Program metadata structures for CHIP-8 loaders."""

from __future__ import annotations

from dataclasses import dataclass

from pychip8.cpu.core import PROGRAM_START


@dataclass
class ProgramImage:
    """A ROM image and the name it was loaded under."""

    data: bytes
    name: str = ""
    start: int = PROGRAM_START

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        """Last address occupied by the image once loaded."""

        return self.start + len(self.data) - 1
