"""Byte-addressable memory for the CHIP-8 interpreter.

The interpreter owns a single flat 4 KB region. Every access is range
checked; block transfers validate the full span before touching any byte so
that a faulting instruction never leaves memory half written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


class MemoryError(Exception):
    """Raised when memory is misconfigured or accessed out of range."""


@dataclass
class Memory:
    """Simple byte-addressable memory region."""

    start: int
    length: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.length <= 0:
            raise MemoryError("memory region must have a positive length and non-negative start")
        self._data = bytearray(self.length)

    def get_start_address(self) -> int:
        return self.start

    def get_end_address(self) -> int:
        return self.start + self.length - 1

    def _offset(self, address: int) -> int:
        offset = address - self.start
        if not 0 <= offset < self.length:
            raise MemoryError(
                f"address {address:#06x} outside region {self.start:#06x}-{self.get_end_address():#06x}"
            )
        return offset

    def _span(self, address: int, count: int) -> int:
        if count < 0:
            raise MemoryError(f"negative transfer length {count}")
        offset = address - self.start
        if offset < 0 or offset + count > self.length:
            raise MemoryError(
                f"range {address:#06x}+{count} outside region {self.start:#06x}-{self.get_end_address():#06x}"
            )
        return offset

    def load8(self, address: int) -> int:
        return self._data[self._offset(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[self._offset(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word from ``address`` and ``address + 1``."""

        high = self.load8(address)
        low = self.load8(address + 1)
        return ((high & 0xFF) << 8) | (low & 0xFF)

    def read_block(self, address: int, count: int) -> bytes:
        offset = self._span(address, count)
        return bytes(self._data[offset : offset + count])

    def write_block(self, address: int, data: Iterable[int]) -> None:
        payload = bytes(value & 0xFF for value in data)
        offset = self._span(address, len(payload))
        self._data[offset : offset + len(payload)] = payload

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)
