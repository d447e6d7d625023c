"""Tests for the interpreter memory region."""

from __future__ import annotations

import pytest

from pychip8.bus import Memory, MemoryError


def test_store_and_load_byte() -> None:
    mem = Memory(0x000, 0x1000)
    mem.store8(0x123, 0x1AB)

    assert mem.load8(0x123) == 0xAB


def test_load16_is_big_endian() -> None:
    mem = Memory(0x000, 0x1000)
    mem.store8(0x200, 0x12)
    mem.store8(0x201, 0x34)

    assert mem.load16(0x200) == 0x1234


def test_out_of_range_access_raises() -> None:
    mem = Memory(0x000, 0x1000)

    with pytest.raises(MemoryError):
        mem.load8(0x1000)
    with pytest.raises(MemoryError):
        mem.store8(-1, 0)
    with pytest.raises(MemoryError):
        mem.load16(0xFFF)


def test_write_block_is_all_or_nothing() -> None:
    mem = Memory(0x000, 0x10)

    with pytest.raises(MemoryError):
        mem.write_block(0x0E, b"\x01\x02\x03")

    assert mem.snapshot() == bytes(0x10)


def test_read_and_write_block() -> None:
    mem = Memory(0x000, 0x10)
    mem.write_block(0x04, [0x101, 0x02, 0x03])

    assert mem.read_block(0x04, 3) == b"\x01\x02\x03"
    assert mem.read_block(0x10, 0) == b""
    with pytest.raises(MemoryError):
        mem.read_block(0x0F, 2)


def test_clear_zeroes_region() -> None:
    mem = Memory(0x000, 0x10)
    mem.write_block(0, b"\xFF" * 0x10)

    mem.clear()

    assert mem.snapshot() == bytes(0x10)


def test_invalid_region_rejected() -> None:
    with pytest.raises(MemoryError):
        Memory(0x000, 0)
