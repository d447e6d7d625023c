"""Tests for opcode metadata and decoding."""

from __future__ import annotations

import pytest

from pychip8.cpu import Interpreter
from pychip8.cpu.opcodes import (
    DEFAULT_INSTRUCTIONS,
    Instruction,
    Opcode,
    build_instruction_table,
    decode,
)


def test_opcode_fields() -> None:
    opcode = Opcode(0xD3A7)

    assert opcode.digits == (0xD, 0x3, 0xA, 0x7)
    assert opcode.x == 0x3
    assert opcode.y == 0xA
    assert opcode.n == 0x7
    assert opcode.nn == 0xA7
    assert opcode.nnn == 0x3A7


def test_opcode_rejects_out_of_range_word() -> None:
    with pytest.raises(ValueError):
        Opcode(0x10000)


def test_instruction_pattern_compiles_to_mask() -> None:
    instruction = Instruction("8XY4", "ADD", "op_add_reg")

    assert instruction.mask == 0xF00F
    assert instruction.value == 0x8004
    assert instruction.matches(0x8AB4)
    assert not instruction.matches(0x8AB5)


@pytest.mark.parametrize("pattern", ["8XY", "GXY0", "XNNN"])
def test_instruction_rejects_bad_patterns(pattern: str) -> None:
    with pytest.raises(ValueError):
        Instruction(pattern, "BAD", "op_bad")


def test_table_rejects_overlapping_patterns() -> None:
    with pytest.raises(ValueError):
        build_instruction_table(
            [
                Instruction("1NNN", "JP", "op_jp"),
                Instruction("12NN", "JP2", "op_jp2"),
            ]
        )


def test_default_table_covers_every_instruction() -> None:
    assert len(DEFAULT_INSTRUCTIONS) == 35


@pytest.mark.parametrize(
    ("word", "mnemonic"),
    [
        (0x0000, "NOP"),
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1234, "JP"),
        (0x2FFF, "CALL"),
        (0x8AB6, "SHR"),
        (0x8ABE, "SHL"),
        (0xB123, "JP V0"),
        (0xD12F, "DRW"),
        (0xE59E, "SKP"),
        (0xE5A1, "SKNP"),
        (0xF50A, "LD K"),
        (0xF565, "LD Vx"),
    ],
)
def test_decode_finds_instruction(word: int, mnemonic: str) -> None:
    opcode, instruction = decode(word)

    assert opcode.word == word
    assert instruction is not None
    assert instruction.mnemonic == mnemonic


@pytest.mark.parametrize("word", [0x0001, 0x00EF, 0x5AB1, 0x800F, 0x9AB8, 0xE000, 0xF001])
def test_decode_returns_none_for_unknown_words(word: int) -> None:
    _, instruction = decode(word)
    assert instruction is None


def test_every_handler_exists_on_interpreter() -> None:
    interp = Interpreter()
    for instruction in DEFAULT_INSTRUCTIONS:
        assert callable(getattr(interp, instruction.handler, None)), instruction.handler
