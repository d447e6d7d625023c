"""Opcode metadata and decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Final, Iterable, List, Mapping, Sequence, Tuple

_WILDCARDS: Final[str] = "XYN"


@dataclass(frozen=True)
class Opcode:
    """A fetched 16-bit instruction word split into its operand fields."""

    word: int

    def __post_init__(self) -> None:
        if not 0 <= self.word <= 0xFFFF:
            raise ValueError(f"opcode word out of range: {self.word}")

    @property
    def digits(self) -> Tuple[int, int, int, int]:
        word = self.word
        return ((word >> 12) & 0xF, (word >> 8) & 0xF, (word >> 4) & 0xF, word & 0xF)

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def nn(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF


@dataclass(frozen=True)
class Instruction:
    """Metadata describing one row of the dispatch table.

    ``pattern`` is written the way the instruction is usually documented:
    hexadecimal digits must match exactly and ``X``, ``Y`` or ``N`` match any
    nibble.
    """

    pattern: str
    mnemonic: str
    handler: str
    mask: int = field(init=False, repr=False)
    value: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.pattern) != 4:
            raise ValueError(f"pattern must be four nibbles: {self.pattern!r}")
        mask = 0
        value = 0
        for char in self.pattern.upper():
            mask <<= 4
            value <<= 4
            if char in _WILDCARDS:
                continue
            try:
                nibble = int(char, 16)
            except ValueError:
                raise ValueError(f"invalid pattern character {char!r} in {self.pattern!r}") from None
            mask |= 0xF
            value |= nibble
        if mask & 0xF000 == 0:
            raise ValueError(f"pattern must fix the leading nibble: {self.pattern!r}")
        object.__setattr__(self, "mask", mask)
        object.__setattr__(self, "value", value)

    @property
    def group(self) -> int:
        return (self.value >> 12) & 0xF

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.value

    def overlaps(self, other: "Instruction") -> bool:
        common = self.mask & other.mask
        return ((self.value ^ other.value) & common) == 0


class OpcodeTable:
    """Builder that groups instructions by their leading nibble."""

    def __init__(self) -> None:
        self._groups: Dict[int, List[Instruction]] = {group: [] for group in range(16)}

    def register(self, instruction: Instruction) -> None:
        bucket = self._groups[instruction.group]
        for existing in bucket:
            if existing.overlaps(instruction):
                raise ValueError(
                    f"pattern {instruction.pattern} overlaps {existing.pattern} ({existing.mnemonic})"
                )
        bucket.append(instruction)

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Mapping[int, Tuple[Instruction, ...]]:
        return {group: tuple(bucket) for group, bucket in self._groups.items()}


def build_instruction_table(
    instructions: Iterable[Instruction],
) -> Mapping[int, Tuple[Instruction, ...]]:
    """Build the leading-nibble lookup used by :func:`decode`."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction("0000", "NOP", "op_nop"),
    Instruction("00E0", "CLS", "op_cls"),
    Instruction("00EE", "RET", "op_ret"),
    Instruction("1NNN", "JP", "op_jp"),
    Instruction("2NNN", "CALL", "op_call"),
    Instruction("3XNN", "SE", "op_se_imm"),
    Instruction("4XNN", "SNE", "op_sne_imm"),
    Instruction("5XY0", "SE", "op_se_reg"),
    Instruction("6XNN", "LD", "op_ld_imm"),
    Instruction("7XNN", "ADD", "op_add_imm"),
    Instruction("8XY0", "LD", "op_ld_reg"),
    Instruction("8XY1", "OR", "op_or"),
    Instruction("8XY2", "AND", "op_and"),
    Instruction("8XY3", "XOR", "op_xor"),
    Instruction("8XY4", "ADD", "op_add_reg"),
    Instruction("8XY5", "SUB", "op_sub"),
    Instruction("8XY6", "SHR", "op_shr"),
    Instruction("8XY7", "SUBN", "op_subn"),
    Instruction("8XYE", "SHL", "op_shl"),
    Instruction("9XY0", "SNE", "op_sne_reg"),
    Instruction("ANNN", "LD I", "op_ld_index"),
    Instruction("BNNN", "JP V0", "op_jp_offset"),
    Instruction("CXNN", "RND", "op_rnd"),
    Instruction("DXYN", "DRW", "op_drw"),
    Instruction("EX9E", "SKP", "op_skp"),
    Instruction("EXA1", "SKNP", "op_sknp"),
    Instruction("FX07", "LD DT", "op_ld_from_delay"),
    Instruction("FX0A", "LD K", "op_wait_key"),
    Instruction("FX15", "LD DT", "op_ld_delay"),
    Instruction("FX18", "LD ST", "op_ld_sound"),
    Instruction("FX1E", "ADD I", "op_add_index"),
    Instruction("FX29", "LD F", "op_ld_font"),
    Instruction("FX33", "LD B", "op_bcd"),
    Instruction("FX55", "LD [I]", "op_store_registers"),
    Instruction("FX65", "LD Vx", "op_load_registers"),
)


OPCODE_TABLE: Mapping[int, Tuple[Instruction, ...]] = build_instruction_table(DEFAULT_INSTRUCTIONS)


def decode(
    word: int,
    table: Mapping[int, Tuple[Instruction, ...]] = OPCODE_TABLE,
) -> tuple[Opcode, Instruction | None]:
    """Split ``word`` into operands and find the matching table entry."""

    opcode = Opcode(word)
    for instruction in table.get(opcode.digits[0], ()):
        if instruction.matches(word):
            return opcode, instruction
    return opcode, None


__all__ = [
    "Opcode",
    "Instruction",
    "OpcodeTable",
    "DEFAULT_INSTRUCTIONS",
    "OPCODE_TABLE",
    "build_instruction_table",
    "decode",
]
