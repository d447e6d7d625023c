"""CHIP-8 interpreter core."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Mapping, Protocol, Tuple

from pychip8.bus import Memory, MemoryError
from pychip8.utils import debug_enabled, debug_log
from pychip8.video.font import FONT_SET, FONT_START, GLYPH_BYTES

from .opcodes import Instruction, OPCODE_TABLE, Opcode, decode


class CPUError(Exception):
    """Base error for interpreter failures."""


class UnimplementedOpcodeError(CPUError):
    """Raised when the fetched word matches no instruction in the table."""

    def __init__(self, opcode: int, pc: int) -> None:
        self.opcode = opcode & 0xFFFF
        self.pc = pc & 0xFFFF
        super().__init__(f"unimplemented opcode {self.opcode:#06x} at {self.pc:#05x}")


class StackOverflowError(CPUError):
    """Raised when a subroutine call would exceed the 16-entry stack."""


class StackUnderflowError(CPUError):
    """Raised when a return is executed with an empty stack."""


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:  # pragma: no cover - protocol
        ...


MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
REGISTER_COUNT = 16
STACK_DEPTH = 16
KEY_COUNT = 16
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
FLAG_REGISTER = 0xF


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    pc: int = PROGRAM_START
    i: int = 0x0000
    sp: int = 0
    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0

    def clone(self) -> "CPUState":
        return CPUState(
            self.pc,
            self.i,
            self.sp,
            bytearray(self.v),
            list(self.stack),
            self.delay_timer,
            self.sound_timer,
        )


class Interpreter:
    """Fetch-decode-execute core for the CHIP-8 virtual machine.

    The host drives everything: ``tick`` runs one instruction and
    ``tick_timers`` advances the 60 Hz countdown timers. Nothing runs in the
    background.
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        *,
        instruction_table: Mapping[int, Tuple[Instruction, ...]] = OPCODE_TABLE,
    ) -> None:
        self.memory = Memory(0x000, MEMORY_SIZE)
        self.instruction_table = instruction_table
        self.state = CPUState()
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._screen = [False] * (SCREEN_WIDTH * SCREEN_HEIGHT)
        self._keys = [False] * KEY_COUNT
        self.memory.write_block(FONT_START, FONT_SET)

    # ------------------------------------------------------------------
    # Host interface

    def reset(self) -> None:
        """Return every register, buffer and timer to the power-on state."""

        self.state = CPUState()
        self.memory.clear()
        self._screen = [False] * (SCREEN_WIDTH * SCREEN_HEIGHT)
        self._keys = [False] * KEY_COUNT
        self.memory.write_block(FONT_START, FONT_SET)

    def load(self, data: bytes) -> None:
        """Copy ``data`` into memory at the program load address."""

        if len(data) > MAX_PROGRAM_SIZE:
            raise MemoryError(f"program of {len(data)} bytes exceeds {MAX_PROGRAM_SIZE} byte limit")
        self.memory.write_block(PROGRAM_START, data)

    def set_key(self, index: int, pressed: bool) -> None:
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"key index out of range: {index}")
        self._keys[index] = bool(pressed)

    def get_display(self) -> Tuple[bool, ...]:
        return tuple(self._screen)

    @property
    def delay_timer(self) -> int:
        return self.state.delay_timer

    @property
    def sound_timer(self) -> int:
        return self.state.sound_timer

    @property
    def sound_active(self) -> bool:
        """True while the host should be emitting a tone."""

        return self.state.sound_timer > 0

    def tick(self) -> None:
        """Execute a single instruction."""

        pc_before = self.state.pc
        word = self.memory.load16(pc_before)
        self.state.pc = (pc_before + 2) & 0xFFFF

        opcode, instruction = decode(word, self.instruction_table)
        if instruction is None:
            self.state.pc = pc_before
            raise UnimplementedOpcodeError(word, pc_before)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, word, instruction.mnemonic)

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")
        try:
            handler(opcode)
        except (CPUError, MemoryError):
            self.state.pc = pc_before
            raise

    def tick_timers(self) -> None:
        """Advance both countdown timers by one 60 Hz step."""

        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            if state.sound_timer == 1 and debug_enabled("timer"):
                debug_log("timer", "sound timer expired")
            state.sound_timer -= 1

    # ------------------------------------------------------------------
    # Flow control

    def op_nop(self, _: Opcode) -> None:
        """No operation."""

    def op_cls(self, _: Opcode) -> None:
        self._screen = [False] * (SCREEN_WIDTH * SCREEN_HEIGHT)

    def op_ret(self, _: Opcode) -> None:
        self.state.pc = self._pop()

    def op_jp(self, opcode: Opcode) -> None:
        self.state.pc = opcode.nnn

    def op_call(self, opcode: Opcode) -> None:
        self._push(self.state.pc)
        self.state.pc = opcode.nnn

    def op_jp_offset(self, opcode: Opcode) -> None:
        # Deliberately not masked to 12 bits.
        self.state.pc = self.state.v[0] + opcode.nnn

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_imm(self, opcode: Opcode) -> None:
        if self.state.v[opcode.x] == opcode.nn:
            self._skip()

    def op_sne_imm(self, opcode: Opcode) -> None:
        if self.state.v[opcode.x] != opcode.nn:
            self._skip()

    def op_se_reg(self, opcode: Opcode) -> None:
        if self.state.v[opcode.x] == self.state.v[opcode.y]:
            self._skip()

    def op_sne_reg(self, opcode: Opcode) -> None:
        if self.state.v[opcode.x] != self.state.v[opcode.y]:
            self._skip()

    def op_skp(self, opcode: Opcode) -> None:
        if self._key_for(opcode.x):
            self._skip()

    def op_sknp(self, opcode: Opcode) -> None:
        if not self._key_for(opcode.x):
            self._skip()

    # ------------------------------------------------------------------
    # Register arithmetic

    def op_ld_imm(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = opcode.nn

    def op_add_imm(self, opcode: Opcode) -> None:
        v = self.state.v
        v[opcode.x] = (v[opcode.x] + opcode.nn) & 0xFF

    def op_ld_reg(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = self.state.v[opcode.y]

    def op_or(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] |= self.state.v[opcode.y]

    def op_and(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] &= self.state.v[opcode.y]

    def op_xor(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] ^= self.state.v[opcode.y]

    def op_add_reg(self, opcode: Opcode) -> None:
        v = self.state.v
        total = v[opcode.x] + v[opcode.y]
        self._set_with_flag(opcode.x, total & 0xFF, 1 if total > 0xFF else 0)

    def op_sub(self, opcode: Opcode) -> None:
        v = self.state.v
        self._subtract(opcode.x, v[opcode.x], v[opcode.y])

    def op_subn(self, opcode: Opcode) -> None:
        v = self.state.v
        self._subtract(opcode.x, v[opcode.y], v[opcode.x])

    def op_shr(self, opcode: Opcode) -> None:
        value = self.state.v[opcode.x]
        self._set_with_flag(opcode.x, value >> 1, value & 0x01)

    def op_shl(self, opcode: Opcode) -> None:
        value = self.state.v[opcode.x]
        self._set_with_flag(opcode.x, (value << 1) & 0xFF, (value >> 7) & 0x01)

    def op_rnd(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = self._rng.randrange(0x100) & opcode.nn

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_index(self, opcode: Opcode) -> None:
        self.state.i = opcode.nnn

    def op_add_index(self, opcode: Opcode) -> None:
        self.state.i = (self.state.i + self.state.v[opcode.x]) & 0xFFFF

    def op_ld_font(self, opcode: Opcode) -> None:
        self.state.i = FONT_START + self.state.v[opcode.x] * GLYPH_BYTES

    def op_bcd(self, opcode: Opcode) -> None:
        value = self.state.v[opcode.x]
        self.memory.write_block(self.state.i, (value // 100, (value // 10) % 10, value % 10))

    def op_store_registers(self, opcode: Opcode) -> None:
        self.memory.write_block(self.state.i, self.state.v[: opcode.x + 1])

    def op_load_registers(self, opcode: Opcode) -> None:
        values = self.memory.read_block(self.state.i, opcode.x + 1)
        self.state.v[: opcode.x + 1] = values

    # ------------------------------------------------------------------
    # Timers and input

    def op_ld_from_delay(self, opcode: Opcode) -> None:
        self.state.v[opcode.x] = self.state.delay_timer

    def op_ld_delay(self, opcode: Opcode) -> None:
        self.state.delay_timer = self.state.v[opcode.x]

    def op_ld_sound(self, opcode: Opcode) -> None:
        self.state.sound_timer = self.state.v[opcode.x]

    def op_wait_key(self, opcode: Opcode) -> None:
        for index, pressed in enumerate(self._keys):
            if pressed:
                self.state.v[opcode.x] = index
                return
        # No key yet: re-run this instruction on the next tick.
        self.state.pc = (self.state.pc - 2) & 0xFFFF

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, opcode: Opcode) -> None:
        v = self.state.v
        origin_x = v[opcode.x]
        origin_y = v[opcode.y]
        rows = self.memory.read_block(self.state.i, opcode.n)

        screen = self._screen
        collision = False
        for row, bits in enumerate(rows):
            y = (origin_y + row) % SCREEN_HEIGHT
            for col in range(8):
                if not bits & (0x80 >> col):
                    continue
                x = (origin_x + col) % SCREEN_WIDTH
                index = x + SCREEN_WIDTH * y
                collision |= screen[index]
                screen[index] = not screen[index]
        v[FLAG_REGISTER] = 1 if collision else 0

    # ------------------------------------------------------------------
    # Helpers

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _set_with_flag(self, index: int, value: int, flag: int) -> None:
        # VF is written last so it holds the flag even when X is F.
        self.state.v[index] = value & 0xFF
        self.state.v[FLAG_REGISTER] = flag

    def _subtract(self, index: int, minuend: int, subtrahend: int) -> None:
        borrow = subtrahend > minuend
        self._set_with_flag(index, (minuend - subtrahend) & 0xFF, 0 if borrow else 1)

    def _key_for(self, register: int) -> bool:
        key = self.state.v[register]
        if key >= KEY_COUNT:
            raise CPUError(f"V{register:X}={key:#04x} is not a valid key index")
        return self._keys[key]

    def _push(self, address: int) -> None:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(f"stack overflow calling from {address - 2:#05x}")
        state.stack[state.sp] = address
        state.sp += 1

    def _pop(self) -> int:
        state = self.state
        if state.sp <= 0:
            raise StackUnderflowError(f"return with empty stack at {state.pc - 2:#05x}")
        state.sp -= 1
        return state.stack[state.sp]
