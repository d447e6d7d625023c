"""CHIP-8 machine assembly and frame pacing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pychip8.cpu import Interpreter
from pychip8.cpu.core import RandomSource
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log

DEFAULT_CPU_HZ = 600
FRAME_RATE = 60


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    rom_image: Optional[bytes] = None
    cycles_per_frame: int = DEFAULT_CPU_HZ // FRAME_RATE
    rng: Optional[RandomSource] = None
    keypad: Keypad | None = None

    def __post_init__(self) -> None:
        if self.cycles_per_frame <= 0:
            raise ValueError("cycles_per_frame must be positive")


@dataclass
class Machine:
    """Aggregates the interpreter with its host-side keypad."""

    interpreter: Interpreter
    keypad: Keypad
    config: MachineConfig
    frame_count: int = 0

    def run_frame(self) -> int:
        """Run one 60 Hz frame and return the number of instructions executed."""

        interpreter = self.interpreter
        for _ in range(self.config.cycles_per_frame):
            interpreter.tick()
        interpreter.tick_timers()
        self.frame_count += 1
        if debug_enabled("timer"):
            debug_log(
                "timer",
                "frame=%d delay=%d sound=%d",
                self.frame_count,
                interpreter.delay_timer,
                interpreter.sound_timer,
            )
        return self.config.cycles_per_frame

    def reset(self) -> None:
        """Power-cycle the interpreter and reload the configured ROM."""

        self.interpreter.reset()
        self.frame_count = 0
        if self.config.rom_image:
            self.interpreter.load(self.config.rom_image)
        # Re-apply any keys still held on the host side.
        for index, pressed in enumerate(self.keypad.snapshot()):
            if pressed:
                self.interpreter.set_key(index, True)


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    interpreter = Interpreter(config.rng)
    if config.rom_image:
        interpreter.load(config.rom_image)

    keypad = config.keypad or Keypad()
    keypad.add_listener(interpreter.set_key)
    for index, pressed in enumerate(keypad.snapshot()):
        if pressed:
            interpreter.set_key(index, True)

    return Machine(interpreter=interpreter, keypad=keypad, config=config)
