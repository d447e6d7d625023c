"""Pygame front end for the CHIP-8 emulator."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import MemoryError
from pychip8.cpu import CPUError
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import DEFAULT_CPU_HZ, FRAME_RATE, Machine, MachineConfig, create_machine
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import MONOCHROME, SCREEN_HEIGHT, SCREEN_WIDTH, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the pygame front end."""

    rom_path: Optional[Path] = None
    scale: int = 10
    cpu_hz: int = DEFAULT_CPU_HZ
    fullscreen: bool = False
    mute: bool = False
    palette: Sequence[RGBColor] = field(default=MONOCHROME)

    @property
    def cycles_per_frame(self) -> int:
        return max(1, self.cpu_hz // FRAME_RATE)


class Chip8App:
    """Owns the window, the event loop and the machine it drives."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._renderer = Renderer(config.palette)
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._pygame = None

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass a ROM path")
        rom_path = self._config.rom_path
        if not rom_path.exists():
            raise RuntimeError(f"ROM file not found: {rom_path}")

        machine = self._create_machine(rom_path)
        self._machine = machine

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {rom_path.stem}")
        self._pygame = pygame

        if not self._config.mute:
            self._initialise_audio(pygame)

        surface_size = (SCREEN_WIDTH * self._config.scale, SCREEN_HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)
        clock = pygame.time.Clock()
        self._running = True

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_F5:
                        self._reset_machine(machine)
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame.key.name(event.key), pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame.key.name(event.key), pressed=False)

                frame_start = time.perf_counter()
                self._step_machine(machine)
                self._update_audio(machine)

                frame = self._renderer.render(machine.interpreter.get_display(), scale=self._config.scale)
                screen.blit(frame.to_surface(), (0, 0))
                pygame.display.flip()

                if self._perf_enabled:
                    self._report_perf(time.perf_counter() - frame_start)
                clock.tick(FRAME_RATE)
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - hardware dependent
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _create_machine(self, rom_path: Path) -> Machine:
        try:
            program = load_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

        if debug_enabled("loader"):
            debug_log("loader", "rom=%s size=%d", program.name, program.size)
        return create_machine(
            MachineConfig(
                rom_image=program.data,
                cycles_per_frame=self._config.cycles_per_frame,
            )
        )

    def _handle_key_event(self, name: str, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        canonical = _canonical_name(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s canonical=%s pressed=%s", name, canonical, pressed)
        if canonical is None:
            return
        if pressed:
            machine.keypad.press(canonical)
        else:
            machine.keypad.release(canonical)

    def _step_machine(self, machine: Machine) -> None:
        try:
            machine.run_frame()
        except (CPUError, MemoryError) as exc:
            self._running = False
            state = machine.interpreter.state
            raise RuntimeError(f"Emulation halted at pc={state.pc:03X}: {exc}") from exc

    def _update_audio(self, machine: Machine) -> None:
        if self._beeper is None:
            return
        active = machine.interpreter.sound_active
        if active != self._beeper.playing and debug_enabled("audio"):
            debug_log("audio", "buzzer active=%s", active)
        self._beeper.set_active(active)

    def _reset_machine(self, machine: Machine) -> None:
        if debug_enabled("input"):
            debug_log("input", "reset requested")
        machine.reset()
        if self._beeper is not None:
            self._beeper.set_active(False)

    def _report_perf(self, frame_duration: float) -> None:
        self._perf_frame += 1
        if frame_duration <= 0:
            return
        effective_hz = self._config.cycles_per_frame / frame_duration
        debug_log(
            "perf",
            "frame=%d frame_ms=%.3f effective_khz=%.2f",
            self._perf_frame,
            frame_duration * 1000.0,
            effective_hz / 1000.0,
        )


def _canonical_name(name: str) -> str | None:
    lowered = name.lower()
    if lowered.startswith("[") and lowered.endswith("]"):
        # Numeric keypad keys report as "[1]" etc.
        lowered = lowered[1:-1]
    if len(lowered) == 1:
        return lowered
    return None
