"""Audio output for the CHIP-8 emulator."""

from .beeper import DEFAULT_FREQUENCY, SquareWaveBeeper, build_square_wave

__all__ = [
    "SquareWaveBeeper",
    "build_square_wave",
    "DEFAULT_FREQUENCY",
]
