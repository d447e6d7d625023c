"""Single-tone buzzer sounded while the CHIP-8 sound timer is running."""

from __future__ import annotations

from array import array
from typing import Optional

DEFAULT_FREQUENCY = 440.0


class SquareWaveBeeper:
    """Manage a looping square-wave tone using pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = DEFAULT_FREQUENCY,
        volume: float = 0.25,
        min_play_ms: int = 35,
    ) -> None:
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")
        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._volume = max(0.0, min(1.0, volume))
        self._min_play_ms = max(0, min_play_ms)
        self._sound = pygame.mixer.Sound(buffer=build_square_wave(self._sample_rate, frequency).tobytes())
        self._channel: Optional["pygame.mixer.Channel"] = None
        self._playing = False
        self._last_start_ms = 0

    @property
    def playing(self) -> bool:
        return self._playing

    # ------------------------------------------------------------------
    # Public API

    def set_active(self, active: bool) -> None:
        """Start or stop the tone; repeated calls with the same state are cheap."""

        if active == self._playing:
            return
        if not active:
            self._stop()
            return

        channel = self._channel
        if channel is None:
            channel = self._pygame.mixer.find_channel(True)
            if channel is None:
                return
            self._channel = channel
        channel.play(self._sound, loops=-1)
        channel.set_volume(self._volume)
        self._playing = True
        self._last_start_ms = self._pygame.time.get_ticks()

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        self._stop()
        self._channel = None

    # ------------------------------------------------------------------
    # Internals

    def _stop(self) -> None:
        if self._channel is not None:
            # Very short beeps are stretched so they remain audible.
            elapsed = self._pygame.time.get_ticks() - self._last_start_ms
            remaining = self._min_play_ms - elapsed
            if remaining > 0:
                self._channel.fadeout(int(max(10, remaining)))
            else:
                self._channel.stop()
        self._playing = False


def build_square_wave(sample_rate: int, frequency: float, amplitude: int = 12_000) -> array:
    """Return one period of a signed 16-bit square wave."""

    if frequency <= 0.0:
        raise ValueError("frequency must be positive")
    period = max(2, int(round(sample_rate / frequency)))
    half = period // 2
    return array("h", [amplitude] * half + [-amplitude] * (period - half))


__all__ = ["SquareWaveBeeper", "build_square_wave", "DEFAULT_FREQUENCY"]
