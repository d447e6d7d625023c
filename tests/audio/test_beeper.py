"""Tests for the buzzer waveform generator."""

from __future__ import annotations

import pytest

from pychip8.audio import build_square_wave


def test_square_wave_period_and_levels() -> None:
    wave = build_square_wave(44_100, 441.0, amplitude=1000)

    assert len(wave) == 100
    assert set(wave[:50]) == {1000}
    assert set(wave[50:]) == {-1000}


def test_square_wave_rejects_zero_frequency() -> None:
    with pytest.raises(ValueError):
        build_square_wave(44_100, 0.0)
