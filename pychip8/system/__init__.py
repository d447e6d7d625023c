"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import DEFAULT_CPU_HZ, FRAME_RATE, Machine, MachineConfig, create_machine

__all__ = [
    "MachineConfig",
    "Machine",
    "create_machine",
    "DEFAULT_CPU_HZ",
    "FRAME_RATE",
]
