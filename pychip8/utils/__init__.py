"""Utility helpers for the CHIP-8 emulator."""

from .debug import debug_enabled, debug_log, reload_categories

__all__ = [
    "debug_enabled",
    "debug_log",
    "reload_categories",
]
