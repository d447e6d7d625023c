"""Chip8App wiring that does not need a pygame window."""

from __future__ import annotations

import pytest

from pychip8.ui.app import AppConfig, Chip8App, _canonical_name


def test_app_creates_machine_from_rom(tmp_path) -> None:
    rom_path = tmp_path / "test.ch8"
    rom_path.write_bytes(b"\x6A\x02\x12\x02")

    app = Chip8App(AppConfig(rom_path=rom_path, cpu_hz=1200))
    machine = app._create_machine(rom_path)

    assert machine.config.cycles_per_frame == 20
    assert machine.interpreter.memory.read_block(0x200, 4) == b"\x6A\x02\x12\x02"


def test_app_rejects_empty_rom(tmp_path) -> None:
    rom_path = tmp_path / "empty.ch8"
    rom_path.write_bytes(b"")

    app = Chip8App(AppConfig(rom_path=rom_path))
    with pytest.raises(RuntimeError):
        app._create_machine(rom_path)


def test_app_reports_missing_rom(tmp_path) -> None:
    app = Chip8App(AppConfig())
    with pytest.raises(RuntimeError):
        app._create_machine(tmp_path / "missing.ch8")


def test_key_events_update_keypad(tmp_path) -> None:
    rom_path = tmp_path / "test.ch8"
    rom_path.write_bytes(b"\x00\x00")
    app = Chip8App(AppConfig(rom_path=rom_path))
    app._machine = app._create_machine(rom_path)

    app._handle_key_event("W", pressed=True)
    assert app._machine.keypad.is_pressed(0x5)

    app._handle_key_event("w", pressed=False)
    assert not app._machine.keypad.is_pressed(0x5)


def test_faulting_rom_stops_with_runtime_error(tmp_path) -> None:
    rom_path = tmp_path / "bad.ch8"
    rom_path.write_bytes(b"\x51\x21")
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    with pytest.raises(RuntimeError, match="0x5121"):
        app._step_machine(machine)
    assert app._running is False


@pytest.mark.parametrize(("name", "expected"), [("a", "a"), ("Q", "q"), ("[4]", "4"), ("space", None), ("left shift", None)])
def test_canonical_name(name: str, expected) -> None:
    assert _canonical_name(name) == expected
