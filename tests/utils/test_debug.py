"""Tests for the category-gated debug logger."""

from __future__ import annotations

import pytest

from pychip8.utils import debug, debug_enabled, debug_log, reload_categories


@pytest.fixture(autouse=True)
def _restore_categories(monkeypatch):
    yield
    monkeypatch.delenv(debug.ENV_VAR, raising=False)
    reload_categories()


def test_disabled_without_environment(monkeypatch, capsys) -> None:
    monkeypatch.delenv(debug.ENV_VAR, raising=False)
    reload_categories()

    assert not debug_enabled("cpu")
    debug_log("cpu", "pc=%03x", 0x200)
    assert capsys.readouterr().out == ""


def test_selected_categories(monkeypatch, capsys) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "CPU, timer")
    assert reload_categories() == {"cpu", "timer"}

    assert debug_enabled("cpu")
    assert debug_enabled("Timer")
    assert not debug_enabled("input")

    debug_log("cpu", "pc=%03x opcode=%04x", 0x200, 0x00E0)
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200 opcode=00e0\n"


def test_all_enables_everything(monkeypatch) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "all")
    reload_categories()

    assert debug_enabled("perf")
    assert debug_enabled()


def test_bad_format_arguments_are_appended(monkeypatch, capsys) -> None:
    monkeypatch.setenv(debug.ENV_VAR, "audio")
    reload_categories()

    debug_log("audio", "no placeholders", 1)

    assert capsys.readouterr().out == "[CHIP8][audio] no placeholders (1,)\n"
