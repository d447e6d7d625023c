"""Tests for the CHIP-8 keypad mapping."""

from __future__ import annotations

import pytest

from pychip8.io import KEY_MAP_TEMPLATE, Keypad


def test_key_map_covers_all_sixteen_keys() -> None:
    assert sorted(KEY_MAP_TEMPLATE.values()) == list(range(16))


def test_key_down_and_up() -> None:
    pad = Keypad()

    assert pad.press("q")
    assert pad.snapshot()[0x4]

    assert pad.release("q")
    assert not pad.snapshot()[0x4]


def test_lookup_is_case_insensitive() -> None:
    pad = Keypad()
    assert pad.lookup("V") == 0xF
    assert pad.lookup("x") == 0x0


def test_unmapped_key_is_ignored() -> None:
    pad = Keypad()

    assert pad.press("p") is False
    assert not any(pad.snapshot())


def test_repeated_presses_are_reference_counted() -> None:
    pad = Keypad()
    pad.press_index(0xA)
    pad.press_index(0xA)

    pad.release_index(0xA)
    assert pad.is_pressed(0xA)

    pad.release_index(0xA)
    assert not pad.is_pressed(0xA)


def test_listeners_see_transitions_only() -> None:
    pad = Keypad()
    events: list[tuple[int, bool]] = []
    pad.add_listener(lambda index, pressed: events.append((index, pressed)))

    pad.press("1")
    pad.press("1")
    pad.release("1")
    pad.release("1")
    pad.release("1")

    assert events == [(0x1, True), (0x1, False)]


def test_reset_releases_held_keys() -> None:
    pad = Keypad()
    events: list[tuple[int, bool]] = []
    pad.add_listener(lambda index, pressed: events.append((index, pressed)))
    pad.press("z")
    pad.press("4")

    pad.reset()

    assert not any(pad.snapshot())
    assert sorted(events[2:]) == [(0xA, False), (0xC, False)]


def test_custom_map_is_validated() -> None:
    with pytest.raises(ValueError):
        Keypad(key_map={"k": 16})


def test_index_out_of_range() -> None:
    pad = Keypad()
    with pytest.raises(ValueError):
        pad.press_index(16)
