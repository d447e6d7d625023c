"""CHIP-8 hexadecimal keypad handling.

The original COSMAC VIP keypad is laid out as a 4x4 grid. Host keys are
mapped positionally onto the left-hand block of a QWERTY keyboard::

    1 2 3 C        1 2 3 4
    4 5 6 D   <-   q w e r
    7 8 9 E        a s d f
    A 0 B F        z x c v
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


KEY_MAP_TEMPLATE: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


KeyListener = Callable[[int, bool], None]


@dataclass
class Keypad:
    """Tracks which of the 16 keypad keys are held down."""

    key_map: Mapping[str, int] = field(default_factory=lambda: dict(KEY_MAP_TEMPLATE))
    _state: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _active: Dict[int, int] = field(default_factory=dict)
    _listeners: list[KeyListener] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name, index in self.key_map.items():
            if not 0 <= index < KEY_COUNT:
                raise ValueError(f"key {name!r} maps to invalid keypad index {index}")

    def press(self, key_name: str) -> bool:
        """Press the keypad key bound to ``key_name``; return False if unmapped."""

        index = self.lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.press_index(index)
        return True

    def release(self, key_name: str) -> bool:
        index = self.lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.release_index(index)
        return True

    def press_index(self, index: int) -> None:
        self._check_index(index)
        before = self._state[index]
        self._active[index] = self._active.get(index, 0) + 1
        self._state[index] = True
        if debug_enabled("input"):
            debug_log("input", "keypad_press key=%X count=%d", index, self._active[index])
        if not before:
            self._notify_listeners(index, True)

    def release_index(self, index: int) -> None:
        self._check_index(index)
        count = self._active.get(index, 0)
        before = self._state[index]
        if count <= 1:
            self._state[index] = False
            self._active.pop(index, None)
        else:
            self._active[index] = count - 1
        if debug_enabled("input"):
            debug_log("input", "keypad_release key=%X count=%d", index, self._active.get(index, 0))
        if before and not self._state[index]:
            self._notify_listeners(index, False)

    def is_pressed(self, index: int) -> bool:
        self._check_index(index)
        return self._state[index]

    def reset(self) -> None:
        """Release every key, notifying listeners of each transition."""

        held = [index for index, pressed in enumerate(self._state) if pressed]
        self._state = [False] * KEY_COUNT
        self._active.clear()
        for index in held:
            self._notify_listeners(index, False)

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._state)

    def add_listener(self, listener: KeyListener) -> None:
        self._listeners.append(listener)

    def lookup(self, key_name: str) -> int | None:
        return self.key_map.get(key_name.lower())

    def _check_index(self, index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"keypad index out of range: {index}")

    def _notify_listeners(self, index: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(index, pressed)
