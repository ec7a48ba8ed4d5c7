"""
Keyboard mapping for Snake drivers.

Translates raw key names (browser-style "ArrowUp", or WASD letters) into
engine actions: a Direction to queue, or a pause toggle.
"""

from __future__ import annotations

from typing import Optional, Union

from snake_engine.core.geometry import Direction


PAUSE = "pause"

KEY_TO_DIRECTION: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
    "W": Direction.UP,
    "S": Direction.DOWN,
    "A": Direction.LEFT,
    "D": Direction.RIGHT,
}

PAUSE_KEYS = frozenset({" ", "p", "P"})

Action = Union[Direction, str]


def key_to_action(key: str) -> Optional[Action]:
    """
    Map a key name to an engine action.

    Returns:
        A Direction for movement keys, "pause" for pause keys, None otherwise.
    """
    if key in PAUSE_KEYS:
        return PAUSE
    return KEY_TO_DIRECTION.get(key)
