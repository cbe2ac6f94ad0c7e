"""Lookup Tables — fixed lane → hand / finger assignments per key mode.

Each supported key mode has one table pair:
    - which hand is assumed to press a lane
    - which finger of that hand is assumed to press it

Fingers are bit flags so several of them can be folded into one
``FingerState`` value (a "finger set").  No state, no I/O.
"""

from __future__ import annotations

import enum


class GameMode(enum.Enum):
    """Supported keyboard-lane modes, valued by their lane count."""

    KEYS4 = 4
    KEYS7 = 7


class Hand(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    AMBIGUOUS = "ambiguous"


class FingerState(enum.IntFlag):
    NONE = 0
    INDEX = 1
    MIDDLE = 2
    RING = 4
    PINKY = 8
    THUMB = 16


# ── 4K ────────────────────────────────────────────────────────
LANE_TO_HAND_4K: dict[int, Hand] = {
    1: Hand.LEFT,
    2: Hand.LEFT,
    3: Hand.RIGHT,
    4: Hand.RIGHT,
}

LANE_TO_FINGER_4K: dict[int, FingerState] = {
    1: FingerState.MIDDLE,
    2: FingerState.INDEX,
    3: FingerState.INDEX,
    4: FingerState.MIDDLE,
}

# ── 7K ────────────────────────────────────────────────────────
# Lane 4 sits under either thumb; the solver resolves it per pass.
LANE_TO_HAND_7K: dict[int, Hand] = {
    1: Hand.LEFT,
    2: Hand.LEFT,
    3: Hand.LEFT,
    4: Hand.AMBIGUOUS,
    5: Hand.RIGHT,
    6: Hand.RIGHT,
    7: Hand.RIGHT,
}

LANE_TO_FINGER_7K: dict[int, FingerState] = {
    1: FingerState.RING,
    2: FingerState.MIDDLE,
    3: FingerState.INDEX,
    4: FingerState.THUMB,
    5: FingerState.INDEX,
    6: FingerState.MIDDLE,
    7: FingerState.RING,
}

_HAND_TABLES: dict[GameMode, dict[int, Hand]] = {
    GameMode.KEYS4: LANE_TO_HAND_4K,
    GameMode.KEYS7: LANE_TO_HAND_7K,
}

_FINGER_TABLES: dict[GameMode, dict[int, FingerState]] = {
    GameMode.KEYS4: LANE_TO_FINGER_4K,
    GameMode.KEYS7: LANE_TO_FINGER_7K,
}


def resolve_mode(mode: GameMode | int) -> GameMode:
    """Coerce a lane count or ``GameMode`` into a supported ``GameMode``.

    Raises:
        ValueError: If the mode is not one of the supported key modes.
    """
    if isinstance(mode, GameMode):
        return mode
    try:
        return GameMode(mode)
    except ValueError:
        raise ValueError(
            f"Unsupported game mode: {mode!r} (expected one of "
            f"{[m.value for m in GameMode]})"
        ) from None


def hand_for(mode: GameMode | int, lane: int) -> Hand:
    """Return the hand assumed to press *lane* in *mode*.

    Raises:
        ValueError: If *lane* is outside the mode's lane range.
    """
    mode = resolve_mode(mode)
    table = _HAND_TABLES[mode]
    if lane not in table:
        raise ValueError(f"Lane {lane} is not valid for {mode.name}")
    return table[lane]


def finger_for(mode: GameMode | int, lane: int) -> FingerState:
    """Return the finger assumed to press *lane* in *mode*.

    Raises:
        ValueError: If *lane* is outside the mode's lane range.
    """
    mode = resolve_mode(mode)
    table = _FINGER_TABLES[mode]
    if lane not in table:
        raise ValueError(f"Lane {lane} is not valid for {mode.name}")
    return table[lane]
