"""Event Adapter — wrap raw lane events with their hand / finger assignment.

Responsibilities:
    - Define the immutable input event (``LaneEvent``).
    - Resolve each event's hand and finger from the lookup tables,
      replacing the ambiguous middle lane with the assumed hand.
    - Rescale timestamps by the playback rate.
    - Hold the slot the wrist-lift builder fills in later.

Output is always in ascending start-time order; later passes derive
any other ordering as a view over this list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

from .lookup_tables import FingerState, GameMode, Hand, finger_for, hand_for, resolve_mode

if TYPE_CHECKING:
    from .wrist_lift import WristLift


@dataclass(frozen=True)
class LaneEvent:
    """One timed hit object: a lane, a start time and an optional end (ms)."""

    lane: int
    start_time: float
    end_time: Optional[float] = None

    @property
    def is_long_note(self) -> bool:
        return self.end_time is not None and self.end_time > self.start_time


@dataclass(eq=False)
class AdaptedEvent:
    event: LaneEvent
    hand: Hand
    finger: FingerState
    start_time: float
    wrist_lift: Optional["WristLift"] = field(default=None, repr=False)

    @property
    def lane(self) -> int:
        return self.event.lane

    def attach_wrist_lift(self, lift: "WristLift") -> None:
        """Attach *lift* to this event. A lift can only be attached once."""
        if self.wrist_lift is not None and self.wrist_lift is not lift:
            raise ValueError(
                f"Event on lane {self.lane} at {self.start_time} ms "
                "already carries a wrist lift"
            )
        self.wrist_lift = lift


def adapt_events(
    events: Iterable[LaneEvent],
    mode: GameMode | int,
    assume_hand: Hand = Hand.RIGHT,
    rate: float = 1.0,
) -> list[AdaptedEvent]:
    """Adapt raw lane events for one solver pass.

    Args:
        events: Lane events, normally already sorted by ``start_time``.
        mode: Key mode used to look up hands and fingers.
        assume_hand: Hand that takes the ambiguous lane
            (``Hand.LEFT`` or ``Hand.RIGHT``).
        rate: Playback rate; every timestamp is divided by it.

    Returns:
        A new list of ``AdaptedEvent`` sorted (stably) by rate-scaled
        start time.

    Raises:
        ValueError: On a non-positive rate, an ambiguous *assume_hand*,
            or a lane outside the mode's range.
    """
    if rate <= 0:
        raise ValueError(f"Playback rate must be positive, got {rate}")
    if assume_hand is Hand.AMBIGUOUS:
        raise ValueError("assume_hand must be Hand.LEFT or Hand.RIGHT")

    mode = resolve_mode(mode)
    adapted: list[AdaptedEvent] = []
    for event in events:
        hand = hand_for(mode, event.lane)
        if hand is Hand.AMBIGUOUS:
            hand = assume_hand
        adapted.append(
            AdaptedEvent(
                event=event,
                hand=hand,
                finger=finger_for(mode, event.lane),
                start_time=event.start_time / rate,
            )
        )

    adapted.sort(key=lambda e: e.start_time)
    return adapted
