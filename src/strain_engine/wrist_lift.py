"""Wrist Lift — detect where a hand has to lift instead of repeating a finger.

State per hand:  an append-only chain of ``WristLift`` nodes, each linked
                 to the next one by index (``next_index``).
Walk:            events in ascending time, one hand at a time.

A node starts at an event that has no lift yet and spans the following
same-hand events until a finger repeats; every finger in the span is
folded into the node's ``finger_set``.  Once the whole chain is known a
node is marked ``UP`` and attached to its originating event when

    - the span covered more than the originating finger, or
    - the next node in the chain has the same finger set (a jack).

Otherwise the node stays in the chain with action ``NONE`` and the
originating event keeps no lift.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from .event_adapter import AdaptedEvent
from .lookup_tables import FingerState, Hand


class WristAction(enum.Enum):
    NONE = "none"
    UP = "up"


@dataclass(eq=False)
class WristLift:
    index: int
    hand: Hand
    time: float
    finger_set: FingerState = FingerState.NONE
    action: WristAction = WristAction.NONE
    next_index: Optional[int] = None


@dataclass
class WristChain:
    """Index-addressed, append-only lift timeline of one hand."""

    hand: Hand
    lifts: list[WristLift] = field(default_factory=list)

    def append(self, time: float) -> WristLift:
        lift = WristLift(index=len(self.lifts), hand=self.hand, time=time)
        if self.lifts:
            self.lifts[-1].next_index = lift.index
        self.lifts.append(lift)
        return lift

    def next_of(self, lift: WristLift) -> Optional[WristLift]:
        if lift.next_index is None:
            return None
        return self.lifts[lift.next_index]

    @property
    def up_lifts(self) -> list[WristLift]:
        return [lift for lift in self.lifts if lift.action is WristAction.UP]


def _build_hand_chain(hand: Hand, hand_events: list[AdaptedEvent]) -> WristChain:
    chain = WristChain(hand)
    origins: list[tuple[WristLift, AdaptedEvent]] = []

    for i, event in enumerate(hand_events):
        if event.wrist_lift is not None:
            continue

        lift = chain.append(event.start_time)
        state = event.finger
        for j in range(i + 1, len(hand_events)):
            later = hand_events[j]
            # A repeated finger ends the span
            if state & later.finger:
                break
            state |= later.finger
            later.attach_wrist_lift(lift)

        lift.finger_set = state
        origins.append((lift, event))

    for lift, event in origins:
        if lift.finger_set != event.finger:
            lift.action = WristAction.UP
            event.attach_wrist_lift(lift)
            continue

        next_lift = chain.next_of(lift)
        if next_lift is not None and next_lift.finger_set == lift.finger_set:
            lift.action = WristAction.UP
            event.attach_wrist_lift(lift)

    return chain


def build_wrist_chains(events: list[AdaptedEvent]) -> dict[Hand, WristChain]:
    """Build the lift chain of each hand and attach lifts to events.

    Args:
        events: Adapted events in ascending start-time order, with the
            ambiguous lane already resolved to a concrete hand.

    Returns:
        ``{Hand.LEFT: chain, Hand.RIGHT: chain}``.
    """
    chains: dict[Hand, WristChain] = {}
    for hand in (Hand.LEFT, Hand.RIGHT):
        hand_events = [e for e in events if e.hand is hand]
        chains[hand] = _build_hand_chain(hand, hand_events)
    return chains
