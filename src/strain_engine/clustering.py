"""Chord Clustering — group same-hand notes into hand states and pair hands.

Two stages:
    build_clusters  – per-hand greedy first-fit clustering over a
                      latest-first view of the events
    pair_clusters   – one pass over every cluster in creation order,
                      linking each to at most one cluster of the other hand

Clustering is first-fit: once a cluster in the window accepts a note the
search stops, even if a later cluster would also fit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .constants import StrainConstants
from .event_adapter import AdaptedEvent
from .lookup_tables import FingerState, Hand


@dataclass(eq=False)
class HandCluster:
    """Notes of one hand judged to be struck together."""

    hand: Hand
    members: list[AdaptedEvent]
    paired: Optional["HandCluster"] = field(default=None, repr=False)
    intrinsic_difficulty: float = 0.0
    running_strain: float = 0.0

    @classmethod
    def from_event(cls, event: AdaptedEvent) -> HandCluster:
        return cls(hand=event.hand, members=[event])

    @property
    def time(self) -> float:
        # Representative time is the first-inserted member's.
        return self.members[0].start_time

    @property
    def lanes(self) -> set[int]:
        return {m.lane for m in self.members}

    @property
    def finger_set(self) -> FingerState:
        state = FingerState.NONE
        for member in self.members:
            state |= member.finger
        return state

    def accepts(self, event: AdaptedEvent) -> bool:
        """True when *event* is on this hand and no member shares its lane."""
        return event.hand is self.hand and event.lane not in self.lanes

    def add(self, event: AdaptedEvent) -> None:
        if not self.accepts(event):
            raise ValueError(
                f"Cannot add lane {event.lane} ({event.hand.value}) to a "
                f"{self.hand.value} cluster with lanes {sorted(self.lanes)}"
            )
        self.members.append(event)

    def pair_with(self, other: HandCluster) -> None:
        self.paired = other
        other.paired = self


@dataclass
class ClusterSet:
    """Clusters of one solver pass.

    Every list is in creation order, i.e. latest time first.
    """

    left: list[HandCluster] = field(default_factory=list)
    right: list[HandCluster] = field(default_factory=list)
    all: list[HandCluster] = field(default_factory=list)

    def for_hand(self, hand: Hand) -> list[HandCluster]:
        if hand is Hand.LEFT:
            return self.left
        if hand is Hand.RIGHT:
            return self.right
        raise ValueError(f"No cluster list for hand {hand.value}")


def build_clusters(
    events: list[AdaptedEvent],
    constants: StrainConstants,
) -> ClusterSet:
    """Cluster adapted events into per-hand chords.

    Args:
        events: Adapted events in ascending start-time order.
        constants: Supplies ``chord_threshold_same_hand_ms``.

    Returns:
        A ``ClusterSet`` whose lists are ordered latest-first.
    """
    clusters = ClusterSet()
    window = constants.chord_threshold_same_hand_ms

    for event in reversed(events):
        hand_clusters = clusters.for_hand(event.hand)

        chord_found = False
        for cluster in hand_clusters:
            if cluster.time > event.start_time + window:
                break
            if cluster.accepts(event):
                cluster.add(event)
                chord_found = True
                break

        if not chord_found:
            cluster = HandCluster.from_event(event)
            hand_clusters.append(cluster)
            clusters.all.append(cluster)

    return clusters


def pair_clusters(clusters: ClusterSet, constants: StrainConstants) -> int:
    """Pair clusters of different hands that land close together.

    Returns:
        The number of pairs formed.
    """
    window = constants.chord_threshold_other_hand_ms
    ordered = clusters.all
    pairs = 0

    for i, cluster in enumerate(ordered):
        # Already chosen as the partner of an earlier cluster.
        if cluster.paired is not None:
            continue
        for j in range(i + 1, len(ordered)):
            candidate = ordered[j]
            # Creation order is time-descending, nothing later can qualify.
            if cluster.time - candidate.time > window:
                break
            if (
                candidate.paired is None
                and candidate.hand is not cluster.hand
                and candidate.hand is not Hand.AMBIGUOUS
            ):
                cluster.pair_with(candidate)
                pairs += 1
                break

    return pairs
