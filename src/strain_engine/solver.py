"""Solver — overall strain rating for 4K and 7K keys maps.

Pipeline per pass:
    adapt_events → build_clusters → pair_clusters
                 → build_wrist_chains → aggregate_hand (left, right)
                 → combine_hands

Modes:
    - 4K runs one pass.
    - 7K runs two passes, first assuming the middle lane belongs to the
      left hand and then to the right hand, and averages them.

Design choices:
    - No randomness, no shared state; every call builds fresh structures.
    - Maps with fewer than two hit objects are not rated (difficulty 0).
    - Vibro / roll confidence are reported as 0.0 and never computed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .cluster_evaluator import ClusterDifficultyModel, ClusterEvaluator
from .clustering import ClusterSet, build_clusters, pair_clusters
from .constants import StrainConstants
from .event_adapter import LaneEvent, adapt_events
from .lookup_tables import GameMode, Hand, resolve_mode
from .strain_aggregator import HandStrain, aggregate_hand, combine_hands
from .wrist_lift import WristChain, build_wrist_chains

logger = logging.getLogger(__name__)


# ── Public types ──────────────────────────────────────────────
HANDS: tuple[Hand, Hand] = (Hand.LEFT, Hand.RIGHT)

# Hands the ambiguous lane is assumed to belong to, one pass each
ASSUMED_HANDS: dict[GameMode, tuple[Hand, ...]] = {
    GameMode.KEYS4: (Hand.RIGHT,),
    GameMode.KEYS7: (Hand.LEFT, Hand.RIGHT),
}


@dataclass
class HandAssumptionSolve:
    """One full pipeline pass under a single assumed hand."""

    assume_hand: Hand
    clusters: ClusterSet
    wrist_chains: dict[Hand, WristChain]
    hand_strains: dict[Hand, HandStrain]
    pairs: int
    difficulty: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "assume_hand": self.assume_hand.value,
            "difficulty": self.difficulty,
            "pairs": self.pairs,
            "hands": {
                hand.value: {
                    "clusters": len(self.clusters.for_hand(hand)),
                    "wrist_lifts_up": len(self.wrist_chains[hand].up_lifts),
                    "steps": strain.count,
                    "total_strain": strain.total,
                    "stamina_baseline": strain.baseline,
                    "contribution": strain.contribution,
                }
                for hand, strain in self.hand_strains.items()
            },
        }


@dataclass
class DifficultyResult:
    mode: GameMode
    rate: float
    overall_difficulty: float = 0.0
    average_note_density: float = 0.0
    vibro_inaccuracy_confidence: float = 0.0
    roll_inaccuracy_confidence: float = 0.0
    passes: list[HandAssumptionSolve] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.name,
            "rate": self.rate,
            "overall_difficulty": self.overall_difficulty,
            "average_note_density": self.average_note_density,
            "vibro_inaccuracy_confidence": self.vibro_inaccuracy_confidence,
            "roll_inaccuracy_confidence": self.roll_inaccuracy_confidence,
            "passes": [p.to_dict() for p in self.passes],
        }


def solve_for_hand(
    events: list[LaneEvent],
    mode: GameMode,
    assume_hand: Hand,
    rate: float,
    constants: StrainConstants,
    evaluator: ClusterEvaluator,
) -> HandAssumptionSolve:
    """Run the whole pipeline once with *assume_hand* on the ambiguous lane."""
    adapted = adapt_events(events, mode, assume_hand=assume_hand, rate=rate)

    clusters = build_clusters(adapted, constants)
    pairs = pair_clusters(clusters, constants)
    wrist_chains = build_wrist_chains(adapted)

    hand_strains = {
        hand: aggregate_hand(hand, clusters.for_hand(hand), evaluator, constants)
        for hand in HANDS
    }
    difficulty = combine_hands(hand_strains.values())

    logger.debug(
        f"{mode.name} pass (assume {assume_hand.value}): "
        f"{len(clusters.left)}L/{len(clusters.right)}R clusters, "
        f"{pairs} pairs, difficulty={difficulty:.4f}"
    )
    return HandAssumptionSolve(
        assume_hand=assume_hand,
        clusters=clusters,
        wrist_chains=wrist_chains,
        hand_strains=hand_strains,
        pairs=pairs,
        difficulty=difficulty,
    )


def average_note_density(events: list[LaneEvent], rate: float = 1.0) -> float:
    """Hit objects per second over the rate-scaled span of the map."""
    if len(events) < 2:
        return 0.0
    first = min(e.start_time for e in events)
    last = max(e.end_time if e.end_time is not None else e.start_time for e in events)
    length = (last - first) / rate
    if length <= 0:
        return 0.0
    return 1000.0 * len(events) / length


def solve(
    events: Iterable[LaneEvent],
    mode: GameMode | int,
    rate: float = 1.0,
    constants: Optional[StrainConstants] = None,
    evaluator: Optional[ClusterEvaluator] = None,
    detailed: bool = False,
) -> DifficultyResult:
    """Rate a keys map.

    Args:
        events: Hit objects sorted by start time.
        mode: ``GameMode`` or lane count (4 or 7).
        rate: Playback rate (from the active modifiers).
        constants: Strain constants. Defaults to ``StrainConstants()``.
        evaluator: Cluster evaluator. Defaults to
            ``ClusterDifficultyModel()``.
        detailed: Also compute the average note density.

    Returns:
        A ``DifficultyResult``; ``overall_difficulty`` is 0.0 for maps
        with fewer than two hit objects.

    Raises:
        ValueError: On an unsupported mode, or (for maps that get rated)
            a non-positive rate or an out-of-range lane.
    """
    mode = resolve_mode(mode)

    events = list(events)
    constants = constants if constants is not None else StrainConstants()
    evaluator = evaluator if evaluator is not None else ClusterDifficultyModel()

    result = DifficultyResult(mode=mode, rate=rate)
    if len(events) < 2:
        logger.debug(f"Not rating map with {len(events)} hit object(s)")
        return result

    result.passes = [
        solve_for_hand(events, mode, hand, rate, constants, evaluator)
        for hand in ASSUMED_HANDS[mode]
    ]
    result.overall_difficulty = sum(p.difficulty for p in result.passes) / len(result.passes)

    if detailed:
        result.average_note_density = average_note_density(events, rate)

    return result


def compute_overall_difficulty(
    events: Iterable[LaneEvent],
    mode: GameMode | int,
    rate: float = 1.0,
    constants: Optional[StrainConstants] = None,
    evaluator: Optional[ClusterEvaluator] = None,
) -> float:
    """Shortcut returning only the overall difficulty scalar."""
    return solve(events, mode, rate, constants, evaluator).overall_difficulty
