"""Strain Aggregator — fold hand states into a stamina-weighted difficulty.

For each hand the clusters are walked in creation order (latest first),
so the lookahead gap ``time[i] - time[i + 2]`` is never negative.  The
last two clusters only serve as lookahead and are never evaluated.

Per step ``i``:
    baseline  += (d[i] - baseline) * multiplier * min(1, gap / 1000)
                 (decremental multiplier when d[i] < baseline,
                  incremental otherwise)
    total     += max(1, d[i] * difficulty_multiplier
                        * sqrt(30000 / gap) + difficulty_offset)
                 (only for gap != 0, which also counts the step)

Result: ``(log10(count) / 25 + 0.9) * total / count``, or 0 without steps.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .cluster_evaluator import ClusterEvaluator
from .clustering import HandCluster
from .constants import StrainConstants
from .lookup_tables import Hand


@dataclass
class HandStrain:
    """Accumulated strain of one hand for one solver pass."""

    hand: Hand
    total: float = 0.0
    count: int = 0
    baseline: float = 1.0

    @property
    def contribution(self) -> float:
        return stamina_difficulty(self.total, self.count)


def stamina_difficulty(total: float, count: int) -> float:
    """Average step strain scaled by the slowly growing stamina factor."""
    if count == 0:
        return 0.0
    return (math.log10(count) / 25 + 0.9) * total / count


def aggregate_hand(
    hand: Hand,
    clusters: list[HandCluster],
    evaluator: ClusterEvaluator,
    constants: StrainConstants,
) -> HandStrain:
    """Evaluate a hand's clusters and accumulate its strain.

    Args:
        hand: The hand the clusters belong to.
        clusters: That hand's clusters in creation order (latest first).
        evaluator: Supplies each cluster's intrinsic difficulty.
        constants: Stamina multipliers and strain step scaling.

    Returns:
        The hand's ``HandStrain``. Evaluated clusters also get their
        ``intrinsic_difficulty`` and ``running_strain`` filled in.

    Raises:
        ValueError: If the evaluator returns a negative difficulty.
    """
    strain = HandStrain(hand)
    steps = len(clusters) - 2
    if steps <= 0:
        return strain

    times = np.array([c.time for c in clusters], dtype=float)
    gaps = times[:-2] - times[2:]
    difficulties = np.empty(steps, dtype=float)

    baseline = 1.0
    for i in range(steps):
        cluster = clusters[i]
        difficulty = float(evaluator.evaluate(cluster))
        if difficulty < 0:
            raise ValueError(
                f"Cluster evaluator returned a negative difficulty ({difficulty}) "
                f"for the {hand.value} cluster at {cluster.time} ms"
            )
        cluster.intrinsic_difficulty = difficulty
        difficulties[i] = difficulty

        if difficulty < baseline:
            multiplier = constants.stamina_decremental_multiplier
        else:
            multiplier = constants.stamina_incremental_multiplier
        baseline += (difficulty - baseline) * multiplier * min(1.0, gaps[i] / 1000.0)
        cluster.running_strain = baseline

    strain.baseline = float(baseline)

    # Zero gaps (stacked clusters) neither add strain nor count as a step
    active = gaps != 0
    step_strains = np.maximum(
        1.0,
        difficulties[active]
        * constants.difficulty_multiplier
        * np.sqrt(30000.0 / gaps[active])
        + constants.difficulty_offset,
    )
    strain.count = int(np.count_nonzero(active))
    strain.total = float(step_strains.sum())
    return strain


def combine_hands(strains: Iterable[HandStrain]) -> float:
    """Pool the steps of every hand into one difficulty value."""
    total = 0.0
    count = 0
    for strain in strains:
        total += strain.total
        count += strain.count
    return stamina_difficulty(total, count)
