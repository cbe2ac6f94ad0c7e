"""Shared pytest fixtures for strain engine tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.strain_engine.clustering import HandCluster
from src.strain_engine.constants import StrainConstants
from src.strain_engine.event_adapter import LaneEvent


class ConstantEvaluator:
    """Evaluator returning the same difficulty for every cluster."""

    def __init__(self, value: float = 2.0) -> None:
        self.value = value
        self.calls: list[HandCluster] = []

    def evaluate(self, cluster: HandCluster) -> float:
        self.calls.append(cluster)
        return self.value


def make_events(*notes: tuple[int, float]) -> list[LaneEvent]:
    """Build lane events from ``(lane, start_time)`` pairs."""
    return [LaneEvent(lane=lane, start_time=float(time)) for lane, time in notes]


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def constants() -> StrainConstants:
    """Constants with neutral step scaling."""
    return StrainConstants(
        stamina_incremental_multiplier=0.5,
        stamina_decremental_multiplier=0.2,
        difficulty_multiplier=1.0,
        difficulty_offset=0.0,
        chord_threshold_same_hand_ms=8.0,
        chord_threshold_other_hand_ms=16.0,
    )


@pytest.fixture
def evaluator() -> ConstantEvaluator:
    return ConstantEvaluator(2.0)


@pytest.fixture
def stream_map() -> list[LaneEvent]:
    """A 4K map mixing jumps, jacks and a trill, 64 hit objects."""
    pattern = [1, 3, 2, 4, 1, 1, 4, 4, 2, 3, 2, 3, 1, 4, 2, 3]
    notes = []
    for i in range(64):
        lane = pattern[i % len(pattern)]
        notes.append((lane, i * 120.0))
        if i % 8 == 0:
            notes.append((5 - lane, i * 120.0))
    notes.sort(key=lambda n: (n[1], n[0]))
    return make_events(*notes)
