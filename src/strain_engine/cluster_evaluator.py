"""Cluster Evaluator — intrinsic difficulty of one hand state.

The strain aggregator only depends on the ``ClusterEvaluator`` protocol:
given a ``HandCluster`` return a non-negative, deterministic scalar.
``ClusterDifficultyModel`` is the configurable rule-based default.

Components:
    finger_cost    – heaviest finger weight among the members
    chord_factor   – grows with the number of notes in the chord
    paired_factor  – grows with the size of the other hand's chord
    wrist_factor   – extra weight when a member needs a wrist lift
    evaluate       – product of all components
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Protocol

from .clustering import HandCluster
from .constants import load_config_file, require_keys, use_builtin_defaults
from .lookup_tables import FingerState
from .wrist_lift import WristAction


class ClusterEvaluator(Protocol):
    def evaluate(self, cluster: HandCluster) -> float: ...


DEFAULT_FINGER_WEIGHTS: dict[str, float] = {
    "index": 1.0,
    "middle": 1.05,
    "ring": 1.15,
    "pinky": 1.3,
    "thumb": 1.1,
}


class ClusterDifficultyModel:
    """Rule-based evaluator for hand-state difficulty.

    Args:
        finger_weights: Base weight per finger name
            (``index``, ``middle``, ``ring``, ``pinky``, ``thumb``).
        chord_weight: Added per extra note in the chord.
        paired_chord_weight: Added per note of the paired cluster.
        wrist_up_multiplier: Factor applied when a member has an UP lift.
    """

    _REQUIRED_KEYS: list[str] = [
        "finger_weights",
        "chord_weight",
        "paired_chord_weight",
        "wrist_up_multiplier",
    ]

    def __init__(
        self,
        finger_weights: Mapping[str, float] | None = None,
        chord_weight: float = 0.15,
        paired_chord_weight: float = 0.05,
        wrist_up_multiplier: float = 1.1,
    ) -> None:
        names = dict(DEFAULT_FINGER_WEIGHTS)
        if finger_weights is not None:
            names.update({str(k).lower(): float(v) for k, v in finger_weights.items()})

        self.finger_weights: dict[FingerState, float] = {}
        for name, weight in names.items():
            try:
                finger = FingerState[name.upper()]
            except KeyError:
                raise ValueError(f"Unknown finger in finger_weights: '{name}'") from None
            if weight < 0:
                raise ValueError(f"Finger weight for '{name}' must be non-negative")
            self.finger_weights[finger] = weight

        self.chord_weight: float = float(chord_weight)
        self.paired_chord_weight: float = float(paired_chord_weight)
        self.wrist_up_multiplier: float = float(wrist_up_multiplier)

        if min(self.chord_weight, self.paired_chord_weight, self.wrist_up_multiplier) < 0:
            raise ValueError("Cluster evaluator weights must be non-negative")

    @classmethod
    def from_yaml(cls, config_path: str | Path | None = None) -> ClusterDifficultyModel:
        """Load evaluator weights from the strain config YAML.

        Falls back to the built-in weights like ``StrainConstants.from_yaml``.
        """
        if use_builtin_defaults(config_path):
            return cls()
        cfg: dict[str, Any] = load_config_file(config_path)
        require_keys(cfg, cls._REQUIRED_KEYS, config_path or "configs/strain_constants.yaml")
        if not isinstance(cfg["finger_weights"], dict):
            raise ValueError("'finger_weights' must be a mapping of finger name to weight")
        return cls(
            finger_weights=cfg["finger_weights"],
            chord_weight=cfg["chord_weight"],
            paired_chord_weight=cfg["paired_chord_weight"],
            wrist_up_multiplier=cfg["wrist_up_multiplier"],
        )

    # ── Individual components ─────────────────────────────────

    def finger_cost(self, cluster: HandCluster) -> float:
        return max(self.finger_weights.get(m.finger, 1.0) for m in cluster.members)

    def chord_factor(self, cluster: HandCluster) -> float:
        return 1.0 + self.chord_weight * (len(cluster.members) - 1)

    def paired_factor(self, cluster: HandCluster) -> float:
        if cluster.paired is None:
            return 1.0
        return 1.0 + self.paired_chord_weight * len(cluster.paired.members)

    def wrist_factor(self, cluster: HandCluster) -> float:
        for member in cluster.members:
            lift = member.wrist_lift
            if lift is not None and lift.action is WristAction.UP:
                return self.wrist_up_multiplier
        return 1.0

    # ── Aggregate ─────────────────────────────────────────────

    def evaluate(self, cluster: HandCluster) -> float:
        """Intrinsic difficulty of *cluster* (non-negative)."""
        return (
            self.finger_cost(cluster)
            * self.chord_factor(cluster)
            * self.paired_factor(cluster)
            * self.wrist_factor(cluster)
        )
