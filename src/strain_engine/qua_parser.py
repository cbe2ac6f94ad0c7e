"""Qua Parser — load keys maps from Quaver ``.qua`` files.

Responsibilities:
    - Load a ``.qua`` file (a YAML document) via *PyYAML*.
    - Read the key mode (``Keys4`` / ``Keys7``) and basic metadata.
    - Return hit objects as ``LaneEvent`` sorted by ``(start_time, lane)``.

Omitted ``StartTime`` values mean 0, as the format leaves out defaults.
No difficulty logic lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .event_adapter import LaneEvent
from .lookup_tables import GameMode


_QUA_MODES: dict[str, GameMode] = {
    "Keys4": GameMode.KEYS4,
    "Keys7": GameMode.KEYS7,
}


@dataclass
class QuaMap:
    mode: GameMode
    hit_objects: list[LaneEvent] = field(default_factory=list)
    title: str = ""
    artist: str = ""
    difficulty_name: str = ""

    @property
    def length(self) -> float:
        """Time of the last hit object end (or start) in ms."""
        if not self.hit_objects:
            return 0.0
        return max(
            h.end_time if h.end_time is not None else h.start_time
            for h in self.hit_objects
        )


def load_qua(qua_path: str | Path) -> dict[str, Any]:
    """Load a ``.qua`` file and return the raw YAML mapping.

    Args:
        qua_path: Path to the ``.qua`` file.

    Raises:
        FileNotFoundError: If *qua_path* does not exist.
        ValueError: If the file is not valid YAML or not a mapping.
    """
    path = Path(qua_path)
    if not path.exists():
        raise FileNotFoundError(f"Map file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8-sig") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse map file '{path.name}': {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Map file '{path.name}' does not contain a YAML mapping")
    return data


def _parse_time(value: Any, name: str, index: int) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Hit object {index}: invalid {name} {value!r}") from exc


def extract_map(data: dict[str, Any]) -> QuaMap:
    """Convert a raw ``.qua`` mapping into a ``QuaMap``.

    Raises:
        ValueError: On an unsupported ``Mode`` or malformed ``HitObjects``.
    """
    mode_name = data.get("Mode")
    if mode_name not in _QUA_MODES:
        raise ValueError(f"Unsupported game mode: {mode_name!r}")
    mode = _QUA_MODES[mode_name]

    raw_objects = data.get("HitObjects") or []
    if not isinstance(raw_objects, list):
        raise ValueError("'HitObjects' must be a list")

    hit_objects: list[LaneEvent] = []
    for i, raw in enumerate(raw_objects):
        if not isinstance(raw, dict) or "Lane" not in raw:
            raise ValueError(f"Hit object {i} has no 'Lane'")
        start = _parse_time(raw.get("StartTime", 0), "StartTime", i)
        end = _parse_time(raw.get("EndTime"), "EndTime", i)
        # EndTime 0 means a plain note
        if end is not None and end <= 0:
            end = None
        hit_objects.append(LaneEvent(lane=int(raw["Lane"]), start_time=start or 0.0, end_time=end))

    # Deterministic sort: start time first, then lane
    hit_objects.sort(key=lambda h: (h.start_time, h.lane))

    return QuaMap(
        mode=mode,
        hit_objects=hit_objects,
        title=str(data.get("Title") or ""),
        artist=str(data.get("Artist") or ""),
        difficulty_name=str(data.get("DifficultyName") or ""),
    )


def parse_qua(qua_path: str | Path) -> QuaMap:
    """Convenience wrapper: load ``.qua`` → extract map."""
    return extract_map(load_qua(qua_path))
