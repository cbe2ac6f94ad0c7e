"""Strain Constants — tunable scalars used by the keys strain solver.

Values are read from ``configs/strain_constants.yaml``.  When loading
from YAML every required key must be present; a missing key raises a
``ValueError`` naming it.  ``StrainConstants()`` without a file gives the
built-in defaults.

Fields:
    stamina_incremental_multiplier  – blend rate when difficulty rises
    stamina_decremental_multiplier  – blend rate when difficulty falls
    difficulty_multiplier           – global scale of each strain step
    difficulty_offset               – added to each strain step
    chord_threshold_same_hand_ms    – same-hand chord window
    chord_threshold_other_hand_ms   – cross-hand pairing window
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


# Default: configs/strain_constants.yaml relative to project root.
# Absent from a non-editable install, where the built-in defaults apply.
DEFAULT_CONFIG_PATH: Path = (
    Path(__file__).resolve().parents[2] / "configs" / "strain_constants.yaml"
)


def use_builtin_defaults(config_path: str | Path | None = None) -> bool:
    """True when no file was asked for and the project config is missing."""
    if config_path is not None or DEFAULT_CONFIG_PATH.exists():
        return False
    logger.debug(f"No strain config at {DEFAULT_CONFIG_PATH}, using built-in defaults")
    return True


def config_source(config_path: str | Path | None = None) -> str:
    """Describe where the constants for *config_path* come from."""
    if use_builtin_defaults(config_path):
        return "built-in defaults"
    return str(DEFAULT_CONFIG_PATH if config_path is None else Path(config_path))


def load_config_file(config_path: str | Path | None = None) -> dict[str, Any]:
    """Read a strain-constants YAML file into a dict.

    Args:
        config_path: Path to the YAML file. Defaults to
            ``configs/strain_constants.yaml``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not hold a YAML mapping.
    """
    config_path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Strain config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh)

    if not isinstance(cfg, dict):
        raise ValueError(
            f"Strain config must be a YAML mapping, got {type(cfg).__name__}: {config_path}"
        )
    return cfg


def require_keys(cfg: dict[str, Any], keys: list[str], source: str | Path) -> None:
    """Raise ``ValueError`` for the first of *keys* missing from *cfg*."""
    for key in keys:
        if key not in cfg:
            raise ValueError(f"Missing required key '{key}' in strain config: {source}")


@dataclass(frozen=True)
class StrainConstants:
    """Read-only numeric configuration for one or many solves."""

    stamina_incremental_multiplier: float = 0.85
    stamina_decremental_multiplier: float = 0.2
    difficulty_multiplier: float = 1.0
    difficulty_offset: float = 0.0
    chord_threshold_same_hand_ms: float = 8.0
    chord_threshold_other_hand_ms: float = 16.0

    @classmethod
    def from_dict(cls, cfg: dict[str, Any], source: str | Path = "<dict>") -> StrainConstants:
        """Build constants from a config mapping, validating every key."""
        names = [f.name for f in fields(cls)]
        require_keys(cfg, names, source)
        constants = cls(**{name: float(cfg[name]) for name in names})

        if constants.chord_threshold_same_hand_ms < 0 or constants.chord_threshold_other_hand_ms < 0:
            raise ValueError(f"Chord thresholds must be non-negative in strain config: {source}")
        return constants

    @classmethod
    def from_yaml(cls, config_path: str | Path | None = None) -> StrainConstants:
        """Load constants from a YAML file (default: project config).

        Without *config_path* and without the project config file the
        built-in defaults are returned. An explicit path must exist.
        """
        if use_builtin_defaults(config_path):
            return cls()
        source = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
        return cls.from_dict(load_config_file(source), source)

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
