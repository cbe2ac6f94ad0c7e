"""Run configuration for the keys strain rater.

Resolves which strain-constants file is in use, loads it and prints the
run banner.  No heavy imports.
"""

from __future__ import annotations

import platform
from pathlib import Path

from src.strain_engine.constants import StrainConstants, config_source


def setup_run(config_path: str | Path | None = None) -> dict:
    """Load the strain constants and print the run banner.

    Args:
        config_path: Optional YAML path; defaults to
            ``configs/strain_constants.yaml``, or the built-in defaults
            when that file is not installed.

    Returns:
        dict with keys ``python_version``, ``config_path``, ``constants``.
    """
    source = config_source(config_path)
    constants = StrainConstants.from_yaml(config_path)

    info = {
        "python_version": platform.python_version(),
        "config_path": source,
        "constants": constants,
    }

    print("──── Keys Strain Rater — Run ────")
    print(f"  Python        : {info['python_version']}")
    print(f"  Config        : {source}")
    for name, value in constants.as_dict().items():
        print(f"  {name:<32}: {value:g}")
    print("─────────────────────────────────")
    return info
