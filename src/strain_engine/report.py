"""Report — rate map files and export the results.

Responsibilities:
    1. Call the qua parser to load the map.
    2. Load strain constants and evaluator weights from the YAML config.
    3. Call the solver (detailed) to rate the map.
    4. Save ``<stem>_difficulty.json`` (default: ``data/reports/``).
    5. Return the report data structure for programmatic use.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .cluster_evaluator import ClusterDifficultyModel
from .constants import StrainConstants
from .qua_parser import parse_qua
from .solver import solve

logger = logging.getLogger(__name__)


def rate_map(
    qua_path: str | Path,
    output_dir: str | Path | None = None,
    rate: float = 1.0,
    config_path: str | Path | None = None,
    export_json: bool = True,
) -> dict[str, Any]:
    """Run the full rating pipeline on a ``.qua`` file.

    Args:
        qua_path: Path to the input map.
        output_dir: Directory for the JSON report.
            Defaults to ``data/reports/`` under the working directory.
        rate: Playback rate.
        config_path: Path to the strain-constants YAML.
            Defaults to ``configs/strain_constants.yaml``.
        export_json: If ``False``, nothing is written to disk.

    Returns:
        Report dict with the map metadata and the solver result.
    """
    qua_path = Path(qua_path)

    # ── Pipeline ──────────────────────────────────────────────
    qua_map = parse_qua(qua_path)
    constants = StrainConstants.from_yaml(config_path)
    evaluator = ClusterDifficultyModel.from_yaml(config_path)
    result = solve(
        qua_map.hit_objects,
        qua_map.mode,
        rate=rate,
        constants=constants,
        evaluator=evaluator,
        detailed=True,
    )

    report: dict[str, Any] = {
        "map": qua_path.name,
        "title": qua_map.title,
        "artist": qua_map.artist,
        "difficulty_name": qua_map.difficulty_name,
        "hit_objects": len(qua_map.hit_objects),
        **result.to_dict(),
    }
    logger.info(f"Rated {qua_path.name}: {result.overall_difficulty:.2f} ({qua_map.mode.name} @ {rate}x)")

    # ── Save <stem>_difficulty.json ───────────────────────────
    if export_json:
        if output_dir is None:
            output_dir = Path.cwd() / "data" / "reports"
        else:
            output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        json_path = output_dir / f"{qua_path.stem}_difficulty.json"
        with open(json_path, "w", encoding="utf-8") as fh:
            json.dump(report, fh, indent=2, ensure_ascii=False)
        logger.info(f"Wrote report JSON: {json_path}")

    return report


def report_to_json_bytes(report: dict[str, Any]) -> bytes:
    """Serialise a report to UTF-8 JSON bytes."""
    return json.dumps(report, indent=2, ensure_ascii=False).encode("utf-8")
