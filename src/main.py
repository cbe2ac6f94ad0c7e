"""Keys Strain Rater — command-line entry point.

Rates one or more ``.qua`` maps and prints their overall difficulty::

    python -m src.main maps/song.qua --rate 1.2
"""

from __future__ import annotations

import argparse
import logging
import sys

from src.config import setup_run
from src.strain_engine.report import rate_map


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rate 4K / 7K keys maps.")
    parser.add_argument("maps", nargs="+", help="Paths to .qua files")
    parser.add_argument("--rate", type=float, default=1.0, help="Playback rate (default 1.0)")
    parser.add_argument("--config", default=None, help="Strain constants YAML")
    parser.add_argument("--output-dir", default=None, help="Directory for JSON reports")
    parser.add_argument("--no-export", action="store_true", help="Do not write JSON reports")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Rate every map given on the command line."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    setup_run(args.config)

    failures = 0
    for map_path in args.maps:
        try:
            report = rate_map(
                map_path,
                output_dir=args.output_dir,
                rate=args.rate,
                config_path=args.config,
                export_json=not args.no_export,
            )
        except (FileNotFoundError, ValueError) as exc:
            print(f"  ✗ {map_path}: {exc}", file=sys.stderr)
            failures += 1
            continue
        print(f"  {report['map']:<40} {report['mode']:<6} {report['overall_difficulty']:.2f}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
