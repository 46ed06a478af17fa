"""
Command line entry point: evaluate a measurements file against a hierarchy.

Usage:
    healthscore --measurements measurements.json
    healthscore --measurements m.json --hierarchy my_hierarchy.yaml --strict --output result.json
    healthscore --measurements m.json --no-strict

The result hierarchy is written as JSON to stdout (or --output). Logs go to
stderr and the log directory.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from healthscore.core.config import settings
from healthscore.core.exceptions import HealthScoreError
from healthscore.core.hierarchy_loader import load_measurements, resolve_hierarchy
from healthscore.services.calculator import calculate_kpis

log = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthscore",
        description="Calculate the project health score from raw KPI measurements",
    )
    parser.add_argument(
        "--measurements",
        type=Path,
        required=True,
        help="JSON list of raw measurements ({typeId, score, id?, originId?})",
    )
    parser.add_argument(
        "--hierarchy",
        type=Path,
        default=None,
        help="Hierarchy document, YAML or JSON (default: HEALTHSCORE_HIERARCHY_PATH "
        "or the packaged default hierarchy)",
    )
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=settings.strict_mode,
        help="Any erroring child makes its parent an error "
        "(default: HEALTHSCORE_STRICT_MODE)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the result JSON to this file (default: stdout)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the calculation. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        hierarchy = resolve_hierarchy(args.hierarchy or settings.hierarchy_path)
        measurements = load_measurements(args.measurements)
        result = calculate_kpis(hierarchy, measurements, strict=args.strict)
    except HealthScoreError as e:
        log.error("kpi_calculation_failed", error_type=type(e).__name__, message=e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    output = result.model_dump_json(indent=2)
    if args.output is None:
        print(output)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding="utf-8")
        log.info("result_written", path=str(args.output))

    return 0


def run() -> None:
    """Console script entry point."""
    from healthscore.core.logging import configure_logging

    configure_logging()
    sys.exit(main())
