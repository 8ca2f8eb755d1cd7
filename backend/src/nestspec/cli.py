"""Command line runner for spec files."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from nestspec.config import get_settings
from nestspec.dsl import SpecSession
from nestspec.loader import discover_spec_files, load_spec_file
from nestspec.observability import get_logger, render_metrics, setup_observability

logger = get_logger("nestspec.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nestspec", description="Run nestspec spec files.")
    parser.add_argument("paths", nargs="*", default=["."], help="Spec files or directories.")
    parser.add_argument(
        "--pattern",
        default=None,
        help="Glob used to find spec files inside directories (default from NESTSPEC_PATTERN).",
    )
    parser.add_argument(
        "--metrics-out",
        default=None,
        help="Write Prometheus metrics for the run to this file.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_observability()

    try:
        files = discover_spec_files(args.paths, args.pattern or settings.spec_pattern)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    session = SpecSession()
    load_errors = 0
    for path in files:
        try:
            load_spec_file(path, session)
        except Exception as exc:
            load_errors += 1
            logger.error("spec.file.failed", path=str(path), error=str(exc))
            print(f"error loading {path}: {type(exc).__qualname__}: {exc}", file=sys.stderr)

    if args.metrics_out:
        Path(args.metrics_out).write_text(render_metrics(), encoding="utf-8")

    if not files:
        print("no spec files found", file=sys.stderr)
        return 1

    return 0 if session.success and not load_errors else 1
