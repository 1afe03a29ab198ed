from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from bundle_size_reporter.application.app import BuildApp
from bundle_size_reporter.domain.models.app_config import BuildOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bundle-size-reporter",
        description="Build the app and report gzip size changes of emitted assets.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Build without compression",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        default=False,
        help="Watch file changes and rebuild",
    )
    parser.add_argument(
        "-o",
        "--output-path",
        default=None,
        help="Specify output path",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        default=False,
        help="Visualize and analyze the bundle",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings file (default: ./.bundlerc)",
    )
    return parser


def parse_options(argv: Sequence[str] | None = None) -> tuple[BuildOptions, Path | None]:
    args = build_parser().parse_args(argv)
    options = BuildOptions(
        debug=bool(args.debug),
        watch=bool(args.watch),
        output_path=args.output_path or None,
        analyze=bool(args.analyze),
    )
    return options, args.settings


def main(argv: Sequence[str] | None = None) -> None:
    options, settings_path = parse_options(argv)
    sys.exit(BuildApp.run_from_argv(options, settings_path))
