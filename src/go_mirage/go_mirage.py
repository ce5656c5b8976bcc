"""
Main entry point for the go-mirage package.

This module provides the command-line interface for the package.
It can be invoked via:
- The `go-mirage` command (after installation)
- `python -m go_mirage`
- Direct import and call to main()
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import find_config_file, load_options
from .errors import MirageError
from .manager import MirrorManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="go-mirage",
        description=(
            "Copy a Go package and every package it depends on within its module "
            "into a destination module, rewriting import paths"
        ),
    )
    parser.add_argument("src_dir", metavar="SRCDIR", type=Path, help="Source package directory")
    parser.add_argument("dst_dir", metavar="DSTDIR", type=Path, help="Destination directory")
    parser.add_argument(
        "--dst-module",
        help="The destination module name (autodetected via destination go.mod if unset)",
    )
    parser.add_argument(
        "--no-local-imports",
        action="store_true",
        help="Don't fix up imports to treat the destination module as local imports",
    )
    parser.add_argument(
        "--include-tests",
        action="store_true",
        help="Also copy _test.go files and the packages only they import",
    )
    parser.add_argument(
        "--no-tidy",
        action="store_true",
        help="Don't run 'go mod tidy' in the destination after copying",
    )
    parser.add_argument(
        "--no-clean",
        action="store_true",
        help="Don't remove existing Go files from the destination before copying",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (default: DSTDIR/.go-mirage.toml, then the source module root)",
    )
    parser.add_argument(
        "--analyze-only",
        action="store_true",
        help="Only print the copy plan, don't write anything",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the extraction.

    Parses command-line arguments, merges them over the configuration file
    and runs the extraction.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = build_parser().parse_args(argv)

    try:
        config_path = args.config or find_config_file(args.dst_dir, args.src_dir)
        if config_path is not None:
            print(f"Using configuration file: {config_path}")
        options = load_options(config_path).merged(
            dst_module=args.dst_module,
            local_imports=False if args.no_local_imports else None,
            include_tests=True if args.include_tests else None,
            tidy=False if args.no_tidy else None,
            clean=False if args.no_clean else None,
        )

        manager = MirrorManager(args.src_dir, args.dst_dir, options)

        if args.analyze_only:
            plan = manager.prepare()
            print()
            print(plan.describe())
            return 0

        manager.run()
        return 0

    except (MirageError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
