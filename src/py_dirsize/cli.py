"""Command-line entrypoint — analyse a transcript file.

This module is the thin I/O wrapper around the builder and the report:
it reads the transcript, prints the report, and turns errors into an
exit status.  ``main()`` takes ``argv`` and returns the status so it is
testable without a subprocess.

Usage::

    py-dirsize session.txt [--settings disk.json] [--tree] [--verbose]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from py_dirsize.config import ConfigError, load_settings
from py_dirsize.logging import Logger, LogLevel
from py_dirsize.report import build_report, format_report
from py_dirsize.sizes import NoCandidateError
from py_dirsize.transcript import NavigationError, ParseError, build_tree


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for ``py-dirsize``."""
    parser = argparse.ArgumentParser(
        prog="py-dirsize",
        description="Rebuild a directory tree from a shell transcript and report its sizes.",
    )
    parser.add_argument("transcript", type=Path, help="transcript file to analyse")
    parser.add_argument("--settings", type=Path, default=None, help="JSON report settings")
    parser.add_argument("--tree", action="store_true", help="print the rebuilt tree")
    parser.add_argument("--verbose", action="store_true", help="print the full build log")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the analysis and print the report.

    Returns:
        0 on success, 1 on any analysis or I/O error.

    """
    args = build_parser().parse_args(argv)
    logger = Logger()

    try:
        settings = load_settings(args.settings)
        with args.transcript.open(encoding="utf-8") as lines:
            tree = build_tree(lines, logger=logger)
        report = build_report(tree, settings, logger=logger)
    except (
        OSError,
        UnicodeDecodeError,
        ConfigError,
        ParseError,
        NavigationError,
        NoCandidateError,
    ) as e:
        min_level = LogLevel.DEBUG if args.verbose else LogLevel.ERROR
        for entry in logger.filter(min_level=min_level):
            print(entry, file=sys.stderr)  # noqa: T201
        print(f"Error: {e}", file=sys.stderr)  # noqa: T201
        return 1

    if args.verbose:
        for entry in logger.entries:
            print(entry)  # noqa: T201
    if args.tree:
        print(tree.render())  # noqa: T201
    print(format_report(report))  # noqa: T201
    return 0


if __name__ == "__main__":
    sys.exit(main())
