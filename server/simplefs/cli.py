"""Command-line front door: runs the line protocol over stdin/stdout."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import SimpleShell
from .limits import MAX_DEPTH, MAX_NAMELENGTH, MAX_NODES, Limits
from .logs import configure_logging, parse_level

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _log_level(value: str) -> int:
    """argparse type for logging level names such as ``info`` or ``DEBUG``."""
    try:
        return parse_level(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplefs",
        description="In-memory filesystem driven by a line-oriented command protocol.",
    )
    parser.add_argument(
        "--input",
        type=argparse.FileType("r", encoding="utf-8"),
        default=None,
        help="read commands from this file instead of stdin",
    )
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default="WARNING",
        help="log level for stderr diagnostics",
    )
    parser.add_argument("--max-nodes", type=_positive_int, default=MAX_NODES)
    parser.add_argument("--max-name-length", type=_positive_int, default=MAX_NAMELENGTH)
    parser.add_argument("--max-depth", type=_positive_int, default=MAX_DEPTH)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        limits = Limits(
            max_nodes=args.max_nodes,
            max_namelength=args.max_name_length,
            max_depth=args.max_depth,
        )
    except ValueError as exc:
        parser.error(str(exc))
    shell = SimpleShell(limits=limits)
    source = args.input or sys.stdin
    try:
        consumed = shell.run(source, sys.stdout)
    finally:
        if args.input is not None:
            args.input.close()
    logger.info("processed %d line(s), %d node(s) left", consumed, shell.fs.count())
    return 0
