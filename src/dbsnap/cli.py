#!/usr/bin/env python3
"""
CLI for inspecting snapshot fixtures.

Usage:
    dbsnap reduce --name word_docids [--inline] [--full] [snap.txt]
    dbsnap locate tests/unit/test_indexing.py "test_indexing.py::test_add" [--case first]
    dbsnap tables
"""

import argparse
import logging
import sys
from pathlib import Path

from .config.config_loader import load_config
from .core.exceptions import ConfigError, DbSnapError
from .core.logging import configure_logging
from .render.tables import TableName
from .snapshot.identity import resolve_snapshot_location
from .snapshot.reducer import convert_snap_to_hash_if_needed


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2


def setup_logging(verbose: bool = False, structured: bool = False) -> None:
    """Configure logging."""
    log_level = logging.DEBUG if verbose else logging.INFO
    configure_logging(level=log_level, structured=structured)


def cmd_reduce(args) -> int:
    """Print the records a snapshot text reduces to."""
    if args.file:
        with open(args.file, "r", encoding="utf-8", newline="") as f:
            snap = f.read()
    else:
        snap = sys.stdin.read()

    store_full = True if args.full else None
    records = convert_snap_to_hash_if_needed(args.name, snap, args.inline, store_full=store_full)

    for record in records:
        print(f"--- {record.name}")
        print(record.content)
    return EXIT_OK


def cmd_locate(args) -> int:
    """Print the fixture directory of a test."""
    config = load_config()
    location = resolve_snapshot_location(
        args.source,
        args.test_id,
        case_name=args.case,
        source_root=config.source_root,
        snapshot_root=config.snapshot_root,
    )
    print(location.directory)
    return EXIT_OK


def cmd_tables(args) -> int:
    """List every snapshot-able name."""
    for table in TableName:
        print(table.value)
    return EXIT_OK


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Index snapshot fixture tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON-structured log lines",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Reduce command
    reduce_parser = subparsers.add_parser("reduce", help="Reduce snapshot text to fixture records")
    reduce_parser.add_argument("--name", required=True, help="Snapshot name")
    reduce_parser.add_argument("--inline", action="store_true", help="Use the inline threshold")
    reduce_parser.add_argument("--full", action="store_true",
                               help="Keep the full text of hashed snapshots")
    reduce_parser.add_argument("file", nargs="?", help="Snapshot text file (default: stdin)")

    # Locate command
    locate_parser = subparsers.add_parser("locate", help="Print the fixture directory of a test")
    locate_parser.add_argument("source", type=Path, help="Test source file")
    locate_parser.add_argument("test_id", help="Test id, e.g. test_x.py::TestY::test_z")
    locate_parser.add_argument("--case", help="Case label")

    # Tables command
    subparsers.add_parser("tables", help="List snapshot-able tables")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(verbose=args.verbose, structured=args.json_logs)

    commands = {
        "reduce": cmd_reduce,
        "locate": cmd_locate,
        "tables": cmd_tables,
    }
    command = commands.get(args.command)
    if command is None:
        print("No command specified. Use --help for usage.", file=sys.stderr)
        return EXIT_ERROR

    try:
        return command(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except DbSnapError as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
