"""Iplog CLI entry points.

This module exposes the ``ingest`` and ``run-spec`` commands.
It maps argparse settings onto validated ingest options and runs them.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Mapping, Sequence

from cli.summary_report import format_summary
from core.config import IplogConfig
from core.constants import (
    DEFAULT_VERBOSITY,
    EXIT_CONFIG_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_OK,
    EXIT_STORE_ERROR,
    IPLOG_VERSION,
    VERBOSITY_CHOICES,
)
from core.errors import IplogConfigError, IplogInputError, IplogRunSpecError, IplogStoreError
from core.option_builders import build_ingest_options
from core.run_spec import load_run_spec
from core.types import IngestOptions, Verbosity
from ingest.pipeline import ingest_log_file


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="iplog",
        description="Load Apache Combined Log Format access logs into a MySQL table.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {IPLOG_VERSION}")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_ingest_command(subparsers)
    _add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Iplog CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        options = _build_options(args)
    except (IplogConfigError, IplogRunSpecError) as error:
        _print_error(error)
        return EXIT_CONFIG_ERROR
    return _run_ingest(options)


def _build_options(args: argparse.Namespace) -> IngestOptions:
    """Resolve CLI or run-spec settings into ingest options.

    Args:
        args: Parsed CLI args.

    Returns:
        Validated ingest options.

    Raises:
        IplogConfigError: If settings are missing or invalid.
        IplogRunSpecError: If the run-spec file is invalid.
    """
    config = IplogConfig.from_env()
    if args.command == "run-spec":
        settings: Mapping[str, object] = load_run_spec(args.spec_file).settings
    else:
        settings = _settings_from_args(args)
    return build_ingest_options(settings, config)


def _run_ingest(options: IngestOptions) -> int:
    """Run one ingest and print its summary.

    Args:
        options: Validated ingest options.

    Returns:
        Exit code.
    """
    try:
        summary = ingest_log_file(options)
    except IplogInputError as error:
        _print_error(error)
        return EXIT_INPUT_ERROR
    except IplogStoreError as error:
        _print_error(error)
        return EXIT_STORE_ERROR
    if options.verbosity > Verbosity.SILENT:
        print(format_summary(summary))
    return EXIT_OK


def _settings_from_args(args: argparse.Namespace) -> dict[str, object]:
    return {
        "log_file": args.log_file,
        "origin_host": args.origin_host,
        "db_host": args.db_host,
        "db_port": args.db_port,
        "db_user": args.db_user,
        "db_password": args.db_password,
        "db_name": args.db_name,
        "db_table": args.db_table,
        "insert": args.insert,
        "max_lines": args.max_lines,
        "max_duplicates": args.max_duplicates,
        "recent_first": args.recent_first,
        "stop_on_parse_failure": args.stop_on_parse_failure,
        "stop_on_insert_failure": args.stop_on_insert_failure,
        "verbosity": args.verbosity,
        "items_of_interest": args.items_of_interest,
    }


def _print_error(error: Exception) -> None:
    print(f"iplog: error: {error}", file=sys.stderr)


def _add_ingest_command(subparsers: Any) -> None:
    """Register ingest subcommand."""
    parser = subparsers.add_parser("ingest", help="Parse an access log and load its records")
    parser.add_argument("log_file", help="Apache Combined Log Format access log")
    parser.add_argument(
        "--origin-host",
        help="Domain or IP of the server that wrote the log (default: IPLOG_ORIGIN_HOST)",
    )
    parser.add_argument("--db-host", help="MySQL server host (default: IPLOG_DB_HOST)")
    parser.add_argument("--db-port", type=int, help="MySQL server port (default: 3306)")
    parser.add_argument("--db-user", help="MySQL user (default: IPLOG_DB_USER)")
    parser.add_argument(
        "--db-password",
        help="MySQL password; prefer IPLOG_DB_PASSWORD to keep it off the command line",
    )
    parser.add_argument("--db-name", help="MySQL database (default: IPLOG_DB_NAME)")
    parser.add_argument("--db-table", help="Target table, created if absent")
    parser.add_argument(
        "--insert",
        action="store_true",
        help="Insert parsed records; without it the run only parses and counts",
    )
    parser.add_argument("--max-lines", type=int, help="Stop after reading N lines")
    parser.add_argument(
        "--max-duplicates",
        type=int,
        help="Stop after skipping N records that are already stored",
    )
    parser.add_argument(
        "--recent-first",
        action="store_true",
        help="Insert newest lines first so --max-duplicates stops at already loaded entries",
    )
    parser.add_argument(
        "--stop-on-parse-failure",
        action="store_true",
        help="Stop reading at the first line that fails parsing or validation",
    )
    parser.add_argument(
        "--stop-on-insert-failure",
        action="store_true",
        help="Stop reading at the first failed insert",
    )
    parser.add_argument(
        "--verbosity",
        choices=VERBOSITY_CHOICES,
        default=DEFAULT_VERBOSITY,
        help="Output detail: silent, log, general, or all",
    )
    parser.add_argument(
        "--items-of-interest",
        action="store_true",
        help="Report invalid request methods at every verbosity except silent",
    )


def _add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser(
        "run-spec",
        help="Run an ingest described by a YAML run-spec file",
    )
    parser.add_argument("spec_file", help="Path to YAML run-spec file")
