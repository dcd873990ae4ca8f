"""Command-line front end for check_postgresql.

Usage::

    check_postgresql -d monitor:secret@db1:5432/app \\
        -q "SELECT count(*) FROM pg_stat_activity" -w 80 -c 95

    # Two columns, one threshold per column
    check_postgresql -d monitor@db1/app -q "SELECT a, b FROM t" -w 5,5 -c 10,10
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import NoReturn

import structlog
import yaml
from pydantic import ValidationError

from pgcheck.core.config import Settings, load_settings
from pgcheck.core.logging import bind_run_context, setup_logging
from pgcheck.core.types import Report
from pgcheck.probe.driver import CheckRequest, run_check
from pgcheck.probe.exceptions import ConfigurationError, ProbeError
from pgcheck.probe.report import emit

logger = structlog.get_logger(__name__)

__version__ = "0.1.0"


class _ArgumentParser(argparse.ArgumentParser):
    """Argument errors become UNKNOWN reports instead of exit status 2."""

    def error(self, message: str) -> NoReturn:
        raise ConfigurationError(message)


def build_parser() -> _ArgumentParser:
    parser = _ArgumentParser(
        prog="check_postgresql",
        description=(
            "Run a query and compare (>=) each result column to the warning"
            " and critical thresholds. Integer result columns only."
        ),
    )
    parser.add_argument(
        "-d",
        "--db-connection-string",
        dest="conn",
        required=True,
        metavar="user[:password]@host[:port][/database]",
        help="The connection string",
    )
    parser.add_argument(
        "-q", "--query", required=True, metavar="QUERY", help="The query to execute"
    )
    parser.add_argument(
        "-w", "--warn", default=None, metavar="n1[,n2...]", help="Warning thresholds"
    )
    parser.add_argument(
        "-c",
        "--critical",
        dest="crit",
        default=None,
        metavar="n1[,n2...]",
        help="Critical thresholds",
    )
    parser.add_argument("--config", default=None, help="Path to YAML settings")
    parser.add_argument("--log-level", default=None, help="Override log level")
    parser.add_argument(
        "--connect-timeout",
        type=int,
        default=None,
        metavar="SECS",
        help="Connection timeout in seconds (0 disables)",
    )
    parser.add_argument(
        "--statement-timeout",
        type=int,
        default=None,
        metavar="MS",
        help="Statement timeout in milliseconds (0 disables)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _load_settings(path: str | None) -> Settings:
    try:
        return load_settings(Path(path) if path else None)
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid settings file: {exc}") from exc


def _request(args: argparse.Namespace, settings: Settings) -> CheckRequest:
    return CheckRequest(
        connection=args.conn,
        query=args.query,
        warning=args.warn if args.warn is not None else settings.thresholds.warning,
        critical=args.crit if args.crit is not None else settings.thresholds.critical,
    )


def check(argv: list[str] | None = None) -> Report:
    """Parse *argv*, run the check and return its report."""
    args = build_parser().parse_args(argv)
    settings = _load_settings(args.config)
    setup_logging(level=args.log_level)

    db_config = settings.database
    overrides: dict[str, int] = {}
    if args.connect_timeout is not None:
        overrides["connect_timeout_secs"] = args.connect_timeout
    if args.statement_timeout is not None:
        overrides["statement_timeout_ms"] = args.statement_timeout
    if overrides:
        db_config = db_config.model_copy(update=overrides)

    bind_run_context(probe="check_postgresql", pid=os.getpid())
    logger.info("check_started", query=args.query)
    return run_check(_request(args, settings), config=db_config)


def main(argv: list[str] | None = None) -> int:
    """Entry point. Prints exactly one status line and returns its exit code."""
    try:
        report = check(argv)
    except ProbeError as exc:
        report = Report.unknown(str(exc))
    except Exception as exc:  # noqa: BLE001
        # unconfigured structlog prints to stdout
        if structlog.is_configured():
            logger.exception("check_crashed")
        report = Report.unknown(f"Internal error: {exc}")
    return emit(report)
