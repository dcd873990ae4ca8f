"""Run one check end to end and fold every failure into an UNKNOWN report."""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType
from typing import Protocol

import structlog
from pydantic import BaseModel

from pgcheck.core.config import DatabaseConfig, get_settings
from pgcheck.core.types import Column, ConnectionDescriptor, Report
from pgcheck.probe.database import PostgresExecutor, parse_connection_string
from pgcheck.probe.evaluator import evaluate_rows
from pgcheck.probe.exceptions import ProbeError
from pgcheck.probe.thresholds import parse_thresholds

logger = structlog.stdlib.get_logger()


class CheckRequest(BaseModel):
    """Inputs for a single probe run."""

    connection: str
    query: str
    warning: str | None = None
    critical: str | None = None


class QueryExecutor(Protocol):
    def __enter__(self) -> QueryExecutor: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    def execute(self, query: str) -> list[list[Column]]: ...


ExecutorFactory = Callable[[ConnectionDescriptor, DatabaseConfig], QueryExecutor]


def run_check(
    request: CheckRequest,
    config: DatabaseConfig | None = None,
    executor_factory: ExecutorFactory = PostgresExecutor,
) -> Report:
    """Evaluate *request* and return its report. Never raises ProbeError.

    Thresholds are validated before the connection string is parsed and
    before any connection is opened.
    """
    db_config = config or get_settings().database
    try:
        thresholds = parse_thresholds(request.warning, request.critical)
        logger.debug(
            "thresholds_parsed",
            warning=list(thresholds.warning),
            critical=list(thresholds.critical),
        )
        descriptor = parse_connection_string(request.connection)

        with executor_factory(descriptor, db_config) as executor:
            rows = executor.execute(request.query)

        report = evaluate_rows(rows, thresholds)
    except ProbeError as exc:
        logger.warning("check_failed", error=str(exc), error_type=type(exc).__name__)
        return Report.unknown(str(exc))

    logger.info("check_completed", severity=report.severity.name, description=report.description)
    return report
