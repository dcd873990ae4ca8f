"""Probe module — coercion, thresholds, evaluation, database access and the driver."""

from pgcheck.probe.coercion import coerce_column, coerce_row
from pgcheck.probe.database import PostgresExecutor, build_conninfo, parse_connection_string
from pgcheck.probe.driver import CheckRequest, run_check
from pgcheck.probe.evaluator import evaluate_row, evaluate_rows
from pgcheck.probe.exceptions import (
    CoercionError,
    ConfigurationError,
    DatabaseConnectionError,
    EmptyResultError,
    ProbeError,
    QueryError,
    ShapeMismatchError,
    UnsupportedTypeError,
)
from pgcheck.probe.report import emit, format_result
from pgcheck.probe.thresholds import Thresholds, parse_thresholds, parse_vector

__all__ = [
    "CheckRequest",
    "CoercionError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "EmptyResultError",
    "PostgresExecutor",
    "ProbeError",
    "QueryError",
    "ShapeMismatchError",
    "Thresholds",
    "UnsupportedTypeError",
    "build_conninfo",
    "coerce_column",
    "coerce_row",
    "emit",
    "evaluate_row",
    "evaluate_rows",
    "format_result",
    "parse_connection_string",
    "parse_thresholds",
    "parse_vector",
    "run_check",
]
