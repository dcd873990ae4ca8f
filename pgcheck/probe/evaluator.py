"""Compare result rows against threshold vectors and derive a status."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from pgcheck.core.types import Column, Report, Severity
from pgcheck.probe.coercion import coerce_row
from pgcheck.probe.exceptions import EmptyResultError, ShapeMismatchError
from pgcheck.probe.report import format_result
from pgcheck.probe.thresholds import ThresholdVector, Thresholds

logger = structlog.stdlib.get_logger()


def check_width(width: int, thresholds: Thresholds) -> None:
    """Raise if a row is not as wide as the threshold vectors."""
    if width != thresholds.width:
        raise ShapeMismatchError("Size of result set and integer array need to match")


def _reaches(vector: ThresholdVector, values: Sequence[int]) -> bool:
    # first column at or above its threshold decides; which one doesn't matter
    return any(limit <= value for limit, value in zip(vector, values))


def evaluate_row(values: Sequence[int], thresholds: Thresholds) -> Severity:
    """Derive the severity of one coerced row.

    Any column reaching its warning threshold gives WARNING; any column
    reaching its critical threshold gives CRITICAL, regardless of which
    column tripped the warning. Comparison is inclusive.
    """
    check_width(len(values), thresholds)
    severity = Severity.OK
    if _reaches(thresholds.warning, values):
        severity = Severity.WARNING
    if _reaches(thresholds.critical, values):
        severity = Severity.CRITICAL
    return severity


def evaluate_rows(rows: Sequence[Sequence[Column]], thresholds: Thresholds) -> Report:
    """Build the report for a query result.

    Only the first row is validated, coerced and reported.

    Raises:
        EmptyResultError: The result has no rows.
        ShapeMismatchError: The first row has the wrong width.
        CoercionError: A column of the first row is not a readable integer.
    """
    if not rows:
        raise EmptyResultError("Query did return empty row set")

    first = rows[0]
    check_width(len(first), thresholds)
    values = coerce_row(first)
    severity = evaluate_row(values, thresholds)

    if len(rows) > 1:
        logger.debug("extra_rows_ignored", rows=len(rows))

    return Report(severity=severity, description=format_result(values))
