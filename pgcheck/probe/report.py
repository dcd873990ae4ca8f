"""Render reports for the plugin's stdout contract."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from pgcheck.core.types import Report


def format_result(values: Sequence[int]) -> str:
    """Render a coerced row as ``Result:(v1,...,vn)``."""
    return "Result:(" + ",".join(str(v) for v in values) + ")"


def emit(report: Report, stream: TextIO | None = None) -> int:
    """Write the report line (no trailing newline) and return the exit code."""
    out = stream if stream is not None else sys.stdout
    out.write(report.render())
    out.flush()
    return report.exit_code
