"""Exception hierarchy for the probe pipeline.

Every subclass ends a run with an UNKNOWN report carrying ``str(exc)``.
"""

from __future__ import annotations


class ProbeError(Exception):
    """Base exception for all probe errors."""


class ConfigurationError(ProbeError):
    """Invalid thresholds, connection string, arguments or settings."""


class DatabaseConnectionError(ProbeError):
    """Failed to connect to the database."""


class QueryError(ProbeError):
    """The database rejected or failed to run the query."""


class EmptyResultError(ProbeError):
    """The query returned no rows."""


class ShapeMismatchError(ProbeError):
    """A result row's width does not match the threshold vectors."""


class CoercionError(ProbeError):
    """A column value could not be read as a canonical integer."""


class UnsupportedTypeError(CoercionError):
    """A column's type is outside the accepted integer family."""
